# microdiff/nn/losses.py
from ..core.errors import DimensionMismatch
from ..ops.arithmetic import add, sub, pow, div

def mse(predictions, targets):
    """
    Mean squared error as a graph node:
        (1/n) * sum_i (p_i - t_i)^2
    Entries may be Values or plain numbers.
    """
    predictions = list(predictions)
    targets = list(targets)
    if len(predictions) != len(targets):
        raise DimensionMismatch(
            f"mse: got {len(predictions)} predictions for {len(targets)} targets"
        )
    if not predictions:
        raise ValueError("mse of an empty batch is undefined")

    total = pow(sub(predictions[0], targets[0]), 2)
    for p, t in zip(predictions[1:], targets[1:]):
        total = add(total, pow(sub(p, t), 2))
    return div(total, len(predictions))
