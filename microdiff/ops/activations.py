# microdiff/ops/activations.py
from scipy.special import expit
from ..core.node import register_backward
from .arithmetic import _as_value, _record

def sigmoid(x):
    """
    Logistic function 1 / (1 + exp(-x)).
    scipy's expit saturates to 0/1 for large |x| instead of overflowing.
    """
    x = _as_value(x)
    return _record(expit(x.value), "sigmoid", (x,))

def relu(x):
    x = _as_value(x)
    return _record(x.value if x.value > 0 else 0.0, "relu", (x,))

def linear(x):
    """Identity. Kept so a neuron can name its activation explicitly."""
    x = _as_value(x)
    return _record(x.value, "linear", (x,))

@register_backward("sigmoid")
def _sigmoid_backward(out):
    (a,) = out.node.operands
    s = out.value
    a.grad += out.grad * s * (1.0 - s)

@register_backward("relu")
def _relu_backward(out):
    (a,) = out.node.operands
    # gated by the node's own output
    a.grad += out.grad * (1.0 if out.value > 0 else 0.0)

@register_backward("linear")
def _linear_backward(out):
    (a,) = out.node.operands
    a.grad += out.grad
