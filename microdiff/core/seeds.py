# microdiff/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the graph.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List

import numpy as np

from .value import Value
from .tape import use_tape
from .engine import backward


def value(x: Any) -> Any:
    """Return the numeric value of a Value; pass through plain numbers unchanged."""
    return x.value if isinstance(x, Value) else x


def _ensure_value(v: Any, *, name: str) -> Value:
    """Wrap a plain number as a leaf Value if needed; otherwise return it as is."""
    return v if isinstance(v, Value) else Value(v, name=name)


def _run(y: Any) -> None:
    # A constant result does not depend on the inputs: all grads stay 0
    if isinstance(y, Value):
        backward(y)


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Value], Value], x0: float) -> np.float64:
    """
    Derivative of a scalar function y = f(x) at x0.
    Runs one reverse pass on a fresh, isolated tape.
    """
    with use_tape():
        x = _ensure_value(x0, name="x")
        x.grad = np.float64(0.0)
        _run(f(x))
        return x.grad


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Value]], Value],
          inputs: Dict[str, float]) -> Dict[str, np.float64]:
    """
    Gradient of y = f(vars) w.r.t. ALL inputs (dict form), from ONE reverse pass.

    Parameters
    ----------
    f       : function taking a dict {name: Value} and returning a scalar Value
    inputs  : dict {name: number}

    Returns
    -------
    dict {name: partial}  # same key order as `inputs`
    """
    with use_tape():
        vars_v: Dict[str, Value] = {k: _ensure_value(v, name=k) for k, v in inputs.items()}
        for v in vars_v.values():
            v.grad = np.float64(0.0)
        _run(f(vars_v))
        return {k: vars_v[k].grad for k in inputs.keys()}


def grads_list(f: Callable[[List[Value]], Value],
               x0_list: Iterable[float]) -> List[np.float64]:
    """
    Same as grads(), with inputs and partials as lists.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    with use_tape():
        xs: List[Value] = [_ensure_value(v, name=f"x{i}") for i, v in enumerate(x0_list)]
        for x in xs:
            x.grad = np.float64(0.0)
        _run(f(xs))
        return [x.grad for x in xs]
