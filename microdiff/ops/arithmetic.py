# microdiff/ops/arithmetic.py
import numbers
import numpy as np
from ..core.value import Value
from ..core.node import Node, register_backward
from ..core.errors import DivisionByZero
from ..core import tape as tape_mod  # Use module access for use_tape() compatibility

def _as_value(x):
    """Ensure x is a Value; otherwise wrap it as a constant leaf."""
    return x if isinstance(x, Value) else Value(x)

def _record(out_value, tag, operands, params=()):
    """Create the output Value of an op and record it on the active tape."""
    out = Value(out_value, _node=Node(op_tag=tag, operands=tuple(operands), params=tuple(params)))
    tape = tape_mod.global_tape
    if tape is not None:
        tape.push(out)
    return out

def _quiet():
    """Float overflow and inf arithmetic give IEEE results without warnings."""
    return np.errstate(divide="ignore", over="ignore", invalid="ignore")

def _binary(x, y, f, tag):
    """
    Generic binary primitive:
      - wraps plain numbers as leaves
      - computes out.value = f(x.value, y.value) right away
      - links (x, y) as operands; the backward rule is chosen by `tag`
    """
    x = _as_value(x)
    y = _as_value(y)
    with _quiet():
        out_value = f(x.value, y.value)
    return _record(out_value, tag, (x, y))

def add(x, y): return _binary(x, y, lambda a, b: a + b, "add")
def sub(x, y): return _binary(x, y, lambda a, b: a - b, "sub")
def mul(x, y): return _binary(x, y, lambda a, b: a * b, "mul")

def div(x, y):
    """
    Division. The divisor is checked here, at construction: a zero divisor
    raises DivisionByZero and no node is created or recorded.
    """
    x = _as_value(x)
    y = _as_value(y)
    if y.value == 0.0:
        raise DivisionByZero(f"division by a zero-valued node ({y!r})")
    with _quiet():
        out_value = x.value / y.value
    return _record(out_value, "div", (x, y))

def neg(x):
    x = _as_value(x)
    return _record(-x.value, "neg", (x,))

def pow(x, k):
    """
    Integer power:
      out.value = x.value ** k

    Local partial:
      d out / d x = k * x^(k-1)

    `k` is a constructor parameter, not a graph node. Negative exponents on a
    zero base follow float semantics (inf), they do not raise.
    """
    if isinstance(k, (bool, np.bool_)) or not isinstance(k, numbers.Integral):
        raise TypeError(f"pow exponent must be an integer, got {type(k)}")
    x = _as_value(x)
    k = int(k)
    with _quiet():
        out_value = x.value ** k
    return _record(out_value, "pow", (x,), params=(k,))

# ---------------- backward rules: accumulate onto operands ---------------- #

@register_backward("add")
def _add_backward(out):
    a, b = out.node.operands
    with _quiet():
        a.grad += out.grad
        b.grad += out.grad

@register_backward("sub")
def _sub_backward(out):
    a, b = out.node.operands
    with _quiet():
        a.grad += out.grad
        b.grad -= out.grad

@register_backward("mul")
def _mul_backward(out):
    a, b = out.node.operands
    # read both values before touching grads; a and b may be the same node
    av, bv = a.value, b.value
    with _quiet():
        a.grad += out.grad * bv
        b.grad += out.grad * av

@register_backward("div")
def _div_backward(out):
    a, b = out.node.operands
    av, bv = a.value, b.value
    with _quiet():
        a.grad += out.grad / bv
        # divide twice; bv * bv underflows to 0 for tiny divisors
        b.grad += out.grad * (-(av / bv) / bv)

@register_backward("neg")
def _neg_backward(out):
    (a,) = out.node.operands
    a.grad -= out.grad

@register_backward("pow")
def _pow_backward(out):
    (a,) = out.node.operands
    (k,) = out.node.params
    if k == 0:
        return  # constant 1
    with _quiet():
        a.grad += out.grad * k * a.value ** (k - 1)
