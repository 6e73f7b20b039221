# microdiff/core/value.py
from __future__ import annotations
import numbers
import numpy as np
from typing import Any, Optional

from .node import Node

class Value:
    """
    Scalar node of the computation graph.

    Attributes
    ----------
    value : np.float64
        Result of this node's operation, computed once when the node is
        created (or the literal of a leaf).
    grad  : np.float64
        Accumulator for d(root)/d(self). Zero at construction; only the
        backward pass and `zero_grad` touch it.
    node  : Optional[Node]
        Operation record (tag, operands, params). None for leaves, which
        have no backward rule.
    name  : Optional[str]
        Optional debug/pretty-print name.
    """

    __array_priority__ = 1000  # keeps `np.float64 * Value` on our __rmul__

    def __init__(self, value: Any, *, name: Optional[str] = None, _node: Optional[Node] = None):
        # Only real numeric scalars; bool is an int subclass but not a quantity
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
            raise TypeError(
                f"Value only accepts real numeric scalars (int, float, numpy real), "
                f"but got {type(value)}"
            )
        self.value = np.float64(value)
        self.grad = np.float64(0.0)
        self.node = _node
        self.name = name
        # Position on the tape that recorded it, if any
        self._tape_idx: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.node is None

    @property
    def operands(self):
        return () if self.node is None else self.node.operands

    @property
    def op_tag(self) -> str:
        return "leaf" if self.node is None else self.node.op_tag

    def __repr__(self):
        return f"Value(value={self.value:.4f}, grad={self.grad:.4f})"

    def backward(self):
        """Run a reverse pass with this value as root (see engine.backward)."""
        from .engine import backward
        backward(self)

    # Activations as methods
    def sigmoid(self):
        from ..ops.activations import sigmoid
        return sigmoid(self)

    def relu(self):
        from ..ops.activations import relu
        return relu(self)

    def linear(self):
        from ..ops.activations import linear
        return linear(self)

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, k):
        from ..ops.arithmetic import pow
        return pow(self, k)
