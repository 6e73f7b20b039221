# microdiff/core/__init__.py

"""
Core public API of the engine.

Exports:
    Value             : The differentiable scalar node.
    Tape, use_tape    : Per-graph arena and the context manager switching it.
    backward          : Run a single reverse pass from a root value.
    topological_order : Dependency order of the subgraph under a root.
    zero_grad         : Reset grads on given values or on the active tape.
    grad, grads, grads_list, value : Convenience seeds.
"""

from .value import Value
from .node import Node
from .tape import Tape, use_tape
from .engine import backward, topological_order, zero_grad
from .seeds import grad, grads, grads_list, value

__all__ = [
    "Value", "Node",
    "Tape", "use_tape",
    "backward", "topological_order", "zero_grad",
    "grad", "grads", "grads_list", "value",
]
