# microdiff/core/node.py
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Tuple

@dataclass(eq=False)
class Node:
    """
    Operation record attached to every non-leaf Value.

    Attributes
    ----------
    op_tag   : str
        Operation kind (e.g., "add", "mul"). Selects the backward rule.
    operands : Tuple[Value, ...]
        The values this one was computed from, in argument order. The same
        Value may be shared by many nodes, or appear twice in one node.
    params   : Tuple[Any, ...]
        Constructor-time parameters the backward rule needs
        (the integer exponent for "pow").
    """
    op_tag: str
    operands: Tuple[Any, ...]
    params: Tuple[Any, ...] = field(default=())


# op_tag -> rule(out) that accumulates out.grad contributions onto operands
BACKWARD_RULES: Dict[str, Callable[[Any], None]] = {}


def register_backward(op_tag: str):
    """Decorator registering the backward rule of one operation kind."""
    def deco(fn):
        if op_tag in BACKWARD_RULES:
            raise ValueError(f"backward rule for {op_tag!r} already registered")
        BACKWARD_RULES[op_tag] = fn
        return fn
    return deco


def backward_rule(op_tag: str) -> Callable[[Any], None]:
    try:
        return BACKWARD_RULES[op_tag]
    except KeyError:
        raise KeyError(f"no backward rule registered for op {op_tag!r}") from None
