# microdiff/core/engine.py
from __future__ import annotations
import logging
import numpy as np
from typing import Iterable, List, Optional

from . import tape as tape_mod  # module access for use_tape() compatibility
from .config import get_config
from .errors import GraphCycleError
from .node import backward_rule
from .value import Value

logger = logging.getLogger(__name__)

def topological_order(root: Value) -> List[Value]:
    """
    Every Value reachable from `root` through operand links, each exactly once,
    dependencies first and `root` last.

    Iterative depth-first search: a value is appended only after all of its
    operands have been appended. The visited set is keyed by identity, so
    shared subgraphs (diamonds, `x * x`) are emitted once.

    Precondition: the reachable subgraph is acyclic. With `check_cycles`
    enabled a back edge raises GraphCycleError; otherwise the result for a
    cyclic graph is unspecified.
    """
    if not isinstance(root, Value):
        raise TypeError(f"topological_order expects a Value, got {type(root)}")

    check = get_config().check_cycles
    order: List[Value] = []
    visited = {root}
    in_progress = {root}
    stack = [(root, iter(root.operands))]

    while stack:
        v, pending = stack[-1]
        for child in pending:
            if child in visited:
                if check and child in in_progress:
                    raise GraphCycleError(
                        f"cycle detected: {child!r} is (transitively) its own operand"
                    )
                continue
            visited.add(child)
            in_progress.add(child)
            stack.append((child, iter(child.operands)))
            break
        else:
            # all operands emitted
            stack.pop()
            in_progress.discard(v)
            order.append(v)
    return order

def backward(root: Value) -> None:
    """
    Run a single reverse pass from `root`.

    Steps:
        1) sort the reachable subgraph and walk it from `root` toward leaves,
        2) seed root.grad = 1 (d root / d root),
        3) call each non-leaf value's backward rule, which accumulates
           out.grad * (d out / d operand) onto its operands.

    Grads are not cleared first: callers reset them between independent
    passes (see `zero_grad`).
    """
    order = topological_order(root)
    if get_config().log_graph_size:
        logger.debug("backward pass over %d values (root op=%s)", len(order), root.op_tag)

    root.grad = np.float64(1.0)
    for v in reversed(order):
        if v.node is None:
            continue  # leaf: nothing to propagate
        backward_rule(v.node.op_tag)(v)

def zero_grad(values: Optional[Iterable[Value]] = None) -> None:
    """
    Set grads to zero.

    With `values` given, only those are reset. Otherwise every value on the
    active tape is reset, together with its operands so leaves that were never
    recorded are cleared as well. Outside `use_tape()` there is no tape to
    scan, so `values` must be given.
    """
    if values is not None:
        for v in values:
            v.grad = np.float64(0.0)
        return

    tape = tape_mod.global_tape
    if tape is None:
        raise RuntimeError("zero_grad() without values needs an active tape (use_tape())")

    seen = set()
    for out in tape.values:
        if out not in seen:
            out.grad = np.float64(0.0); seen.add(out)
        for p in out.operands:
            if p not in seen:
                p.grad = np.float64(0.0); seen.add(p)
