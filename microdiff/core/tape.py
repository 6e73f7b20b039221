# microdiff/core/tape.py
from __future__ import annotations
from typing import List, Optional
from contextlib import contextmanager

class Tape:
    """
    Arena for one computation graph: records every Value produced by an
    operation, in creation order. Leaves are not recorded; they are reached
    through the operands of recorded values.

    Recording only happens inside `use_tape()`; leaving the block drops the
    arena and with it the last reference to the graph.
    """
    def __init__(self):
        self.values: List = []

    def __len__(self):
        return len(self.values)

    def reset(self):
        for v in self.values:
            v._tape_idx = None
        self.values.clear()

    def push(self, out):
        """Append `out` and stamp it with its index on this tape."""
        out._tape_idx = len(self.values)
        self.values.append(out)
        return out._tape_idx

    def __repr__(self):
        return f"Tape(values={len(self.values)})"

# Active arena; None outside `use_tape()`, so graphs built there are not
# retained and are freed as soon as the caller drops them
global_tape: Optional[Tape] = None

@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily record on a fresh (or given) tape:
        with use_tape():
            ... build computation ...
            loss.backward()
    The previous tape is restored on exit, and the fresh tape's references
    go away with it.
    """
    from . import tape as _tape_mod  # module access so other modules see the swap
    prev = _tape_mod.global_tape
    try:
        _tape_mod.global_tape = tape if tape is not None else Tape()
        yield _tape_mod.global_tape
    finally:
        _tape_mod.global_tape = prev
