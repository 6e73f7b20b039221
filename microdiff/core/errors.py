# microdiff/core/errors.py
"""
Error taxonomy of the engine.

All errors raised on purpose by microdiff derive from `AutodiffError`, and each
one also derives from the builtin exception a caller would naturally expect,
so `except ZeroDivisionError` keeps working for division by a zero node.
"""


class AutodiffError(Exception):
    """Base class for all microdiff errors."""


class DivisionByZero(AutodiffError, ZeroDivisionError):
    """Raised when a div node is constructed with a divisor whose value is 0."""


class DimensionMismatch(AutodiffError, ValueError):
    """Raised by collaborators when input and parameter counts disagree."""


class GraphCycleError(AutodiffError, RuntimeError):
    """Raised by the topological sorter when the cycle guard finds a cycle."""
