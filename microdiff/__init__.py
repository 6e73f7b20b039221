# microdiff/__init__.py
# Scalar reverse-mode automatic differentiation

from .core.value import Value
from .core.tape import Tape, use_tape
from .core.engine import backward, topological_order, zero_grad
from .core.seeds import grad, grads, grads_list, value
from .core.config import EngineConfig, get_config, set_config, configure
from .core.errors import AutodiffError, DivisionByZero, DimensionMismatch, GraphCycleError

# Registers every backward rule
from .ops import add, sub, mul, div, neg, pow, sigmoid, relu, linear

__version__ = "0.1.0"

__all__ = [
    # Core
    'Value',
    'Tape',
    'use_tape',
    # Engine
    'backward',
    'topological_order',
    'zero_grad',
    # Seeds
    'grad',
    'grads',
    'grads_list',
    'value',
    # Config
    'EngineConfig',
    'get_config',
    'set_config',
    'configure',
    # Errors
    'AutodiffError',
    'DivisionByZero',
    'DimensionMismatch',
    'GraphCycleError',
    # Ops
    'add', 'sub', 'mul', 'div', 'neg', 'pow',
    'sigmoid', 'relu', 'linear',
]
