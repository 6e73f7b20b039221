# microdiff/ops/__init__.py

# Importing the modules registers their backward rules
from . import arithmetic
from . import activations

# Convenience re-exports so users can do: from microdiff.ops import mul, sigmoid, ...
from .arithmetic import add, sub, mul, div, neg, pow
from .activations import sigmoid, relu, linear

__all__ = [
    "add", "sub", "mul", "div", "neg", "pow",
    "sigmoid", "relu", "linear",
]
