# microdiff/nn/__init__.py
"""Perceptron collaborators: they only build Values, read value/grad and call backward."""

from .perceptron import Activation, Neuron, Layer, Net
from .optimizers import SGD
from .losses import mse

__all__ = ["Activation", "Neuron", "Layer", "Net", "SGD", "mse"]
