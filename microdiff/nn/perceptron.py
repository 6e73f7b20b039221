# microdiff/nn/perceptron.py
"""
Perceptron building blocks on top of the scalar engine.

Only fully connected perceptrons are supported. Every call builds a fresh
subgraph from the inputs to the neuron outputs; the weights and biases are
long-lived leaf Values shared by all those subgraphs, so gradients from one
backward pass land on them directly.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from ..core.errors import DimensionMismatch
from ..core.tape import use_tape
from ..core.value import Value
from ..ops.arithmetic import add, mul
from ..ops.activations import linear, relu, sigmoid
from .losses import mse
from .optimizers import SGD

logger = logging.getLogger(__name__)


class Activation(Enum):
    LOGISTIC = "logistic"
    RELU = "relu"
    LINEAR = "linear"

    @classmethod
    def parse(cls, a: Union["Activation", str]) -> "Activation":
        """Accept an Activation or its name ("relu", "LOGISTIC", ...)."""
        if isinstance(a, cls):
            return a
        if isinstance(a, str):
            try:
                return cls(a.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"unknown activation {a!r}; expected one of {[m.value for m in cls]}")

    def apply(self, x: Value) -> Value:
        return _ACTIVATION_OPS[self](x)


_ACTIVATION_OPS = {
    Activation.LOGISTIC: sigmoid,
    Activation.RELU: relu,
    Activation.LINEAR: linear,
}


def _update(params: Iterable[Value], lr: float) -> None:
    for p in params:
        p.value = p.value - lr * p.grad


class Neuron:
    """
    Weighted sum of the inputs plus a bias, followed by an activation.

    Weights and bias start uniform in [-1, 1).
    """

    def __init__(self, n_inputs: int, activation=Activation.LOGISTIC,
                 rng: Optional[np.random.Generator] = None):
        if n_inputs < 1:
            raise ValueError(f"a neuron needs at least one input, got {n_inputs}")
        rng = np.random.default_rng() if rng is None else rng
        self.activation = Activation.parse(activation)
        self.weights = [Value(w, name=f"w{i}") for i, w in enumerate(rng.uniform(-1.0, 1.0, n_inputs))]
        self.bias = Value(rng.uniform(-1.0, 1.0), name="b")

    @property
    def n_inputs(self) -> int:
        return len(self.weights)

    def __call__(self, inputs: Sequence) -> Value:
        if len(inputs) != len(self.weights):
            raise DimensionMismatch(
                f"neuron expects {len(self.weights)} inputs, got {len(inputs)}"
            )
        acc = mul(inputs[0], self.weights[0])
        for x, w in zip(inputs[1:], self.weights[1:]):
            acc = add(acc, mul(x, w))
        acc = add(acc, self.bias)
        return self.activation.apply(acc)

    def parameters(self) -> List[Value]:
        return self.weights + [self.bias]

    def update_params(self, lr: float = 1.0) -> None:
        _update(self.parameters(), lr)

    def __repr__(self):
        return f"Neuron({self.n_inputs}, {self.activation.value})"


class Layer:
    def __init__(self, n_inputs: int, n_neurons: int, activation=Activation.LOGISTIC,
                 rng: Optional[np.random.Generator] = None):
        if n_neurons < 1:
            raise ValueError(f"a layer needs at least one neuron, got {n_neurons}")
        rng = np.random.default_rng() if rng is None else rng
        self.neurons = [Neuron(n_inputs, activation, rng) for _ in range(n_neurons)]

    def __call__(self, inputs: Sequence) -> List[Value]:
        return [n(inputs) for n in self.neurons]

    def parameters(self) -> List[Value]:
        return [p for n in self.neurons for p in n.parameters()]

    def update_params(self, lr: float = 1.0) -> None:
        _update(self.parameters(), lr)

    def __repr__(self):
        return f"Layer([{', '.join(repr(n) for n in self.neurons)}])"


class Net:
    """
    Multi-layer perceptron.

    Args:
        n_inputs: Size of the input vector
        layer_sizes: Neuron count per layer, the last entry is the output size
        activation: Activation of the hidden layers
        output_activation: Activation of the last layer
        seed: Seed for weight initialisation
    """

    def __init__(self, n_inputs: int, layer_sizes: Sequence[int],
                 activation=Activation.LOGISTIC, output_activation=Activation.LINEAR,
                 seed: Optional[int] = None):
        if not layer_sizes:
            raise ValueError("Net needs at least one layer")
        rng = np.random.default_rng(seed)
        sizes = [n_inputs] + list(layer_sizes)
        self.layers = [
            Layer(sizes[i], sizes[i + 1],
                  output_activation if i == len(layer_sizes) - 1 else activation, rng)
            for i in range(len(layer_sizes))
        ]

    @property
    def n_inputs(self) -> int:
        return self.layers[0].neurons[0].n_inputs

    def __call__(self, inputs: Sequence) -> Union[Value, List[Value]]:
        out = list(inputs)
        for layer in self.layers:
            out = layer(out)
        return out[0] if len(out) == 1 else out

    def parameters(self) -> List[Value]:
        return [p for layer in self.layers for p in layer.parameters()]

    def update_params(self, lr: float = 1.0) -> None:
        _update(self.parameters(), lr)

    def fit(self, xs: Sequence[Sequence], ys: Sequence, epochs: int = 100,
            lr: float = 0.05) -> List[float]:
        """
        Full-batch gradient descent with MSE loss.

        Each epoch builds its graph on a fresh tape, so the whole graph of
        the step is released when the step ends. Returns the loss per epoch.
        """
        if len(xs) != len(ys):
            raise DimensionMismatch(f"fit: {len(xs)} samples but {len(ys)} targets")
        optimizer = SGD(self.parameters(), lr=lr)
        history = []
        for epoch in range(epochs):
            with use_tape():
                preds, targets = [], []
                for x, y in zip(xs, ys):
                    out = self(x)
                    preds.extend(out if isinstance(out, list) else [out])
                    targets.extend(np.atleast_1d(y).tolist())
                loss = mse(preds, targets)
                optimizer.zero_grad()
                loss.backward()
                optimizer.step()
            history.append(float(loss.value))
            logger.info("epoch %d/%d loss=%.6f", epoch + 1, epochs, history[-1])
        return history

    def __repr__(self):
        return f"Net({self.n_inputs}, {[len(l.neurons) for l in self.layers]})"
