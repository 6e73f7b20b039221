# microdiff/nn/optimizers.py
import numpy as np

class SGD:
    """
    Plain gradient descent on leaf parameters:
        p.value <- p.value - lr * p.grad
    The engine never updates parameters itself; this is the collaborator side.
    """

    def __init__(self, params, lr=0.01):
        if lr <= 0:
            raise ValueError(f"learning rate must be positive, got {lr}")
        self.params = list(params)
        for p in self.params:
            if not p.is_leaf:
                raise ValueError(f"SGD only updates leaf values, got a {p.op_tag!r} node")
        self.lr = lr

    def zero_grad(self):
        for p in self.params:
            p.grad = np.float64(0.0)

    def step(self):
        for p in self.params:
            p.value = p.value - self.lr * p.grad

    def __repr__(self):
        return f"SGD(params={len(self.params)}, lr={self.lr})"
