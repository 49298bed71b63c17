from ..nn.errors import LogicError, ShapeError
from ..nn.module import Module
from ..nn.tensor import Tensor
from ..utils.backend import make_rng, xp


class Dense(Module):
    """
    Affine layer ``out = x @ W + b`` with ``W`` of shape (in_features, out_features).

    Default weights are drawn uniformly from [-sqrt(2/in_features), sqrt(2/in_features)]
    using ``rng`` (a numpy Generator, an int seed or None); default bias is zero.
    """

    def __init__(self, in_features, out_features, weight=None, bias=None, rng=None, dtype=xp.float32):
        super().__init__()
        if in_features <= 0 or out_features <= 0:
            raise ValueError(f"Dense needs positive feature counts, got ({in_features}, {out_features})")
        self.in_features = in_features
        self.out_features = out_features

        if weight is None:
            self.weight = Tensor(self.he_uniform((in_features, out_features), make_rng(rng)), dtype=dtype)
        else:
            self.weight = Tensor(weight, dtype=dtype)
            if self.weight.shape != (in_features, out_features):
                raise ShapeError(
                    f"Weight shape {self.weight.shape} does not match ({in_features}, {out_features})"
                )

        if bias is None:
            self.bias = Tensor.zeros(out_features, dtype=dtype)
        else:
            self.bias = Tensor(bias, dtype=dtype)
            if self.bias.shape != (out_features,):
                raise ShapeError(f"Bias shape {self.bias.shape} does not match ({out_features},)")

        self.grad_weight = Tensor.zeros(self.weight.shape, dtype=dtype)
        self.grad_bias = Tensor.zeros(self.bias.shape, dtype=dtype)
        self.last_x = None

    @property
    def shape(self):
        return self.weight.shape

    def parameters(self):
        return {"weight": self.weight, "bias": self.bias}

    def gradients(self):
        return {"weight": self.grad_weight, "bias": self.grad_bias}

    def forward(self, x: Tensor) -> Tensor:
        if x.rank != 2 or x.shape[1] != self.in_features:
            raise ShapeError(f"Input features mismatch: expected (batch, {self.in_features}), got {x.shape}")
        self.last_x = x.copy()
        return x @ self.weight + self.bias

    def backward(self, grad: Tensor) -> Tensor:
        if self.last_x is None:
            raise LogicError("Dense.backward() called before forward()")
        expected = (self.last_x.shape[0], self.out_features)
        if grad.shape != expected:
            raise ShapeError(f"Gradient shape {grad.shape} does not match layer output {expected}")

        self.grad_weight = self.last_x.transpose_2d() @ grad
        self.grad_bias = grad.sum(axis=0)
        return grad @ self.weight.transpose_2d()
