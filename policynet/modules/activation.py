from ..nn.errors import LogicError, ShapeError
from ..nn.module import Module
from ..nn.tensor import Tensor
from ..utils.backend import xp


class ReLU(Module):
    """
    Rectified Linear Unit, ``max(0, x)``.

    Parameter-free: count 0, empty parameter vector, update is a no-op.
    """

    def __init__(self):
        super().__init__()
        self.mask = None

    def forward(self, x: Tensor) -> Tensor:
        # 1 where x > 0, else 0
        self.mask = Tensor(x.data > 0, dtype=x.dtype)
        return Tensor(xp.maximum(x.data, 0), dtype=x.dtype)

    def backward(self, grad: Tensor) -> Tensor:
        if self.mask is None:
            raise LogicError("ReLU.backward() called before forward()")
        if grad.shape != self.mask.shape:
            raise ShapeError(f"Gradient shape {grad.shape} does not match cached mask {self.mask.shape}")
        return grad * self.mask
