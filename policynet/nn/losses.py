from .errors import LogicError, ShapeError
from .tensor import Tensor


class MeanSquaredError:
    """Mean of squared differences over every batch x feature element."""

    def __init__(self):
        self.last_pred = None
        self.last_target = None

    def __call__(self, pred: Tensor, target: Tensor) -> float:
        return self.forward(pred, target)

    def forward(self, pred: Tensor, target: Tensor) -> float:
        if pred.shape != target.shape:
            raise ShapeError(f"Loss shape mismatch: prediction {pred.shape} vs target {target.shape}")
        if pred.size == 0:
            raise ShapeError("Loss of an empty prediction is undefined")
        self.last_pred = pred.copy()
        self.last_target = target.copy()

        diff = pred - target
        return float((diff * diff).data.mean())

    def backward(self) -> Tensor:
        if self.last_pred is None:
            raise LogicError("MeanSquaredError.backward() called before forward()")
        scale = 2.0 / self.last_pred.size
        return (self.last_pred - self.last_target).scalar_multiply(scale)
