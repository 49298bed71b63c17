from ..modules.sequential import Sequential
from ..utils.logger import train_logger
from ..utils.lr_scheduler import LRScheduler
from .losses import MeanSquaredError
from .optim import SGD
from .tensor import Tensor


class NeuralNetwork(Sequential):
    """
    Top-level model: an ordered layer list plus one loss.

    Every training epoch runs, in this order: forward(X), loss.forward(pred, Y),
    loss.backward(), backward(grad), then one update step on every layer.
    """

    def __init__(self, layers=None, loss=None):
        super().__init__(*(layers or ()))
        self.loss = loss if loss is not None else MeanSquaredError()
        self.history = []

    def add_layer(self, layer):
        return self.add(layer)

    def predict(self, X: Tensor) -> Tensor:
        return self.forward(X)

    def train_epoch(self, X: Tensor, Y: Tensor, optimizer: SGD):
        """Runs one epoch and returns ``(loss, pred)``; ``pred`` is the pre-update output."""
        self._check_layers()

        # Forward pass
        pred = self.forward(X)
        loss = self.loss.forward(pred, Y)

        # Backward pass
        grad = self.loss.backward()
        self.backward(grad)

        # Update weights
        optimizer.step()

        self.history.append(loss)
        return loss, pred

    def train(self, X: Tensor, Y: Tensor, epochs: int, lr: LRScheduler | float) -> float:
        self._check_layers()
        optimizer = SGD(self, lr)

        final_loss = 0.0
        for epoch in range(epochs):
            final_loss, _ = self.train_epoch(X, Y, optimizer)
            train_logger.debug("Epoch %d/%d, Loss: %.6f", epoch + 1, epochs, final_loss)
        return final_loss
