from ..utils.lr_scheduler import LRScheduler
from .params import apply_weight_decay


class SGD:
    def __init__(self, model, lr: LRScheduler | float = 1e-2, weight_decay: float = 0.0):
        if weight_decay < 0:
            raise ValueError(f"weight_decay must be non-negative, got {weight_decay}")
        self.model = model
        self.lr_scheduler = lr if isinstance(lr, LRScheduler) else None
        self.lr = lr
        self.weight_decay = weight_decay
        self.t = 0

    def get_lr(self, step: int):
        if self.lr_scheduler is not None:
            return self.lr_scheduler(step)
        else:
            return self.lr

    def step(self):
        """
        One plain gradient-descent step with the gradients stored by the last
        backward pass, followed by L2 shrinkage when ``weight_decay`` is set.
        """
        # Increase timestep
        self.t += 1
        lr_t = self.get_lr(self.t)

        self.model.update(lr_t)
        if self.weight_decay > 0:
            apply_weight_decay(self.model, self.weight_decay)
        return lr_t
