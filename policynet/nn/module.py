from ..utils.backend import xp
from .errors import LengthError
from .tensor import Tensor


class Module:
    """
    Base class of every layer.

    A layer implements ``forward``/``backward`` by hand and exposes its learnable
    tensors through ``parameters()`` and the matching gradient accumulators
    through ``gradients()`` (same keys, same order: weights before biases).
    ``update`` and the flat parameter vector helpers are derived from those two
    dicts, so a parameter-free layer gets count 0, an empty vector and a no-op
    update for free.
    """

    def __init__(self):
        self.name = self.__class__.__name__

    def __call__(self, x):
        return self.forward(x)

    def __repr__(self):
        return f"<{self.name}>"

    def __str__(self):
        lines = [f"{self.name}:"]
        for name, param in self.parameters().items():
            lines.append(f"  {name}: shape={tuple(param.shape)}, dtype={param.dtype}")
        lines.append(f"  parameters: {self.num_parameters}")
        return "\n".join(lines)

    def forward(self, x: Tensor) -> Tensor:
        raise NotImplementedError("Child class must implement forward()")

    def backward(self, grad: Tensor) -> Tensor:
        raise NotImplementedError("Child class must implement backward()")

    def parameters(self):
        return {}

    def gradients(self):
        return {}

    @property
    def num_parameters(self):
        return self.count_parameters()

    def update(self, lr):
        grads = self.gradients()
        for name, param in self.parameters().items():
            param.copy_(param - grads[name] * lr)

    def count_parameters(self) -> int:
        return sum(param.size for param in self.parameters().values())

    def get_parameters(self):
        params = [param.data.ravel() for param in self.parameters().values()]
        if not params:
            return xp.zeros(0, dtype=xp.float64)
        return xp.concatenate(params).astype(xp.float64)

    def set_parameters(self, values):
        values = as_parameter_vector(values)
        expected = self.count_parameters()
        if values.size != expected:
            raise LengthError(f"{self.name} expects {expected} parameters, got {values.size}")

        offset = 0
        for param in self.parameters().values():
            chunk = values[offset:offset + param.size]
            param.copy_(Tensor(chunk.reshape(param.shape), dtype=param.dtype))
            offset += param.size

    def he_uniform(self, shape, rng):
        # uniform in [-sqrt(2/fan_in), sqrt(2/fan_in)], fan_in is the leading axis
        fan_in = shape[0]
        limit = xp.sqrt(2.0 / fan_in)
        return rng.uniform(-limit, limit, size=shape)


def as_parameter_vector(values):
    return xp.asarray(values, dtype=xp.float64).reshape(-1)
