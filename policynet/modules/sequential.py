from ..nn.errors import LengthError, LogicError
from ..nn.module import Module, as_parameter_vector
from ..nn.tensor import Tensor
from ..utils.backend import xp


class Sequential(Module):
    """
    Ordered stack of layers that is itself a layer.

    ``forward`` runs the layers in insertion order, ``backward`` in reverse.
    The flat parameter vector is the concatenation of every layer's vector in
    insertion order, so a Sequential can be nested inside another one.
    """

    def __init__(self, *layers):
        super().__init__()
        self._layers = []
        for layer in layers:
            self.add(layer)

    def add(self, layer):
        """Adds a layer to the stack."""
        if not isinstance(layer, Module):
            raise TypeError("Object must inherit from policynet.nn.module.Module")
        self._layers.append(layer)
        return self

    @property
    def layers(self):
        return tuple(self._layers)

    def __len__(self):
        return len(self._layers)

    def __iter__(self):
        return iter(self._layers)

    def __getitem__(self, index):
        return self._layers[index]

    def __repr__(self):
        inner = ", ".join(repr(layer) for layer in self._layers)
        return f"<{self.name} [{inner}]>"

    def _check_layers(self):
        if not self._layers:
            raise LogicError(f"{self.name} has no layers")

    def forward(self, x: Tensor) -> Tensor:
        self._check_layers()
        out = x
        for layer in self._layers:
            out = layer.forward(out)
        return out

    def backward(self, grad: Tensor) -> Tensor:
        self._check_layers()
        for layer in reversed(self._layers):
            grad = layer.backward(grad)
        return grad

    def update(self, lr):
        for layer in self._layers:
            layer.update(lr)

    def parameters(self):
        params = {}
        for i, layer in enumerate(self._layers):
            for name, param in layer.parameters().items():
                params[f"{i}.{name}"] = param
        return params

    def gradients(self):
        grads = {}
        for i, layer in enumerate(self._layers):
            for name, grad in layer.gradients().items():
                grads[f"{i}.{name}"] = grad
        return grads

    def count_parameters(self) -> int:
        return sum(layer.count_parameters() for layer in self._layers)

    def get_parameters(self):
        chunks = [layer.get_parameters() for layer in self._layers]
        if not chunks:
            return xp.zeros(0, dtype=xp.float64)
        return xp.concatenate(chunks)

    def set_parameters(self, values):
        values = as_parameter_vector(values)
        expected = self.count_parameters()
        if values.size != expected:
            raise LengthError(f"{self.name} expects {expected} parameters, got {values.size}")

        offset = 0
        for layer in self._layers:
            n_params = layer.count_parameters()
            # parameter-free layers take no slice
            if n_params == 0:
                continue
            layer.set_parameters(values[offset:offset + n_params])
            offset += n_params
