"""
Whole-model transforms that go through the flat parameter vector.

Everything here only calls ``count_parameters``/``get_parameters``/``set_parameters``,
so it works on any layer, composite or network.
"""

from pathlib import Path

from ..utils.backend import xp
from .errors import LengthError


def apply_weight_decay(model, weight_decay: float):
    """L2 shrinkage: every parameter ``p`` becomes ``p - weight_decay * p``."""
    params = model.get_parameters()
    model.set_parameters(params - weight_decay * params)


def prune_by_magnitude(model, ratio: float) -> int:
    """
    Zero every parameter whose magnitude is below the ``ratio`` quantile.

    The threshold is the magnitude at position ``int(ratio * n)`` of the sorted
    magnitudes; ``ratio >= 1`` zeroes everything. Returns how many parameters
    were zeroed by this call.
    """
    if not 0.0 <= ratio <= 1.0:
        raise ValueError(f"prune ratio must be in [0, 1], got {ratio}")

    params = model.get_parameters()
    if params.size == 0:
        return 0

    magnitudes = xp.sort(xp.abs(params))
    cut = int(ratio * params.size)
    if cut >= params.size:
        pruned = params != 0
    else:
        pruned = xp.abs(params) < magnitudes[cut]
    pruned &= params != 0

    params[pruned] = 0.0
    model.set_parameters(params)
    return int(pruned.sum())


def save_parameters(model, path):
    """Writes one scalar per line, in flatten order."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    xp.savetxt(path, model.get_parameters(), fmt="%.17g")


def load_parameters(model, path):
    values = xp.loadtxt(path, dtype=xp.float64, ndmin=1)
    expected = model.count_parameters()
    if values.size != expected:
        raise LengthError(f"{path} holds {values.size} parameters, model expects {expected}")
    model.set_parameters(values)
    return values
