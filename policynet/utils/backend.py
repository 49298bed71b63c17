import numpy as xp


def make_rng(seed=None) -> xp.random.Generator:
    # Generators are passed through so callers can share one stream
    if isinstance(seed, xp.random.Generator):
        return seed
    return xp.random.default_rng(seed)
