"""
Seeded 2D noise sampling.

The noise primitive itself comes from the ``opensimplex`` package. This module
wraps it in an immutable value type so that every classification step builds
its own sampling context for the seed it needs instead of reseeding a shared
generator in place.
"""

import math
from functools import lru_cache

from opensimplex import OpenSimplex


@lru_cache(maxsize=256)
def _generator(seed: int) -> OpenSimplex:
    """Build (once per seed) the OpenSimplex permutation tables."""
    return OpenSimplex(seed)


class NoiseSource:
    """
    Deterministic 2D noise field for a single seed.

    Instances are immutable; ``reseed`` returns a new source. Two sources with
    the same seed always produce the same samples, which makes them safe to
    share between threads.
    """

    __slots__ = ("_seed", "_generator")

    def __init__(self, seed: int):
        self._seed = int(seed)
        self._generator = _generator(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reseed(self, seed: int) -> "NoiseSource":
        """Return a sampling context for another seed."""
        return NoiseSource(seed)

    def sample(self, x: float, z: float) -> float:
        """Sample the field at (x, z); the result lies in [-1, 1]."""
        return self._generator.noise2(x, z)

    def __eq__(self, other):
        if not isinstance(other, NoiseSource):
            return NotImplemented
        return self._seed == other._seed

    def __hash__(self):
        return hash((NoiseSource, self._seed))

    def __repr__(self):
        return f"NoiseSource(seed={self._seed})"


def round_to_precision(value: float, precision: float) -> float:
    """
    Round half-up to ``1 / precision`` steps.

    A precision of 100 keeps two decimals. Half-up (not banker's) rounding
    keeps values such as -0.325 on the same side of a band as other tooling
    built on ``Math.round``.
    """
    return math.floor(value * precision + 0.5) / precision


def context_in_range(minimum: float, maximum: float, value: float, precision: float) -> float:
    """
    Re-map ``value`` from [minimum, maximum] onto [-1, 1], rounded.

    Args:
        minimum: Lower bound of the selected layer range
        maximum: Upper bound of the selected layer range
        value: Noise value that selected the layer
        precision: Rounding precision of the dimension

    Returns:
        Relative position of ``value`` inside its range. A degenerate
        range (minimum == maximum) has no extent and maps to its centre, 0.0.
    """
    span = maximum - minimum
    if span == 0:
        return 0.0
    return round_to_precision(((value - minimum) / span) * 2 - 1, precision)
