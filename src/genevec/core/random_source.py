"""
Random source used by mutation operators.

A thin wrapper around ``numpy.random.Generator`` exposing the handful of
primitives the operators draw from. Each worker thread should own its own
source; ``spawn`` derives statistically independent children.
"""

from typing import List, Optional

import numpy as np


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class RandomSource:
    """Random primitives backed by a numpy ``Generator``."""

    def __init__(self, seed: Optional[int] = None, generator: Optional[np.random.Generator] = None):
        if generator is not None and seed is not None:
            raise ValueError("Pass either a seed or a generator, not both")
        self.seed = seed
        self._generator = generator if generator is not None else np.random.default_rng(seed)

    @property
    def generator(self) -> np.random.Generator:
        return self._generator

    def spawn(self, count: int) -> List["RandomSource"]:
        """Create ``count`` independent sources, one per worker."""
        seeds = np.random.SeedSequence(self.seed).spawn(count)
        return [RandomSource(generator=np.random.default_rng(s)) for s in seeds]

    def uniform(self) -> float:
        """Uniform draw from the half-open interval [0, 1)."""
        return float(self._generator.random())

    def uniform_closed(self) -> float:
        """Uniform draw from the closed interval [0, 1]."""
        while True:
            d = self.uniform()
            if self.coin():
                d += 1.0
            if d <= 1.0:
                return d

    def gaussian(self) -> float:
        """Standard normal draw."""
        return float(self._generator.standard_normal())

    def coin(self, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self.uniform() < probability

    def integer(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}")
        return int(self._generator.integers(0, n, dtype=np.uint64))

    def any_integer(self) -> int:
        """Uniform integer over the whole signed 64-bit domain."""
        return int(self._generator.integers(INT64_MIN, INT64_MAX, endpoint=True, dtype=np.int64))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"
