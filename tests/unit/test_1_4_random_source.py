"""
Unit tests for the Random Source (Subtask 1.4).

Tests cover:
- Seeded reproducibility
- Interval and range guarantees of each primitive
- Independent per-worker sources
"""

import numpy as np
import pytest

from src.genevec.core.random_source import INT64_MAX, INT64_MIN, RandomSource


class TestRandomSource:
    """Test suite for random primitives."""

    def test_seeded_reproducibility(self):
        a, b = RandomSource(11), RandomSource(11)

        assert [a.uniform() for _ in range(5)] == [b.uniform() for _ in range(5)]
        assert [a.gaussian() for _ in range(5)] == [b.gaussian() for _ in range(5)]

    def test_uniform_intervals(self, rng):
        """Test half-open and closed uniform draws stay in [0, 1]."""
        for _ in range(5_000):
            assert 0.0 <= rng.uniform() < 1.0
            assert 0.0 <= rng.uniform_closed() <= 1.0

    def test_coin_extremes(self, rng):
        assert not any(rng.coin(0.0) for _ in range(100))
        assert all(rng.coin(1.0) for _ in range(100))

    def test_coin_frequency(self, rng):
        heads = sum(rng.coin(0.3) for _ in range(10_000))
        assert 2_700 < heads < 3_300

    def test_integer_range(self, rng):
        assert {rng.integer(3) for _ in range(300)} == {0, 1, 2}
        with pytest.raises(ValueError):
            rng.integer(0)

    def test_integer_large_range(self, rng):
        value = rng.integer(2 ** 63)
        assert 0 <= value < 2 ** 63

    def test_any_integer(self, rng):
        for _ in range(100):
            assert INT64_MIN <= rng.any_integer() <= INT64_MAX

    def test_generator_injection(self):
        generator = np.random.default_rng(5)
        source = RandomSource(generator=generator)

        assert source.generator is generator
        with pytest.raises(ValueError):
            RandomSource(seed=1, generator=generator)

    def test_spawn(self):
        """Test spawned sources are reproducible and distinct."""
        first = [s.uniform() for s in RandomSource(3).spawn(3)]
        second = [s.uniform() for s in RandomSource(3).spawn(3)]

        assert first == second
        assert len(set(first)) == 3
