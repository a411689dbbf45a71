"""Tests for noise sampling and rounding helpers."""

import pytest

from py_orbis.core.noise import NoiseSource, context_in_range, round_to_precision

COORDINATES = [(x * 0.37, z * 0.91) for x in range(-5, 6) for z in range(-5, 6)]


class TestNoiseSource:
    """Test the seeded noise value type."""

    def test_same_seed_same_samples(self):
        """Two sources with one seed produce identical samples."""
        first = [NoiseSource(42).sample(x, z) for x, z in COORDINATES]
        second = [NoiseSource(42).sample(x, z) for x, z in COORDINATES]
        assert first == second

    def test_reseed_round_trip(self):
        """Reseeding back to a seed restores its sample sequence."""
        source = NoiseSource(42)
        expected = [source.sample(x, z) for x, z in COORDINATES]

        round_trip = source.reseed(7).reseed(42)
        assert [round_trip.sample(x, z) for x, z in COORDINATES] == expected

        again = source.reseed(42)
        assert [again.sample(x, z) for x, z in COORDINATES] == expected

    def test_reseed_returns_new_source(self):
        source = NoiseSource(42)
        other = source.reseed(7)

        assert other is not source
        assert source.seed == 42
        assert other.seed == 7

    def test_different_seeds_differ(self):
        a = [NoiseSource(1).sample(x, z) for x, z in COORDINATES]
        b = [NoiseSource(2).sample(x, z) for x, z in COORDINATES]
        assert a != b

    def test_samples_in_range(self):
        source = NoiseSource(1242352482951642511)
        for x, z in COORDINATES:
            assert -1.0 <= source.sample(x * 13.0, z * 13.0) <= 1.0

    def test_equality_by_seed(self):
        assert NoiseSource(3) == NoiseSource(3)
        assert NoiseSource(3) != NoiseSource(4)
        assert hash(NoiseSource(3)) == hash(NoiseSource(3))
        assert len({NoiseSource(3), NoiseSource(3), NoiseSource(5)}) == 2


class TestRounding:
    """Test half-up rounding to the dimension precision."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.333, 0.33),
            (0.336, 0.34),
            (0.125, 0.13),
            (-0.125, -0.12),
            (1.0, 1.0),
            (-1.0, -1.0),
        ],
    )
    def test_two_decimals(self, value, expected):
        assert round_to_precision(value, 100) == pytest.approx(expected)

    def test_one_decimal(self):
        assert round_to_precision(0.44, 10) == pytest.approx(0.4)
        assert round_to_precision(0.45, 10) == pytest.approx(0.5)


class TestContext:
    """Test re-mapping of a value inside its layer range."""

    def test_full_range_is_identity(self):
        assert context_in_range(-1.0, 1.0, 0.5, 100) == pytest.approx(0.5)

    def test_range_ends(self):
        assert context_in_range(-0.32, 0.33, -0.32, 100) == pytest.approx(-1.0)
        assert context_in_range(-0.32, 0.33, 0.33, 100) == pytest.approx(1.0)

    def test_midpoint(self):
        assert context_in_range(0.0, 1.0, 0.5, 100) == pytest.approx(0.0)
        assert context_in_range(-1.0, 0.0, -0.25, 100) == pytest.approx(0.5)

    def test_rounded_to_precision(self):
        # (0.1 / 0.3) * 2 - 1 = -0.3333...
        assert context_in_range(0.0, 0.3, 0.1, 100) == pytest.approx(-0.33)

    def test_degenerate_range(self):
        assert context_in_range(0.5, 0.5, 0.5, 100) == 0.0
