"""Shared fixtures for classification tests."""

import pytest

from py_orbis.core.classification_tree import (
    Biome,
    BiomeLayer,
    Dimension,
    Region,
    RegionLayer,
    Registry,
    SurfaceBand,
    SurfaceType,
)

TYPE_SEED = 1
REGION_SEED = 2

DEFAULT_BANDS = (
    SurfaceBand(SurfaceType.LAND, 0.31, 1.0),
    SurfaceBand(SurfaceType.SHORE, 0.15, 0.30),
    SurfaceBand(SurfaceType.SEA, -1.0, 0.14),
)


class FixedNoise:
    """Noise stand-in returning one constant per seed."""

    def __init__(self, values, seed):
        self.values = values
        self.seed = seed

    def sample(self, x, z):
        return self.values[self.seed]


def make_dimension(regions, bands=DEFAULT_BANDS, precision=100.0):
    return Dimension(
        name="test",
        type_seed=TYPE_SEED,
        type_zoom=50.0,
        region_seed=REGION_SEED,
        region_zoom=200.0,
        precision=precision,
        bands=bands,
        regions=tuple(regions),
    )


@pytest.fixture
def fixed_noise():
    """Build a noise factory from a {seed: value} mapping."""

    def factory(values):
        return lambda seed: FixedNoise(values, seed)

    return factory


@pytest.fixture
def plains_tree():
    """Root region 'World' whose only land layer maps [-1, 1] to 'Plains'."""
    registry = Registry(
        regions=[
            Region(name="World", seed=10, zoom=80.0, land=(BiomeLayer("Plains", -1.0, 1.0),)),
        ],
        biomes=[Biome(name="Plains", id=7, color=(200, 214, 143))],
    )
    dimension = make_dimension([RegionLayer("World", -1.0, 1.0)])
    return dimension, registry
