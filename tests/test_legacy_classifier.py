"""Tests for the legacy flat classifier and its one-level tree equivalent."""

import pytest

from py_orbis.config import load_preset
from py_orbis.core.classification_tree import SurfaceType
from py_orbis.core.errors import RegistryLookupError
from py_orbis.core.legacy_classifier import (
    LEGACY_BIOMES,
    LegacyClassifier,
    LegacyRegion,
    build_legacy_tree,
    legacy_biome,
    legacy_biome_by_id,
)
from py_orbis.core.region_resolver import RegionResolver

GRID = [(x, z) for x in range(-6000, 6000, 347) for z in range(-6000, 6000, 409)]


@pytest.fixture(scope="module")
def legacy():
    return LegacyClassifier()


class TestLegacyTable:
    """Test the fixed 15-entry lookup table."""

    def test_ids_unique(self):
        ids = [biome.id for biome in LEGACY_BIOMES]
        assert sorted(ids) == list(range(1, 16))

    def test_by_id(self):
        assert legacy_biome_by_id(1).name == "hot_darker_red"
        assert legacy_biome_by_id(15).name == "cold_darker_magenta"
        with pytest.raises(RegistryLookupError):
            legacy_biome_by_id(16)

    @pytest.mark.parametrize(
        "region, surface_type, value, expected",
        [
            (LegacyRegion.HOT, SurfaceType.LAND, -0.5, 1),
            (LegacyRegion.HOT, SurfaceType.LAND, -0.33, 1),
            (LegacyRegion.HOT, SurfaceType.LAND, 0.0, 2),
            (LegacyRegion.HOT, SurfaceType.LAND, 0.334, 2),
            (LegacyRegion.HOT, SurfaceType.LAND, 0.336, 3),
            (LegacyRegion.HOT, SurfaceType.SHORE, 0.9, 4),
            (LegacyRegion.HOT, SurfaceType.SEA, -0.9, 5),
            (LegacyRegion.TEMPERATE, SurfaceType.SEA, 0.0, 6),
            (LegacyRegion.TEMPERATE, SurfaceType.SHORE, 0.0, 7),
            (LegacyRegion.TEMPERATE, SurfaceType.LAND, -1.0, 8),
            (LegacyRegion.TEMPERATE, SurfaceType.LAND, 0.1, 9),
            (LegacyRegion.TEMPERATE, SurfaceType.LAND, 1.0, 10),
            (LegacyRegion.COLD, SurfaceType.SEA, 0.5, 11),
            (LegacyRegion.COLD, SurfaceType.SHORE, -0.5, 12),
            (LegacyRegion.COLD, SurfaceType.LAND, -0.7, 13),
            (LegacyRegion.COLD, SurfaceType.LAND, 0.2, 14),
            (LegacyRegion.COLD, SurfaceType.LAND, 0.9, 15),
        ],
    )
    def test_lookup(self, region, surface_type, value, expected):
        assert legacy_biome(region, surface_type, value).id == expected

    def test_colors(self):
        assert legacy_biome_by_id(3).color == (255, 0, 0)
        assert legacy_biome_by_id(2).color == (178, 0, 0)
        assert legacy_biome_by_id(1).color == (124, 0, 0)


class TestLegacyClassifier:
    """Test the flat classifier against its tree equivalent."""

    def test_deterministic(self, legacy):
        other = LegacyClassifier()
        for x, z in GRID[:100]:
            assert legacy.classify(x, z) == other.classify(x, z)

    def test_ids_in_table(self, legacy):
        seen = {legacy(x, z) for x, z in GRID}
        assert seen <= set(range(1, 16))
        assert len(seen) > 1

    def test_tree_matches_flat_classifier(self, legacy):
        dimension, registry = build_legacy_tree()
        resolver = RegionResolver(dimension, registry)
        for x, z in GRID:
            assert resolver.classify(x, z) == legacy.classify(x, z), (x, z)

    def test_preset_matches_flat_classifier(self, legacy):
        dimension, registry = load_preset("legacy")
        resolver = RegionResolver(dimension, registry)
        for x, z in GRID:
            assert resolver.classify(x, z) == legacy.classify(x, z), (x, z)

    def test_tree_with_custom_seeds(self):
        seeds = {"region_seed": 11, "type_seed": 22, "biome_seed": 33}
        legacy = LegacyClassifier(**seeds)
        resolver = RegionResolver(*build_legacy_tree(**seeds))
        for x, z in GRID[::3]:
            assert resolver.classify(x, z) == legacy.classify(x, z), (x, z)

    def test_tree_is_frozen(self):
        _, registry = build_legacy_tree()
        assert registry.frozen
        assert len(registry.regions) == 3
        assert len(registry.biomes) == 15
