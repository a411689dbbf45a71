"""Tests for settings, definitions and built-in presets."""

import pytest
from pydantic import ValidationError

from py_orbis.config import PRESETS, Settings, get_preset, list_presets, load_preset
from py_orbis.config.dimension_settings import (
    ClassificationDefinition,
    LayerDefinition,
    LayerKind,
)
from py_orbis.core.classification_tree import BiomeLayer, RegionLayer, SurfaceType
from py_orbis.core.errors import CycleError, RegistryLookupError


def minimal_definition(**overrides):
    definition = {
        "dimension": {
            "name": "minimal",
            "type_seed": 1,
            "type_zoom": 50.0,
            "region_seed": 2,
            "region_zoom": 200.0,
            "land": {"min": 0.31, "max": 1.0},
            "shore": {"min": 0.15, "max": 0.30},
            "sea": {"min": -1.0, "max": 0.14},
            "regions": [{"kind": "region", "name": "World", "min": -1.0, "max": 1.0}],
        },
        "regions": [
            {
                "name": "World",
                "seed": 10,
                "zoom": 80.0,
                "land": [{"kind": "biome", "name": "Plains", "min": -1.0, "max": 1.0}],
                "shore": [{"kind": "biome", "name": "Plains", "min": -1.0, "max": 1.0}],
                "sea": [{"kind": "biome", "name": "Plains", "min": -1.0, "max": 1.0}],
            }
        ],
        "biomes": [{"name": "Plains", "id": 1, "color": [200, 214, 143]}],
    }
    definition.update(overrides)
    return definition


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ORBIS_CHUNK_WIDTH", raising=False)
        settings = Settings(_env_file=None)
        assert settings.chunk_width == 16
        assert settings.point_frequency == 0.04
        assert settings.default_preset == "orbis_demo"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ORBIS_CHUNK_WIDTH", "32")
        monkeypatch.setenv("ORBIS_MIN_BLEND_RADIUS", "12.5")
        settings = Settings(_env_file=None)
        assert settings.chunk_width == 32
        assert settings.min_blend_radius == 12.5

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("ORBIS_CHUNK_WIDTH", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestDefinitions:
    """Test definition validation and tree building."""

    def test_layer_build(self):
        region = LayerDefinition(kind="region", name="World", min=-1.0, max=0.0)
        biome = LayerDefinition(kind=LayerKind.BIOME, name="Plains", min=0.01, max=1.0)
        assert region.build() == RegionLayer("World", -1.0, 0.0)
        assert biome.build() == BiomeLayer("Plains", 0.01, 1.0)

    def test_layer_min_above_max(self):
        with pytest.raises(ValidationError, match="greater than max"):
            LayerDefinition(kind="biome", name="Plains", min=0.5, max=0.1)

    def test_layer_outside_noise_range(self):
        with pytest.raises(ValidationError):
            LayerDefinition(kind="biome", name="Plains", min=-1.5, max=0.1)

    def test_unknown_layer_kind(self):
        with pytest.raises(ValidationError):
            LayerDefinition(kind="forest", name="Plains", min=-1.0, max=1.0)

    def test_build_minimal(self):
        dimension, registry = ClassificationDefinition.model_validate(minimal_definition()).build()
        assert dimension.name == "minimal"
        assert dimension.band_for(SurfaceType.LAND).min == 0.31
        assert registry.frozen
        assert registry.biome("Plains").color == (200, 214, 143)

    def test_top_level_biome_rejected(self):
        definition = minimal_definition()
        definition["dimension"]["regions"] = [
            {"kind": "biome", "name": "Plains", "min": -1.0, "max": 1.0}
        ]
        with pytest.raises(ValidationError, match="must reference a region"):
            ClassificationDefinition.model_validate(definition)

    def test_bad_color(self):
        definition = minimal_definition(biomes=[{"name": "Plains", "id": 1, "color": [0, 300, 0]}])
        with pytest.raises(ValidationError, match="colour"):
            ClassificationDefinition.model_validate(definition)

    def test_unresolved_name_on_build(self):
        definition = minimal_definition(biomes=[{"name": "Forest", "id": 1}])
        model = ClassificationDefinition.model_validate(definition)
        with pytest.raises(RegistryLookupError, match="Plains"):
            model.build()

    def test_cycle_on_build(self):
        definition = minimal_definition()
        definition["regions"][0]["land"] = [
            {"kind": "region", "name": "World", "min": -1.0, "max": 1.0}
        ]
        model = ClassificationDefinition.model_validate(definition)
        with pytest.raises(CycleError):
            model.build()

    def test_context_flags(self):
        definition = minimal_definition()
        definition["regions"][0]["context"] = {"use_sea_context": True}
        _, registry = ClassificationDefinition.model_validate(definition).build()
        context = registry.region("World").context
        assert context.uses_context(SurfaceType.SEA)
        assert not context.uses_context(SurfaceType.LAND)


class TestPresets:
    """Test the built-in presets."""

    def test_list(self):
        assert list_presets() == sorted(PRESETS)
        assert "orbis_demo" in list_presets()
        assert "legacy" in list_presets()

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="Available"):
            get_preset("nowhere")

    @pytest.mark.parametrize("name", ["orbis_demo", "legacy"])
    def test_presets_build(self, name):
        dimension, registry = load_preset(name)
        assert dimension.name == name
        assert registry.frozen

    def test_demo_nesting(self):
        _, registry = load_preset("orbis_demo")
        assert registry.region("hot").child_region_names(SurfaceType.LAND) == ["desert"]
        assert registry.region("desert").context.uses_context(SurfaceType.LAND)
        assert registry.region("temperate").child_region_names(SurfaceType.LAND) == ["highlands"]
        assert len(registry.biomes) == 19
