"""
Built-in dimension presets.

Each preset is a raw mapping validated by ``ClassificationDefinition``:
- orbis_demo: hot/temperate/cold climate regions with nested sub-regions
- legacy: the one-level tree equivalent to the legacy flat classifier
"""

from typing import Dict, List, Tuple

from ..core.classification_tree import Dimension, Registry, SurfaceType
from ..core import legacy_classifier as legacy
from .dimension_settings import ClassificationDefinition

DEMO_BIOME_SEED = 235623651371436421


def _region(name, minimum, maximum):
    return {"kind": "region", "name": name, "min": minimum, "max": maximum}


def _biome(name, minimum=-1.0, maximum=1.0):
    return {"kind": "biome", "name": name, "min": minimum, "max": maximum}


ORBIS_DEMO = {
    "dimension": {
        "name": "orbis_demo",
        "type_seed": legacy.TYPE_SEED,
        "type_zoom": 850.0,
        "region_seed": legacy.REGION_SEED,
        "region_zoom": 2500.0,
        "precision": 100.0,
        "land": {"min": 0.31, "max": 1.0},
        "shore": {"min": 0.15, "max": 0.30},
        "sea": {"min": -1.0, "max": 0.14},
        "regions": [
            _region("hot", -1.0, -0.33),
            _region("temperate", -0.32, 0.33),
            _region("cold", 0.34, 1.0),
        ],
    },
    "regions": [
        {
            "name": "hot",
            "seed": DEMO_BIOME_SEED,
            "zoom": 300.0,
            "land": [
                _region("desert", -1.0, -0.01),
                _biome("savanna", 0.0, 0.5),
                _biome("jungle", 0.51, 1.0),
            ],
            "shore": [_biome("hot_beach")],
            "sea": [_biome("warm_ocean")],
        },
        {
            # Splits the hot region's desert range instead of sampling new noise
            "name": "desert",
            "seed": DEMO_BIOME_SEED + 1,
            "zoom": 120.0,
            "context": {"use_land_context": True},
            "land": [_biome("dunes", -1.0, 0.0), _biome("badlands", 0.01, 1.0)],
            "shore": [_biome("hot_beach")],
            "sea": [_biome("warm_ocean")],
        },
        {
            "name": "temperate",
            "seed": DEMO_BIOME_SEED + 2,
            "zoom": 300.0,
            "land": [
                _biome("plains", -1.0, -0.33),
                _biome("forest", -0.32, 0.33),
                _region("highlands", 0.34, 1.0),
            ],
            "shore": [_biome("sand_beach")],
            "sea": [_biome("ocean")],
        },
        {
            "name": "highlands",
            "seed": DEMO_BIOME_SEED + 3,
            "zoom": 90.0,
            "land": [_biome("hills", -1.0, 0.2), _biome("mountains", 0.21, 1.0)],
            "shore": [_biome("stony_shore")],
            "sea": [_biome("ocean")],
        },
        {
            "name": "cold",
            "seed": DEMO_BIOME_SEED + 4,
            "zoom": 300.0,
            "land": [
                _biome("tundra", -1.0, 0.0),
                _biome("taiga", 0.01, 0.6),
                _biome("glacier", 0.61, 1.0),
            ],
            "shore": [_biome("frozen_shore")],
            "sea": [_biome("frozen_ocean", -1.0, -0.2), _biome("cold_ocean", -0.19, 1.0)],
        },
    ],
    "biomes": [
        {"name": "savanna", "id": 1, "color": (210, 208, 130)},
        {"name": "jungle", "id": 2, "color": (125, 203, 53)},
        {"name": "dunes", "id": 3, "color": (251, 231, 159)},
        {"name": "badlands", "id": 4, "color": (190, 110, 60)},
        {"name": "hot_beach", "id": 5, "color": (255, 255, 0)},
        {"name": "warm_ocean", "id": 6, "color": (0, 255, 255)},
        {"name": "plains", "id": 7, "color": (200, 214, 143)},
        {"name": "forest", "id": 8, "color": (41, 188, 86)},
        {"name": "hills", "id": 9, "color": (75, 107, 50)},
        {"name": "mountains", "id": 10, "color": (160, 160, 160)},
        {"name": "sand_beach", "id": 11, "color": (178, 178, 0)},
        {"name": "ocean", "id": 12, "color": (0, 0, 255)},
        {"name": "stony_shore", "id": 13, "color": (130, 130, 130)},
        {"name": "tundra", "id": 14, "color": (150, 120, 75)},
        {"name": "taiga", "id": 15, "color": (75, 107, 50)},
        {"name": "glacier", "id": 16, "color": (213, 231, 235)},
        {"name": "frozen_shore", "id": 17, "color": (124, 124, 0)},
        {"name": "frozen_ocean", "id": 18, "color": (180, 200, 230)},
        {"name": "cold_ocean", "id": 19, "color": (0, 0, 178)},
    ],
}


def _legacy_preset() -> dict:
    """Mapping form of the legacy-equivalent tree."""
    regions: List[dict] = []
    top_level: List[dict] = []
    for region in legacy.LegacyRegion:
        name = region.name.lower()
        layers: Dict[SurfaceType, List[dict]] = {surface_type: [] for surface_type in SurfaceType}
        for biome in legacy.LEGACY_BIOMES:
            if biome.region == region:
                layers[biome.surface_type].append(_biome(biome.name, biome.min, biome.max))
        regions.append(
            {
                "name": name,
                "seed": legacy.BIOME_SEED,
                "zoom": legacy.BIOME_ZOOM,
                "land": layers[SurfaceType.LAND],
                "shore": layers[SurfaceType.SHORE],
                "sea": layers[SurfaceType.SEA],
            }
        )
        top_level.append(_region(name, *legacy.REGION_BANDS[region]))

    bands = {
        surface_type.name.lower(): {"min": minimum, "max": maximum}
        for surface_type, (minimum, maximum) in legacy.SURFACE_BANDS.items()
    }
    return {
        "dimension": {
            "name": "legacy",
            "type_seed": legacy.TYPE_SEED,
            "type_zoom": legacy.TYPE_ZOOM,
            "region_seed": legacy.REGION_SEED,
            "region_zoom": legacy.REGION_ZOOM,
            "precision": legacy.LEGACY_PRECISION,
            "regions": top_level,
            **bands,
        },
        "regions": regions,
        "biomes": [
            {"name": biome.name, "id": biome.id, "color": biome.color}
            for biome in legacy.LEGACY_BIOMES
        ],
    }


PRESETS: Dict[str, dict] = {
    "orbis_demo": ORBIS_DEMO,
    "legacy": _legacy_preset(),
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: str) -> ClassificationDefinition:
    """
    Validated definition of a preset.

    Raises:
        KeyError: If the preset does not exist
    """
    if name not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(list_presets())}")
    return ClassificationDefinition.model_validate(PRESETS[name])


def load_preset(name: str) -> Tuple[Dimension, Registry]:
    """Build the immutable tree of a preset."""
    return get_preset(name).build()
