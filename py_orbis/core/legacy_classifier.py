"""
Legacy flat biome classifier.

Fifteen fixed biomes addressed by (climate region, surface type, rounded
biome noise). It predates the region tree and is kept as a reference oracle:
``build_legacy_tree`` produces the one-level tree that must classify every
coordinate exactly like ``LegacyClassifier``.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple

import structlog

from .classification_tree import (
    Biome,
    BiomeLayer,
    Color,
    Dimension,
    Region,
    RegionLayer,
    Registry,
    SurfaceBand,
    SurfaceType,
)
from .errors import ConfigurationError, RegistryLookupError
from .noise import NoiseSource, round_to_precision

logger = structlog.get_logger()

LEGACY_PRECISION = 100

REGION_SEED = 1242352482951642511
TYPE_SEED = 2235650352155145
BIOME_SEED = 235623651371436421

REGION_ZOOM = 2500.0
TYPE_ZOOM = 850.0
BIOME_ZOOM = 300.0


class LegacyRegion(IntEnum):
    """Climate regions of the flat classifier."""

    HOT = 0
    TEMPERATE = 1
    COLD = 2


# Region-noise bands per climate region
REGION_BANDS: Dict[LegacyRegion, Tuple[float, float]] = {
    LegacyRegion.HOT: (-1.0, -0.33),
    LegacyRegion.TEMPERATE: (-0.32, 0.33),
    LegacyRegion.COLD: (0.34, 1.0),
}

# Type-noise bands
SURFACE_BANDS: Dict[SurfaceType, Tuple[float, float]] = {
    SurfaceType.LAND: (0.31, 1.0),
    SurfaceType.SHORE: (0.15, 0.30),
    SurfaceType.SEA: (-1.0, 0.14),
}


@dataclass(frozen=True)
class LegacyBiome:
    """One row of the fixed lookup table."""

    name: str
    id: int
    region: LegacyRegion
    surface_type: SurfaceType
    min: float
    max: float
    color: Color


LEGACY_BIOMES: Tuple[LegacyBiome, ...] = (
    LegacyBiome("hot_darker_red", 1, LegacyRegion.HOT, SurfaceType.LAND, -1.0, -0.33, (124, 0, 0)),
    LegacyBiome("hot_dark_red", 2, LegacyRegion.HOT, SurfaceType.LAND, -0.32, 0.33, (178, 0, 0)),
    LegacyBiome("hot_red", 3, LegacyRegion.HOT, SurfaceType.LAND, 0.34, 1.0, (255, 0, 0)),
    LegacyBiome("hot_yellow", 4, LegacyRegion.HOT, SurfaceType.SHORE, -1.0, 1.0, (255, 255, 0)),
    LegacyBiome("hot_cyan", 5, LegacyRegion.HOT, SurfaceType.SEA, -1.0, 1.0, (0, 255, 255)),
    LegacyBiome("temperate_blue", 6, LegacyRegion.TEMPERATE, SurfaceType.SEA, -1.0, 1.0, (0, 0, 255)),
    LegacyBiome("temperate_dark_yellow", 7, LegacyRegion.TEMPERATE, SurfaceType.SHORE, -1.0, 1.0, (178, 178, 0)),
    LegacyBiome("temperate_green", 8, LegacyRegion.TEMPERATE, SurfaceType.LAND, -1.0, -0.33, (0, 255, 0)),
    LegacyBiome("temperate_dark_green", 9, LegacyRegion.TEMPERATE, SurfaceType.LAND, -0.32, 0.33, (0, 178, 0)),
    LegacyBiome("temperate_darker_green", 10, LegacyRegion.TEMPERATE, SurfaceType.LAND, 0.34, 1.0, (0, 124, 0)),
    LegacyBiome("cold_dark_blue", 11, LegacyRegion.COLD, SurfaceType.SEA, -1.0, 1.0, (0, 0, 178)),
    LegacyBiome("cold_darker_yellow", 12, LegacyRegion.COLD, SurfaceType.SHORE, -1.0, 1.0, (124, 124, 0)),
    LegacyBiome("cold_magenta", 13, LegacyRegion.COLD, SurfaceType.LAND, -1.0, -0.33, (255, 0, 255)),
    LegacyBiome("cold_dark_magenta", 14, LegacyRegion.COLD, SurfaceType.LAND, -0.32, 0.33, (178, 0, 178)),
    LegacyBiome("cold_darker_magenta", 15, LegacyRegion.COLD, SurfaceType.LAND, 0.34, 1.0, (124, 0, 124)),
)

_BY_ID = {biome.id: biome for biome in LEGACY_BIOMES}


def legacy_biome_by_id(biome_id: int) -> LegacyBiome:
    try:
        return _BY_ID[biome_id]
    except KeyError:
        raise RegistryLookupError("legacy biome id", str(biome_id)) from None


def legacy_biome(region: LegacyRegion, surface_type: SurfaceType, value: float) -> LegacyBiome:
    """
    Look up the legacy biome for a region, surface type and biome noise value.

    The value is rounded to two decimals first; shore and sea entries cover
    the whole noise range.

    Raises:
        ConfigurationError: If no table row matches
    """
    rounded = round_to_precision(value, LEGACY_PRECISION)
    for biome in LEGACY_BIOMES:
        if (
            biome.region == region
            and biome.surface_type == surface_type
            and biome.min <= rounded <= biome.max
        ):
            return biome
    raise ConfigurationError(
        f"No legacy biome for region {LegacyRegion(region).name}, "
        f"type {SurfaceType(surface_type).name}, value {rounded}"
    )


def _band_of(bands, value: float, what: str):
    for key, (minimum, maximum) in bands.items():
        if minimum <= value <= maximum:
            return key
    raise ConfigurationError(f"{what} noise {value} matches no legacy band")


class LegacyClassifier:
    """Flat region x type x value classifier over three independent noise fields."""

    def __init__(
        self,
        region_seed: int = REGION_SEED,
        type_seed: int = TYPE_SEED,
        biome_seed: int = BIOME_SEED,
        region_zoom: float = REGION_ZOOM,
        type_zoom: float = TYPE_ZOOM,
        biome_zoom: float = BIOME_ZOOM,
    ):
        self.region_noise = NoiseSource(region_seed)
        self.type_noise = NoiseSource(type_seed)
        self.biome_noise = NoiseSource(biome_seed)
        self.region_zoom = region_zoom
        self.type_zoom = type_zoom
        self.biome_zoom = biome_zoom

    def classify_biome(self, x: float, z: float) -> LegacyBiome:
        region_value = round_to_precision(
            self.region_noise.sample(x / self.region_zoom, z / self.region_zoom), LEGACY_PRECISION
        )
        region = _band_of(REGION_BANDS, region_value, "Region")

        type_value = round_to_precision(
            self.type_noise.sample(x / self.type_zoom, z / self.type_zoom), LEGACY_PRECISION
        )
        surface_type = _band_of(SURFACE_BANDS, type_value, "Type")

        biome_value = self.biome_noise.sample(x / self.biome_zoom, z / self.biome_zoom)
        return legacy_biome(region, surface_type, biome_value)

    def classify(self, x: float, z: float) -> int:
        return self.classify_biome(x, z).id

    def __call__(self, x: float, z: float) -> int:
        return self.classify(x, z)


def build_legacy_tree(
    region_seed: int = REGION_SEED,
    type_seed: int = TYPE_SEED,
    biome_seed: int = BIOME_SEED,
    region_zoom: float = REGION_ZOOM,
    type_zoom: float = TYPE_ZOOM,
    biome_zoom: float = BIOME_ZOOM,
) -> Tuple[Dimension, Registry]:
    """
    Build the one-level region tree equivalent to ``LegacyClassifier``.

    Each climate region becomes a region sampling the biome seed at the biome
    zoom, with one biome layer per table row of its surface type.

    Returns:
        Tuple of (dimension, validated registry)
    """
    registry = Registry()
    for biome in LEGACY_BIOMES:
        registry.register_biome(Biome(name=biome.name, id=biome.id, color=biome.color))

    top_level = []
    for region in LegacyRegion:
        layers = {surface_type: [] for surface_type in SurfaceType}
        for biome in LEGACY_BIOMES:
            if biome.region == region:
                layers[biome.surface_type].append(BiomeLayer(biome.name, biome.min, biome.max))

        name = region.name.lower()
        registry.register_region(
            Region(
                name=name,
                seed=biome_seed,
                zoom=biome_zoom,
                land=tuple(layers[SurfaceType.LAND]),
                shore=tuple(layers[SurfaceType.SHORE]),
                sea=tuple(layers[SurfaceType.SEA]),
            )
        )
        minimum, maximum = REGION_BANDS[region]
        top_level.append(RegionLayer(name, minimum, maximum))

    dimension = Dimension(
        name="legacy",
        type_seed=type_seed,
        type_zoom=type_zoom,
        region_seed=region_seed,
        region_zoom=region_zoom,
        precision=LEGACY_PRECISION,
        bands=tuple(
            SurfaceBand(surface_type, minimum, maximum)
            for surface_type, (minimum, maximum) in SURFACE_BANDS.items()
        ),
        regions=tuple(top_level),
    )
    registry.validate(dimension)
    logger.debug("Legacy tree built", regions=len(top_level), biomes=len(LEGACY_BIOMES))
    return dimension, registry
