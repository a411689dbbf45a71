"""
Region/biome classification tree.

This module implements:
- Surface types (land, shore, sea) and their dimension-wide noise bands
- Region and biome layers, a closed union of child-region and terminal-biome entries
- Region and biome definitions plus the registry that resolves them by name
- Load-time validation (name resolution, range sanity, band coverage, cycles)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Tuple, Union

import structlog

from .errors import ConfigurationError, CycleError, RegistryLookupError

logger = structlog.get_logger()

NOISE_MIN = -1.0
NOISE_MAX = 1.0

Color = Tuple[int, int, int]


class SurfaceType(IntEnum):
    """Surface type of a coordinate, decided before region descent."""

    LAND = 0
    SHORE = 1
    SEA = 2


@dataclass(frozen=True)
class RegionLayer:
    """Layer entry that descends into a child region over the closed range [min, max]."""

    region_name: str
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class BiomeLayer:
    """Layer entry that terminates on a biome over the closed range [min, max]."""

    biome_name: str
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


Layer = Union[RegionLayer, BiomeLayer]


@dataclass(frozen=True)
class ContextSettings:
    """Per surface type: reuse the parent's context instead of sampling fresh noise."""

    use_land_context: bool = False
    use_shore_context: bool = False
    use_sea_context: bool = False

    def uses_context(self, surface_type: SurfaceType) -> bool:
        if surface_type == SurfaceType.LAND:
            return self.use_land_context
        if surface_type == SurfaceType.SHORE:
            return self.use_shore_context
        return self.use_sea_context


@dataclass(frozen=True)
class Biome:
    """Terminal classification result."""

    name: str
    id: int
    color: Color = (0, 0, 0)


@dataclass(frozen=True)
class Region:
    """
    Internal node of the classification tree.

    Each surface type has its own ordered layer list; the noise value sampled
    with the region's seed and zoom (or the parent context) selects the first
    layer whose range contains it.
    """

    name: str
    seed: int
    zoom: float
    context: ContextSettings = field(default_factory=ContextSettings)
    land: Tuple[Layer, ...] = ()
    shore: Tuple[Layer, ...] = ()
    sea: Tuple[Layer, ...] = ()

    def layers(self, surface_type: SurfaceType) -> Tuple[Layer, ...]:
        if surface_type == SurfaceType.LAND:
            return self.land
        if surface_type == SurfaceType.SHORE:
            return self.shore
        return self.sea

    def child_region_names(self, surface_type: SurfaceType) -> List[str]:
        return [
            layer.region_name
            for layer in self.layers(surface_type)
            if isinstance(layer, RegionLayer)
        ]


@dataclass(frozen=True)
class SurfaceBand:
    """Type-noise band assigned to a surface type."""

    surface_type: SurfaceType
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class Dimension:
    """Dimension-wide classification settings and its top-level regions."""

    name: str
    type_seed: int
    type_zoom: float
    region_seed: int
    region_zoom: float
    precision: float
    bands: Tuple[SurfaceBand, ...]
    regions: Tuple[RegionLayer, ...]

    def band_for(self, surface_type: SurfaceType) -> SurfaceBand:
        for band in self.bands:
            if band.surface_type == surface_type:
                return band
        raise ConfigurationError(
            f"Dimension '{self.name}' has no band for {surface_type.name.lower()}"
        )

    def validate_bands(self):
        """
        Check that the land/shore/sea bands cover [-1, 1] exactly once.

        Bands are compared after sorting by their minimum. Consecutive bands
        may not overlap and may not leave a gap wider than one rounding step,
        since rounded type noise never falls between them.

        Raises:
            ConfigurationError: If bands are missing, duplicated, out of range,
                overlapping or leave reachable values uncovered.
        """
        types = [band.surface_type for band in self.bands]
        if sorted(types) != sorted(SurfaceType):
            raise ConfigurationError(
                f"Dimension '{self.name}' needs exactly one band per surface type, got "
                f"{[t.name.lower() for t in types]}"
            )

        step = 1.0 / self.precision
        tolerance = step * 1e-6
        for band in self.bands:
            _check_range(band.min, band.max, f"{band.surface_type.name.lower()} band")

        ordered = sorted(self.bands, key=lambda band: band.min)
        if ordered[0].min > NOISE_MIN + tolerance or ordered[-1].max < NOISE_MAX - tolerance:
            raise ConfigurationError(
                f"Dimension '{self.name}' bands do not span [-1, 1]"
            )
        for previous, current in zip(ordered, ordered[1:]):
            if current.min <= previous.max:
                raise ConfigurationError(
                    f"Bands {previous.surface_type.name.lower()} and "
                    f"{current.surface_type.name.lower()} overlap"
                )
            if current.min - previous.max > step + tolerance:
                raise ConfigurationError(
                    f"Gap between bands {previous.surface_type.name.lower()} and "
                    f"{current.surface_type.name.lower()}"
                )


def _check_range(minimum: float, maximum: float, what: str):
    if minimum > maximum:
        raise ConfigurationError(f"{what}: min {minimum} is greater than max {maximum}")
    if minimum < NOISE_MIN or maximum > NOISE_MAX:
        raise ConfigurationError(f"{what}: range [{minimum}, {maximum}] leaves [-1, 1]")


def _covers_noise_range(layers: Iterable[Layer], step: float) -> bool:
    """True if the closed ranges cover [-1, 1] up to gaps of one rounding step."""
    tolerance = step * 1e-6
    reached = NOISE_MIN - step
    for layer in sorted(layers, key=lambda layer: layer.min):
        if layer.min - reached > step + tolerance:
            return False
        reached = max(reached, layer.max)
    return reached >= NOISE_MAX - tolerance


class Registry:
    """
    Name lookup for regions and biomes.

    Populated once at startup, then frozen by ``validate``. After that the
    registry is read-only and may be shared freely between workers.
    """

    def __init__(
        self,
        regions: Optional[Iterable[Region]] = None,
        biomes: Optional[Iterable[Biome]] = None,
    ):
        self._regions: Dict[str, Region] = {}
        self._biomes: Dict[str, Biome] = {}
        self._biomes_by_id: Dict[int, Biome] = {}
        self._frozen = False

        for biome in biomes or ():
            self.register_biome(biome)
        for region in regions or ():
            self.register_region(region)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def regions(self) -> Dict[str, Region]:
        return dict(self._regions)

    @property
    def biomes(self) -> Dict[str, Biome]:
        return dict(self._biomes)

    def register_region(self, region: Region):
        self._ensure_mutable()
        if region.name in self._regions:
            raise ConfigurationError(f"Region '{region.name}' registered twice")
        self._regions[region.name] = region

    def register_biome(self, biome: Biome):
        self._ensure_mutable()
        if biome.name in self._biomes:
            raise ConfigurationError(f"Biome '{biome.name}' registered twice")
        if biome.id in self._biomes_by_id:
            raise ConfigurationError(
                f"Biome id {biome.id} used by '{self._biomes_by_id[biome.id].name}' and '{biome.name}'"
            )
        self._biomes[biome.name] = biome
        self._biomes_by_id[biome.id] = biome

    def freeze(self):
        self._frozen = True

    def _ensure_mutable(self):
        if self._frozen:
            raise ConfigurationError("Registry is frozen; definitions are read-only")

    def region(self, name: str) -> Region:
        try:
            return self._regions[name]
        except KeyError:
            raise RegistryLookupError("region", name) from None

    def biome(self, name: str) -> Biome:
        try:
            return self._biomes[name]
        except KeyError:
            raise RegistryLookupError("biome", name) from None

    def biome_by_id(self, biome_id: int) -> Biome:
        try:
            return self._biomes_by_id[biome_id]
        except KeyError:
            raise RegistryLookupError("biome id", str(biome_id)) from None

    def validate(self, dimension: Optional[Dimension] = None):
        """
        Validate every definition before any classification call.

        Args:
            dimension: Optional dimension whose bands and top-level layers are
                checked against this registry as well

        Layer lists that leave part of [-1, 1] uncovered are only logged: a
        tree may leave a surface type unused, and a reachable gap is reported
        as a ConfigurationError by the resolver for the coordinate that hits it.

        Raises:
            RegistryLookupError: A layer names an unregistered region or biome
            ConfigurationError: A range or zoom is malformed
            CycleError: A region can reach itself through one surface type
        """
        step = 1.0 / dimension.precision if dimension is not None else 0.01
        for region in self._regions.values():
            if region.zoom <= 0:
                raise ConfigurationError(f"Region '{region.name}' has non-positive zoom")
            for surface_type in SurfaceType:
                layers = region.layers(surface_type)
                for layer in layers:
                    self._check_layer(layer, f"region '{region.name}'")
                if not _covers_noise_range(layers, step):
                    logger.warning(
                        "Layer list does not cover [-1, 1]",
                        region=region.name,
                        surface_type=surface_type.name,
                        layers=len(layers),
                    )

        if dimension is not None:
            dimension.validate_bands()
            if not dimension.regions:
                raise ConfigurationError(f"Dimension '{dimension.name}' has no regions")
            for layer in dimension.regions:
                self._check_layer(layer, f"dimension '{dimension.name}'")

        self._check_cycles()
        self.freeze()

        logger.info(
            "Registry validated",
            regions=len(self._regions),
            biomes=len(self._biomes),
            dimension=dimension.name if dimension is not None else None,
        )

    def _check_layer(self, layer: Layer, owner: str):
        if isinstance(layer, RegionLayer):
            _check_range(layer.min, layer.max, f"{owner} -> region '{layer.region_name}'")
            self.region(layer.region_name)
        elif isinstance(layer, BiomeLayer):
            _check_range(layer.min, layer.max, f"{owner} -> biome '{layer.biome_name}'")
            self.biome(layer.biome_name)
        else:
            raise ConfigurationError(f"{owner}: unsupported layer {layer!r}")

    def _check_cycles(self):
        """Depth-first walk of each surface type's sub-trees."""
        for surface_type in SurfaceType:
            finished = set()
            for name in self._regions:
                if name not in finished:
                    self._walk(name, surface_type, [], finished)

    def _walk(self, name: str, surface_type: SurfaceType, path: List[str], finished: set):
        if name in path:
            cycle = path[path.index(name):] + [name]
            logger.error("Region cycle found", path=cycle, surface_type=surface_type.name)
            raise CycleError(cycle, surface_type)
        if name in finished:
            return
        path.append(name)
        for child in self.region(name).child_region_names(surface_type):
            self._walk(child, surface_type, path, finished)
        path.pop()
        finished.add(name)
