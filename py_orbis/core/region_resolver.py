"""
Hierarchical biome classification.

A coordinate is classified in three steps:
- the type-noise field picks the surface type (land, shore or sea)
- the region-noise field picks a top-level region of the dimension
- regions are descended, each sampling its own seed and zoom, until a
  biome layer matches

At every level the position of the selecting noise value inside its layer
range is re-mapped to [-1, 1] ("context"). A region whose context flag is set
for the active surface type uses that parent context instead of fresh noise.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import structlog

from .classification_tree import (
    Biome,
    BiomeLayer,
    Dimension,
    Layer,
    RegionLayer,
    Registry,
    SurfaceType,
)
from .errors import ConfigurationError, CycleError
from .noise import NoiseSource, context_in_range, round_to_precision

logger = structlog.get_logger()

NoiseFactory = Callable[[int], NoiseSource]


@dataclass(frozen=True)
class Resolution:
    """Full classification result for one coordinate."""

    biome: Biome
    surface_type: SurfaceType
    region_path: Tuple[str, ...]
    type_noise: float
    noise: float


class RegionResolver:
    """Classifies coordinates by descending a dimension's region tree."""

    def __init__(
        self,
        dimension: Dimension,
        registry: Registry,
        noise_factory: NoiseFactory = NoiseSource,
    ):
        """
        Initialize the resolver.

        Args:
            dimension: Dimension providing type/region fields, bands and precision
            registry: Registry resolving region and biome names
            noise_factory: Callable building a noise source for a seed
        """
        self.dimension = dimension
        self.registry = registry
        self.noise_factory = noise_factory

    def classify(self, x: float, z: float) -> int:
        """Return the biome id at (x, z)."""
        return self.resolve(x, z).biome.id

    def classify_biome(self, x: float, z: float) -> Biome:
        return self.resolve(x, z).biome

    def __call__(self, x: float, z: float) -> int:
        return self.classify(x, z)

    def surface_type_at(self, x: float, z: float) -> Tuple[SurfaceType, float]:
        """
        Determine the surface type of a coordinate.

        Returns:
            Tuple of (surface type, rounded type noise)

        Raises:
            ConfigurationError: If no band contains the type noise
        """
        dimension = self.dimension
        type_noise = self._sample(dimension.type_seed, dimension.type_zoom, x, z)
        for band in dimension.bands:
            if band.contains(type_noise):
                return band.surface_type, type_noise

        logger.error("No surface band matched", dimension=dimension.name, x=x, z=z, value=type_noise)
        raise ConfigurationError(
            f"Type noise {type_noise} at ({x}, {z}) matches no surface band of '{dimension.name}'"
        )

    def resolve(self, x: float, z: float) -> Resolution:
        """
        Classify (x, z) and keep the descent path.

        Raises:
            ConfigurationError: If a band or layer search finds no range
            CycleError: If the descent revisits a region
        """
        dimension = self.dimension
        surface_type, type_noise = self.surface_type_at(x, z)

        noise = self._sample(dimension.region_seed, dimension.region_zoom, x, z)
        top_layer = _find_layer(dimension.regions, noise)
        if top_layer is None:
            logger.error("No top-level region matched", dimension=dimension.name, x=x, z=z, value=noise)
            raise ConfigurationError(
                f"Region noise {noise} at ({x}, {z}) matches no region of '{dimension.name}'"
            )

        region = self.registry.region(top_layer.region_name)
        context = context_in_range(top_layer.min, top_layer.max, noise, dimension.precision)
        path: List[str] = [region.name]

        while True:
            if region.context.uses_context(surface_type):
                noise = context
            else:
                noise = self._sample(region.seed, region.zoom, x, z)

            layer = _find_layer(region.layers(surface_type), noise)
            if layer is None:
                logger.error(
                    "No layer matched",
                    region=region.name,
                    surface_type=surface_type.name,
                    x=x,
                    z=z,
                    value=noise,
                )
                raise ConfigurationError(
                    f"Noise {noise} at ({x}, {z}) matches no {surface_type.name.lower()} "
                    f"layer of region '{region.name}'"
                )

            if isinstance(layer, BiomeLayer):
                return Resolution(
                    biome=self.registry.biome(layer.biome_name),
                    surface_type=surface_type,
                    region_path=tuple(path),
                    type_noise=type_noise,
                    noise=noise,
                )

            if not isinstance(layer, RegionLayer):
                raise ConfigurationError(f"Unsupported layer {layer!r} in region '{region.name}'")

            if layer.region_name in path:
                cycle = path[path.index(layer.region_name):] + [layer.region_name]
                logger.error("Region cycle during descent", path=cycle, x=x, z=z)
                raise CycleError(cycle, surface_type)

            context = context_in_range(layer.min, layer.max, noise, dimension.precision)
            region = self.registry.region(layer.region_name)
            path.append(region.name)

    def _sample(self, seed: int, zoom: float, x: float, z: float) -> float:
        value = self.noise_factory(seed).sample(x / zoom, z / zoom)
        return round_to_precision(value, self.dimension.precision)


def _find_layer(layers: Sequence[Layer], value: float):
    """First layer (declaration order) whose closed range contains value."""
    for layer in layers:
        if layer.contains(value):
            return layer
    return None
