"""
Definitions of dimensions, regions and biomes.

This module defines pydantic models that validate raw (already parsed)
classification definitions and build them into the immutable tree used by
the resolver. Where those mappings come from is up to the caller.
"""

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.classification_tree import (
    Biome,
    BiomeLayer,
    ContextSettings,
    Dimension,
    Layer,
    Region,
    RegionLayer,
    Registry,
    SurfaceBand,
    SurfaceType,
)


class LayerKind(str, Enum):
    """What a layer entry points at."""

    REGION = "region"
    BIOME = "biome"


class LayerDefinition(BaseModel):
    """A child region or terminal biome selected by a closed noise range."""

    kind: LayerKind = Field(..., description="Layer kind")
    name: str = Field(..., min_length=1, description="Referenced region or biome name")
    min: float = Field(..., ge=-1.0, le=1.0, description="Inclusive lower bound")
    max: float = Field(..., ge=-1.0, le=1.0, description="Inclusive upper bound")

    @model_validator(mode="after")
    def check_order(self):
        if self.min > self.max:
            raise ValueError(f"layer '{self.name}': min {self.min} is greater than max {self.max}")
        return self

    def build(self) -> Layer:
        if self.kind == LayerKind.REGION:
            return RegionLayer(self.name, self.min, self.max)
        return BiomeLayer(self.name, self.min, self.max)


class BiomeDefinition(BaseModel):
    """Terminal biome with its display colour."""

    name: str = Field(..., min_length=1, description="Unique biome name")
    id: int = Field(..., ge=0, description="Unique numeric biome id")
    color: Tuple[int, int, int] = Field(default=(0, 0, 0), description="RGB display colour")

    @field_validator("color")
    @classmethod
    def check_color(cls, value):
        if any(channel < 0 or channel > 255 for channel in value):
            raise ValueError(f"colour channels must lie in [0, 255], got {value}")
        return value

    def build(self) -> Biome:
        return Biome(name=self.name, id=self.id, color=tuple(self.color))


class ContextDefinition(BaseModel):
    """Per surface type: reuse the parent context instead of sampling noise."""

    use_land_context: bool = Field(default=False)
    use_shore_context: bool = Field(default=False)
    use_sea_context: bool = Field(default=False)


class RegionDefinition(BaseModel):
    """Region with one ordered layer list per surface type."""

    name: str = Field(..., min_length=1, description="Unique region name")
    seed: int = Field(..., description="Noise seed of this region")
    zoom: float = Field(..., gt=0, description="Spatial frequency divisor")
    context: ContextDefinition = Field(default_factory=ContextDefinition)
    land: List[LayerDefinition] = Field(default_factory=list)
    shore: List[LayerDefinition] = Field(default_factory=list)
    sea: List[LayerDefinition] = Field(default_factory=list)

    def build(self) -> Region:
        return Region(
            name=self.name,
            seed=self.seed,
            zoom=self.zoom,
            context=ContextSettings(**self.context.model_dump()),
            land=tuple(layer.build() for layer in self.land),
            shore=tuple(layer.build() for layer in self.shore),
            sea=tuple(layer.build() for layer in self.sea),
        )


class BandDefinition(BaseModel):
    """Type-noise band of a surface type."""

    min: float = Field(..., ge=-1.0, le=1.0)
    max: float = Field(..., ge=-1.0, le=1.0)


class DimensionDefinition(BaseModel):
    """Dimension-wide fields, bands and top-level regions."""

    name: str = Field(..., min_length=1)
    type_seed: int = Field(..., description="Seed of the surface type noise")
    type_zoom: float = Field(..., gt=0)
    region_seed: int = Field(..., description="Seed of the top-level region noise")
    region_zoom: float = Field(..., gt=0)
    precision: float = Field(default=100.0, gt=0, description="Noise rounding (100 -> 2 decimals)")
    land: BandDefinition
    shore: BandDefinition
    sea: BandDefinition
    regions: List[LayerDefinition] = Field(..., min_length=1)

    @field_validator("regions")
    @classmethod
    def check_region_layers(cls, value):
        for layer in value:
            if layer.kind != LayerKind.REGION:
                raise ValueError(f"top-level layer '{layer.name}' must reference a region")
        return value

    def build(self) -> Dimension:
        bands = (
            SurfaceBand(SurfaceType.LAND, self.land.min, self.land.max),
            SurfaceBand(SurfaceType.SHORE, self.shore.min, self.shore.max),
            SurfaceBand(SurfaceType.SEA, self.sea.min, self.sea.max),
        )
        return Dimension(
            name=self.name,
            type_seed=self.type_seed,
            type_zoom=self.type_zoom,
            region_seed=self.region_seed,
            region_zoom=self.region_zoom,
            precision=self.precision,
            bands=bands,
            regions=tuple(layer.build() for layer in self.regions),
        )


class ClassificationDefinition(BaseModel):
    """Complete classification tree of one dimension."""

    dimension: DimensionDefinition
    regions: List[RegionDefinition] = Field(..., min_length=1)
    biomes: List[BiomeDefinition] = Field(..., min_length=1)

    def build(self) -> Tuple[Dimension, Registry]:
        """
        Build and validate the immutable tree.

        Returns:
            Tuple of (dimension, frozen registry)

        Raises:
            ConfigurationError, RegistryLookupError, CycleError: If the
                definitions do not form a valid tree
        """
        dimension = self.dimension.build()
        registry = Registry(
            regions=[region.build() for region in self.regions],
            biomes=[biome.build() for biome in self.biomes],
        )
        registry.validate(dimension)
        return dimension, registry
