"""
Core biome classification and blending functionality.
"""

from .errors import ClassificationError, ConfigurationError, CycleError, RegistryLookupError
from .noise import NoiseSource, round_to_precision, context_in_range
from .classification_tree import (
    SurfaceType, RegionLayer, BiomeLayer, ContextSettings,
    Biome, Region, SurfaceBand, Dimension, Registry
)
from .region_resolver import RegionResolver, Resolution
from .legacy_classifier import LegacyClassifier, build_legacy_tree
from .scatter import ScatteredPointSampler, scatter_points
from .weight_map import WeightMap
from .blender import BiomeBlender

__all__ = ['ClassificationError', 'ConfigurationError', 'CycleError', 'RegistryLookupError',
           'NoiseSource', 'round_to_precision', 'context_in_range',
           'SurfaceType', 'RegionLayer', 'BiomeLayer', 'ContextSettings',
           'Biome', 'Region', 'SurfaceBand', 'Dimension', 'Registry',
           'RegionResolver', 'Resolution', 'LegacyClassifier', 'build_legacy_tree',
           'ScatteredPointSampler', 'scatter_points', 'WeightMap', 'BiomeBlender']
