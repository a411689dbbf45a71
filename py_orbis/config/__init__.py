"""
Configuration modules for biome classification.
"""

from .config import settings, Settings
from .dimension_presets import get_preset, list_presets, load_preset, PRESETS

__all__ = ['get_preset', 'list_presets', 'load_preset', 'PRESETS', 'settings', 'Settings']
