"""
Hierarchical noise-based biome classification with scattered-point blending.
"""

__version__ = "0.1.0"
