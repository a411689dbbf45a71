"""
Error types raised by biome classification.

All of them are fatal for the coordinate (or chunk) being processed: the
inputs are deterministic, so a retry would reproduce the failure and a
default biome would corrupt the blended weights.
"""

from typing import Optional, Sequence


class ClassificationError(Exception):
    """Base class for classification tree and blending failures."""


class ConfigurationError(ClassificationError, ValueError):
    """A noise value fell outside every range, or a definition is malformed."""


class CycleError(ClassificationError):
    """A region descent came back to a region already on its path."""

    def __init__(self, path: Sequence[str], surface_type: Optional[object] = None):
        self.path = tuple(path)
        self.surface_type = surface_type
        where = f" ({surface_type.name.lower()})" if surface_type is not None else ""
        super().__init__(f"Region cycle detected{where}: {' -> '.join(self.path)}")


class RegistryLookupError(ClassificationError, LookupError):
    """A layer references a region or biome name that is not registered."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind} '{name}'")
