"""Scatter-point sampling for chunk blending."""

import math
from typing import Tuple

import numpy as np

from .lattice_hash import unit_offsets

DEFAULT_JITTER = 0.9


class ScatteredPointSampler:
    """
    Jittered square lattice of blending anchors.

    The lattice spacing is ``1 / frequency``. Every lattice cell holds exactly
    one point, displaced from the cell centre by a hash of the world seed and
    the cell coordinates, so the same seed always yields the same points and
    overlapping chunk margins agree without shared state.
    """

    def __init__(
        self,
        frequency: float,
        min_blend_radius: float,
        chunk_width: int,
        jitter: float = DEFAULT_JITTER,
    ):
        """
        Initialize the sampler.

        Args:
            frequency: Points per unit along each axis (0.04 -> spacing 25)
            min_blend_radius: Radius over which biome transitions are blended
            chunk_width: Number of cells along each chunk edge
            jitter: Maximum displacement as a fraction of half the spacing
        """
        if frequency <= 0:
            raise ValueError(f"frequency must be positive, got {frequency}")
        if min_blend_radius < 0:
            raise ValueError(f"min_blend_radius must not be negative, got {min_blend_radius}")
        if chunk_width <= 0:
            raise ValueError(f"chunk_width must be positive, got {chunk_width}")
        if not 0 <= jitter <= 1:
            raise ValueError(f"jitter must lie in [0, 1], got {jitter}")

        self.frequency = frequency
        self.min_blend_radius = min_blend_radius
        self.chunk_width = chunk_width
        self.jitter = jitter
        self.spacing = 1.0 / frequency

    @property
    def max_point_distance(self) -> float:
        """Upper bound of the distance from any location to its nearest point."""
        return math.sqrt(2.0) * self.spacing * (1.0 + self.jitter) / 2.0

    @property
    def blend_radius(self) -> float:
        """
        Radius used for weighting.

        ``min_blend_radius`` padded by the lattice coverage bound, so every
        cell has at least one point strictly inside it.
        """
        return self.min_blend_radius + self.max_point_distance

    def point_for_cell(self, seed: int, cell_x: int, cell_z: int) -> Tuple[float, float]:
        """World position of the scatter point of lattice cell (cell_x, cell_z)."""
        ox, oz = unit_offsets(seed, cell_x, cell_z)
        amplitude = self.jitter * self.spacing / 2.0
        x = (cell_x + 0.5) * self.spacing + ox * amplitude
        z = (cell_z + 0.5) * self.spacing + oz * amplitude
        return x, z

    def scatter_points(self, seed: int, chunk_x: int, chunk_z: int) -> np.ndarray:
        """
        Scatter points that can influence a chunk.

        Args:
            seed: World seed
            chunk_x: World x of the chunk's first cell
            chunk_z: World z of the chunk's first cell

        Returns:
            Array of shape (n, 2) with [x, z] coordinates, in row-major lattice
            order, of every point closer than ``blend_radius`` to the chunk's
            cell rectangle
        """
        radius = self.blend_radius
        radius_sq = radius * radius
        last_x = chunk_x + self.chunk_width - 1
        last_z = chunk_z + self.chunk_width - 1

        # Points never leave their lattice cell, so the cells overlapping the
        # padded rectangle are the only candidates.
        first_i = math.floor((chunk_x - radius) / self.spacing)
        last_i = math.floor((last_x + radius) / self.spacing)
        first_j = math.floor((chunk_z - radius) / self.spacing)
        last_j = math.floor((last_z + radius) / self.spacing)

        points = []
        for j in range(first_j, last_j + 1):
            for i in range(first_i, last_i + 1):
                x, z = self.point_for_cell(seed, i, j)
                dx = max(chunk_x - x, 0.0, x - last_x)
                dz = max(chunk_z - z, 0.0, z - last_z)
                if dx * dx + dz * dz < radius_sq:
                    points.append([x, z])

        return np.array(points, dtype=np.float64).reshape(-1, 2)


def scatter_points(
    seed: int,
    chunk_x: int,
    chunk_z: int,
    frequency: float,
    min_blend_radius: float,
    chunk_width: int,
) -> np.ndarray:
    """Scatter points for one chunk without keeping a sampler around."""
    sampler = ScatteredPointSampler(frequency, min_blend_radius, chunk_width)
    return sampler.scatter_points(seed, chunk_x, chunk_z)
