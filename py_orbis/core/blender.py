"""
Scattered-point biome blending.

This module implements:
- Per-chunk blending: classify the chunk's scatter points once, weight them
  per cell by distance and normalize per biome
- Sparse storage of the result as a WeightMap chain
- Parallel blending of rectangular areas of independent chunks
"""

import concurrent.futures
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import structlog
from scipy.spatial.distance import cdist

from .scatter import ScatteredPointSampler
from .weight_map import WeightMap

logger = structlog.get_logger()

Classifier = Callable[[float, float], int]


class BiomeBlender:
    """Builds per-chunk biome weight maps from scattered classification anchors."""

    def __init__(
        self,
        frequency: float,
        min_blend_radius: float,
        chunk_width: int,
        sampler: Optional[ScatteredPointSampler] = None,
    ):
        """
        Initialize the blender.

        Args:
            frequency: Scatter point frequency (points per unit along an axis)
            min_blend_radius: Radius over which transitions are blended
            chunk_width: Number of cells along each chunk edge
            sampler: Scatter point source; any object exposing ``blend_radius``
                and ``scatter_points(seed, chunk_x, chunk_z)`` may be given; a
                ``chunk_width`` it exposes must match ``chunk_width``
        """
        sampler_width = getattr(sampler, "chunk_width", chunk_width)
        if sampler_width != chunk_width:
            raise ValueError(
                f"sampler chunk_width {sampler_width} does not match blender chunk_width {chunk_width}"
            )
        self.sampler = sampler or ScatteredPointSampler(frequency, min_blend_radius, chunk_width)
        self._chunk_width = chunk_width

        # Cell offsets in index order: index = zi * chunk_width + xi
        zi, xi = np.divmod(np.arange(chunk_width * chunk_width), chunk_width)
        self._cell_offsets = np.column_stack([xi, zi]).astype(np.float64)

    @property
    def chunk_width(self) -> int:
        return self._chunk_width

    @property
    def blend_radius(self) -> float:
        return self.sampler.blend_radius

    def blend_for_chunk(
        self, seed: int, chunk_x: int, chunk_z: int, classify: Classifier
    ) -> Optional[WeightMap]:
        """
        Blend biome weights for one chunk.

        Args:
            seed: World seed for the scatter points
            chunk_x: World x of the chunk's first cell
            chunk_z: World z of the chunk's first cell
            classify: Maps a world coordinate to a biome id

        Returns:
            Head of the chunk's WeightMap chain (one node per biome with any
            influence on the chunk), or None if no scatter point reaches it

        Raises:
            ClassificationError: Propagated from ``classify``; a chunk is never
                blended with a guessed biome
        """
        points = self.sampler.scatter_points(seed, chunk_x, chunk_z)
        if len(points) == 0:
            logger.warning("No scatter points reach chunk", chunk_x=chunk_x, chunk_z=chunk_z)
            return None

        # Every point is classified exactly once, before any cell work.
        point_biomes = [classify(float(x), float(z)) for x, z in points]

        biome_order: List[int] = []
        biome_column: Dict[int, int] = {}
        for biome in point_biomes:
            if biome not in biome_column:
                biome_column[biome] = len(biome_order)
                biome_order.append(biome)
        columns = np.array([biome_column[biome] for biome in point_biomes])

        cells = self._cell_offsets + np.array([chunk_x, chunk_z], dtype=np.float64)
        distance_sq = cdist(cells, points, "sqeuclidean")

        radius_sq = self.blend_radius * self.blend_radius
        falloff = np.maximum(radius_sq - distance_sq, 0.0) ** 2

        biome_weights = np.zeros((len(cells), len(biome_order)), dtype=np.float64)
        for column in range(len(biome_order)):
            biome_weights[:, column] = falloff[:, columns == column].sum(axis=1)

        totals = biome_weights.sum(axis=1)
        blended = totals > 0
        biome_weights[blended] /= totals[blended, np.newaxis]

        head = None
        for column, biome in enumerate(biome_order):
            weights = biome_weights[:, column]
            if np.any(weights > 0):
                head = WeightMap(biome, weights, head)

        logger.debug(
            "Chunk blended",
            chunk_x=chunk_x,
            chunk_z=chunk_z,
            points=len(points),
            biomes=len(head) if head is not None else 0,
        )
        return head

    def blend_area(
        self,
        seed: int,
        chunk_x: int,
        chunk_z: int,
        chunks_x: int,
        chunks_z: int,
        classify: Classifier,
        max_workers: Optional[int] = None,
    ) -> Dict[Tuple[int, int], Optional[WeightMap]]:
        """
        Blend a rectangle of chunks in parallel.

        Chunks share nothing but the read-only classification tree, so they
        are blended on a thread pool without synchronization.

        Args:
            seed: World seed
            chunk_x: World x of the first chunk's first cell
            chunk_z: World z of the first chunk's first cell
            chunks_x: Number of chunks along x
            chunks_z: Number of chunks along z
            classify: Maps a world coordinate to a biome id
            max_workers: Thread pool size (executor default if None)

        Returns:
            Mapping of chunk origin (x, z) to its WeightMap chain, in row-major order

        Raises:
            ClassificationError: The first failure of any chunk
        """
        width = self._chunk_width
        origins = [
            (chunk_x + i * width, chunk_z + j * width)
            for j in range(chunks_z)
            for i in range(chunks_x)
        ]

        logger.info("Blending area", chunks=len(origins), origin=(chunk_x, chunk_z))

        results: Dict[Tuple[int, int], Optional[WeightMap]] = {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_origin = {
                executor.submit(self.blend_for_chunk, seed, x, z, classify): (x, z)
                for x, z in origins
            }
            for future in concurrent.futures.as_completed(future_to_origin):
                origin = future_to_origin[future]
                try:
                    results[origin] = future.result()
                except Exception as exc:
                    logger.error("Chunk blend failed", chunk=origin, error=str(exc))
                    for pending in future_to_origin:
                        pending.cancel()
                    raise

        return {origin: results[origin] for origin in origins}
