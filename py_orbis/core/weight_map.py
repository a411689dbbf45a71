"""
Sparse per-chunk biome weights.

A chunk usually touches only a handful of biomes, so weights are stored as a
linked chain with one node per biome present instead of one array per
possible biome. Nodes are immutable; a chain belongs to the chunk it was
built for and is discarded once the chunk's output has been computed.
"""

from typing import Callable, Dict, Iterator, List, Optional

import numpy as np


class WeightMap:
    """One biome's per-cell weights, linked to the next biome of the chunk."""

    __slots__ = ("_biome_id", "_weights", "_next")

    def __init__(self, biome_id: int, weights, next: Optional["WeightMap"] = None):
        """
        Initialize a chain node.

        Args:
            biome_id: Biome identifier
            weights: Per-cell weights, indexed ``zi * chunk_width + xi``
            next: Following node of the chain, if any
        """
        array = np.array(weights, dtype=np.float64).ravel()
        array.flags.writeable = False
        self._biome_id = int(biome_id)
        self._weights = array
        self._next = next

    @property
    def biome_id(self) -> int:
        return self._biome_id

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def next(self) -> Optional["WeightMap"]:
        return self._next

    @property
    def cell_count(self) -> int:
        return self._weights.size

    def __iter__(self) -> Iterator["WeightMap"]:
        node = self
        while node is not None:
            yield node
            node = node._next

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self):
        return f"WeightMap(biomes={self.biome_ids()}, cells={self.cell_count})"

    def biome_ids(self) -> List[int]:
        return [node.biome_id for node in self]

    def weights_for(self, biome_id: int) -> np.ndarray:
        """Weights of one biome; zeros if the biome does not touch the chunk."""
        for node in self:
            if node.biome_id == biome_id:
                return node.weights
        return np.zeros(self.cell_count, dtype=np.float64)

    def as_dict(self) -> Dict[int, np.ndarray]:
        return {node.biome_id: node.weights for node in self}

    def weight_at(self, index: int) -> Dict[int, float]:
        """Biome weights of a single cell, zero entries omitted."""
        return {
            node.biome_id: float(node.weights[index])
            for node in self
            if node.weights[index] > 0
        }

    def total_weights(self) -> np.ndarray:
        """Per-cell sum over the chain (1.0 for every blended cell)."""
        total = np.zeros(self.cell_count, dtype=np.float64)
        for node in self:
            total += node.weights
        return total

    def dominant_biomes(self) -> np.ndarray:
        """Per-cell id of the biome with the largest weight."""
        nodes = list(self)
        stacked = np.vstack([node.weights for node in nodes])
        ids = np.array([node.biome_id for node in nodes], dtype=np.int64)
        return ids[np.argmax(stacked, axis=0)]

    def blend(self, attribute: Callable[[int], object]) -> np.ndarray:
        """
        Weighted per-cell sum of a biome attribute.

        Args:
            attribute: Maps a biome id to a scalar (height bias, ...) or a
                vector (RGB colour, ...)

        Returns:
            Array of shape (cells,) for scalar attributes or (cells, k) for
            vectors of length k
        """
        result = None
        for node in self:
            value = np.asarray(attribute(node.biome_id), dtype=np.float64)
            contribution = np.multiply.outer(node.weights, value)
            result = contribution if result is None else result + contribution
        return result
