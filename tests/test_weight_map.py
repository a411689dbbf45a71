"""Tests for the sparse weight chain."""

import numpy as np
import pytest

from py_orbis.core.weight_map import WeightMap


@pytest.fixture
def chain():
    """Three biomes over four cells."""
    tail = WeightMap(3, [0.0, 0.0, 0.5, 1.0])
    middle = WeightMap(2, [0.0, 0.75, 0.25, 0.0], tail)
    return WeightMap(1, [1.0, 0.25, 0.25, 0.0], middle)


class TestWeightMap:
    """Test chain traversal and per-cell queries."""

    def test_iteration_order(self, chain):
        assert chain.biome_ids() == [1, 2, 3]
        assert [node.biome_id for node in chain] == [1, 2, 3]
        assert len(chain) == 3
        assert chain.next.next.next is None

    def test_weights_read_only(self, chain):
        with pytest.raises(ValueError):
            chain.weights[0] = 0.5

    def test_input_copied(self):
        source = np.array([0.5, 0.5])
        node = WeightMap(1, source)
        source[0] = 0.0
        assert node.weights[0] == 0.5

    def test_cell_count(self, chain):
        assert chain.cell_count == 4

    def test_weights_for(self, chain):
        np.testing.assert_array_equal(chain.weights_for(2), [0.0, 0.75, 0.25, 0.0])
        np.testing.assert_array_equal(chain.weights_for(42), np.zeros(4))

    def test_as_dict(self, chain):
        assert sorted(chain.as_dict()) == [1, 2, 3]

    def test_weight_at_omits_zeros(self, chain):
        assert chain.weight_at(0) == {1: 1.0}
        assert chain.weight_at(2) == {1: 0.25, 2: 0.25, 3: 0.5}

    def test_total_weights(self, chain):
        np.testing.assert_allclose(chain.total_weights(), np.ones(4))

    def test_dominant_biomes(self, chain):
        np.testing.assert_array_equal(chain.dominant_biomes(), [1, 2, 3, 3])

    def test_blend_scalar(self, chain):
        heights = {1: 10.0, 2: 20.0, 3: 40.0}
        np.testing.assert_allclose(chain.blend(heights.get), [10.0, 17.5, 27.5, 40.0])

    def test_blend_vector(self, chain):
        colors = {1: (255, 0, 0), 2: (0, 255, 0), 3: (0, 0, 255)}
        rgb = chain.blend(colors.get)
        assert rgb.shape == (4, 3)
        np.testing.assert_allclose(rgb[0], [255, 0, 0])
        np.testing.assert_allclose(rgb[2], [63.75, 63.75, 127.5])

    def test_repr(self, chain):
        assert repr(chain) == "WeightMap(biomes=[1, 2, 3], cells=4)"
