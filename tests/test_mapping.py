"""
Tests for range mapping and sensor quantization.
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from anndrive.driving.mapping import map_range, proximity, round_half_away
from anndrive.driving.sensors import SENSOR_DIRECTIONS, SensorRig, proximities


class TestMapRange:
    """Test the clamped linear map."""

    @pytest.mark.parametrize("value", [-1.0, -1.5, -100.0])
    def test_clamps_below(self, value):
        assert map_range(0, 1, -1, 1, value) == 0

    @pytest.mark.parametrize("value", [1.0, 1.5, 100.0])
    def test_clamps_above(self, value):
        assert map_range(0, 1, -1, 1, value) == 1

    @pytest.mark.parametrize("value,expected", [(0.0, 0.5), (0.5, 0.75), (-0.5, 0.25), (0.9, 0.95)])
    def test_linear_inside(self, value, expected):
        assert map_range(0, 1, -1, 1, value) == pytest.approx(expected)

    def test_inverse_round_trip(self):
        for v in np.linspace(-0.99, 0.99, 37):
            forward = map_range(0, 1, -1, 1, v)
            assert map_range(-1, 1, 0, 1, forward) == pytest.approx(v)

    def test_swapped_endpoints_reverse(self):
        assert map_range(1, -1, 0, 1, 0.25) == pytest.approx(0.5)
        assert map_range(1, -1, 0, 1, 0.0) == 1
        assert map_range(1, -1, 0, 1, 1.0) == -1


class TestProximity:
    """Test ray hit quantization."""

    @pytest.mark.parametrize("x,expected", [
        (0.4, 0.0), (0.5, 1.0), (1.5, 2.0), (2.5, 3.0), (-0.5, -1.0), (-2.5, -3.0),
    ])
    def test_round_half_away(self, x, expected):
        assert round_half_away(x) == expected

    def test_near_hit(self):
        assert proximity(10.0, 200.0) == 1.0

    def test_far_hit(self):
        assert proximity(150.0, 200.0) == 0.5

    def test_half_range_rounds_away(self):
        assert proximity(100.0, 200.0) == 0.5

    def test_proximities_missing_hits_read_zero(self):
        values = proximities([None, 10.0, None, 150.0, 200.0], 200.0)
        assert values.tolist() == [0.0, 1.0, 0.0, 0.5, 0.5]
        assert values.dtype == np.float64


class FixedRig(SensorRig):
    def __init__(self, distances):
        self.distances = dict(zip(SENSOR_DIRECTIONS, distances))
        self.calls = []

    def ray_distance(self, direction, visible_distance):
        self.calls.append((direction, visible_distance))
        return self.distances[direction]


class TestSensorRig:
    """Test the sensor interface."""

    def test_abstract(self):
        with pytest.raises(TypeError):
            SensorRig()

    def test_read_distances_order(self):
        rig = FixedRig([1.0, 2.0, 3.0, 4.0, None])
        assert rig.read_distances(200.0) == [1.0, 2.0, 3.0, 4.0, None]
        assert [c[0] for c in rig.calls] == list(SENSOR_DIRECTIONS)
        assert all(c[1] == 200.0 for c in rig.calls)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
