"""Tests for coordinate transforms, distance metrics and level classification."""

import math

import numpy as np
import pytest

from xstitch.config import EPSILON
from xstitch.families import Circles, LayerCount, LayerThickness, Polygons, Rectangles
from xstitch.geometry import (
    cell_offsets, chebyshev_distance, count_levels, cycle_colors,
    euclidean_distance, frame_for, grid_center, max_corner_distance,
    polygon_distance, resolve_layer_count, rotate, stripe_positions,
    thickness_levels, to_pattern_frame,
)


class TestFrame:
    def test_center_of_odd_grid(self):
        assert grid_center(3, 3) == (1.0, 1.0)

    def test_center_with_offset(self):
        assert grid_center(4, 2, 1.0, -0.5) == (2.5, 0.0)

    def test_full_turn_is_identity(self):
        assert frame_for(10, 7, tilt=360) == frame_for(10, 7, tilt=0)

    def test_negative_tilt_wraps(self):
        a = frame_for(10, 7, tilt=-90)
        b = frame_for(10, 7, tilt=270)
        assert a == b

    def test_cell_offsets_shape(self):
        frame = frame_for(5, 3)
        dx, dy = cell_offsets(5, 3, frame)
        assert dx.shape == (3, 5)
        assert dx[0, 0] == -2.0
        assert dy[2, 0] == 1.0


class TestTransform:
    def test_quarter_turn(self):
        frame = frame_for(1, 1, tilt=90)
        rx, ry = rotate(1.0, 0.0, frame)
        assert rx == pytest.approx(0.0, abs=1e-12)
        assert ry == pytest.approx(-1.0)

    def test_ratio_divides(self):
        frame = frame_for(1, 1, ratio_x=2.0, ratio_y=0.5)
        rx, ry = to_pattern_frame(4.0, 1.0, frame)
        assert rx == pytest.approx(2.0)
        assert ry == pytest.approx(2.0)

    def test_nudge_is_applied(self):
        frame = frame_for(1, 1)
        rx, ry = to_pattern_frame(0.0, 0.0, frame)
        assert rx == EPSILON
        assert ry == EPSILON

    def test_mirror_takes_abs_first(self):
        frame = frame_for(1, 1)
        rx, _ = to_pattern_frame(-2.0, 0.0, frame, mirror=True)
        assert rx > 2.0


class TestMetrics:
    def test_chebyshev(self):
        assert chebyshev_distance(3.0, -4.0) == 4.0

    def test_euclidean(self):
        assert euclidean_distance(3.0, 4.0) == 5.0

    def test_square_edge_direction(self):
        # vertex at angle 0, so 45 degrees points at an edge midpoint
        d = polygon_distance(math.sqrt(0.5), math.sqrt(0.5), 4)
        assert d == pytest.approx(1.0)

    def test_square_vertex_direction(self):
        assert polygon_distance(1.0, 0.0, 4) == pytest.approx(math.cos(math.pi / 4))

    def test_polygon_folding_symmetric(self):
        a = polygon_distance(2.0, 0.7, 6)
        b = polygon_distance(2.0, -0.7, 6)
        assert a == pytest.approx(b)

    def test_polygon_never_exceeds_radius(self):
        rng = np.random.default_rng(0)
        rx, ry = rng.normal(size=(2, 200))
        d = polygon_distance(rx, ry, 5)
        r = np.sqrt(rx * rx + ry * ry)
        assert np.all(d <= r + 1e-12)
        assert np.all(d >= r * math.cos(math.pi / 5) - 1e-12)


class TestBounds:
    def test_rectangle_bound(self):
        frame = frame_for(3, 3)
        d = max_corner_distance(Rectangles(LayerCount(2)), 3, 3, frame)
        assert d == pytest.approx(1.0)

    def test_circle_bound(self):
        frame = frame_for(9, 7)
        d = max_corner_distance(Circles(LayerCount(2)), 9, 7, frame)
        assert d == pytest.approx(5.0)

    def test_bound_ignores_size_policy(self):
        frame = frame_for(9, 7)
        a = max_corner_distance(Polygons(LayerCount(2), 6), 9, 7, frame)
        b = max_corner_distance(Polygons(LayerThickness(3.0), 6), 9, 7, frame)
        assert a == b

    def test_bound_covers_every_cell(self):
        family = Circles(LayerCount(3), ratio_x=1.5, tilt=30)
        frame = frame_for(20, 11, 2.0, -1.0, 30, 1.5, 1.0)
        bound = max_corner_distance(family, 20, 11, frame)
        dx, dy = cell_offsets(20, 11, frame)
        rx, ry = to_pattern_frame(dx, dy, frame)
        assert euclidean_distance(rx, ry).max() <= bound + 1e-9


class TestLevels:
    def test_count_levels_clamps_outer_edge(self):
        levels = count_levels(np.array([0.0, 0.5, 1.0]), 1.0, 2)
        assert levels.tolist() == [0, 1, 1]

    def test_zero_bound_uses_unit_divisor(self):
        levels = count_levels(np.array([0.0, 0.5]), 0.0, 4)
        assert levels.tolist() == [0, 2]

    def test_nonpositive_count_is_single_layer(self):
        levels = count_levels(np.array([0.0, 3.0, 9.0]), 9.0, 0)
        assert levels.tolist() == [0, 0, 0]

    def test_thickness_boundaries_at_half_steps(self):
        d = np.array([0.0, 4.9, 5.0, 14.9, 15.0])
        assert thickness_levels(d, 10).tolist() == [0, 0, 1, 1, 2]

    def test_resolve_thickness(self):
        assert resolve_layer_count(25, LayerThickness(10)) == 3

    def test_resolve_thickness_minimum(self):
        assert resolve_layer_count(0.0, LayerThickness(10)) == 1

    def test_resolve_count_echoes(self):
        assert resolve_layer_count(123.0, LayerCount(7)) == 7

    def test_cycle_negative(self):
        assert cycle_colors(np.array([-1, -2, 3, 0]), 3).tolist() == [2, 1, 0, 0]


class TestStripes:
    def test_positions(self):
        frame = frame_for(4, 1)
        dx, dy = cell_offsets(4, 1, frame)
        assert stripe_positions(dx, dy, frame, 2).tolist() == [[-1, -1, 0, 0]]

    def test_horizontal_stripes_at_quarter_turn(self):
        frame = frame_for(1, 4, tilt=90)
        dx, dy = cell_offsets(1, 4, frame)
        pos = stripe_positions(dx, dy, frame, 2)
        assert pos[:, 0].tolist() == [-1, -1, 0, 0]
