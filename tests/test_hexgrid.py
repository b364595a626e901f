"""Tests for the isometric cube (hexagonal lattice) classifier."""

import numpy as np
import pytest

from xstitch.hexgrid import (
    axial_coordinates, classify_faces, cube_round, face_from_angle,
    hex_centers, hex_radius,
)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class TestCubeRound:
    def test_sum_is_zero(self, rng):
        q, r = rng.uniform(-50, 50, size=(2, 5000))
        cq, cr, cs = cube_round(q, r)
        assert np.all(cq + cr + cs == 0)

    def test_integers_unchanged(self):
        cq, cr, cs = cube_round(np.array([2.0, -3.0]), np.array([-1.0, 0.0]))
        assert cq.tolist() == [2, -3]
        assert cr.tolist() == [-1, 0]
        assert cs.tolist() == [-1, 3]

    def test_largest_error_axis_is_rebuilt(self):
        # s moves least, q and r tie: r is rebuilt
        cq, cr, cs = cube_round(0.4, 0.4)
        assert (int(cq), int(cr), int(cs)) == (0, 1, -1)

    def test_snaps_to_nearest_center(self, rng):
        radius = 5.0
        pts = rng.uniform(-40, 40, size=(2, 2000))
        q, r = axial_coordinates(pts[0], pts[1], radius)
        cq, cr, _ = cube_round(q, r)
        hx, hy = hex_centers(cq, cr, radius)
        own = np.hypot(pts[0] - hx, pts[1] - hy)
        # compare against the six neighbouring centers
        for dq, dr in [(1, 0), (-1, 0), (0, 1), (0, -1), (1, -1), (-1, 1)]:
            nx, ny = hex_centers(cq + dq, cr + dr, radius)
            assert np.all(own <= np.hypot(pts[0] - nx, pts[1] - ny) + 1e-9)


class TestFaces:
    @pytest.mark.parametrize("angle,face", [
        (-90.0, 0), (-150.0, 0), (-30.0, 1), (0.0, 1),
        (89.9, 1), (90.0, 2), (180.0, 2), (-151.0, 2),
    ])
    def test_bands(self, angle, face):
        assert int(face_from_angle(angle)) == face

    def test_radius_floor(self):
        assert hex_radius(1) == 2.0
        assert hex_radius(7.5) == 7.5

    def test_center_cell_is_right_face(self):
        faces = classify_faces(5, 5, 4)
        assert faces[2, 2] == 1

    def test_all_faces_present(self):
        faces = classify_faces(40, 40, 5)
        assert faces.shape == (40, 40)
        assert set(np.unique(faces).tolist()) == {0, 1, 2}

    def test_offset_shifts_pattern(self):
        base = classify_faces(30, 30, 4)
        shifted = classify_faces(30, 30, 4, offset_x=3.0)
        assert np.array_equal(base[:, :27], shifted[:, 3:])
