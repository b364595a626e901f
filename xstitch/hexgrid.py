"""
Hexagonal lattice classifier for the tumbling-blocks (isometric cube) pattern.

Each cell is snapped to its nearest hexagon center with cube-coordinate
rounding, then split into three 120 degree wedges by its angle around that
center.  The wedges are the visible top, right and left faces of a cube.

Tilt and axis ratios do not apply here; only the grid center and offset do.
"""

import numpy as np

from xstitch.config import MIN_HEX_RADIUS, RIGHT_FACE_BAND, TOP_FACE_BAND
from xstitch.geometry import grid_center

SQRT3 = np.sqrt(3)


def hex_radius(cube_size):
    """Circumradius of one hexagon, floored for numerical stability."""
    return max(MIN_HEX_RADIUS, float(cube_size))


def axial_coordinates(adj_x, adj_y, radius):
    """Fractional axial ``(q, r)`` of pointy-top hexagons of circumradius ``radius``."""
    q = (SQRT3 / 3 * adj_x - 1 / 3 * adj_y) / radius
    r = (2 / 3 * adj_y) / radius
    return q, r


def _round_half_up(v):
    return np.floor(v + 0.5)


def cube_round(q, r):
    """Round fractional axial coordinates to the nearest hexagon.

    Returns integer cube coordinates ``(cq, cr, cs)`` with
    ``cq + cr + cs == 0``.  The axis that moved furthest while rounding is
    rebuilt from the other two; ties favour q, then r, then s.
    """
    q = np.asarray(q, dtype=np.float64)
    r = np.asarray(r, dtype=np.float64)
    s = -q - r

    rq = _round_half_up(q)
    rr = _round_half_up(r)
    rs = _round_half_up(s)

    dq = np.abs(rq - q)
    dr = np.abs(rr - r)
    ds = np.abs(rs - s)

    fix_q = (dq > dr) & (dq > ds)
    fix_r = ~fix_q & (dr > ds)
    fix_s = ~fix_q & ~fix_r

    rq = np.where(fix_q, -rr - rs, rq)
    rr = np.where(fix_r, -rq - rs, rr)
    rs = np.where(fix_s, -rq - rr, rs)
    return rq.astype(np.int64), rr.astype(np.int64), rs.astype(np.int64)


def hex_centers(cq, cr, radius):
    """Pixel-space center of the hexagon at cube coordinates ``(cq, cr, -cq-cr)``."""
    hx = radius * SQRT3 * (cq + cr / 2)
    hy = radius * 3 / 2 * cr
    return hx, hy


def face_from_angle(angle):
    """Map an angle in degrees, as returned by atan2, to a face index.

    ``[-150, -30)`` is the top face (0), ``[-30, 90)`` the right face (1),
    everything else the left face (2).
    """
    angle = np.asarray(angle)
    top = (angle >= TOP_FACE_BAND[0]) & (angle < TOP_FACE_BAND[1])
    right = (angle >= RIGHT_FACE_BAND[0]) & (angle < RIGHT_FACE_BAND[1])
    return np.where(top, 0, np.where(right, 1, 2)).astype(np.int64)


def classify_faces(width, height, cube_size, offset_x=0.0, offset_y=0.0):
    """Return an int array of shape (height, width) holding face indices 0-2."""
    radius = hex_radius(cube_size)
    cx, cy = grid_center(width, height, offset_x, offset_y)
    gx, gy = np.meshgrid(np.arange(width, dtype=np.float64),
                         np.arange(height, dtype=np.float64))
    adj_x = gx - cx
    adj_y = gy - cy

    q, r = axial_coordinates(adj_x, adj_y, radius)
    cq, cr, _ = cube_round(q, r)
    hx, hy = hex_centers(cq, cr, radius)

    angle = np.arctan2(adj_y - hy, adj_x - hx) * 180 / np.pi
    return face_from_angle(angle)
