"""
Coordinate transforms, distance fields and level classification.

Every function here works on numpy arrays of cell offsets as well as on plain
scalars, so the grid builder can classify a whole grid in one pass and the
corner bound can reuse exactly the same code on four points.

The pipeline for the layered families (rectangles, circles, polygons) is::

    (x, y) --center--> (dx, dy) --rotate/scale--> (rx, ry) --metric--> d --> level

Stripes only need the projection onto the stripe normal.
"""

import functools
import math
from dataclasses import dataclass

import numpy as np

from xstitch.config import EPSILON
from xstitch.families import (
    Circles, LayerCount, LayerThickness, Polygons, Rectangles,
)


# ---------------------------------------------------------------------------
# Frame (center + rotation + axis scale), computed once per invocation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Frame:
    center_x: float
    center_y: float
    cos_t: float
    sin_t: float
    ratio_x: float = 1.0
    ratio_y: float = 1.0


def grid_center(width, height, offset_x=0.0, offset_y=0.0):
    """Geometric midpoint of the grid shifted by the configured offset."""
    return (width - 1) / 2 + offset_x, (height - 1) / 2 + offset_y


@functools.lru_cache(maxsize=128)
def frame_for(width, height, offset_x=0.0, offset_y=0.0, tilt=0.0,
              ratio_x=1.0, ratio_y=1.0):
    """Build the shared transform for one geometry tuple.

    ``tilt`` is in degrees and is reduced modulo 360 first, so a full turn
    yields exactly the same sines and cosines as no turn at all.
    """
    cx, cy = grid_center(width, height, offset_x, offset_y)
    theta = math.radians(tilt % 360)
    return Frame(cx, cy, math.cos(theta), math.sin(theta),
                 float(ratio_x), float(ratio_y))


def cell_offsets(width, height, frame):
    """Return ``(dx, dy)`` arrays of shape (height, width), row-major."""
    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(height, dtype=np.float64)
    gx, gy = np.meshgrid(xs, ys)
    return gx - frame.center_x, gy - frame.center_y


def corner_offsets(width, height, frame):
    """Offsets of the four grid corners, in (0,0), (w-1,0), (0,h-1), (w-1,h-1) order."""
    xs = np.array([0, width - 1, 0, width - 1], dtype=np.float64)
    ys = np.array([0, 0, height - 1, height - 1], dtype=np.float64)
    return xs - frame.center_x, ys - frame.center_y


def rotate(dx, dy, frame):
    """Rotate offsets by ``-tilt`` into the pattern's own axes."""
    rx = dx * frame.cos_t + dy * frame.sin_t
    ry = -dx * frame.sin_t + dy * frame.cos_t
    return rx, ry


def to_pattern_frame(dx, dy, frame, mirror=False):
    """Rotate, nudge by EPSILON and divide by the axis ratios.

    With ``mirror`` the absolute value is taken before the nudge so exact
    boundary cells on both sides of the center fall outward together.
    """
    rx, ry = rotate(dx, dy, frame)
    if mirror:
        rx, ry = np.abs(rx), np.abs(ry)
    return (rx + EPSILON) / frame.ratio_x, (ry + EPSILON) / frame.ratio_y


# ---------------------------------------------------------------------------
# Distance metrics
# ---------------------------------------------------------------------------

def chebyshev_distance(rx, ry):
    """L-infinity distance: nested rectangles."""
    return np.maximum(np.abs(rx), np.abs(ry))


def euclidean_distance(rx, ry):
    """L2 distance: nested circles, or ellipses when the ratios differ."""
    return np.sqrt(rx * rx + ry * ry)


def polygon_distance(rx, ry, sides):
    """Perpendicular distance to the nearest edge of a regular polygon.

    The polar angle is folded into one ``2*pi/sides`` sector; subtracting half
    a sector puts a vertex, not an edge, at angle 0.
    """
    step = 2 * np.pi / sides
    r = np.sqrt(rx * rx + ry * ry)
    theta = np.arctan2(ry, rx)
    folded = np.fmod(np.fmod(theta, step) + step, step)
    return r * np.cos(folded - step / 2)


def family_distance(family, dx, dy, frame):
    """Run the transform + metric pipeline for one layered family."""
    if isinstance(family, Rectangles):
        rx, ry = to_pattern_frame(dx, dy, frame, mirror=True)
        return chebyshev_distance(rx, ry)
    rx, ry = to_pattern_frame(dx, dy, frame)
    if isinstance(family, Circles):
        return euclidean_distance(rx, ry)
    if isinstance(family, Polygons):
        return polygon_distance(rx, ry, family.sides)
    raise TypeError(f"{type(family).__name__} has no distance field")


def stripe_positions(dx, dy, frame, stripe_width):
    """Signed stripe number along the stripe normal (may be negative)."""
    along = dx * frame.cos_t + dy * frame.sin_t + EPSILON
    return np.floor(along / stripe_width).astype(np.int64)


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

def max_corner_distance(family, width, height, frame):
    """Largest distance over the grid, taken at its four corners.

    Every metric here grows monotonically away from the center along any
    ray, so over a rectangle the maximum sits on a corner.
    """
    sides = family.sides if isinstance(family, Polygons) else 0
    return _corner_bound(type(family), sides, width, height, frame)


@functools.lru_cache(maxsize=128)
def _corner_bound(family_type, sides, width, height, frame):
    if family_type is Polygons:
        probe = Polygons(LayerCount(1), num_sides=sides)
    else:
        probe = family_type(LayerCount(1))
    dx, dy = corner_offsets(width, height, frame)
    distances = family_distance(probe, dx, dy, frame)
    return max(0.0, float(np.max(distances)))


# ---------------------------------------------------------------------------
# Level classification
# ---------------------------------------------------------------------------

def effective_count(count):
    """Layer count actually used: anything below one means a single layer."""
    return max(1, int(count))


def count_levels(distance, max_distance, count):
    """Count mode: split ``[0, max_distance]`` into ``count`` equal bands.

    The outermost corner lands exactly on ``count`` and is clamped back into
    the last band.
    """
    count = effective_count(count)
    divisor = max_distance or 1
    level = np.floor((distance / divisor) * count).astype(np.int64)
    return np.minimum(level, count - 1)


def thickness_levels(distance, thickness):
    """Thickness mode: band boundaries at 0.5t, 1.5t, 2.5t, ..."""
    return np.floor((distance + thickness / 2) / thickness).astype(np.int64)


def resolve_layer_count(max_distance, size):
    """Total number of layers reported back to the caller."""
    if isinstance(size, LayerThickness):
        t = size.thickness
        return max(1, math.ceil((max_distance + t / 2) / t))
    return effective_count(size.count)


def classify_levels(distance, max_distance, size):
    """Dispatch on the sizing policy."""
    if isinstance(size, LayerThickness):
        return thickness_levels(distance, size.thickness)
    return count_levels(distance, max_distance, size.count)


def cycle_colors(layers, num_colors):
    """Fold layer indices into palette slots; negative indices wrap too."""
    return np.mod(layers, num_colors).astype(np.int64)
