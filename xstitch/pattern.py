"""
Grid builder: turn a ``PatternConfig`` into a fully classified ``Pattern``.

``generate`` validates the configuration, computes the shared quantities
(center, rotation, corner bound) once, classifies every cell in a single
vectorised pass and wraps the result in an immutable envelope.

Usage::

    from xstitch import generate, PatternConfig, Rectangles, LayerCount
    pattern = generate(PatternConfig(3, 3, ["red", "blue"], Rectangles(LayerCount(2))))
    pattern.cell(1, 1)      # Cell(color='red', level=0)
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from xstitch.config import InvalidConfiguration
from xstitch.families import (
    IsometricCubes, LAYERED_TYPES, PatternConfig, Polygons, Stripes,
    validate_config,
)
from xstitch.geometry import (
    cell_offsets, classify_levels, cycle_colors, family_distance, frame_for,
    max_corner_distance, resolve_layer_count, stripe_positions,
)
from xstitch.hexgrid import classify_faces
from xstitch.io import config_to_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """One classified cell.  ``level`` is already folded into the palette."""
    color: str
    level: int


@dataclass(frozen=True, eq=False)
class Pattern:
    """Output envelope of one ``generate`` call.

    Attributes
    ----------
    config : PatternConfig
        The configuration that produced this grid (echoed on export).
    levels : ndarray, shape (height, width), int64, read-only
        Palette slot of every cell, in ``[0, len(colors))``.
    layers : ndarray, shape (height, width), int64, read-only
        Layer / stripe / face number before folding into the palette.
        Stripe numbers may be negative.
    resolved_layer_count : int or None
        Number of layers for rectangles, circles and polygons (derived in
        thickness mode); None for stripes and cubes.
    resolved_sides : int or None
        Side count actually used for polygons.
    """
    config: PatternConfig
    levels: np.ndarray
    layers: np.ndarray
    resolved_layer_count: Optional[int] = None
    resolved_sides: Optional[int] = None

    @property
    def width(self):
        return self.config.width

    @property
    def height(self):
        return self.config.height

    @property
    def colors(self):
        return self.config.colors

    @property
    def family(self):
        return self.config.family

    def cell(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        level = int(self.levels[y, x])
        return Cell(self.colors[level], level)

    @property
    def grid(self):
        """Rows of ``Cell``, row-major, as nested tuples."""
        cells = [Cell(color, i) for i, color in enumerate(self.colors)]
        return tuple(tuple(cells[level] for level in row)
                     for row in self.levels.tolist())

    def color_indices(self):
        """Writable copy of the level array."""
        return self.levels.copy()

    def to_dict(self):
        """Plain, JSON-serialisable view: grid plus the echoed configuration."""
        out = config_to_dict(self.config)
        out["grid"] = [[{"color": c.color, "level": c.level} for c in row]
                       for row in self.grid]
        out["resolvedLayerCount"] = self.resolved_layer_count
        if self.resolved_sides is not None:
            out["numSides"] = self.resolved_sides
        return out


# ---------------------------------------------------------------------------
# Per-family classifiers
# ---------------------------------------------------------------------------

def _classify_layered(config):
    family = config.family
    frame = frame_for(config.width, config.height, config.offset_x, config.offset_y,
                      family.tilt, family.ratio_x, family.ratio_y)
    max_distance = max_corner_distance(family, config.width, config.height, frame)
    dx, dy = cell_offsets(config.width, config.height, frame)
    distance = family_distance(family, dx, dy, frame)
    layers = classify_levels(distance, max_distance, family.size)
    return layers, resolve_layer_count(max_distance, family.size)


def _classify_stripes(config):
    family = config.family
    frame = frame_for(config.width, config.height, config.offset_x, config.offset_y,
                      family.tilt)
    dx, dy = cell_offsets(config.width, config.height, frame)
    return stripe_positions(dx, dy, frame, family.stripe_width)


def _freeze(arr):
    arr = np.ascontiguousarray(arr, dtype=np.int64)
    arr.setflags(write=False)
    return arr


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate(config: PatternConfig) -> Pattern:
    """Classify every cell of the grid described by *config*.

    Raises
    ------
    InvalidConfiguration
        Before any cell is computed, if the configuration is unusable.
    """
    validate_config(config)
    family = config.family
    resolved_layers = None
    resolved_sides = None

    if isinstance(family, LAYERED_TYPES):
        layers, resolved_layers = _classify_layered(config)
        if isinstance(family, Polygons):
            resolved_sides = family.sides
    elif isinstance(family, Stripes):
        layers = _classify_stripes(config)
    elif isinstance(family, IsometricCubes):
        layers = classify_faces(config.width, config.height, family.cube_size,
                                config.offset_x, config.offset_y)
    else:
        raise InvalidConfiguration(f"unknown shape family: {family!r}")

    levels = cycle_colors(layers, len(config.colors))
    logger.debug("generated %s %dx%d, %d colors, layers=%s",
                 family.kind, config.width, config.height,
                 len(config.colors), resolved_layers)
    return Pattern(config, _freeze(levels), _freeze(layers),
                   resolved_layers, resolved_sides)


def color_histogram(pattern):
    """Map each color value to the number of cells using it.

    Repeated color values in the palette are merged; colors no cell uses are
    left out.  Keys keep palette order.
    """
    counts = np.bincount(pattern.levels.ravel(), minlength=len(pattern.colors))
    histogram = {}
    for color, n in zip(pattern.colors, counts.tolist()):
        if n:
            histogram[color] = histogram.get(color, 0) + n
    return histogram
