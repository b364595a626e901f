"""xstitch - Cross-stitch pattern planning: classify a grid into colored layers."""

from xstitch.config import InvalidConfiguration, SHAPE_FAMILIES
from xstitch.families import (
    PatternConfig, LayerCount, LayerThickness,
    Rectangles, Circles, Polygons, Stripes, IsometricCubes,
)
from xstitch.pattern import Cell, Pattern, generate, color_histogram
