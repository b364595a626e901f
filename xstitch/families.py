"""
Pattern configuration as a closed set of frozen dataclasses.

Each shape family is its own class carrying only the parameters that family
understands, so a ``Stripes`` config cannot accidentally carry a layer count
and an ``IsometricCubes`` config cannot carry a tilt.  ``generate`` dispatches
on the class, never on a string.

Usage::

    from xstitch.families import PatternConfig, Circles, LayerCount
    cfg = PatternConfig(80, 60, ("#fff", "#000"), Circles(LayerCount(4)))
"""

import math
import numbers
from dataclasses import dataclass
from typing import Tuple, Union

from xstitch.config import InvalidConfiguration, MAX_LAYER_COUNT, MIN_POLYGON_SIDES


# ---------------------------------------------------------------------------
# Sizing policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LayerCount:
    """Fixed number of layers; layer width follows from the grid extent."""
    count: int


@dataclass(frozen=True)
class LayerThickness:
    """Fixed layer width in cells; the number of layers follows."""
    thickness: float


SizeSpec = Union[LayerCount, LayerThickness]


# ---------------------------------------------------------------------------
# Shape families
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rectangles:
    size: SizeSpec
    ratio_x: float = 1.0
    ratio_y: float = 1.0
    tilt: float = 0.0           # degrees
    kind = "rectangles"


@dataclass(frozen=True)
class Circles:
    size: SizeSpec
    ratio_x: float = 1.0
    ratio_y: float = 1.0
    tilt: float = 0.0
    kind = "circles"


@dataclass(frozen=True)
class Polygons:
    size: SizeSpec
    num_sides: int = 5
    ratio_x: float = 1.0
    ratio_y: float = 1.0
    tilt: float = 0.0
    kind = "polygons"

    @property
    def sides(self) -> int:
        """Side count actually drawn (fewer than 3 is clamped up)."""
        return max(MIN_POLYGON_SIDES, int(self.num_sides))


@dataclass(frozen=True)
class Stripes:
    stripe_width: float
    tilt: float = 0.0
    kind = "stripes"


@dataclass(frozen=True)
class IsometricCubes:
    cube_size: float
    kind = "cubes"


ShapeFamily = Union[Rectangles, Circles, Polygons, Stripes, IsometricCubes]
LAYERED_TYPES = (Rectangles, Circles, Polygons)
FAMILY_TYPES = (Rectangles, Circles, Polygons, Stripes, IsometricCubes)


@dataclass(frozen=True)
class PatternConfig:
    """Everything needed to classify one grid.  Immutable per invocation."""
    width: int
    height: int
    colors: Tuple[str, ...]
    family: ShapeFamily
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self):
        # Accept any sequence of colors but store a tuple so the config stays
        # hashable and the caller's list is never shared.  A bare string is
        # left alone so validation can reject it instead of splitting it.
        if not isinstance(self.colors, str):
            object.__setattr__(self, "colors", tuple(self.colors))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _require_finite(name, value):
    try:
        ok = math.isfinite(value)
    except OverflowError as e:
        raise InvalidConfiguration(f"{name} is out of range: {value!r}") from e
    except TypeError as e:
        raise InvalidConfiguration(f"{name} must be a number, got {value!r}") from e
    if not ok:
        raise InvalidConfiguration(f"{name} must be finite, got {value!r}")


def _require_positive(name, value):
    _require_finite(name, value)
    if value <= 0:
        raise InvalidConfiguration(f"{name} must be > 0, got {value!r}")


def _require_bounded(name, value):
    _require_finite(name, value)
    if value > MAX_LAYER_COUNT:
        raise InvalidConfiguration(f"{name} must be <= {MAX_LAYER_COUNT}, got {value!r}")


def _require_dimension(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConfiguration(f"{name} must be > 0, got {value}")


def validate_config(config: PatternConfig) -> None:
    """Reject configurations the engine cannot classify.

    Only hard errors are raised here.  Permissive parameters (side count,
    layer count, cube size) are clamped later by the geometry code.
    """
    if not isinstance(config, PatternConfig):
        raise InvalidConfiguration(f"expected PatternConfig, got {type(config).__name__}")
    _require_dimension("width", config.width)
    _require_dimension("height", config.height)
    if not isinstance(config.colors, tuple):
        raise InvalidConfiguration(f"colors must be a sequence of strings, got {config.colors!r}")
    if len(config.colors) == 0:
        raise InvalidConfiguration("colors must contain at least one color")
    for color in config.colors:
        if not isinstance(color, str):
            raise InvalidConfiguration(f"color must be a string, got {color!r}")
    _require_finite("offset_x", config.offset_x)
    _require_finite("offset_y", config.offset_y)

    family = config.family
    if not isinstance(family, FAMILY_TYPES):
        raise InvalidConfiguration(f"unknown shape family: {family!r}")

    if isinstance(family, LAYERED_TYPES):
        _require_positive("ratio_x", family.ratio_x)
        _require_positive("ratio_y", family.ratio_y)
        _require_finite("tilt", family.tilt)
        size = family.size
        if isinstance(size, LayerThickness):
            _require_positive("thickness", size.thickness)
        elif isinstance(size, LayerCount):
            _require_bounded("count", size.count)
        else:
            raise InvalidConfiguration(f"unknown size policy: {size!r}")
        if isinstance(family, Polygons):
            _require_bounded("num_sides", family.num_sides)
    elif isinstance(family, Stripes):
        _require_positive("stripe_width", family.stripe_width)
        _require_finite("tilt", family.tilt)
    else:
        _require_finite("cube_size", family.cube_size)
