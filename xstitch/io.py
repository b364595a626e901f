"""JSON import / export of pattern configurations.

The exchange format mirrors the editor's own state object (camelCase keys,
``numSquares`` doubling as stripe width and cube size), wrapped in a small
versioned envelope::

    {"version": "1.0", "pattern": "circles", "timestamp": "...", "config": {...}}
"""

import json
import os
from datetime import datetime

import numpy as np

from xstitch.config import (
    DEFAULT_LAYER_COUNT, DEFAULT_LAYER_THICKNESS, DEFAULT_NUM_SIDES,
    InvalidConfiguration,
)
from xstitch.families import (
    Circles, IsometricCubes, LayerCount, LayerThickness, PatternConfig,
    Polygons, Rectangles, Stripes, validate_config,
)

FORMAT_VERSION = "1.0"

# editor pattern type -> family class; "rectangles" is accepted as an alias
PATTERN_TYPES = {
    "squares": Rectangles,
    "rectangles": Rectangles,
    "circles": Circles,
    "polygons": Polygons,
    "stripes": Stripes,
    "cubes": IsometricCubes,
}


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy scalars and arrays."""

    def default(self, obj):
        if isinstance(obj, (np.bool_,)):
            return bool(obj)
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


def _pattern_type(family):
    return "squares" if isinstance(family, Rectangles) else family.kind


# ---------------------------------------------------------------------------
# dict <-> PatternConfig
# ---------------------------------------------------------------------------

def config_to_dict(config):
    """Flatten a ``PatternConfig`` into the editor's key names."""
    family = config.family
    out = {
        "width": config.width,
        "height": config.height,
        "colors": list(config.colors),
        "patternType": _pattern_type(family),
        "offsetX": config.offset_x,
        "offsetY": config.offset_y,
    }
    if isinstance(family, (Rectangles, Circles, Polygons)):
        if isinstance(family.size, LayerThickness):
            out["squaresSizeMode"] = "thickness"
            out["layerThickness"] = family.size.thickness
        else:
            out["squaresSizeMode"] = "count"
            out["numSquares"] = family.size.count
        out["ratioX"] = family.ratio_x
        out["ratioY"] = family.ratio_y
        out["tilt"] = family.tilt
        if isinstance(family, Polygons):
            out["numSides"] = family.num_sides
    elif isinstance(family, Stripes):
        out["numSquares"] = family.stripe_width
        out["tilt"] = family.tilt
    else:
        out["numSquares"] = family.cube_size
    return out


def config_from_dict(data):
    """Build and validate a ``PatternConfig`` from an editor-style mapping.

    Unknown keys (``canvasType`` and other editor-only state) are ignored.
    """
    try:
        kind = data.get("patternType", "squares")
        family_type = PATTERN_TYPES.get(kind)
        if family_type is None:
            raise InvalidConfiguration(f"unknown patternType: {kind!r}")

        num_squares = data.get("numSquares", DEFAULT_LAYER_COUNT)
        tilt = data.get("tilt", 0)
        if family_type is Stripes:
            family = Stripes(num_squares, tilt)
        elif family_type is IsometricCubes:
            family = IsometricCubes(num_squares)
        else:
            if data.get("squaresSizeMode", "count") == "thickness":
                size = LayerThickness(data.get("layerThickness", DEFAULT_LAYER_THICKNESS))
            else:
                size = LayerCount(num_squares)
            ratios = dict(ratio_x=data.get("ratioX", 1), ratio_y=data.get("ratioY", 1),
                          tilt=tilt)
            if family_type is Polygons:
                family = Polygons(size, num_sides=data.get("numSides", DEFAULT_NUM_SIDES),
                                  **ratios)
            else:
                family = family_type(size, **ratios)

        config = PatternConfig(
            width=data["width"],
            height=data["height"],
            colors=data["colors"],
            family=family,
            offset_x=data.get("offsetX", 0),
            offset_y=data.get("offsetY", 0),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise InvalidConfiguration(f"malformed configuration: {e}") from e
    validate_config(config)
    return config


# ---------------------------------------------------------------------------
# Envelope + files
# ---------------------------------------------------------------------------

def export_envelope(config):
    """Wrap a configuration in the versioned export envelope."""
    return {
        "version": FORMAT_VERSION,
        "pattern": _pattern_type(config.family),
        "timestamp": datetime.now().isoformat(),
        "config": config_to_dict(config),
    }


def save_config(path, config):
    """Write *config* as an export envelope to *path*."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w") as f:
        json.dump(export_envelope(config), f, indent=2, cls=_NumpyEncoder)


def save_pattern(path, pattern):
    """Write a generated pattern (grid and echoed configuration) to *path*."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w") as f:
        json.dump(pattern.to_dict(), f, cls=_NumpyEncoder)


def loads_config(text):
    """Parse an envelope or a bare configuration mapping from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfiguration("configuration must be a JSON object")
    if "config" in data:
        data = data["config"]
        if not isinstance(data, dict):
            raise InvalidConfiguration("envelope 'config' must be a JSON object")
    return config_from_dict(data)


def load_config(path):
    """Read a configuration previously written by ``save_config``."""
    with open(path) as f:
        return loads_config(f.read())
