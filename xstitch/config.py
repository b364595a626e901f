"""
Global configuration: shape-family registry, numeric constants, canvas presets.

The engine is parameterised almost entirely by ``PatternConfig`` (see
``xstitch.families``); what lives here are the fixed numbers the geometry
relies on and the defaults the editor starts from.
"""

from dataclasses import dataclass


class InvalidConfiguration(ValueError):
    """Raised before any cell is computed when a configuration is unusable."""


# ---------------------------------------------------------------------------
# Shape family registry
# ---------------------------------------------------------------------------

SHAPE_FAMILIES = [
    "rectangles",   # Chebyshev rings
    "circles",      # Euclidean rings (ellipses when ratios differ)
    "polygons",     # angularly folded radial distance
    "stripes",      # signed projection onto the stripe normal
    "cubes",        # tumbling blocks on a hexagonal lattice
]

# Families whose levels come from a distance field and therefore accept
# either a layer count or a layer thickness.
LAYERED_FAMILIES = {"rectangles", "circles", "polygons"}

# ---------------------------------------------------------------------------
# Geometry constants
# ---------------------------------------------------------------------------

EPSILON = 1e-10         # deterministic tie-breaking nudge for exact boundaries
MIN_POLYGON_SIDES = 3
MIN_HEX_RADIUS = 2.0    # cube size floor

# Isometric cube faces, in level order
FACE_NAMES = ["top", "right", "left"]
TOP_FACE_BAND = (-150.0, -30.0)     # degrees, [lo, hi)
RIGHT_FACE_BAND = (-30.0, 90.0)

MAX_GRID_SIZE = 500     # editor cap on width / height
MAX_LAYER_COUNT = 2**31 - 1     # upper bound for layer count and polygon sides

# ---------------------------------------------------------------------------
# Editor defaults
# ---------------------------------------------------------------------------

DEFAULT_WIDTH = 100
DEFAULT_HEIGHT = 100
DEFAULT_LAYER_COUNT = 5
DEFAULT_LAYER_THICKNESS = 10
DEFAULT_NUM_SIDES = 5
DEFAULT_PALETTE = "pastelGarden"

# ---------------------------------------------------------------------------
# Canvas presets (thread consumption)
# ---------------------------------------------------------------------------

THREAD_PER_SKEIN_M = 8
CM_PER_METER = 100
YARDS_PER_METER = 1.09361


@dataclass(frozen=True)
class CanvasType:
    id: str
    name: str
    cm_per_stitch: float


CANVAS_STANDARD = CanvasType(
    id="standard",
    name="Standard (Aida 14ct)",
    cm_per_stitch=50.0,
)

CANVAS_SUDAN = CanvasType(
    id="sudan",
    name="Sudan Canvas (Toile Soudan)",
    cm_per_stitch=(8 * 100) / 300,  # one 8 m skein covers 300 stitches
)

CANVAS_TYPES = {"standard": CANVAS_STANDARD, "sudan": CANVAS_SUDAN}
