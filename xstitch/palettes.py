"""Named color palettes and helpers for fitting a palette to a layer count."""

import numpy as np

from xstitch.config import DEFAULT_PALETTE, LAYERED_FAMILIES

# ---------------------------------------------------------------------------
# Palette table (key -> display name + colors, light/dark order varies)
# ---------------------------------------------------------------------------

COLOR_PALETTES = {
    "earthTones": {
        "name": "Earth Tones",
        "colors": ["#8B7355", "#A0826D", "#C9B299", "#E8D5C4", "#F5EBE0"],
    },
    "pastelGarden": {
        "name": "Pastel Garden",
        "colors": ["#E8B4B8", "#F4D1AE", "#F9EAC2", "#C8E3D4", "#B4D4E1"],
    },
    "autumnLeaves": {
        "name": "Autumn Leaves",
        "colors": ["#8B4513", "#CD853F", "#DAA520", "#D2691E", "#A0522D"],
    },
    "oceanBreeze": {
        "name": "Ocean Breeze",
        "colors": ["#4A90A4", "#5FB3B3", "#8ECAE6", "#A8DADC", "#C1E7E3"],
    },
    "lavenderFields": {
        "name": "Lavender Fields",
        "colors": ["#9D84B7", "#B8A4C9", "#D4C5E2", "#E8DFF5", "#F5F0FA"],
    },
    "sunsetBlush": {
        "name": "Sunset Blush",
        "colors": ["#E07A5F", "#F2A490", "#F4C2B8", "#F9DCC4", "#FEF0E7"],
    },
    "forestMoss": {
        "name": "Forest Moss",
        "colors": ["#3D5A40", "#5F7A61", "#8B9D83", "#B8C5B4", "#D8E2DC"],
    },
    "berrySweet": {
        "name": "Berry Sweet",
        "colors": ["#A4508B", "#C97C9D", "#E5A4B4", "#F4C2C2", "#FFE5EC"],
    },
    "vintageTea": {
        "name": "Vintage Tea",
        "colors": ["#9B6B4F", "#B8927D", "#D4B5A0", "#E8D5C4", "#F5EBE0"],
    },
    "mintChocolate": {
        "name": "Mint Chocolate",
        "colors": ["#4A5240", "#6B7F5E", "#A8C69F", "#C8E6C9", "#E8F5E9"],
    },
}


def get_palette(key):
    """Palette by key; unknown keys fall back to the default palette."""
    return COLOR_PALETTES.get(key, COLOR_PALETTES[DEFAULT_PALETTE])


def palette_names():
    """``[(key, display name), ...]`` in table order."""
    return [(key, p["name"]) for key, p in COLOR_PALETTES.items()]


def random_palette(rng=None):
    """Pick a palette uniformly at random."""
    rng = rng or np.random.default_rng()
    keys = list(COLOR_PALETTES)
    return COLOR_PALETTES[keys[rng.integers(len(keys))]]


def fit_palette(colors, count):
    """Cycle or truncate *colors* so there is exactly one per layer.

    New slots repeat the existing colors in order, so a 2-color palette
    stretched to 5 layers reads A, B, A, B, A.
    """
    colors = list(colors)
    if not colors:
        return []
    count = max(1, int(count))
    return [colors[i % len(colors)] for i in range(count)]


def needed_color_count(pattern):
    """How many colors the editor should offer for *pattern*.

    Layered families want one per resolved layer; stripes and cubes keep
    whatever palette they were given.
    """
    if pattern.family.kind in LAYERED_FAMILIES and pattern.resolved_layer_count:
        return pattern.resolved_layer_count
    return len(pattern.colors)
