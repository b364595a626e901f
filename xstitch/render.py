"""
Raster preview of a classified pattern, backed by OpenCV.

Produces ``uint8`` RGB images of shape ``(height * cell_size,
width * cell_size, 3)``: one flat square per cell, faint grid lines between
cells and an optional lightened overlay on one level (the editor's hover
highlight).
"""

import os

import cv2
import numpy as np
from matplotlib.colors import to_rgb
from PIL import Image

GRID_LINE_ALPHA = 0.1
HIGHLIGHT_ALPHA = 0.15


def parse_color(color):
    """Return an ``(r, g, b)`` tuple of ints for ``#RGB``, ``#RRGGBB`` or a CSS name."""
    try:
        rgb = to_rgb(color)
    except ValueError as e:
        raise ValueError(f"Cannot parse color: {color!r}") from e
    return tuple(int(round(c * 255)) for c in rgb)


def palette_array(colors):
    """Colors as a ``(n, 3)`` uint8 lookup table."""
    return np.array([parse_color(c) for c in colors], dtype=np.uint8)


def draw_grid_lines(img, cell_size, color=(0, 0, 0), alpha=GRID_LINE_ALPHA):
    """Blend one-pixel cell borders into *img* (in place) and return it."""
    h, w = img.shape[:2]
    overlay = img.copy()
    for x in range(0, w + 1, cell_size):
        cv2.line(overlay, (min(x, w - 1), 0), (min(x, w - 1), h - 1), color, 1)
    for y in range(0, h + 1, cell_size):
        cv2.line(overlay, (0, min(y, h - 1)), (w - 1, min(y, h - 1)), color, 1)
    cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0, dst=img)
    return img


def render_pattern(pattern, cell_size=8, grid_lines=True, highlight_level=None):
    """Render *pattern* to an RGB uint8 image.

    Parameters
    ----------
    pattern : Pattern
    cell_size : int
        Edge length of one cell in pixels.
    grid_lines : bool
        Draw faint borders between cells (skipped below 3 px cells).
    highlight_level : int or None
        Lighten every cell of this level.
    """
    cell_size = max(1, int(cell_size))
    lut = palette_array(pattern.colors)
    small = lut[pattern.levels]
    size = (pattern.width * cell_size, pattern.height * cell_size)
    img = cv2.resize(small, size, interpolation=cv2.INTER_NEAREST)

    if highlight_level is not None:
        mask = (pattern.levels == highlight_level).astype(np.uint8)
        mask = cv2.resize(mask, size, interpolation=cv2.INTER_NEAREST).astype(bool)
        white = np.full_like(img, 255)
        lifted = cv2.addWeighted(white, HIGHLIGHT_ALPHA, img, 1 - HIGHLIGHT_ALPHA, 0)
        img[mask] = lifted[mask]

    if grid_lines and cell_size >= 3:
        draw_grid_lines(img, cell_size)
    return img


def save_preview(pattern, path, cell_size=8, **kwargs):
    """Render *pattern* and write it as an image file (format from extension)."""
    img = render_pattern(pattern, cell_size=cell_size, **kwargs)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    Image.fromarray(img).save(path)
    return img
