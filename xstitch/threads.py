"""
Thread consumption estimates from a color histogram.

Assumes a fixed length of thread per stitch for each canvas type and thread
sold in 8 m skeins.  Lengths are rounded to centimetres for display; skein
counts are rounded up.
"""

import math

from xstitch.config import (
    CANVAS_STANDARD, CANVAS_TYPES, CM_PER_METER, THREAD_PER_SKEIN_M,
    YARDS_PER_METER,
)


def get_canvas_type(canvas_type_id):
    """Canvas preset by id; unknown ids fall back to the standard canvas."""
    return CANVAS_TYPES.get(canvas_type_id, CANVAS_STANDARD)


def estimate_thread_usage(histogram, canvas_type="standard"):
    """Estimate thread length and skeins per color.

    Parameters
    ----------
    histogram : dict
        color -> stitch count, as returned by ``color_histogram``.
    canvas_type : str
        Canvas preset id (``"standard"`` or ``"sudan"``).

    Returns
    -------
    dict
        ``{"canvas_type": name, "by_color": {color: {...}}, "total": {...}}``
        where each entry holds ``stitches``, ``thread_meters``,
        ``thread_yards`` and ``skeins_needed``.
    """
    canvas = get_canvas_type(canvas_type)
    by_color = {}
    total_stitches = 0
    total_meters = 0.0

    for color, count in histogram.items():
        meters = count * canvas.cm_per_stitch / CM_PER_METER
        by_color[color] = {
            "stitches": count,
            "thread_meters": round(meters, 2),
            "thread_yards": round(meters * YARDS_PER_METER, 2),
            "skeins_needed": math.ceil(meters / THREAD_PER_SKEIN_M),
        }
        total_stitches += count
        total_meters += meters

    return {
        "canvas_type": canvas.name,
        "by_color": by_color,
        "total": {
            "stitches": total_stitches,
            "thread_meters": round(total_meters, 2),
            "thread_yards": round(total_meters * YARDS_PER_METER, 2),
            "skeins_needed": math.ceil(total_meters / THREAD_PER_SKEIN_M),
        },
    }


def format_thread_usage(usage):
    """Plain-text report of an ``estimate_thread_usage`` result."""
    lines = ["Yarn Requirements:", ""]
    for color, data in usage["by_color"].items():
        lines.append(f"{color}:")
        lines.append(f"  {data['stitches']} stitches")
        lines.append(f"  {data['thread_meters']}m ({data['thread_yards']} yards)")
        lines.append(f"  {data['skeins_needed']} skein(s)")
        lines.append("")
    total = usage["total"]
    lines.append("Total:")
    lines.append(f"  {total['stitches']} stitches")
    lines.append(f"  {total['thread_meters']}m ({total['thread_yards']} yards)")
    return "\n".join(lines) + "\n"
