"""
Plotting helpers and the command-line entry point.

Usage (CLI):
    xstitch preview        --config pattern.json [--cell-size 8] [--save-path ...]
    xstitch stats          --config pattern.json [--canvas sudan] [--save-path ...]
    xstitch export-config  --pattern circles --width 120 --height 80 --save-path ...

Or from a notebook:
    from xstitch.viz import plot_pattern
    plot_pattern(pattern)
"""

import argparse
import logging
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Patch

from xstitch.config import (
    CANVAS_TYPES, DEFAULT_HEIGHT, DEFAULT_LAYER_COUNT, DEFAULT_LAYER_THICKNESS,
    DEFAULT_NUM_SIDES, DEFAULT_PALETTE, DEFAULT_WIDTH, FACE_NAMES,
    InvalidConfiguration, MAX_GRID_SIZE,
)
from xstitch.io import PATTERN_TYPES, config_from_dict, load_config, save_config
from xstitch.palettes import COLOR_PALETTES, get_palette
from xstitch.pattern import color_histogram, generate
from xstitch.render import render_pattern, save_preview
from xstitch.threads import estimate_thread_usage, format_thread_usage


# -----------------------------------------------------------------------
# Figures
# -----------------------------------------------------------------------

def legend_labels(pattern, max_listed=4):
    """One label per palette slot naming every face or layer drawn with it."""
    labels = []
    for slot, color in enumerate(pattern.colors):
        used = np.unique(pattern.layers[pattern.levels == slot]).tolist()
        if not used:
            labels.append(color)
        elif pattern.family.kind == "cubes":
            labels.append(f"{'/'.join(FACE_NAMES[f] for f in used)} ({color})")
        else:
            listed = ", ".join(str(n) for n in used[:max_listed])
            if len(used) > max_listed:
                listed += ", ..."
            noun = "layer" if len(used) == 1 else "layers"
            labels.append(f"{noun} {listed} ({color})")
    return labels


def plot_pattern(pattern, cell_size=8, save_path="outputs/pattern.png", title=None):
    """Show the rendered grid with one legend entry per palette slot."""
    img = render_pattern(pattern, cell_size=cell_size)
    fig, ax = plt.subplots(figsize=(8, 8 * pattern.height / pattern.width + 1))
    ax.imshow(img, interpolation="nearest")
    ax.axis("off")
    ax.set_title(title or f"{pattern.family.kind} {pattern.width}x{pattern.height}")

    handles = [Patch(facecolor=c, edgecolor="#555555", label=label)
               for c, label in zip(pattern.colors, legend_labels(pattern))]
    ax.legend(handles=handles, loc="upper left", bbox_to_anchor=(1.02, 1.0),
              fontsize=8, frameon=False)

    plt.tight_layout()
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    fig.savefig(save_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    print(f"Pattern figure saved to {save_path}")


def plot_thread_usage(usage, save_path="outputs/thread_usage.png"):
    """Bar charts of stitches and skeins per color."""
    colors = list(usage["by_color"])
    stitches = [usage["by_color"][c]["stitches"] for c in colors]
    skeins = [usage["by_color"][c]["skeins_needed"] for c in colors]

    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    ax = axes[0]
    ax.bar(range(len(colors)), stitches, color=colors, edgecolor="#555555")
    ax.set_xticks(range(len(colors)))
    ax.set_xticklabels(colors, rotation=45, fontsize=8)
    ax.set_title(f"Stitches per color ({usage['total']['stitches']} total)")

    ax = axes[1]
    ax.bar(range(len(colors)), skeins, color=colors, edgecolor="#555555")
    ax.set_xticks(range(len(colors)))
    ax.set_xticklabels(colors, rotation=45, fontsize=8)
    ax.set_title(f"Skeins per color ({usage['canvas_type']})")

    plt.tight_layout()
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    fig.savefig(save_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    print(f"Thread usage saved to {save_path}")


# -----------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------

def _grid_size(value):
    n = int(value)
    if not 1 <= n <= MAX_GRID_SIZE:
        raise argparse.ArgumentTypeError(f"must be between 1 and {MAX_GRID_SIZE}")
    return n


def _config_from_args(args):
    data = {
        "width": args.width,
        "height": args.height,
        "colors": args.colors or get_palette(args.palette)["colors"],
        "patternType": args.pattern,
        "numSquares": args.num_squares,
        "squaresSizeMode": "thickness" if args.thickness else "count",
        "layerThickness": args.thickness or DEFAULT_LAYER_THICKNESS,
        "ratioX": args.ratio_x,
        "ratioY": args.ratio_y,
        "tilt": args.tilt,
        "numSides": args.num_sides,
        "offsetX": args.offset_x,
        "offsetY": args.offset_y,
    }
    return config_from_dict(data)


def main(argv=None):
    p = argparse.ArgumentParser(description="Cross-stitch pattern previews")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command")

    pv = sub.add_parser("preview", help="Render a configuration to an image")
    pv.add_argument("--config", required=True)
    pv.add_argument("--cell-size", type=int, default=8)
    pv.add_argument("--highlight-level", type=int, default=None)
    pv.add_argument("--figure", action="store_true",
                    help="Save a matplotlib figure with a legend instead of the raw raster")
    pv.add_argument("--save-path", default="outputs/pattern.png")

    st = sub.add_parser("stats", help="Stitch counts and thread estimate")
    st.add_argument("--config", required=True)
    st.add_argument("--canvas", choices=sorted(CANVAS_TYPES), default="standard")
    st.add_argument("--save-path", default=None)

    ex = sub.add_parser("export-config", help="Write a configuration file")
    ex.add_argument("--pattern", choices=sorted(PATTERN_TYPES), default="squares")
    ex.add_argument("--width", type=_grid_size, default=DEFAULT_WIDTH)
    ex.add_argument("--height", type=_grid_size, default=DEFAULT_HEIGHT)
    ex.add_argument("--palette", choices=sorted(COLOR_PALETTES), default=DEFAULT_PALETTE)
    ex.add_argument("--colors", nargs="+", default=None)
    ex.add_argument("--num-squares", type=float, default=DEFAULT_LAYER_COUNT,
                    help="Layer count, stripe width or cube size")
    ex.add_argument("--thickness", type=float, default=None,
                    help="Use thickness mode with this layer thickness")
    ex.add_argument("--ratio-x", type=float, default=1.0)
    ex.add_argument("--ratio-y", type=float, default=1.0)
    ex.add_argument("--tilt", type=float, default=0.0)
    ex.add_argument("--num-sides", type=int, default=DEFAULT_NUM_SIDES)
    ex.add_argument("--offset-x", type=float, default=0.0)
    ex.add_argument("--offset-y", type=float, default=0.0)
    ex.add_argument("--save-path", required=True)

    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "preview":
            pattern = generate(load_config(args.config))
            if args.figure:
                plot_pattern(pattern, cell_size=args.cell_size, save_path=args.save_path)
            else:
                save_preview(pattern, args.save_path, cell_size=args.cell_size,
                             highlight_level=args.highlight_level)
                print(f"Preview saved to {args.save_path}")

        elif args.command == "stats":
            pattern = generate(load_config(args.config))
            usage = estimate_thread_usage(color_histogram(pattern), args.canvas)
            if pattern.resolved_layer_count is not None:
                print(f"Layers: {pattern.resolved_layer_count}")
            print(format_thread_usage(usage), end="")
            if args.save_path:
                plot_thread_usage(usage, save_path=args.save_path)

        elif args.command == "export-config":
            if args.pattern in ("squares", "rectangles", "circles", "polygons") \
                    and not args.thickness:
                args.num_squares = int(args.num_squares)
            save_config(args.save_path, _config_from_args(args))
            print(f"Configuration saved to {args.save_path}")

        else:
            p.print_help()
    except InvalidConfiguration as e:
        p.exit(2, f"{p.prog}: invalid configuration: {e}\n")


if __name__ == "__main__":
    main()
