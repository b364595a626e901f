"""Tests for raster previews."""

import numpy as np
import pytest
from PIL import Image

from xstitch import LayerCount, PatternConfig, Rectangles, generate
from xstitch.render import parse_color, render_pattern, save_preview


@pytest.fixture
def pattern():
    return generate(PatternConfig(3, 3, ["#ff0000", "#0000ff"], Rectangles(LayerCount(2))))


class TestParseColor:
    def test_long_hex(self):
        assert parse_color("#ff0000") == (255, 0, 0)

    def test_short_hex(self):
        assert parse_color("#0f0") == (0, 255, 0)

    def test_css_name(self):
        assert parse_color("white") == (255, 255, 255)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_color("not-a-color")


class TestRenderPattern:
    def test_shape_and_dtype(self, pattern):
        img = render_pattern(pattern, cell_size=4)
        assert img.shape == (12, 12, 3)
        assert img.dtype == np.uint8

    def test_cell_fill(self, pattern):
        img = render_pattern(pattern, cell_size=4, grid_lines=False)
        assert tuple(img[5, 5]) == (255, 0, 0)
        assert tuple(img[0, 0]) == (0, 0, 255)

    def test_grid_lines_darken_borders(self, pattern):
        plain = render_pattern(pattern, cell_size=6, grid_lines=False)
        lined = render_pattern(pattern, cell_size=6)
        assert int(lined[6, 8, 0]) < int(plain[6, 8, 0])
        assert np.array_equal(lined[8, 8], plain[8, 8])

    def test_highlight_lightens_level(self, pattern):
        plain = render_pattern(pattern, cell_size=4, grid_lines=False)
        lit = render_pattern(pattern, cell_size=4, grid_lines=False, highlight_level=1)
        assert lit[0, 0, 0] > plain[0, 0, 0]
        assert np.array_equal(lit[5, 5], plain[5, 5])

    def test_one_pixel_cells(self, pattern):
        img = render_pattern(pattern, cell_size=1)
        assert img.shape == (3, 3, 3)


class TestSavePreview:
    def test_writes_png(self, tmp_path, pattern):
        path = tmp_path / "out" / "preview.png"
        save_preview(pattern, str(path), cell_size=5)
        with Image.open(path) as im:
            assert im.size == (15, 15)
