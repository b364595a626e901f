"""Tests for thread consumption estimates."""

import pytest

from xstitch.threads import estimate_thread_usage, format_thread_usage, get_canvas_type


class TestCanvas:
    def test_unknown_falls_back(self):
        assert get_canvas_type("linen").id == "standard"

    def test_sudan_rate(self):
        assert get_canvas_type("sudan").cm_per_stitch == pytest.approx(800 / 300)


class TestEstimate:
    def test_standard(self):
        usage = estimate_thread_usage({"#fff": 100, "#000": 20})
        white = usage["by_color"]["#fff"]
        assert white["stitches"] == 100
        assert white["thread_meters"] == 50.0
        assert white["thread_yards"] == pytest.approx(54.68, abs=0.01)
        assert white["skeins_needed"] == 7
        assert usage["by_color"]["#000"]["skeins_needed"] == 2
        assert usage["total"]["stitches"] == 120
        assert usage["total"]["thread_meters"] == 60.0
        assert usage["total"]["skeins_needed"] == 8

    def test_sudan_one_skein_per_300(self):
        usage = estimate_thread_usage({"a": 300}, "sudan")
        assert usage["canvas_type"] == "Sudan Canvas (Toile Soudan)"
        assert usage["by_color"]["a"]["thread_meters"] == pytest.approx(8.0)
        assert usage["by_color"]["a"]["skeins_needed"] == 1

    def test_empty(self):
        usage = estimate_thread_usage({})
        assert usage["by_color"] == {}
        assert usage["total"]["skeins_needed"] == 0


class TestFormat:
    def test_report(self):
        text = format_thread_usage(estimate_thread_usage({"red": 16}))
        assert text.startswith("Yarn Requirements:")
        assert "red:\n  16 stitches\n  8.0m" in text
        assert "1 skein(s)" in text
        assert "Total:\n  16 stitches" in text
