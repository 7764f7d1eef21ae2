"""Tests for canvas/hit_test.py picking and canvas/handles.py handle layout."""
from __future__ import annotations

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models import Circle, Line, Rectangle
from canvas.handles import ROTATE_HANDLE, handle_at, handles_for
from canvas.hit_test import hit_test, pick
from canvas.scene import Scene


# ─────────────────────────────────────────────────────────
# hit_test / pick
# ─────────────────────────────────────────────────────────


class TestHitTest:
    def test_rectangle_interior_and_exterior(self):
        r = Rectangle(x=10, y=10, width=100, height=50)
        assert hit_test((60, 35), r, 1.0, 5.0)
        assert not hit_test((5, 35), r, 1.0, 5.0)
        assert not hit_test((60, 70), r, 1.0, 5.0)

    def test_rotated_rectangle_uses_local_frame(self):
        # 100x20 bar rotated upright around (50, 10)
        r = Rectangle(x=0, y=0, width=100, height=20, rotation=math.pi / 2)
        assert hit_test((50, 50), r, 1.0, 5.0)
        assert not hit_test((90, 10), r, 1.0, 5.0)

    def test_line_tolerance_in_screen_pixels(self):
        ln = Line(x1=0, y1=0, x2=100, y2=0, line_width=2)
        # half stroke 1 + tolerance 5 = 6 screen px
        assert hit_test((50, 6), ln, 1.0, 5.0)
        assert not hit_test((50, 6.5), ln, 1.0, 5.0)
        # At 2x zoom the same band is 3 world units wide
        assert hit_test((50, 3), ln, 2.0, 5.0)
        assert not hit_test((50, 4), ln, 2.0, 5.0)

    def test_circle_boundary_inclusive(self):
        c = Circle(cx=0, cy=0, radius=10)
        assert hit_test((10, 0), c, 1.0, 5.0)
        assert not hit_test((10.01, 0), c, 1.0, 5.0)

    def test_pick_returns_topmost(self):
        bottom = Rectangle(x=0, y=0, width=100, height=100)
        top = Circle(cx=50, cy=50, radius=20)
        assert pick((50, 50), [bottom, top], 1.0, 5.0) is top
        assert pick((5, 5), [bottom, top], 1.0, 5.0) is bottom
        assert pick((500, 500), [bottom, top], 1.0, 5.0) is None

    def test_unsupported_shape(self):
        with pytest.raises(TypeError):
            hit_test((0, 0), object(), 1.0, 5.0)


# ─────────────────────────────────────────────────────────
# Handles
# ─────────────────────────────────────────────────────────


class TestHandles:
    def test_rectangle_handles(self):
        r = Rectangle(x=10, y=10, width=100, height=50)
        h = handles_for(r, 1.0, 30.0)
        assert set(h) == {"tl", "tr", "bl", "br", "t", "b", "l", "r", ROTATE_HANDLE}
        assert h["tl"] == pytest.approx((10, 10))
        assert h["br"] == pytest.approx((110, 60))
        assert h[ROTATE_HANDLE] == pytest.approx((60, -20))

    def test_rotation_offset_scales_with_zoom(self):
        r = Rectangle(x=10, y=10, width=100, height=50)
        assert handles_for(r, 2.0, 30.0)[ROTATE_HANDLE] == pytest.approx((60, -5))

    def test_rotated_rectangle_handles(self):
        r = Rectangle(x=0, y=0, width=100, height=50, rotation=math.pi / 2)
        h = handles_for(r, 1.0, 30.0)
        assert h["r"] == pytest.approx((50, 75))
        assert h["l"] == pytest.approx((50, -25))

    def test_line_handles(self):
        ln = Line(x1=0, y1=0, x2=100, y2=0)
        h = handles_for(ln, 1.0, 30.0)
        assert h["start"] == (0, 0)
        assert h["end"] == (100, 0)
        assert h[ROTATE_HANDLE] == pytest.approx((50, -30))

    def test_circle_has_no_rotation_handle(self):
        h = handles_for(Circle(cx=0, cy=0, radius=10), 1.0, 30.0)
        assert set(h) == {"n", "s", "w", "e"}
        assert h["e"] == (10, 0)

    def test_handle_at_within_tolerance(self):
        r = Rectangle(x=10, y=10, width=100, height=50)
        assert handle_at((111, 61), r, 1.0, 8.0, 30.0) == "br"
        assert handle_at((60, 35), r, 1.0, 8.0, 30.0) is None
        assert handle_at((60, -20), r, 1.0, 8.0, 30.0) == ROTATE_HANDLE

    def test_handle_at_prefers_nearest(self):
        # Tiny rectangle: corner and edge handles overlap in pick range
        r = Rectangle(x=0, y=0, width=10, height=10)
        assert handle_at((10, 10), r, 1.0, 8.0, 30.0) == "br"
        assert handle_at((10, 5), r, 1.0, 8.0, 30.0) == "r"


# ─────────────────────────────────────────────────────────
# Scene
# ─────────────────────────────────────────────────────────


class TestScene:
    def test_selection_is_by_id(self):
        r = Rectangle(x=0, y=0, width=10, height=10)
        scene = Scene([r])
        scene.select(r)
        assert scene.selected is r
        scene.remove(r.id)
        assert scene.selected is None
        assert scene.selected_id is None

    def test_snapshot_is_independent(self):
        r = Rectangle(x=0, y=0, width=10, height=10)
        scene = Scene([r])
        snap = scene.snapshot()
        r.x = 99
        assert snap[0].x == 0
        assert snap[0] is not r

    def test_replace_clears_selection(self):
        r = Rectangle()
        scene = Scene([r])
        scene.select(r)
        scene.replace_shapes([])
        assert len(scene) == 0
        assert scene.selected is None
