"""Tests for geometry.py helpers and the canvas Viewport transform."""
from __future__ import annotations

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from geometry import (
    angle_of,
    distance,
    point_segment_distance_sq,
    polar,
    rotate_about,
    rotate_vector,
    snap_angle,
)
from canvas.viewport import Viewport


# ─────────────────────────────────────────────────────────
# geometry
# ─────────────────────────────────────────────────────────


class TestGeometry:
    def test_rotate_vector_quarter_turn(self):
        x, y = rotate_vector((10.0, 0.0), math.pi / 2)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(10.0)

    def test_rotate_about_center(self):
        assert rotate_about((20.0, 10.0), (10.0, 10.0), math.pi) == pytest.approx((0.0, 10.0))

    def test_polar_and_angle_of_agree(self):
        p = polar((5.0, 5.0), 10.0, math.pi / 4)
        assert distance((5.0, 5.0), p) == pytest.approx(10.0)
        assert angle_of((5.0, 5.0), p) == pytest.approx(math.pi / 4)

    def test_segment_distance_uses_clamped_projection(self):
        a, b = (0.0, 0.0), (10.0, 0.0)
        assert point_segment_distance_sq((5.0, 3.0), a, b) == pytest.approx(9.0)
        # Beyond the end the nearest point is the endpoint itself
        assert point_segment_distance_sq((13.0, 4.0), a, b) == pytest.approx(25.0)

    def test_segment_distance_zero_length(self):
        assert point_segment_distance_sq((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == pytest.approx(25.0)

    @pytest.mark.parametrize("angle", [0.1, 0.7, 1.2, 2.0, -0.5, -2.9, 3.1])
    def test_snap_angle_is_multiple_of_45(self, angle):
        snapped = snap_angle(angle)
        steps = snapped / (math.pi / 4)
        assert steps == pytest.approx(round(steps))
        assert abs(snapped - angle) <= math.pi / 8 + 1e-9


# ─────────────────────────────────────────────────────────
# Viewport
# ─────────────────────────────────────────────────────────


class TestViewport:
    def test_identity_by_default(self):
        vp = Viewport()
        assert vp.screen_to_world((12.0, 34.0)) == (12.0, 34.0)
        assert vp.zoom_percent == 100

    def test_round_trip_after_pan_and_zoom(self):
        vp = Viewport()
        vp.pan((40.0, -25.0))
        vp.zoom(-1, (300.0, 200.0))
        vp.zoom(-1, (10.0, 10.0))
        for p in [(0.0, 0.0), (123.4, -56.7), (1000.0, 2000.0)]:
            assert vp.screen_to_world(vp.world_to_screen(p)) == pytest.approx(p)

    def test_zoom_keeps_anchor_fixed(self):
        vp = Viewport()
        vp.pan((15.0, 30.0))
        center = (250.0, 180.0)
        before = vp.screen_to_world(center)
        vp.zoom(-120, center)
        assert vp.scale == pytest.approx(1.1)
        assert vp.screen_to_world(center) == pytest.approx(before)
        vp.zoom(120, center)
        assert vp.scale == pytest.approx(1.0)
        assert vp.screen_to_world(center) == pytest.approx(before)

    def test_zoom_clamps(self):
        vp = Viewport()
        for _ in range(200):
            vp.zoom_in((0.0, 0.0))
        assert vp.scale == pytest.approx(10.0)
        for _ in range(400):
            vp.zoom_out((0.0, 0.0))
        assert vp.scale == pytest.approx(0.1)

    def test_reset(self):
        vp = Viewport()
        vp.pan((5.0, 5.0))
        vp.zoom_in((1.0, 1.0))
        vp.reset()
        assert (vp.scale, vp.ox, vp.oy) == (1.0, 0.0, 0.0)

    def test_invalid_range_rejected(self):
        with pytest.raises(ValueError):
            Viewport(min_scale=2.0, max_scale=1.0)
        with pytest.raises(ValueError):
            Viewport(min_scale=0.0)
