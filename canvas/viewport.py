"""
canvas/viewport.py

Screen <-> world transform with pan and cursor-anchored zoom.
"""

from __future__ import annotations

from geometry import Point


class Viewport:
    """
    Affine view transform: ``screen = world * scale + offset``.

    Zooming keeps the world point under the zoom centre fixed on screen.
    The scale is always clamped to ``[min_scale, max_scale]``.
    """

    def __init__(self, min_scale: float = 0.1, max_scale: float = 10.0, step: float = 1.1):
        if min_scale <= 0 or min_scale > max_scale:
            raise ValueError(f"invalid zoom range [{min_scale}, {max_scale}]")
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.step = step
        self.scale = 1.0
        self.ox = 0.0
        self.oy = 0.0

    @property
    def offset(self) -> Point:
        return (self.ox, self.oy)

    @property
    def zoom_percent(self) -> int:
        """Zoom level for display, e.g. ``110`` for 110%."""
        return round(self.scale * 100)

    def screen_to_world(self, p: Point) -> Point:
        return ((p[0] - self.ox) / self.scale, (p[1] - self.oy) / self.scale)

    def world_to_screen(self, p: Point) -> Point:
        return (p[0] * self.scale + self.ox, p[1] * self.scale + self.oy)

    def pan(self, delta: Point) -> None:
        """Shift the view by a screen-space delta."""
        self.ox += delta[0]
        self.oy += delta[1]

    def zoom(self, direction: float, center: Point) -> None:
        """Zoom one step around screen point ``center``.

        Args:
            direction: Negative zooms in (wheel up), anything else zooms out.
            center: Screen point that stays fixed.
        """
        anchor = self.screen_to_world(center)
        new_scale = self.scale * self.step if direction < 0 else self.scale / self.step
        self.scale = max(self.min_scale, min(new_scale, self.max_scale))
        self.ox = center[0] - anchor[0] * self.scale
        self.oy = center[1] - anchor[1] * self.scale

    def zoom_in(self, center: Point) -> None:
        self.zoom(-1, center)

    def zoom_out(self, center: Point) -> None:
        self.zoom(1, center)

    def reset(self) -> None:
        self.scale = 1.0
        self.ox = 0.0
        self.oy = 0.0
