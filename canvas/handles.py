"""
canvas/handles.py

Named resize/rotate handle positions for each shape kind.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

from geometry import Point, distance, polar, rotate_about
from models import Circle, Line, Rectangle, Shape, unsupported_shape

ROTATE_HANDLE = "rot"

RECT_HANDLES = ("tl", "tr", "bl", "br", "t", "b", "l", "r")
LINE_HANDLES = ("start", "end")
CIRCLE_HANDLES = ("n", "s", "w", "e")


def handles_for(shape: Shape, scale: float, rotate_offset: float) -> Dict[str, Point]:
    """Return handle positions in world coordinates.

    Args:
        shape: The selected shape.
        scale: Current viewport scale.
        rotate_offset: Screen-pixel distance of the rotation handle from
            the shape (top edge for rectangles, midpoint for lines).

    Returns:
        Mapping of handle name to world position. Circles have no
        rotation handle.
    """
    offset = rotate_offset / scale
    if isinstance(shape, Rectangle):
        center = shape.center()
        cx, cy = center
        hw = shape.width / 2
        hh = shape.height / 2
        local = {
            "tl": (-hw, -hh),
            "tr": (hw, -hh),
            "bl": (-hw, hh),
            "br": (hw, hh),
            "t": (0.0, -hh),
            "b": (0.0, hh),
            "l": (-hw, 0.0),
            "r": (hw, 0.0),
            ROTATE_HANDLE: (0.0, -hh - offset),
        }
        return {
            name: rotate_about((cx + lx, cy + ly), center, shape.rotation)
            for name, (lx, ly) in local.items()
        }
    if isinstance(shape, Line):
        angle = math.atan2(shape.y2 - shape.y1, shape.x2 - shape.x1)
        return {
            "start": shape.start,
            "end": shape.end,
            ROTATE_HANDLE: polar(shape.center(), offset, angle - math.pi / 2),
        }
    if isinstance(shape, Circle):
        return {
            "n": (shape.cx, shape.cy - shape.radius),
            "s": (shape.cx, shape.cy + shape.radius),
            "w": (shape.cx - shape.radius, shape.cy),
            "e": (shape.cx + shape.radius, shape.cy),
        }
    raise unsupported_shape(shape)


def handle_at(
    p: Point,
    shape: Shape,
    scale: float,
    handle_size: float,
    rotate_offset: float,
    hit_factor: float = 1.5,
) -> Optional[str]:
    """Return the name of the nearest handle within pick range of ``p``.

    The pick radius is ``handle_size * hit_factor`` screen pixels.
    """
    tolerance = (handle_size * hit_factor) / scale
    best: Optional[str] = None
    best_dist = tolerance
    for name, pos in handles_for(shape, scale, rotate_offset).items():
        d = distance(p, pos)
        if d < best_dist:
            best = name
            best_dist = d
    return best
