"""
geometry.py

Point and vector helpers shared by the hit-testing, handle and
interaction code. All functions work on plain ``(x, y)`` tuples in
whatever coordinate space the caller is using.
"""

from __future__ import annotations

import math
from typing import Tuple

Point = Tuple[float, float]

SNAP_STEP = math.pi / 4


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def distance(a: Point, b: Point) -> float:
    """Return the Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def rotate_vector(v: Point, angle: float) -> Point:
    """Rotate vector ``v`` by ``angle`` radians (clockwise on a y-down screen)."""
    c = math.cos(angle)
    s = math.sin(angle)
    return (v[0] * c - v[1] * s, v[0] * s + v[1] * c)


def rotate_about(p: Point, center: Point, angle: float) -> Point:
    """Rotate point ``p`` about ``center`` by ``angle`` radians."""
    rx, ry = rotate_vector(sub(p, center), angle)
    return (rx + center[0], ry + center[1])


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def polar(origin: Point, length: float, angle: float) -> Point:
    """Return the point ``length`` away from ``origin`` along ``angle``."""
    return (origin[0] + length * math.cos(angle), origin[1] + length * math.sin(angle))


def angle_of(a: Point, b: Point) -> float:
    """Return the direction angle of the vector a -> b."""
    return math.atan2(b[1] - a[1], b[0] - a[0])


def point_segment_distance_sq(p: Point, a: Point, b: Point) -> float:
    """Squared distance from ``p`` to segment ``a``-``b``.

    Uses the clamped projection of ``p`` onto the segment; a zero-length
    segment degenerates to point distance.
    """
    l2 = (b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2
    if l2 == 0:
        return (p[0] - a[0]) ** 2 + (p[1] - a[1]) ** 2
    t = ((p[0] - a[0]) * (b[0] - a[0]) + (p[1] - a[1]) * (b[1] - a[1])) / l2
    t = max(0.0, min(1.0, t))
    px = a[0] + t * (b[0] - a[0])
    py = a[1] + t * (b[1] - a[1])
    return (p[0] - px) ** 2 + (p[1] - py) ** 2


def snap_angle(angle: float, step: float = SNAP_STEP) -> float:
    """Round ``angle`` to the nearest multiple of ``step``."""
    return round(angle / step) * step
