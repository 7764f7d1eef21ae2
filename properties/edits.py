"""
properties/edits.py

Inspector values for a shape and the property edits the panel applies.

Sizes are shown in centimetres and angles in degrees; shapes store world
units and radians. ``pixels_per_cm`` converts between the two.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict

from geometry import angle_of, polar
from models import Circle, Line, Rectangle, Shape, unsupported_shape

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# Keys that also become the style for newly drawn shapes
STYLE_KEYS = ("line_width", "stroke_color", "fill_color")


def inspect_shape(shape: Shape, pixels_per_cm: float) -> Dict[str, Any]:
    """Return the display values for ``shape``, keyed like ``apply_property``."""
    values: Dict[str, Any] = {"type": shape.kind, "name": shape.name}
    if isinstance(shape, Rectangle):
        values["width_cm"] = round(shape.width / pixels_per_cm, 2)
        values["height_cm"] = round(shape.height / pixels_per_cm, 2)
        values["rotation_deg"] = round(math.degrees(shape.rotation), 1)
    elif isinstance(shape, Line):
        values["length_cm"] = round(shape.length() / pixels_per_cm, 2)
        values["rotation_deg"] = round(math.degrees(angle_of(shape.start, shape.end)), 1)
    elif isinstance(shape, Circle):
        values["diameter_cm"] = round(shape.radius * 2 / pixels_per_cm, 2)
    else:
        raise unsupported_shape(shape)

    values["line_width"] = shape.line_width
    values["stroke_color"] = shape.stroke_color
    if not isinstance(shape, Line):
        values["fill_color"] = shape.fill_color
    return values


def _number(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{key}: expected a number, got {value!r}")
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key}: expected a number, got {value!r}") from None
    if not math.isfinite(out):
        raise ValueError(f"{key}: must be finite")
    return out


def _color(key: str, value: Any) -> str:
    text = str(value).strip()
    if not _HEX_COLOR.match(text):
        raise ValueError(f"{key}: expected a hex colour like #RRGGBB, got {value!r}")
    return text


def apply_property(shape: Shape, key: str, value: Any, pixels_per_cm: float) -> None:
    """Apply one inspector edit to ``shape`` in place.

    Args:
        shape: Shape to edit.
        key: Property key as returned by ``inspect_shape``.
        value: New value in display units (cm, degrees).
        pixels_per_cm: World units per centimetre.

    Raises:
        KeyError: If ``key`` is unknown or does not apply to this shape type.
        ValueError: If ``value`` cannot be converted. The shape is untouched.
    """
    if key == "name":
        shape.name = "" if value is None else str(value)
        return
    if key == "line_width":
        shape.line_width = max(0.0, _number(key, value))
        return
    if key == "stroke_color":
        shape.stroke_color = _color(key, value)
        return

    if isinstance(shape, Rectangle):
        if key == "width_cm":
            shape.width = max(0.0, _number(key, value) * pixels_per_cm)
        elif key == "height_cm":
            shape.height = max(0.0, _number(key, value) * pixels_per_cm)
        elif key == "rotation_deg":
            shape.rotation = math.radians(_number(key, value))
        elif key == "fill_color":
            shape.fill_color = _color(key, value)
        else:
            raise KeyError(key)
    elif isinstance(shape, Line):
        if key == "rotation_deg":
            angle = math.radians(_number(key, value))
            center = shape.center()
            half = shape.length() / 2
            shape.x1, shape.y1 = polar(center, -half, angle)
            shape.x2, shape.y2 = polar(center, half, angle)
        elif key == "length_cm":
            length = max(0.0, _number(key, value) * pixels_per_cm)
            shape.x2, shape.y2 = polar(shape.start, length, angle_of(shape.start, shape.end))
        else:
            raise KeyError(key)
    elif isinstance(shape, Circle):
        if key == "diameter_cm":
            shape.radius = max(0.0, _number(key, value) * pixels_per_cm / 2)
        elif key == "fill_color":
            shape.fill_color = _color(key, value)
        else:
            raise KeyError(key)
    else:
        raise unsupported_shape(shape)
