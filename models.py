"""
models.py

Data models and constants for the SketchDesk editor.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Union

from geometry import Point, distance, midpoint


# ----------------------------
# Errors
# ----------------------------

class SketchError(Exception):
    """Base class for SketchDesk errors."""


class InvalidSceneFormat(SketchError):
    """Raised when loaded scene data is not a list of shape records.

    Attributes:
        errors: Human-readable validation messages, one per problem.
    """

    def __init__(self, message: str, errors: List[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


# ----------------------------
# Drawing mode constants
# ----------------------------

class Mode:
    """Active tool constants for the editor."""
    SELECT = "select"
    RECTANGLE = "rectangle"
    LINE = "line"
    CIRCLE = "circle"

    ALL = (SELECT, RECTANGLE, LINE, CIRCLE)
    DRAWING = (RECTANGLE, LINE, CIRCLE)


# Loaded files may carry numeric timestamp ids; new shapes get uuid hex
ShapeId = Union[str, int]


def new_shape_id() -> str:
    """Generate a new, collision-free shape id."""
    return uuid.uuid4().hex


# ----------------------------
# Shape model
# ----------------------------

DEFAULT_STROKE = "#000000"
DEFAULT_FILL = "#E5E7EB"


def _num(rec: Dict[str, Any], key: str, default: float | None = None) -> float:
    """Read a numeric record field, raising InvalidSceneFormat on bad data."""
    value = rec.get(key, default)
    if isinstance(value, bool) or value is None:
        raise InvalidSceneFormat(f"{key}: expected a number", [f"{key}: expected a number, got {value!r}"])
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise InvalidSceneFormat(f"{key}: expected a number", [f"{key}: expected a number, got {value!r}"]) from None
    if not math.isfinite(out):
        raise InvalidSceneFormat(f"{key}: must be finite", [f"{key}: must be finite, got {value!r}"])
    return out


def _common_from_record(rec: Dict[str, Any]) -> Dict[str, Any]:
    shape_id = rec.get("id")
    if shape_id is None or shape_id == "":
        shape_id = new_shape_id()
    return {
        "id": shape_id,
        "name": str(rec.get("name") or ""),
        "stroke_color": str(rec.get("strokeColor") or DEFAULT_STROKE),
        "line_width": _num(rec, "lineWidth", 1.0),
    }


@dataclass
class Rectangle:
    """Axis-aligned box rotated about its own centre.

    ``x``/``y`` is the top-left corner before rotation.
    """
    id: ShapeId = field(default_factory=new_shape_id)
    name: str = ""
    stroke_color: str = DEFAULT_STROKE
    line_width: float = 1.0
    fill_color: str = DEFAULT_FILL
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0

    kind = "rectangle"

    def clone(self) -> "Rectangle":
        return replace(self)

    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "name": self.name,
            "strokeColor": self.stroke_color,
            "fillColor": self.fill_color,
            "lineWidth": self.line_width,
            "rotation": self.rotation,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "Rectangle":
        return cls(
            **_common_from_record(rec),
            fill_color=str(rec.get("fillColor") or DEFAULT_FILL),
            x=_num(rec, "x"),
            y=_num(rec, "y"),
            width=max(0.0, _num(rec, "width")),
            height=max(0.0, _num(rec, "height")),
            rotation=_num(rec, "rotation", 0.0),
        )


@dataclass
class Line:
    """Straight segment between two endpoints. Has no fill."""
    id: ShapeId = field(default_factory=new_shape_id)
    name: str = ""
    stroke_color: str = DEFAULT_STROKE
    line_width: float = 1.0
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    kind = "line"

    @property
    def rotation(self) -> float:
        # Direction is encoded by the endpoints
        return 0.0

    @property
    def start(self) -> Point:
        return (self.x1, self.y1)

    @property
    def end(self) -> Point:
        return (self.x2, self.y2)

    def length(self) -> float:
        return distance(self.start, self.end)

    def clone(self) -> "Line":
        return replace(self)

    def center(self) -> Point:
        return midpoint(self.start, self.end)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "name": self.name,
            "strokeColor": self.stroke_color,
            "lineWidth": self.line_width,
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
        }

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "Line":
        return cls(
            **_common_from_record(rec),
            x1=_num(rec, "x1"),
            y1=_num(rec, "y1"),
            x2=_num(rec, "x2"),
            y2=_num(rec, "y2"),
        )


@dataclass
class Circle:
    """Circle given by centre and radius."""
    id: ShapeId = field(default_factory=new_shape_id)
    name: str = ""
    stroke_color: str = DEFAULT_STROKE
    line_width: float = 1.0
    fill_color: str = DEFAULT_FILL
    cx: float = 0.0
    cy: float = 0.0
    radius: float = 0.0

    kind = "circle"

    @property
    def rotation(self) -> float:
        return 0.0

    def clone(self) -> "Circle":
        return replace(self)

    def center(self) -> Point:
        return (self.cx, self.cy)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "name": self.name,
            "strokeColor": self.stroke_color,
            "fillColor": self.fill_color,
            "lineWidth": self.line_width,
            "cx": self.cx,
            "cy": self.cy,
            "radius": self.radius,
        }

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "Circle":
        return cls(
            **_common_from_record(rec),
            fill_color=str(rec.get("fillColor") or DEFAULT_FILL),
            cx=_num(rec, "cx"),
            cy=_num(rec, "cy"),
            radius=max(0.0, _num(rec, "radius")),
        )


Shape = Union[Rectangle, Line, Circle]

SHAPE_TYPES: Dict[str, type] = {
    Rectangle.kind: Rectangle,
    Line.kind: Line,
    Circle.kind: Circle,
}


def shape_from_record(rec: Dict[str, Any]) -> Shape:
    """Create a shape from a flat serialization record.

    Args:
        rec: Record with a ``type`` key of ``rectangle``, ``line`` or ``circle``.

    Returns:
        The matching shape instance.

    Raises:
        InvalidSceneFormat: If the record is not a dict, has an unknown
            type, or carries non-numeric geometry.
    """
    if not isinstance(rec, dict):
        raise InvalidSceneFormat("shape record must be an object", [f"root: expected object, got {type(rec).__name__}"])
    cls = SHAPE_TYPES.get(rec.get("type"))
    if cls is None:
        raise InvalidSceneFormat(f"unknown shape type {rec.get('type')!r}", [f"type: unknown shape type {rec.get('type')!r}"])
    return cls.from_record(rec)


def clone_shapes(shapes: List[Shape]) -> List[Shape]:
    """Return independent copies of ``shapes`` in the same order."""
    return [s.clone() for s in shapes]


def unsupported_shape(shape: Any) -> TypeError:
    """Error for a shape variant an operation has no case for."""
    return TypeError(f"unsupported shape: {type(shape).__name__}")
