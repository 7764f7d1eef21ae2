"""
canvas/state.py

Editor state and gesture session values.

All mutable interaction state lives in one ``EditorState`` owned by the
host. Gesture sessions are small frozen records, one per state of the
pointer state machine, so an in-progress gesture can never be half
updated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from geometry import Point
from history import HistoryManager
from models import Mode, Shape
from settings import EngineSettings
from canvas.scene import Scene
from canvas.viewport import Viewport


# ----------------------------
# Pointer input
# ----------------------------

LEFT = "left"
MIDDLE = "middle"
RIGHT = "right"


@dataclass(frozen=True)
class PointerEvent:
    """Pointer input in host screen coordinates.

    ``snap`` is True while the snapping modifier (Shift) is held.
    """
    x: float
    y: float
    button: str = LEFT
    snap: bool = False

    @property
    def position(self) -> Point:
        return (self.x, self.y)


# ----------------------------
# Gesture sessions
# ----------------------------

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    tool: str
    start_screen: Point


@dataclass(frozen=True)
class Dragging:
    target: Shape       # live shape, resolved once at pointer-down
    snapshot: Shape     # copy taken at pointer-down
    start_world: Point


@dataclass(frozen=True)
class Resizing:
    target: Shape
    handle: str
    snapshot: Shape
    start_world: Point


@dataclass(frozen=True)
class Rotating:
    target: Shape
    snapshot: Shape


@dataclass(frozen=True)
class Panning:
    last_screen: Point


Gesture = Union[Idle, Drawing, Dragging, Resizing, Rotating, Panning]

IDLE = Idle()


# ----------------------------
# Editor state
# ----------------------------

@dataclass
class Style:
    """Style applied to newly drawn shapes."""
    stroke_color: str = "#000000"
    fill_color: str = "#E5E7EB"
    line_width: float = 1.0


@dataclass
class EditorState:
    """Everything the interaction engine reads and writes."""
    scene: Scene
    viewport: Viewport
    history: HistoryManager
    settings: EngineSettings = field(default_factory=EngineSettings)
    tool: str = Mode.SELECT
    gesture: Gesture = IDLE
    snap: bool = False
    pointer_screen: Optional[Point] = None
    show_dimensions: bool = True
    style: Style = field(default_factory=Style)

    @classmethod
    def create(
        cls,
        settings: Optional[EngineSettings] = None,
        shapes: Optional[List[Shape]] = None,
        style: Optional[Style] = None,
    ) -> "EditorState":
        """Build a fresh state whose history holds the initial scene at index 0."""
        settings = settings or EngineSettings()
        scene = Scene(shapes)
        history = HistoryManager(settings.history_depth)
        history.reset(scene.shapes)
        return cls(
            scene=scene,
            viewport=Viewport(settings.min_scale, settings.max_scale, settings.zoom_step),
            history=history,
            settings=settings,
            style=style or Style(),
        )

    @property
    def scale(self) -> float:
        return self.viewport.scale

    @property
    def is_idle(self) -> bool:
        return isinstance(self.gesture, Idle)
