"""
canvas package

Scene, viewport, hit-testing and the pointer state machine.
The Qt widget lives in canvas.view and is imported only by the host.
"""

from canvas.scene import Scene
from canvas.viewport import Viewport
from canvas.state import EditorState, PointerEvent, Style

__all__ = [
    "Scene",
    "Viewport",
    "EditorState",
    "PointerEvent",
    "Style",
]
