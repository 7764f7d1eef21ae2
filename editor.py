"""
editor.py

Editor facade: owns the EditorState and exposes the commands a host
(the Qt window, a test, a script) drives the engine with.

Pointer handling is delegated to canvas.interaction; this module adds
the whole-scene commands (delete, rename, undo/redo, load, property
edits) and tells the host when something changed.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Callable, Dict, List, Optional

from geometry import Point
from models import InvalidSceneFormat, Mode, Shape, ShapeId, clone_shapes
from settings import AppSettings, EngineSettings, engine_settings
from scene_io import RemoteStore, records_to_shapes, scene_to_records
from properties.edits import STYLE_KEYS, apply_property, inspect_shape
from canvas import interaction
from debug_trace import trace_call
from canvas.state import IDLE, EditorState, PointerEvent, Style

log = logging.getLogger(__name__)


class Editor:
    """
    Command surface over one drawing.

    Args:
        settings: Engine numbers (handle size, zoom range, ...).
        shapes: Initial scene, committed as history index 0.
        style: Style for newly drawn shapes.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        shapes: Optional[List[Shape]] = None,
        style: Optional[Style] = None,
    ):
        self.state = EditorState.create(settings, shapes, style)
        self._on_changed: Optional[Callable[[], None]] = None
        self._on_status: Optional[Callable[[str], None]] = None

    @classmethod
    def from_app_settings(cls, app: AppSettings) -> "Editor":
        """Build an editor configured from application settings."""
        d = app.defaults
        editor = cls(
            engine_settings(app),
            style=Style(stroke_color=d.stroke_color, fill_color=d.fill_color, line_width=d.line_width),
        )
        editor.state.show_dimensions = app.units.show_dimensions
        return editor

    def configure_callbacks(
        self,
        on_changed: Optional[Callable[[], None]] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ):
        """
        Configure host notifications.

        Args:
            on_changed: Called after anything the host should repaint for.
            on_status: Called with short user-facing messages.
        """
        self._on_changed = on_changed
        self._on_status = on_status

    def _changed(self):
        if self._on_changed is not None:
            self._on_changed()

    def _status(self, message: str):
        log.info(message)
        if self._on_status is not None:
            self._on_status(message)

    # --- Read access ------------------------------------------------------

    @property
    def shapes(self) -> List[Shape]:
        return self.state.scene.shapes

    @property
    def selected(self) -> Optional[Shape]:
        return self.state.scene.selected

    @property
    def tool(self) -> str:
        return self.state.tool

    @property
    def viewport(self):
        return self.state.viewport

    @property
    def can_undo(self) -> bool:
        return self.state.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.state.history.can_redo

    def preview_shape(self) -> Optional[Shape]:
        return interaction.preview_shape(self.state)

    def cursor_hint(self, screen: Point) -> str:
        return interaction.cursor_hint(self.state, screen)

    def inspect(self) -> Optional[Dict[str, Any]]:
        """Inspector values for the selection, or None."""
        shape = self.selected
        if shape is None:
            return None
        return inspect_shape(shape, self.state.settings.pixels_per_cm)

    # --- Pointer input ----------------------------------------------------

    def pointer_down(self, event: PointerEvent):
        interaction.pointer_down(self.state, event)
        self._changed()

    def pointer_move(self, event: PointerEvent):
        interaction.pointer_move(self.state, event)
        if not self.state.is_idle:
            self._changed()

    def pointer_up(self, event: Optional[PointerEvent] = None):
        interaction.pointer_up(self.state, event)
        self._changed()

    def wheel(self, delta: float, position: Point):
        interaction.wheel(self.state, delta, position)
        self._changed()

    def cancel(self):
        """Abort the gesture in progress, or leave a drawing tool."""
        if self.state.is_idle and self.state.tool in Mode.DRAWING:
            interaction.set_tool(self.state, Mode.SELECT)
        else:
            interaction.cancel_gesture(self.state)
        self._changed()

    # --- Tools and view ---------------------------------------------------

    def set_tool(self, tool: str):
        interaction.set_tool(self.state, tool)
        self._changed()

    def zoom_in(self, center: Point):
        self.state.viewport.zoom_in(center)
        self._changed()

    def zoom_out(self, center: Point):
        self.state.viewport.zoom_out(center)
        self._changed()

    def reset_view(self):
        self.state.viewport.reset()
        self._changed()

    def set_show_dimensions(self, show: bool):
        self.state.show_dimensions = bool(show)
        self._changed()

    # --- Scene commands ---------------------------------------------------

    def _commit(self):
        self.state.history.commit(self.state.scene.shapes)

    def delete_selected(self) -> bool:
        """Remove the selected shape.

        Returns:
            False if nothing was selected.
        """
        shape = self.selected
        if shape is None:
            return False
        self.state.gesture = IDLE
        self.state.scene.remove(shape.id)
        self._commit()
        log.debug("deleted %s %s", shape.kind, shape.id)
        self._changed()
        return True

    def rename(self, shape_id: ShapeId, name: str) -> bool:
        """Rename a shape. A blank name falls back to the default name.

        Returns:
            False if no shape has ``shape_id`` or the name is unchanged.
        """
        shape = self.state.scene.find(shape_id)
        if shape is None:
            return False
        name = (name or "").strip() or self.state.settings.default_shape_name
        if name == shape.name:
            return False
        shape.name = name
        self._commit()
        self._changed()
        return True

    def set_property(self, key: str, value: Any) -> bool:
        """Apply an inspector edit to the selected shape.

        Colour and line-width edits also become the style for new shapes.
        Name edits go through rename(), so a blank name gets the default.

        Returns:
            False if nothing is selected or the value did not change anything.

        Raises:
            KeyError: Unknown key for the selected shape type.
            ValueError: Unparseable value. Nothing is modified.
        """
        shape = self.selected
        if shape is None:
            return False
        if key == "name":
            return self.rename(shape.id, str(value))
        edited = shape.clone()
        apply_property(edited, key, value, self.state.settings.pixels_per_cm)

        if key in STYLE_KEYS:
            setattr(self.state.style, key, getattr(edited, key))
        if edited == shape:
            return False
        for f in fields(edited):
            setattr(shape, f.name, getattr(edited, f.name))
        self._commit()
        self._changed()
        return True

    def undo(self) -> bool:
        return self._restore(self.state.history.undo(), "undo")

    def redo(self) -> bool:
        return self._restore(self.state.history.redo(), "redo")

    def _restore(self, shapes: Optional[List[Shape]], what: str) -> bool:
        if shapes is None:
            return False
        self.state.gesture = IDLE
        self.state.scene.replace_shapes(shapes)
        log.debug("%s -> %d shapes", what, len(shapes))
        self._changed()
        return True

    # --- Persistence ------------------------------------------------------

    def scene_records(self) -> List[Dict[str, Any]]:
        """Serialize the current scene."""
        return scene_to_records(self.state.scene.shapes)

    def load_records(self, data: Any):
        """Replace the scene with decoded records and reset history.

        Raises:
            InvalidSceneFormat: If ``data`` is not a valid scene. The
                current scene and history are left untouched.
        """
        self.load_shapes(records_to_shapes(data))

    @trace_call("EDITOR")
    def load_shapes(self, shapes: List[Shape]):
        """Replace the scene with ``shapes`` and reset history."""
        shapes = clone_shapes(shapes)
        self.state.gesture = IDLE
        self.state.scene.replace_shapes(shapes)
        self.state.history.reset(shapes)
        self._status(f"Loaded {len(shapes)} shape(s)")
        self._changed()

    @trace_call("EDITOR")
    def save_to_store(self, store: RemoteStore, name: str) -> str:
        """Save the scene under ``name`` and return the new drawing id."""
        drawing_id = store.create(name, self.scene_records())
        self._status(f"Saved '{name}'")
        return drawing_id

    def load_from_store(self, store: RemoteStore, drawing_id: str):
        """Load a stored drawing.

        Raises:
            KeyError: Unknown drawing id (store dependent).
            InvalidSceneFormat: Stored data is not a valid scene.
        """
        try:
            self.load_records(store.read(drawing_id))
        except InvalidSceneFormat as e:
            self._status(f"Could not load drawing: {e}")
            raise
