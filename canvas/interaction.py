"""
canvas/interaction.py

Pointer state machine for drawing, moving, resizing and rotating shapes.

Each handler takes the host's ``EditorState`` and returns it. Geometry
during a gesture is always recomputed from the snapshot taken at
pointer-down plus the current pointer, never from the previous frame.
"""

from __future__ import annotations

import logging
import math
from dataclasses import fields
from typing import Optional

from geometry import (
    Point,
    add,
    angle_of,
    distance,
    polar,
    rotate_vector,
    snap_angle,
    sub,
)
from models import Circle, Line, Mode, Rectangle, Shape, unsupported_shape
from debug_trace import trace
from canvas.handles import ROTATE_HANDLE, handle_at
from canvas.hit_test import hit_test
from canvas.state import (
    IDLE,
    LEFT,
    MIDDLE,
    Drawing,
    Dragging,
    EditorState,
    Gesture,
    Idle,
    Panning,
    PointerEvent,
    Resizing,
    Rotating,
)

log = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# Tool selection
# -------------------------------------------------------------------------

def set_tool(state: EditorState, tool: str) -> EditorState:
    """Activate a tool. Switching tools always clears the selection."""
    if tool not in Mode.ALL:
        raise ValueError(f"unknown tool {tool!r}")
    state.tool = tool
    state.scene.clear_selection()
    if isinstance(state.gesture, Drawing):
        state.gesture = IDLE
    return state


# -------------------------------------------------------------------------
# Pointer down
# -------------------------------------------------------------------------

def pointer_down(state: EditorState, event: PointerEvent) -> EditorState:
    """Classify the gesture that starts at ``event``."""
    screen = event.position
    state.pointer_screen = screen
    state.snap = event.snap

    if event.button == MIDDLE:
        if state.is_idle or isinstance(state.gesture, Panning):
            state.gesture = Panning(screen)
            trace("pan start", "GESTURE")
        return state
    if event.button != LEFT or not state.is_idle:
        return state

    if state.tool in Mode.DRAWING:
        state.gesture = Drawing(state.tool, screen)
        trace(f"draw {state.tool} start at {screen}", "GESTURE")
        return state

    s = state.settings
    scale = state.scale
    world = state.viewport.screen_to_world(screen)

    # Handles can sit outside the body (rotation handle), so test them first
    selected = state.scene.selected
    if selected is not None:
        handle = handle_at(world, selected, scale, s.handle_size, s.rotate_offset, s.handle_hit_factor)
        if handle == ROTATE_HANDLE:
            state.gesture = Rotating(selected, selected.clone())
            trace(f"rotate {selected.id}", "GESTURE")
            return state
        if handle is not None:
            state.gesture = Resizing(selected, handle, selected.clone(), world)
            trace(f"resize {selected.id} via {handle}", "GESTURE")
            return state

    hit = state.scene.pick(world, scale, s.line_select_tolerance)
    state.scene.select(hit)
    if hit is not None:
        state.gesture = Dragging(hit, hit.clone(), world)
        trace(f"drag {hit.id}", "GESTURE")
    return state


# -------------------------------------------------------------------------
# Pointer move
# -------------------------------------------------------------------------

def pointer_move(state: EditorState, event: PointerEvent) -> EditorState:
    """Apply the active gesture for the current pointer position."""
    screen = event.position
    state.pointer_screen = screen
    state.snap = event.snap
    g = state.gesture

    if isinstance(g, Panning):
        state.viewport.pan(sub(screen, g.last_screen))
        state.gesture = Panning(screen)
        return state

    world = state.viewport.screen_to_world(screen)
    if isinstance(g, Dragging):
        _move(g, world)
    elif isinstance(g, Resizing):
        _resize(g, world, state.snap, _min_size(state), _snap_step(state))
    elif isinstance(g, Rotating):
        _rotate(g, world, state.snap, _snap_step(state))
    # Drawing only updates the preview, which is derived on demand
    trace(f"move {type(g).__name__} {world}", "MOVE")
    return state


def _min_size(state: EditorState) -> float:
    return state.settings.min_shape_size / state.scale


def _snap_step(state: EditorState) -> float:
    return math.radians(state.settings.snap_angle_deg)


def _move(g: Dragging, world: Point) -> None:
    dx, dy = sub(world, g.start_world)
    t, o = g.target, g.snapshot
    if isinstance(o, Rectangle):
        t.x = o.x + dx
        t.y = o.y + dy
    elif isinstance(o, Line):
        t.x1 = o.x1 + dx
        t.y1 = o.y1 + dy
        t.x2 = o.x2 + dx
        t.y2 = o.y2 + dy
    elif isinstance(o, Circle):
        t.cx = o.cx + dx
        t.cy = o.cy + dy
    else:
        raise unsupported_shape(o)


def _resize(g: Resizing, world: Point, snap: bool, min_size: float, step: float) -> None:
    o = g.snapshot
    if isinstance(o, Rectangle):
        _resize_rectangle(g.target, o, g.handle, sub(world, g.start_world), min_size)
    elif isinstance(o, Line):
        _resize_line(g.target, o, g.handle, world, snap, step)
    elif isinstance(o, Circle):
        _resize_circle(g.target, o, g.handle, world, min_size)
    else:
        raise unsupported_shape(o)


def _resize_rectangle(t: Rectangle, o: Rectangle, handle: str, delta: Point, min_size: float) -> None:
    # Work in the rectangle's unrotated frame, origin at the snapshot centre
    dx, dy = rotate_vector(delta, -o.rotation)
    left, right = -o.width / 2, o.width / 2
    top, bottom = -o.height / 2, o.height / 2

    if "l" in handle:
        left += dx
    if "r" in handle:
        right += dx
    if "t" in handle:
        top += dy
    if "b" in handle:
        bottom += dy

    # Clamp while holding the edge opposite the dragged one
    if right - left < min_size:
        if "l" in handle:
            left = right - min_size
        else:
            right = left + min_size
    if bottom - top < min_size:
        if "t" in handle:
            top = bottom - min_size
        else:
            bottom = top + min_size

    width = right - left
    height = bottom - top
    local_center = ((left + right) / 2, (top + bottom) / 2)
    cx, cy = add(o.center(), rotate_vector(local_center, o.rotation))
    t.width = width
    t.height = height
    t.x = cx - width / 2
    t.y = cy - height / 2


def _resize_line(t: Line, o: Line, handle: str, world: Point, snap: bool, step: float) -> None:
    point = world
    if snap:
        anchor = o.end if handle == "start" else o.start
        point = polar(anchor, distance(anchor, world), snap_angle(angle_of(anchor, world), step))
    if handle == "start":
        t.x1, t.y1 = point
    else:
        t.x2, t.y2 = point


def _resize_circle(t: Circle, o: Circle, handle: str, world: Point, min_size: float) -> None:
    wx, wy = world
    if handle == "n":
        radius = o.cy - wy
    elif handle == "s":
        radius = wy - o.cy
    elif handle == "w":
        radius = o.cx - wx
    elif handle == "e":
        radius = wx - o.cx
    else:
        return
    t.radius = max(min_size, radius)


def _rotate(g: Rotating, world: Point, snap: bool, step: float) -> None:
    o = g.snapshot
    center = o.center()
    angle = angle_of(center, world)
    if isinstance(o, Rectangle):
        # The rotation handle points up from the centre at angle 0
        angle += math.pi / 2
    if snap:
        angle = snap_angle(angle, step)

    if isinstance(o, Rectangle):
        g.target.rotation = angle
    elif isinstance(o, Line):
        half = o.length() / 2
        g.target.x1, g.target.y1 = polar(center, -half, angle)
        g.target.x2, g.target.y2 = polar(center, half, angle)
    elif isinstance(o, Circle):
        # Rotation is unobservable on a circle
        return
    else:
        raise unsupported_shape(o)


# -------------------------------------------------------------------------
# Pointer up
# -------------------------------------------------------------------------

def pointer_up(state: EditorState, event: Optional[PointerEvent] = None) -> EditorState:
    """Finish the active gesture.

    A gesture that changed the scene is committed to history exactly
    once. Panning never is. Releasing a button other than the one that
    started the gesture is ignored.
    """
    g = state.gesture
    if event is not None:
        if not isinstance(g, Idle) and event.button != _gesture_button(g):
            return state
        state.pointer_screen = event.position
        state.snap = event.snap
    state.gesture = IDLE

    changed = False
    if isinstance(g, Drawing):
        end = state.pointer_screen if state.pointer_screen is not None else g.start_screen
        shape = _shape_from_drag(state, g.tool, g.start_screen, end)
        if _large_enough(shape, _min_size(state)):
            state.scene.add(shape)
            changed = True
            log.debug("created %s %s", shape.kind, shape.id)
        else:
            log.debug("discarded degenerate %s", shape.kind)
        set_tool(state, Mode.SELECT)
    elif isinstance(g, (Dragging, Resizing, Rotating)):
        changed = g.target != g.snapshot

    if changed:
        state.history.commit(state.scene.shapes)
    trace(f"{type(g).__name__} end changed={changed}", "GESTURE")
    return state


def _gesture_button(g: Gesture) -> str:
    return MIDDLE if isinstance(g, Panning) else LEFT


def cancel_gesture(state: EditorState) -> EditorState:
    """Abort the active gesture, restoring the shape to its snapshot."""
    g = state.gesture
    if isinstance(g, (Dragging, Resizing, Rotating)):
        for f in fields(g.snapshot):
            setattr(g.target, f.name, getattr(g.snapshot, f.name))
    state.gesture = IDLE
    return state


# -------------------------------------------------------------------------
# Wheel
# -------------------------------------------------------------------------

def wheel(state: EditorState, delta: float, position: Point) -> EditorState:
    """Zoom one step around ``position``; negative delta zooms in."""
    if delta == 0:
        return state
    state.viewport.zoom(delta, position)
    return state


# -------------------------------------------------------------------------
# Drawing preview
# -------------------------------------------------------------------------

def preview_shape(state: EditorState) -> Optional[Shape]:
    """Transient shape for the drawing gesture in progress, if any.

    The preview is never part of the scene.
    """
    g = state.gesture
    if not isinstance(g, Drawing) or state.pointer_screen is None:
        return None
    return _shape_from_drag(state, g.tool, g.start_screen, state.pointer_screen)


def _shape_from_drag(state: EditorState, tool: str, start_screen: Point, end_screen: Point) -> Shape:
    vp = state.viewport
    sx, sy = vp.screen_to_world(start_screen)
    ex, ey = vp.screen_to_world(end_screen)
    style = state.style
    name = state.settings.default_shape_name
    if tool == Mode.RECTANGLE:
        return Rectangle(
            name=name,
            stroke_color=style.stroke_color,
            fill_color=style.fill_color,
            line_width=style.line_width,
            x=min(sx, ex),
            y=min(sy, ey),
            width=abs(sx - ex),
            height=abs(sy - ey),
        )
    if tool == Mode.LINE:
        return Line(
            stroke_color=style.stroke_color,
            line_width=style.line_width,
            x1=sx,
            y1=sy,
            x2=ex,
            y2=ey,
        )
    if tool == Mode.CIRCLE:
        return Circle(
            name=name,
            stroke_color=style.stroke_color,
            fill_color=style.fill_color,
            line_width=style.line_width,
            cx=sx,
            cy=sy,
            radius=math.hypot(ex - sx, ey - sy),
        )
    raise ValueError(f"tool {tool!r} does not draw shapes")


def _large_enough(shape: Shape, min_size: float) -> bool:
    if isinstance(shape, Rectangle):
        return shape.width > min_size and shape.height > min_size
    if isinstance(shape, Line):
        return shape.length() > min_size
    if isinstance(shape, Circle):
        return shape.radius > min_size / 2
    raise unsupported_shape(shape)


# -------------------------------------------------------------------------
# Hover feedback
# -------------------------------------------------------------------------

def cursor_hint(state: EditorState, screen: Point) -> str:
    """Describe what a press at ``screen`` would do.

    Returns one of ``"crosshair"``, ``"rotate"``, ``"resize"``, ``"move"``
    or ``"default"`` for the host to map onto its cursors.
    """
    if state.tool in Mode.DRAWING:
        return "crosshair"
    selected = state.scene.selected
    if selected is None:
        return "default"
    s = state.settings
    world = state.viewport.screen_to_world(screen)
    handle = handle_at(world, selected, state.scale, s.handle_size, s.rotate_offset, s.handle_hit_factor)
    if handle == ROTATE_HANDLE:
        return "rotate"
    if handle is not None:
        return "resize"
    if hit_test(world, selected, state.scale, s.line_select_tolerance):
        return "move"
    return "default"
