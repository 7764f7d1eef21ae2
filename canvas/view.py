"""
canvas/view.py

QWidget that renders an Editor's scene with QPainter and feeds Qt mouse,
wheel and key input into it.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PyQt6.QtWidgets import QInputDialog, QWidget

from editor import Editor
from geometry import Point, angle_of, midpoint
from models import Circle, Line, Mode, Rectangle, Shape
from scene_io import format_dimension
from settings import get_settings
from canvas.handles import ROTATE_HANDLE, handles_for
from canvas.hit_test import pick
from canvas.state import LEFT, MIDDLE, RIGHT, PointerEvent

DIMENSION_COLOR = QColor("#C2410C")
NAME_COLOR = QColor("#111827")
PREVIEW_COLOR = QColor("#3B82F6")
PREVIEW_FILL = QColor("#BFDBFE")

_CURSORS = {
    "crosshair": Qt.CursorShape.CrossCursor,
    "rotate": Qt.CursorShape.PointingHandCursor,
    "resize": Qt.CursorShape.SizeAllCursor,
    "move": Qt.CursorShape.OpenHandCursor,
    "default": Qt.CursorShape.ArrowCursor,
}


def qt_button(button: Qt.MouseButton) -> Optional[str]:
    """Map a Qt mouse button to an engine button name, or None."""
    if button == Qt.MouseButton.LeftButton:
        return LEFT
    if button == Qt.MouseButton.MiddleButton:
        return MIDDLE
    if button == Qt.MouseButton.RightButton:
        return RIGHT
    return None


def _qp(p: Point) -> QPointF:
    return QPointF(p[0], p[1])


class SketchCanvas(QWidget):
    """
    Drawing surface for one Editor.

    All geometry lives in the editor; this widget only translates input
    and paints. Painting uses the viewport as the world transform, so pen
    widths and label sizes are divided by the scale to stay constant on
    screen.
    """

    def __init__(self, editor: Editor, parent=None):
        super().__init__(parent)
        self.editor = editor
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAutoFillBackground(True)
        self.setMinimumSize(400, 300)

    # --- Input ------------------------------------------------------------

    def _event(self, event, button: Optional[str] = None) -> PointerEvent:
        pos = event.position()
        snap = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)
        return PointerEvent(pos.x(), pos.y(), button or LEFT, snap)

    def mousePressEvent(self, event):
        button = qt_button(event.button())
        if button is None:
            super().mousePressEvent(event)
            return
        self.editor.pointer_down(self._event(event, button))
        event.accept()

    def mouseMoveEvent(self, event):
        ev = self._event(event)
        if self.editor.state.is_idle:
            self.editor.state.pointer_screen = ev.position
            self.setCursor(_CURSORS[self.editor.cursor_hint(ev.position)])
        else:
            self.editor.pointer_move(ev)

    def mouseReleaseEvent(self, event):
        button = qt_button(event.button())
        if button is None:
            super().mouseReleaseEvent(event)
            return
        self.editor.pointer_up(self._event(event, button))

    def mouseDoubleClickEvent(self, event):
        """Rename the shape under the pointer."""
        if event.button() != Qt.MouseButton.LeftButton or self.editor.tool != Mode.SELECT:
            super().mouseDoubleClickEvent(event)
            return
        state = self.editor.state
        world = state.viewport.screen_to_world((event.position().x(), event.position().y()))
        shape = pick(world, state.scene.shapes, state.scale, state.settings.line_select_tolerance)
        if shape is None:
            return
        name, ok = QInputDialog.getText(self, "Rename Shape", "Name:", text=shape.name)
        if ok:
            self.editor.rename(shape.id, name)

    def wheelEvent(self, event):
        """Zoom around the pointer; wheel up zooms in."""
        delta = event.angleDelta().y()
        pos = event.position()
        # Engine convention: negative delta zooms in
        self.editor.wheel(-delta, (pos.x(), pos.y()))
        event.accept()

    def keyPressEvent(self, event):
        key = event.key()
        ctrl = bool(event.modifiers() & Qt.KeyboardModifier.ControlModifier)
        if key in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.editor.delete_selected()
        elif ctrl and key == Qt.Key.Key_Z:
            self.editor.undo()
        elif ctrl and key == Qt.Key.Key_Y:
            self.editor.redo()
        elif key == Qt.Key.Key_Escape:
            self.editor.cancel()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    # --- Painting ---------------------------------------------------------

    def paintEvent(self, event):
        state = self.editor.state
        vp = state.viewport
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QColor("#FFFFFF"))
        painter.translate(vp.ox, vp.oy)
        painter.scale(vp.scale, vp.scale)

        for shape in state.scene.shapes:
            painter.save()
            self._draw_shape(painter, shape, state.show_dimensions)
            painter.restore()

        selected = state.scene.selected
        if selected is not None and state.tool == Mode.SELECT:
            self._draw_selection(painter, selected)

        preview = self.editor.preview_shape()
        if preview is not None:
            painter.save()
            painter.setOpacity(0.6)
            preview.stroke_color = PREVIEW_COLOR.name()
            if not isinstance(preview, Line):
                preview.fill_color = PREVIEW_FILL.name()
            preview.line_width = 2.0
            preview.name = ""
            self._draw_shape(painter, preview, False, Qt.PenStyle.DashLine)
            painter.restore()
        painter.end()

    def _pen(self, color: str, width: float, style=Qt.PenStyle.SolidLine) -> QPen:
        pen = QPen(QColor(color), (width or 1.0) / self.editor.state.scale)
        pen.setStyle(style)
        return pen

    def _draw_shape(self, painter: QPainter, shape: Shape, dimensions: bool, style=Qt.PenStyle.SolidLine):
        ppcm = self.editor.state.settings.pixels_per_cm
        if isinstance(shape, Rectangle):
            cx, cy = shape.center()
            painter.translate(cx, cy)
            painter.rotate(math.degrees(shape.rotation))
            rect = QRectF(-shape.width / 2, -shape.height / 2, shape.width, shape.height)
            painter.setPen(self._pen(shape.stroke_color, shape.line_width, style))
            painter.setBrush(QBrush(QColor(shape.fill_color)))
            painter.drawRect(rect)
            if shape.name:
                self._draw_name(painter, shape.name, (0.0, 0.0))
            if dimensions:
                self._draw_label(painter, format_dimension(shape.width, ppcm), (0.0, -shape.height / 2), 0.0)
                self._draw_label(painter, format_dimension(shape.height, ppcm), (shape.width / 2, 0.0), math.pi / 2)
        elif isinstance(shape, Line):
            painter.setPen(self._pen(shape.stroke_color, shape.line_width, style))
            painter.drawLine(_qp(shape.start), _qp(shape.end))
            if dimensions:
                self._draw_label(
                    painter,
                    format_dimension(shape.length(), ppcm),
                    shape.center(),
                    angle_of(shape.start, shape.end),
                )
        elif isinstance(shape, Circle):
            painter.setPen(self._pen(shape.stroke_color, shape.line_width, style))
            painter.setBrush(QBrush(QColor(shape.fill_color)))
            painter.drawEllipse(_qp(shape.center()), shape.radius, shape.radius)
            if shape.name:
                self._draw_name(painter, shape.name, shape.center())
            if dimensions:
                painter.setPen(self._pen(DIMENSION_COLOR.name(), 1.0, Qt.PenStyle.DotLine))
                painter.drawLine(
                    QPointF(shape.cx - shape.radius, shape.cy),
                    QPointF(shape.cx + shape.radius, shape.cy),
                )
                self._draw_label(painter, "Ø " + format_dimension(shape.radius * 2, ppcm), shape.center(), 0.0)

    def _text_font(self, px: float, bold: bool = False, italic: bool = False) -> QFont:
        font = QFont(self.font())
        font.setPixelSize(max(1, round(px)))
        font.setBold(bold)
        font.setItalic(italic)
        return font

    def _draw_text(self, painter: QPainter, text: str, at: Point, angle: float, px: float,
                   color: QColor, lift: float = 0.0, bold: bool = False, italic: bool = False):
        # Text is laid out in screen pixels around the anchor, then scaled back
        scale = self.editor.state.scale
        painter.save()
        painter.translate(at[0], at[1])
        painter.rotate(math.degrees(angle))
        painter.scale(1 / scale, 1 / scale)
        painter.setFont(self._text_font(px, bold, italic))
        painter.setPen(QPen(color))
        box = QRectF(-500, -px - lift - 4, 1000, px + 4) if lift else QRectF(-500, -px, 1000, 2 * px)
        painter.drawText(box, int(Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignVCenter), text)
        painter.restore()

    def _draw_name(self, painter: QPainter, name: str, at: Point):
        self._draw_text(painter, name, at, 0.0, 14, NAME_COLOR, bold=True)

    def _draw_label(self, painter: QPainter, text: str, at: Point, angle: float):
        self._draw_text(painter, text, at, angle, 12, DIMENSION_COLOR, lift=5, italic=True)

    def _draw_selection(self, painter: QPainter, shape: Shape):
        state = self.editor.state
        s = state.settings
        scale = state.scale
        color = get_settings().settings.canvas.handles.border_color
        outline = self._pen(color, 2.0, Qt.PenStyle.DashLine)
        handles: Dict[str, Point] = handles_for(shape, scale, s.rotate_offset)

        painter.save()
        painter.setPen(outline)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        if isinstance(shape, Rectangle):
            cx, cy = shape.center()
            painter.translate(cx, cy)
            painter.rotate(math.degrees(shape.rotation))
            painter.drawRect(QRectF(-shape.width / 2, -shape.height / 2, shape.width, shape.height))
        elif isinstance(shape, Circle):
            painter.drawEllipse(_qp(shape.center()), shape.radius, shape.radius)
        painter.restore()

        if ROTATE_HANDLE in handles:
            if isinstance(shape, Rectangle):
                stalk_from = midpoint(handles["tl"], handles["tr"])
            else:
                stalk_from = shape.center()
            painter.setPen(self._pen(color, 1.0))
            painter.drawLine(_qp(stalk_from), _qp(handles[ROTATE_HANDLE]))

        size = s.handle_size / scale
        half = size / 2
        painter.setPen(self._pen(color, 1.0))
        painter.setBrush(QBrush(QColor(color)))
        for name, (x, y) in handles.items():
            if name == ROTATE_HANDLE:
                painter.drawEllipse(QPointF(x, y), half, half)
            else:
                painter.drawRect(QRectF(x - half, y - half, size, size))
