"""
main.py

SketchDesk - Main Application

PyQt6 application for drawing simple measured sketches:
- Rectangle, line and circle tools with move / resize / rotate handles
- Shift-snapping to 45 degree angles
- Pan (middle button) and cursor-anchored zoom
- Undo / redo, JSON open / save, property inspector

Usage:
    python main.py

Dependencies:
    pip install PyQt6 platformdirs tomli-w jsonschema

Environment:
    SKETCHDESK_TRACE=1 (optional gesture / history tracing to stderr)
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QInputDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QToolBar,
)

from debug_trace import close_log, trace, trace_exception
from editor import Editor
from models import InvalidSceneFormat, Mode
from scene_io import InMemoryRemoteStore, RemoteStore, load_scene_file, save_scene_file
from settings import SettingsManager, get_settings
from canvas.view import SketchCanvas
from properties.dock import PropertyPanel

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main application window for SketchDesk.

    Args:
        settings_manager: The SettingsManager instance for application settings.
        store: Store used by "Save Drawing" / "Open Drawing". Defaults to an
            in-process store that lives as long as the window.
    """

    def __init__(self, settings_manager: SettingsManager, store: Optional[RemoteStore] = None):
        super().__init__()
        self.settings_manager = settings_manager
        self.store: RemoteStore = store if store is not None else InMemoryRemoteStore()
        self.setWindowTitle("SketchDesk")

        self.editor = Editor.from_app_settings(settings_manager.settings)
        self.canvas = SketchCanvas(self.editor)
        self.props = PropertyPanel(self.editor)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.canvas)
        splitter.addWidget(self.props)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self.zoom_label = QLabel()
        self.statusBar().addPermanentWidget(self.zoom_label)

        self._build_toolbar()
        self.editor.configure_callbacks(on_changed=self._on_editor_changed, on_status=self._toast)
        self._on_editor_changed()
        self.statusBar().showMessage("Pick a tool to draw. Shift snaps angles, middle button pans.")

    # --- UI construction --------------------------------------------------

    def _build_toolbar(self):
        """Build the application toolbar."""
        tb = QToolBar("Tools")
        self.addToolBar(tb)

        self.mode_actions: Dict[str, QAction] = {}

        def add_mode_action(text: str, mode: str, shortcut: str, tooltip: str):
            act = QAction(text, self)
            act.setCheckable(True)
            act.setShortcut(shortcut)
            act.setToolTip(f"{tooltip} ({shortcut})")
            act.triggered.connect(lambda checked, m=mode: self.set_mode(m))
            self.mode_actions[mode] = act
            tb.addAction(act)
            return act

        add_mode_action("Select", Mode.SELECT, "V", "Select, move, resize and rotate shapes")
        add_mode_action("Rectangle", Mode.RECTANGLE, "R", "Draw a rectangle")
        add_mode_action("Line", Mode.LINE, "L", "Draw a line")
        add_mode_action("Circle", Mode.CIRCLE, "C", "Draw a circle from its centre")

        tb.addSeparator()

        self.undo_act = QAction("Undo", self)
        self.undo_act.setShortcut(QKeySequence.StandardKey.Undo)
        self.undo_act.triggered.connect(self.editor.undo)
        tb.addAction(self.undo_act)

        self.redo_act = QAction("Redo", self)
        self.redo_act.setShortcut(QKeySequence.StandardKey.Redo)
        self.redo_act.triggered.connect(self.editor.redo)
        tb.addAction(self.redo_act)

        self.delete_act = QAction("Delete", self)
        self.delete_act.triggered.connect(self.editor.delete_selected)
        tb.addAction(self.delete_act)

        tb.addSeparator()

        zoom_in = QAction("Zoom In", self)
        zoom_in.setShortcut(QKeySequence.StandardKey.ZoomIn)
        zoom_in.triggered.connect(lambda: self.editor.zoom_in(self._canvas_center()))
        tb.addAction(zoom_in)

        zoom_out = QAction("Zoom Out", self)
        zoom_out.setShortcut(QKeySequence.StandardKey.ZoomOut)
        zoom_out.triggered.connect(lambda: self.editor.zoom_out(self._canvas_center()))
        tb.addAction(zoom_out)

        zoom_reset = QAction("100%", self)
        zoom_reset.setShortcut("Ctrl+0")
        zoom_reset.triggered.connect(self.editor.reset_view)
        tb.addAction(zoom_reset)

        self.dims_act = QAction("Dimensions", self)
        self.dims_act.setCheckable(True)
        self.dims_act.setChecked(self.editor.state.show_dimensions)
        self.dims_act.toggled.connect(self.editor.set_show_dimensions)
        tb.addAction(self.dims_act)

        tb.addSeparator()

        open_act = QAction("Open...", self)
        open_act.setShortcut(QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self.open_scene_dialog)
        tb.addAction(open_act)

        save_act = QAction("Save...", self)
        save_act.setShortcut(QKeySequence.StandardKey.Save)
        save_act.triggered.connect(self.save_scene_dialog)
        tb.addAction(save_act)

        store_save = QAction("Save Drawing", self)
        store_save.triggered.connect(self.save_to_store_dialog)
        tb.addAction(store_save)

        store_open = QAction("Open Drawing", self)
        store_open.triggered.connect(self.open_from_store_dialog)
        tb.addAction(store_open)

    def _canvas_center(self):
        return (self.canvas.width() / 2, self.canvas.height() / 2)

    # --- Editor notifications ---------------------------------------------

    def _toast(self, message: str):
        self.statusBar().showMessage(message, 3000)

    def _on_editor_changed(self):
        """Sync toolbar, inspector and zoom label with the editor state."""
        for mode, act in self.mode_actions.items():
            act.setChecked(mode == self.editor.tool)
        self.undo_act.setEnabled(self.editor.can_undo)
        self.redo_act.setEnabled(self.editor.can_redo)
        self.delete_act.setEnabled(self.editor.selected is not None)
        self.zoom_label.setText(f"{self.editor.viewport.zoom_percent}%")
        if self.editor.state.is_idle:
            self.props.refresh()
        self.canvas.update()

    def set_mode(self, mode: str):
        trace(f"set_mode {mode}", "MAIN")
        self.editor.set_tool(mode)
        self.canvas.setFocus()

    # --- File I/O ---------------------------------------------------------

    def save_scene_dialog(self):
        """Save the scene as JSON in the workspace directory."""
        workspace = str(self.settings_manager.get_workspace_dir())
        path, _ = QFileDialog.getSaveFileName(self, "Save Drawing", workspace, "JSON (*.json)")
        if not path:
            return
        try:
            save_scene_file(path, self.editor.shapes)
        except OSError as e:
            log.warning("save to %s failed: %s", path, e)
            QMessageBox.critical(self, "Save failed", str(e))
            return
        self._toast(f"Saved: {path}")

    def open_scene_dialog(self):
        """Open a JSON drawing from the workspace directory."""
        workspace = str(self.settings_manager.get_workspace_dir())
        path, _ = QFileDialog.getOpenFileName(self, "Open Drawing", workspace, "JSON (*.json)")
        if not path:
            return
        try:
            shapes = load_scene_file(path)
        except InvalidSceneFormat as e:
            log.warning("%s is not a valid drawing: %s", path, e)
            detail = "\n".join(e.errors[:10])
            QMessageBox.critical(self, "Open failed", f"{e}\n\n{detail}".strip())
            return
        except OSError as e:
            QMessageBox.critical(self, "Open failed", str(e))
            return
        self.editor.load_shapes(shapes)

    def save_to_store_dialog(self):
        name, ok = QInputDialog.getText(self, "Save Drawing", "Drawing name:")
        if not ok or not name.strip():
            return
        self.editor.save_to_store(self.store, name.strip())

    def open_from_store_dialog(self):
        drawings = self.store.list()
        if not drawings:
            self._toast("No saved drawings.")
            return
        labels = [f"{d.name} ({d.created_at:%Y-%m-%d %H:%M})" for d in drawings]
        choice, ok = QInputDialog.getItem(self, "Open Drawing", "Drawing:", labels, 0, False)
        if not ok:
            return
        drawing = drawings[labels.index(choice)]
        try:
            self.editor.load_from_store(self.store, drawing.id)
        except (KeyError, InvalidSceneFormat) as e:
            QMessageBox.critical(self, "Open failed", str(e))


def main():
    """Application entry point."""
    trace("Application starting", "MAIN")
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)

    trace("Loading settings", "MAIN")
    settings_manager = get_settings()
    settings_manager.ensure_file_complete()
    log.info("settings file: %s", settings_manager.get_settings_path())

    def save_on_quit():
        trace("Saving settings on quit", "MAIN")
        settings_manager.save()
        close_log()

    app.aboutToQuit.connect(save_on_quit)

    w = MainWindow(settings_manager)
    w.resize(1280, 820)
    w.show()
    trace("Entering event loop", "MAIN")
    sys.exit(app.exec())


if __name__ == "__main__":
    def excepthook(exc_type, exc_value, exc_tb):
        import traceback
        trace("UNCAUGHT EXCEPTION:", "CRASH")
        trace("".join(traceback.format_exception(exc_type, exc_value, exc_tb)), "CRASH")
        close_log()
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = excepthook

    try:
        main()
    except Exception as e:
        trace(f"FATAL: {type(e).__name__}: {e}", "CRASH")
        trace_exception("Fatal exception")
        close_log()
        raise
