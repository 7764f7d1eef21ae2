"""
properties/dock.py

Property panel widget for editing the selected shape.
"""

from __future__ import annotations

from typing import Any, Dict

from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QColorDialog,
    QDoubleSpinBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from editor import Editor

# key -> (label, minimum, maximum, decimals)
_NUMERIC_FIELDS = {
    "width_cm": ("Width (cm)", 0.0, 100000.0, 2),
    "height_cm": ("Height (cm)", 0.0, 100000.0, 2),
    "length_cm": ("Length (cm)", 0.0, 100000.0, 2),
    "diameter_cm": ("Diameter (cm)", 0.0, 100000.0, 2),
    "rotation_deg": ("Rotation (°)", -360.0, 360.0, 1),
    "line_width": ("Line width", 0.0, 100.0, 1),
}
_COLOR_FIELDS = {
    "stroke_color": "Line color",
    "fill_color": "Fill color",
}


class PropertyPanel(QWidget):
    """
    Inspector for the editor's selection.

    Rows are shown only for the keys ``Editor.inspect()`` reports for the
    selected shape type. Edits are applied when a field loses focus or a
    colour is picked, each as one undoable step.
    """

    def __init__(self, editor: Editor, parent=None):
        super().__init__(parent)
        self.editor = editor
        self._updating = False
        self._values: Dict[str, Any] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        self.kind_label = QLabel("Select a shape to edit.")
        layout.addWidget(self.kind_label)

        self.form = QFormLayout()
        layout.addLayout(self.form)
        layout.addStretch(1)

        self.name_edit = QLineEdit()
        self.name_edit.editingFinished.connect(self._on_name_changed)
        self.form.addRow("Name", self.name_edit)

        self.spins: Dict[str, QDoubleSpinBox] = {}
        for key, (label, lo, hi, decimals) in _NUMERIC_FIELDS.items():
            spin = QDoubleSpinBox()
            spin.setRange(lo, hi)
            spin.setDecimals(decimals)
            spin.setKeyboardTracking(False)
            spin.valueChanged.connect(lambda value, k=key: self._apply(k, value))
            self.spins[key] = spin
            self.form.addRow(label, spin)

        self.color_buttons: Dict[str, QPushButton] = {}
        for key, label in _COLOR_FIELDS.items():
            btn = QPushButton()
            btn.clicked.connect(lambda _checked=False, k=key: self._pick_color(k))
            self.color_buttons[key] = btn
            self.form.addRow(label, btn)

        self.refresh()

    def _set_row_visible(self, widget: QWidget, visible: bool):
        self.form.setRowVisible(widget, visible)

    def refresh(self):
        """Reload the form from the current selection."""
        values = self.editor.inspect()
        self._values = values or {}
        self._updating = True
        try:
            has = values is not None
            self.kind_label.setText(values["type"].capitalize() if has else "Select a shape to edit.")
            self._set_row_visible(self.name_edit, has)
            if has:
                self.name_edit.setText(values["name"])
            for key, spin in self.spins.items():
                visible = key in self._values
                self._set_row_visible(spin, visible)
                if visible:
                    spin.setValue(float(self._values[key]))
            for key, btn in self.color_buttons.items():
                visible = key in self._values
                self._set_row_visible(btn, visible)
                if visible:
                    self._set_preview(btn, self._values[key])
        finally:
            self._updating = False

    def _set_preview(self, btn: QPushButton, color: str):
        btn.setText(color)
        btn.setStyleSheet(f"background-color: {color}; border: 1px solid #444;")

    def _apply(self, key: str, value: Any):
        if self._updating:
            return
        error = None
        try:
            self.editor.set_property(key, value)
        except (KeyError, ValueError) as e:
            error = e
        self.refresh()
        if error is not None:
            self.kind_label.setText(f"Invalid value: {error}")

    def _on_name_changed(self):
        shape = self.editor.selected
        if self._updating or shape is None:
            return
        self.editor.rename(shape.id, self.name_edit.text())
        self.refresh()

    def _pick_color(self, key: str):
        initial = QColor(self._values.get(key, "#000000"))
        c = QColorDialog.getColor(initial, self, "Pick Color")
        if not c.isValid():
            return
        self._apply(key, c.name().upper())

