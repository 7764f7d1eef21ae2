"""
properties package

Inspector values, property edits, and the property panel widget.
The panel imports PyQt6; the edit helpers do not.
"""

from properties.edits import STYLE_KEYS, apply_property, inspect_shape

__all__ = ["STYLE_KEYS", "apply_property", "inspect_shape"]
