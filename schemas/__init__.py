"""
schemas/__init__.py

JSON Schema definition and validation for saved SketchDesk scenes.
Used when loading drawings from files or a remote store.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft202012Validator

# Schema file paths
SCHEMA_DIR = os.path.dirname(os.path.abspath(__file__))
SCENE_SCHEMA_PATH = os.path.join(SCHEMA_DIR, "scene_schema.json")

# Cached schema
_scene_schema: Optional[Dict] = None


def get_scene_schema() -> Dict:
    """Load and return the scene schema."""
    global _scene_schema
    if _scene_schema is None:
        with open(SCENE_SCHEMA_PATH, "r", encoding="utf-8") as f:
            _scene_schema = json.load(f)
    return _scene_schema


def validate_scene(data: Any) -> Tuple[bool, List[str]]:
    """
    Validate scene data against the scene schema.

    Args:
        data: Decoded JSON data (expected to be a list of shape records)

    Returns:
        Tuple of (is_valid, list_of_error_messages)
    """
    validator = Draft202012Validator(get_scene_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])

    if not errors:
        return True, []

    error_messages = []
    for error in errors:
        path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "root"
        error_messages.append(f"{path}: {error.message}")

    return False, error_messages
