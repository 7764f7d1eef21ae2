"""
scene_io.py

Scene serialization: records, JSON text, files, and the remote store
contract used by cloud save/load.
"""

from __future__ import annotations

import itertools
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Protocol, Union

from models import InvalidSceneFormat, Shape, shape_from_record
from schemas import validate_scene

log = logging.getLogger(__name__)

Record = Dict[str, Any]


# -------------------------------------------------------------------------
# Records
# -------------------------------------------------------------------------

def scene_to_records(shapes: List[Shape]) -> List[Record]:
    """Serialize shapes to flat records, bottom-most first."""
    return [s.to_record() for s in shapes]


def records_to_shapes(data: Any) -> List[Shape]:
    """Build shapes from decoded scene data.

    Args:
        data: Decoded JSON; must be a list of shape records.

    Returns:
        New shape instances in the same order.

    Raises:
        InvalidSceneFormat: If ``data`` is not a list of valid shape records.
    """
    if not isinstance(data, list):
        raise InvalidSceneFormat(
            "scene must be an array of shapes",
            [f"root: expected array, got {type(data).__name__}"],
        )
    ok, errors = validate_scene(data)
    if not ok:
        raise InvalidSceneFormat(f"invalid scene ({len(errors)} problem(s))", errors)
    return [shape_from_record(rec) for rec in data]


# -------------------------------------------------------------------------
# JSON text and files
# -------------------------------------------------------------------------

def dumps_scene(shapes: List[Shape]) -> str:
    """Serialize shapes to pretty-printed JSON text."""
    return json.dumps(scene_to_records(shapes), indent=2, ensure_ascii=False)


def loads_scene(text: str) -> List[Shape]:
    """Parse JSON text into shapes.

    Raises:
        InvalidSceneFormat: On malformed JSON or invalid records.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidSceneFormat(f"not valid JSON: {e.msg}", [f"line {e.lineno} col {e.colno}: {e.msg}"]) from e
    return records_to_shapes(data)


def save_scene_file(path: Union[str, Path], shapes: List[Shape]) -> Path:
    """Write shapes to a JSON file and return its path."""
    path = Path(path)
    path.write_text(dumps_scene(shapes), encoding="utf-8")
    log.info("saved %d shapes to %s", len(shapes), path)
    return path


def load_scene_file(path: Union[str, Path]) -> List[Shape]:
    """Read shapes from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        InvalidSceneFormat: If its contents are not a valid scene.
    """
    path = Path(path)
    shapes = loads_scene(path.read_text(encoding="utf-8"))
    log.info("loaded %d shapes from %s", len(shapes), path)
    return shapes


def format_dimension(length_world: float, pixels_per_cm: float) -> str:
    """Dimension label for a world length, e.g. ``"12.3 cm"``."""
    return f"{length_world / pixels_per_cm:.1f} cm"


# -------------------------------------------------------------------------
# Remote store
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class DrawingSummary:
    """Listing entry for a stored drawing."""
    id: str
    name: str
    created_at: datetime


class RemoteStore(Protocol):
    """Contract for a named-drawing store (cloud or otherwise).

    Implementations do their own transport and authentication; the
    editor only exchanges scene records with them.
    """

    def create(self, name: str, records: List[Record]) -> str:
        ...

    def list(self) -> List[DrawingSummary]:
        ...

    def read(self, drawing_id: str) -> List[Record]:
        ...


class InMemoryRemoteStore:
    """Process-local RemoteStore, for tests and offline use."""

    def __init__(self):
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def create(self, name: str, records: List[Record]) -> str:
        drawing_id = f"d{next(self._ids):06d}"
        self._docs[drawing_id] = {
            "name": name,
            "shapes": json.loads(json.dumps(records)),
            "created_at": datetime.now(timezone.utc),
        }
        return drawing_id

    def list(self) -> List[DrawingSummary]:
        return [
            DrawingSummary(id=k, name=v["name"], created_at=v["created_at"])
            for k, v in self._docs.items()
        ]

    def read(self, drawing_id: str) -> List[Record]:
        doc = self._docs.get(drawing_id)
        if doc is None:
            raise KeyError(drawing_id)
        return json.loads(json.dumps(doc["shapes"]))
