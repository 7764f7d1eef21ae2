"""
canvas/scene.py

Ordered shape list with a single weak selection.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from geometry import Point
from models import Shape, ShapeId, clone_shapes
from canvas.hit_test import pick


class Scene:
    """
    Ordered collection of shapes.

    Later shapes are painted on top and are hit-tested first. The
    selection is held by id only, so removing a shape can never leave a
    dangling reference behind.
    """

    def __init__(self, shapes: Optional[List[Shape]] = None):
        self.shapes: List[Shape] = list(shapes or [])
        self.selected_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.shapes)

    def add(self, shape: Shape) -> Shape:
        """Append a shape on top of the stack."""
        self.shapes.append(shape)
        return shape

    def find(self, shape_id: ShapeId) -> Optional[Shape]:
        for s in self.shapes:
            if s.id == shape_id:
                return s
        return None

    def remove(self, shape_id: ShapeId) -> Optional[Shape]:
        """Remove a shape by id, clearing the selection if it pointed there.

        Returns:
            The removed shape, or None if no shape had that id.
        """
        for i, s in enumerate(self.shapes):
            if s.id == shape_id:
                del self.shapes[i]
                if self.selected_id == shape_id:
                    self.selected_id = None
                return s
        return None

    @property
    def selected(self) -> Optional[Shape]:
        """The selected shape, resolved by id."""
        if self.selected_id is None:
            return None
        return self.find(self.selected_id)

    def select(self, shape: Optional[Shape]) -> None:
        self.selected_id = shape.id if shape is not None else None

    def clear_selection(self) -> None:
        self.selected_id = None

    def snapshot(self) -> List[Shape]:
        """Return an independent deep copy of the shape list."""
        return clone_shapes(self.shapes)

    def replace_shapes(self, shapes: List[Shape]) -> None:
        """Install a new shape list and drop the selection."""
        self.shapes = list(shapes)
        self.selected_id = None

    def pick(self, p: Point, scale: float, tolerance_px: float) -> Optional[Shape]:
        """Return the topmost shape under world point ``p``."""
        return pick(p, self.shapes, scale, tolerance_px)

    def to_records(self) -> List[Dict]:
        return [s.to_record() for s in self.shapes]
