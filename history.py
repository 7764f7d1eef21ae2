"""
history.py

Snapshot-based undo/redo for SketchDesk.

Every committed state is a full, independent copy of the shape list.
Copies are taken both when a snapshot is stored and when one is handed
back, so nothing outside this module can alias a stored snapshot.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from models import Shape, clone_shapes
from debug_trace import trace

log = logging.getLogger(__name__)


class HistoryManager:
    """
    Linear undo history with a cursor.

    Invariant: ``-1 <= index < len(self)``. ``index == -1`` only before
    the first commit.

    Args:
        max_depth: Maximum number of stored snapshots (0 = unlimited).
            The oldest snapshots are dropped first.
    """

    def __init__(self, max_depth: int = 0):
        self.max_depth = max_depth
        self._snapshots: List[List[Shape]] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def commit(self, shapes: List[Shape]) -> None:
        """Store a copy of ``shapes`` as the newest state.

        Any redo branch beyond the cursor is discarded.
        """
        del self._snapshots[self._index + 1:]
        self._snapshots.append(clone_shapes(shapes))
        if self.max_depth and len(self._snapshots) > self.max_depth:
            del self._snapshots[: len(self._snapshots) - self.max_depth]
        self._index = len(self._snapshots) - 1
        trace(f"commit -> index={self._index} size={len(self._snapshots)}", "HISTORY")

    def undo(self) -> Optional[List[Shape]]:
        """Step back one snapshot.

        Returns:
            A fresh copy of the previous state, or None if there is none.
        """
        if not self.can_undo:
            return None
        self._index -= 1
        log.debug("undo -> %d", self._index)
        return clone_shapes(self._snapshots[self._index])

    def redo(self) -> Optional[List[Shape]]:
        """Step forward one snapshot.

        Returns:
            A fresh copy of the next state, or None if there is none.
        """
        if not self.can_redo:
            return None
        self._index += 1
        log.debug("redo -> %d", self._index)
        return clone_shapes(self._snapshots[self._index])

    def current(self) -> Optional[List[Shape]]:
        """Return a copy of the snapshot at the cursor."""
        if self._index < 0:
            return None
        return clone_shapes(self._snapshots[self._index])

    def reset(self, shapes: List[Shape]) -> None:
        """Forget all history and start over from ``shapes`` at index 0."""
        self._snapshots = [clone_shapes(shapes)]
        self._index = 0
        log.debug("history reset with %d shapes", len(shapes))
