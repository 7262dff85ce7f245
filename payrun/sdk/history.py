"""Transactional command execution with undo/redo.

Every mutating operation runs through CommandExecutor.execute:

- A snapshot is taken before the operation runs.
- On success the snapshot goes on the undo stack and the redo stack is
  cleared (no branching history).
- On any error the registry is restored from the snapshot and the same
  error is re-raised. Stacks are untouched.

Undo and redo never re-run an operation; they only swap snapshots.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from .snapshots import Snapshot, SnapshotStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HistoryError(Exception):
    """Base class for errors raised by the executor itself."""


class SystemClosedError(HistoryError):
    """Raised when a mutation is attempted after shutdown."""

    def __init__(self):
        super().__init__("System is closed; no further changes are accepted.")


class NothingToUndoError(HistoryError):
    def __init__(self):
        super().__init__("Nothing to undo.")


class NothingToRedoError(HistoryError):
    def __init__(self):
        super().__init__("Nothing to redo.")


class CommandExecutor:
    """All-or-nothing executor over a snapshot store."""

    def __init__(self, store: SnapshotStore):
        self.store = store
        self._undo: List[Snapshot] = []
        self._redo: List[Snapshot] = []
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def close(self) -> None:
        self._closed = True

    def reopen(self) -> None:
        self._closed = False

    def ensure_open(self) -> None:
        if self._closed:
            raise SystemClosedError()

    def execute(self, operation: Callable[[], T], label: Optional[str] = None) -> T:
        """Run `operation` atomically and return its result.

        Raises:
            SystemClosedError: If the system has been shut down
            Exception: Whatever `operation` raised, after rollback
        """
        self.ensure_open()
        name = label or getattr(operation, "__name__", "operation")
        before = self.store.capture()

        try:
            result = operation()
        except Exception as e:
            self.store.restore(before)
            logger.warning(f"{name} failed, rolled back: {e}")
            raise

        self._undo.append(before)
        self._redo.clear()
        logger.debug(f"{name} committed (undo depth {len(self._undo)})")
        return result

    def undo(self) -> None:
        """Restore the state before the most recent command."""
        self.ensure_open()
        if not self._undo:
            raise NothingToUndoError()
        self._redo.append(self.store.capture())
        self.store.restore(self._undo.pop())
        logger.info(f"Undo (undo depth {len(self._undo)}, redo depth {len(self._redo)})")

    def redo(self) -> None:
        """Re-apply the most recently undone command."""
        self.ensure_open()
        if not self._redo:
            raise NothingToRedoError()
        self._undo.append(self.store.capture())
        self.store.restore(self._redo.pop())
        logger.info(f"Redo (undo depth {len(self._undo)}, redo depth {len(self._redo)})")

