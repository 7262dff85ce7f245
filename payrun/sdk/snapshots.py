"""Snapshots of the worker registry for rollback, undo and redo.

A snapshot is a deep copy of every worker, including compensation,
payment method, union data and all three logs. Nothing is shared
between a snapshot and the live registry in either direction:
capture copies out, restore copies back in, so one snapshot can be
restored any number of times.
"""

from dataclasses import dataclass
from typing import Tuple

from .registry import WorkerRegistry
from .schemas import Worker


@dataclass(frozen=True)
class Snapshot:
    """Immutable point-in-time copy of the roster."""

    workers: Tuple[Worker, ...]

    def __len__(self) -> int:
        return len(self.workers)

    @property
    def worker_ids(self) -> Tuple[str, ...]:
        return tuple(w.id for w in self.workers)


def _clone(worker: Worker) -> Worker:
    return worker.model_copy(deep=True)


class SnapshotStore:
    """Captures and restores snapshots of one registry."""

    def __init__(self, registry: WorkerRegistry):
        self.registry = registry

    def capture(self) -> Snapshot:
        """Deep-copy the current roster."""
        return Snapshot(workers=tuple(_clone(w) for w in self.registry.get_all()))

    def restore(self, snapshot: Snapshot) -> None:
        """Replace the live roster with a fresh copy of `snapshot`."""
        self.registry.replace_all(_clone(w) for w in snapshot.workers)
