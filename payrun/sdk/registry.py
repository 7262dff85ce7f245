"""Worker registry: the in-memory roster and its JSON persistence.

One registry instance is constructed by whatever composes the system
and handed to the snapshot store and command executor. There is no
module-level roster.

Ids are sequential strings ("1", "2", ...), one past the largest id
currently on the roster.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .schemas import Worker

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)


class WorkerRegistry:
    """Insertion-ordered collection of workers keyed by id."""

    def __init__(self, workers: Optional[Iterable[Worker]] = None):
        self._workers: Dict[str, Worker] = {}
        for worker in workers or []:
            if not worker.id:
                worker.id = self.next_id()
            self._workers[worker.id] = worker

    def __len__(self) -> int:
        return len(self._workers)

    def __iter__(self) -> Iterator[Worker]:
        return iter(list(self._workers.values()))

    def __contains__(self, worker_id: str) -> bool:
        return worker_id in self._workers

    def get_all(self) -> List[Worker]:
        """All workers in insertion order."""
        return list(self._workers.values())

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        return self._workers.get(worker_id)

    def next_id(self) -> str:
        if not self._workers:
            return "1"
        return str(max(int(key) for key in self._workers) + 1)

    def add(self, worker: Worker) -> str:
        """Add a worker, assigning the next sequential id.

        Returns:
            The new worker's id
        """
        worker.id = self.next_id()
        self._workers[worker.id] = worker
        return worker.id

    def remove(self, worker_id: str) -> bool:
        """Remove a worker. Returns False if no such id."""
        return self._workers.pop(worker_id, None) is not None

    def clear(self) -> None:
        self._workers.clear()

    def replace_all(self, workers: Iterable[Worker]) -> None:
        """Swap the whole roster. Used by snapshot restore only."""
        self._workers = {worker.id: worker for worker in workers}

    def find_by_union_id(self, member_id: str) -> Optional[Worker]:
        for worker in self._workers.values():
            if worker.union is not None and worker.union.member_id == member_id:
                return worker
        return None

    def find_by_name(self, name: str) -> List[Worker]:
        """Workers with exactly this name, ordered by numeric id."""
        matches = [w for w in self._workers.values() if w.name == name]
        return sorted(matches, key=lambda w: int(w.id))


def load_registry(path: Path) -> WorkerRegistry:
    """Load a roster from a JSON file.

    Missing file yields an empty registry.

    Raises:
        pydantic.ValidationError: If a stored worker is malformed
    """
    if not path.exists():
        logger.debug(f"No roster at {path}, starting empty")
        return WorkerRegistry()

    with open(path, "r") as f:
        data = json.load(f)

    workers = [Worker.model_validate(item) for item in data.get("workers", [])]
    logger.debug(f"Loaded {len(workers)} worker(s) from {path}")
    return WorkerRegistry(workers)


def save_registry(registry: WorkerRegistry, path: Path) -> Path:
    """Write the roster to a JSON file.

    Returns:
        Path to the saved file
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {"workers": [w.model_dump(mode="json") for w in registry.get_all()]}

    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    logger.debug(f"Saved {len(registry)} worker(s) to {path}")
    return path
