"""Tests for the command executor: atomicity, undo/redo, shutdown."""

import pytest
from datetime import date
from decimal import Decimal

from payrun.sdk.history import (
    CommandExecutor,
    NothingToRedoError,
    NothingToUndoError,
    SystemClosedError,
)
from payrun.sdk.registry import WorkerRegistry
from payrun.sdk.schemas import HourlyPay, TimeEntry, Worker
from payrun.sdk.snapshots import SnapshotStore


def make_worker(name: str) -> Worker:
    return Worker(
        name=name,
        address="Rua 1",
        compensation=HourlyPay(hourly_rate=Decimal("10")),
        schedule="weekly 5",
    )


def dump(registry: WorkerRegistry) -> list:
    return [w.model_dump() for w in registry.get_all()]


@pytest.fixture
def registry():
    return WorkerRegistry([make_worker("Ana")])


@pytest.fixture
def executor(registry):
    return CommandExecutor(SnapshotStore(registry))


class TestExecute:
    """Commit and rollback."""

    def test_returns_operation_result(self, registry, executor):
        worker_id = executor.execute(lambda: registry.add(make_worker("Bia")))
        assert worker_id == "2"
        assert executor.can_undo
        assert not executor.can_redo

    def test_failure_rolls_back_partial_changes(self, registry, executor):
        before = dump(registry)

        def partial():
            worker = registry.get_by_id("1")
            worker.name = "Changed"
            worker.time_entries.append(TimeEntry(day=date(2005, 1, 3), hours=Decimal("8")))
            registry.add(make_worker("Bia"))
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            executor.execute(partial)

        assert dump(registry) == before
        assert not executor.can_undo

    def test_failure_leaves_history_untouched(self, registry, executor):
        executor.execute(lambda: registry.add(make_worker("Bia")))
        executor.undo()

        with pytest.raises(ValueError):
            executor.execute(lambda: int("x"))

        assert executor.can_redo
        assert not executor.can_undo

    def test_same_error_object_reraised(self, executor):
        error = KeyError("missing")

        def fail():
            raise error

        with pytest.raises(KeyError) as exc_info:
            executor.execute(fail)
        assert exc_info.value is error


class TestUndoRedo:
    """Snapshot replay."""

    def test_undo_restores_previous_state(self, registry, executor):
        before = dump(registry)
        executor.execute(lambda: registry.add(make_worker("Bia")))
        executor.undo()
        assert dump(registry) == before

    def test_redo_restores_undone_state(self, registry, executor):
        executor.execute(lambda: registry.add(make_worker("Bia")))
        after = dump(registry)
        executor.undo()
        executor.redo()
        assert dump(registry) == after

    def test_multiple_steps(self, registry, executor):
        states = [dump(registry)]
        for name in ["Bia", "Caio", "Duda"]:
            executor.execute(lambda n=name: registry.add(make_worker(n)))
            states.append(dump(registry))

        for expected in reversed(states[:-1]):
            executor.undo()
            assert dump(registry) == expected

        for expected in states[1:]:
            executor.redo()
            assert dump(registry) == expected

    def test_new_command_discards_redo(self, registry, executor):
        executor.execute(lambda: registry.add(make_worker("Bia")))
        executor.undo()
        executor.execute(lambda: registry.add(make_worker("Caio")))

        with pytest.raises(NothingToRedoError):
            executor.redo()

    def test_empty_undo(self, executor):
        with pytest.raises(NothingToUndoError):
            executor.undo()

    def test_empty_redo(self, executor):
        with pytest.raises(NothingToRedoError):
            executor.redo()

    def test_undo_does_not_rerun_operation(self, registry, executor):
        calls = []

        def op():
            calls.append(1)
            registry.add(make_worker("Bia"))

        executor.execute(op)
        executor.undo()
        executor.redo()
        assert len(calls) == 1
        assert len(registry) == 2


class TestClosed:
    """Shutdown blocks every mutation."""

    def test_execute_after_close(self, registry, executor):
        executor.close()
        with pytest.raises(SystemClosedError):
            executor.execute(lambda: registry.add(make_worker("Bia")))
        assert len(registry) == 1

    def test_undo_redo_after_close(self, registry, executor):
        executor.execute(lambda: registry.add(make_worker("Bia")))
        executor.close()
        with pytest.raises(SystemClosedError):
            executor.undo()
        with pytest.raises(SystemClosedError):
            executor.redo()

    def test_reopen(self, registry, executor):
        executor.close()
        executor.reopen()
        executor.execute(lambda: registry.add(make_worker("Bia")))
        assert len(registry) == 2
