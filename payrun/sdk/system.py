"""PayrollSystem: one roster, its schedule book and its command history.

Every mutating call goes through CommandExecutor.execute, so each is
atomic and undoable. Queries read the registry directly.

Example:
    system = PayrollSystem.load()
    worker_id = system.hire_worker("Ana", "Rua 1", "hourly", "20")
    system.post_time_entry(worker_id, "2005-01-03", "9")
    report = system.run_payroll("2005-01-07")
    system.shutdown()
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from . import workers as ops
from .config import (
    get_roster_path,
    get_setting,
    load_schedules,
    save_schedules,
)
from .formats import AmountLike, DateLike, parse_date
from .history import CommandExecutor
from .payroll import PayrollReport, build_payroll, total_payroll
from .payroll import run_payroll as run_payroll_on
from .registry import WorkerRegistry, load_registry, save_registry
from .report import write_payroll_report
from .schedule import DEFAULT_SCHEDULES, PaySchedule, ScheduleBook
from .schemas import Category, Worker
from .snapshots import SnapshotStore

logger = logging.getLogger(__name__)


class PayrollSystem:
    """Facade over registry, schedule book, snapshots and history."""

    def __init__(
        self,
        registry: Optional[WorkerRegistry] = None,
        schedules: Optional[ScheduleBook] = None,
        roster_path: Optional[Path] = None,
        default_schedules: Optional[Dict[str, str]] = None,
    ):
        self.registry = registry if registry is not None else WorkerRegistry()
        self.schedules = schedules if schedules is not None else ScheduleBook()
        self.roster_path = roster_path
        self.default_schedules = default_schedules or {}
        self.history = CommandExecutor(SnapshotStore(self.registry))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, roster_path: Optional[Path] = None) -> "PayrollSystem":
        """Build a system from the configured roster and schedules.

        Args:
            roster_path: Override for roster.json (default: data dir)
        """
        path = Path(roster_path) if roster_path else get_roster_path()
        system = cls(
            registry=load_registry(path),
            schedules=ScheduleBook.from_descriptors(load_schedules()),
            roster_path=path,
            default_schedules=get_setting("default_schedules") or {},
        )
        logger.debug(f"Loaded system: {len(system.registry)} worker(s), roster {path}")
        return system

    def save(self) -> Path:
        """Persist roster and custom schedules.

        Returns:
            Path to the saved roster
        """
        path = self.roster_path or get_roster_path()
        save_registry(self.registry, path)
        save_schedules(self.schedules.custom)
        return path

    def shutdown(self) -> None:
        """Save and refuse further changes (undo/redo included)."""
        self.history.ensure_open()
        self.save()
        self.history.close()
        logger.info("System shut down")

    def reset(self) -> None:
        """Empty the roster and drop custom schedules.

        The roster part can be undone; custom schedules can't.
        """
        def _reset():
            self.registry.clear()
            self.schedules.reset()

        self.history.execute(_reset, label="reset")

    @property
    def is_closed(self) -> bool:
        return self.history.is_closed

    def undo(self) -> None:
        self.history.undo()

    def redo(self) -> None:
        self.history.redo()

    # -------------------------------------------------------------------------
    # Schedules
    # -------------------------------------------------------------------------

    def default_schedule(self, category) -> str:
        """Schedule for new hires in `category` (settings override built-ins)."""
        category = Category(category)
        return self.default_schedules.get(category.value, DEFAULT_SCHEDULES[category])

    def available_schedules(self) -> List[str]:
        return self.schedules.available()

    def register_schedule(self, text: str) -> PaySchedule:
        self.history.ensure_open()
        return self.schedules.register(text)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def hire_worker(
        self,
        name: str,
        address: str,
        category,
        rate: AmountLike,
        commission_rate: Optional[AmountLike] = None,
        hire_date: Optional[DateLike] = None,
        schedule: Optional[str] = None,
    ) -> str:
        def _hire():
            chosen = schedule
            if chosen is None:
                chosen = self.default_schedule(ops.parse_category(category))
            return ops.hire_worker(
                self.registry, name, address, category, rate,
                commission_rate=commission_rate,
                hire_date=hire_date,
                schedule=chosen,
                schedules=self.schedules if schedule is not None else None,
            )

        return self.history.execute(_hire, label="hire_worker")

    def fire_worker(self, worker_id: str) -> None:
        self.history.execute(lambda: ops.fire_worker(self.registry, worker_id), label="fire_worker")

    def update_worker(self, worker_id: str, field: str, value) -> Worker:
        return self.history.execute(
            lambda: ops.update_worker(self.registry, worker_id, field, value, schedules=self.schedules),
            label="update_worker",
        )

    def change_category(self, worker_id: str, category, amount: Optional[AmountLike] = None) -> Worker:
        return self.history.execute(
            lambda: ops.change_category(
                self.registry, worker_id, category, amount,
                schedule=self.default_schedule(ops.parse_category(category)),
            ),
            label="change_category",
        )

    def set_payment_method(
        self,
        worker_id: str,
        method: str,
        bank: Optional[str] = None,
        branch: Optional[str] = None,
        account: Optional[str] = None,
    ) -> Worker:
        return self.history.execute(
            lambda: ops.set_payment_method(self.registry, worker_id, method, bank, branch, account),
            label="set_payment_method",
        )

    def join_union(self, worker_id: str, member_id: str, dues_rate: AmountLike) -> Worker:
        return self.history.execute(
            lambda: ops.join_union(self.registry, worker_id, member_id, dues_rate),
            label="join_union",
        )

    def leave_union(self, worker_id: str) -> Worker:
        return self.history.execute(lambda: ops.leave_union(self.registry, worker_id), label="leave_union")

    def post_time_entry(self, worker_id: str, day: DateLike, hours: AmountLike):
        return self.history.execute(
            lambda: ops.post_time_entry(self.registry, worker_id, day, hours),
            label="post_time_entry",
        )

    def post_sale(self, worker_id: str, day: DateLike, amount: AmountLike):
        return self.history.execute(
            lambda: ops.post_sale(self.registry, worker_id, day, amount),
            label="post_sale",
        )

    def post_service_fee(self, member_id: str, day: DateLike, amount: AmountLike):
        return self.history.execute(
            lambda: ops.post_service_fee(self.registry, member_id, day, amount),
            label="post_service_fee",
        )

    def run_payroll(self, on: DateLike, output: Optional[Path] = None) -> PayrollReport:
        """Pay everyone due on `on`, optionally writing the text report.

        The run and the report write are one atomic unit: if writing
        fails, no last-paid date moves.
        """
        pay_date = parse_date(on)

        def _run():
            report = run_payroll_on(self.registry, pay_date)
            if output is not None:
                write_payroll_report(report, Path(output))
            return report

        return self.history.execute(_run, label="run_payroll")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_worker(self, worker_id: str) -> Worker:
        return ops.require_worker(self.registry, worker_id)

    def list_workers(self) -> List[Worker]:
        return self.registry.get_all()

    def worker_count(self) -> int:
        return len(self.registry)

    def total_payroll(self, on: DateLike) -> Decimal:
        return total_payroll(self.registry, parse_date(on))

    def preview_payroll(self, on: DateLike) -> PayrollReport:
        """Payroll report for `on` without committing anything."""
        return build_payroll(self.registry, parse_date(on))

    def hours_worked(self, worker_id: str, start: DateLike, end: DateLike) -> Tuple[Decimal, Decimal]:
        return ops.hours_worked(self.registry, worker_id, start, end)

    def sales_total(self, worker_id: str, start: DateLike, end: DateLike) -> Decimal:
        return ops.sales_total(self.registry, worker_id, start, end)

    def service_fees_total(self, worker_id: str, start: DateLike, end: DateLike) -> Decimal:
        return ops.service_fees_total(self.registry, worker_id, start, end)

    def find_worker_by_name(self, name: str, index: int = 1) -> str:
        return ops.find_worker_by_name(self.registry, name, index)
