"""Payroll runs across the whole roster for one date.

total_payroll is read-only. run_payroll computes every due worker's pay
first and only then moves `last_paid` for workers whose net pay is
positive; callers run it inside CommandExecutor.execute so the update
is part of one atomic unit.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List

from .calculator import PaymentResult, compute_payment
from .formats import ZERO, round_total
from .registry import WorkerRegistry
from .schedule import is_due, parse_schedule
from .schemas import BankDeposit, Cash, Category, Mail, Worker

logger = logging.getLogger(__name__)

CATEGORY_ORDER = (Category.HOURLY, Category.SALARIED, Category.COMMISSIONED)


def describe_payment_method(worker: Worker) -> str:
    """Human-readable payment method, as printed on the payroll report."""
    method = worker.payment_method
    if isinstance(method, Cash):
        return "Cash"
    if isinstance(method, Mail):
        return f"Mail, {worker.address}"
    if isinstance(method, BankDeposit):
        return f"{method.bank}, Branch {method.branch} Account {method.account}"
    raise TypeError(f"Unknown payment method: {method!r}")


@dataclass
class PayrollLine:
    """One paid worker on a payroll report."""

    worker_id: str
    name: str
    category: Category
    payment_method: str
    result: PaymentResult


@dataclass
class CategoryTotals:
    gross: Decimal = ZERO
    deductions: Decimal = ZERO
    net: Decimal = ZERO
    normal_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    fixed: Decimal = ZERO
    sales: Decimal = ZERO
    commission: Decimal = ZERO

    def add(self, result: PaymentResult) -> None:
        self.gross += result.gross
        self.deductions += result.deductions
        self.net += result.net
        self.normal_hours += result.normal_hours
        self.overtime_hours += result.overtime_hours
        self.fixed += result.fixed
        self.sales += result.sales
        self.commission += result.commission


@dataclass
class PayrollReport:
    """Everything paid on one date, lines sorted by worker name."""

    pay_date: date
    lines: List[PayrollLine] = field(default_factory=list)

    def lines_for(self, category: Category) -> List[PayrollLine]:
        return [line for line in self.lines if line.category is category]

    def totals(self, category: Category) -> CategoryTotals:
        totals = CategoryTotals()
        for line in self.lines_for(category):
            totals.add(line.result)
        return totals

    def totals_by_category(self) -> Dict[Category, CategoryTotals]:
        return {category: self.totals(category) for category in CATEGORY_ORDER}

    @property
    def total_gross(self) -> Decimal:
        """Grand total of gross pay, rounded half-up."""
        return round_total(sum((line.result.gross for line in self.lines), ZERO))

    @property
    def paid_count(self) -> int:
        return sum(1 for line in self.lines if line.result.net > ZERO)


def due_workers(registry: WorkerRegistry, on: date) -> List[Worker]:
    """Workers whose schedule makes `on` a pay date, in roster order."""
    return [
        worker for worker in registry.get_all()
        if is_due(parse_schedule(worker.schedule), worker.effective_hire_date(), on)
    ]


def total_payroll(registry: WorkerRegistry, on: date) -> Decimal:
    """Sum of gross pay for every worker due on `on`. Read-only."""
    total = sum((compute_payment(w, on).gross for w in due_workers(registry, on)), ZERO)
    return round_total(total)


def build_payroll(registry: WorkerRegistry, on: date) -> PayrollReport:
    """Compute the payroll report for `on` without changing any worker."""
    report = PayrollReport(pay_date=on)
    for worker in sorted(due_workers(registry, on), key=lambda w: w.name):
        report.lines.append(PayrollLine(
            worker_id=worker.id,
            name=worker.name,
            category=worker.category,
            payment_method=describe_payment_method(worker),
            result=compute_payment(worker, on),
        ))
    return report


def commit_payroll(registry: WorkerRegistry, report: PayrollReport) -> int:
    """Mark workers with positive net pay as paid on the report date.

    A worker already paid on or after the report date keeps that date;
    last-paid never moves backwards.

    Returns:
        Number of workers marked paid
    """
    paid = 0
    for line in report.lines:
        if line.result.net <= ZERO:
            continue
        worker = registry.get_by_id(line.worker_id)
        if worker.last_paid is not None and worker.last_paid >= report.pay_date:
            logger.warning(f"Worker {worker.id} already paid on {worker.last_paid}, not marked")
            continue
        worker.last_paid = report.pay_date
        paid += 1
    return paid


def run_payroll(registry: WorkerRegistry, on: date) -> PayrollReport:
    """Compute the payroll for `on` and commit last-paid dates.

    Must run inside CommandExecutor.execute.
    """
    report = build_payroll(registry, on)
    paid = commit_payroll(registry, report)
    logger.info(
        f"Payroll {on.isoformat()}: {len(report.lines)} due, {paid} paid, "
        f"gross {report.total_gross}"
    )
    return report
