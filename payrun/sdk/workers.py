"""Worker operations: hiring, editing, posting hours/sales/fees, queries.

SDK layer - functions over a WorkerRegistry. Mutating functions are
meant to run inside CommandExecutor.execute; they validate input and
raise before or while mutating, and rely on the executor for rollback.

Queries never mutate and take half-open date ranges [start, end).
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from .calculator import split_hours, sum_amounts
from .formats import AmountLike, DateLike, parse_amount, parse_date, quantize_stored
from .registry import WorkerRegistry
from .schedule import DEFAULT_SCHEDULES, ScheduleBook, parse_schedule
from .schemas import (
    BankDeposit,
    Cash,
    Category,
    CommissionedPay,
    HourlyPay,
    Mail,
    SalariedPay,
    SaleEntry,
    ServiceFee,
    TimeEntry,
    UnionMembership,
    Worker,
)

logger = logging.getLogger(__name__)


class WorkerError(Exception):
    """Base class for worker operation errors."""


class WorkerNotFoundError(WorkerError):
    def __init__(self, worker_id: str):
        self.worker_id = worker_id
        super().__init__(f"Worker not found: {worker_id!r}")


class InvalidFieldError(WorkerError, ValueError):
    """Raised when an input value is missing or invalid."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class WrongCategoryError(WorkerError):
    """Raised when an operation doesn't apply to the worker's category."""


class NotUnionMemberError(WorkerError):
    pass


class UnionMemberNotFoundError(WorkerError):
    pass


class DuplicateUnionIdError(WorkerError):
    pass


# =============================================================================
# Input helpers
# =============================================================================


def _required_text(field: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise InvalidFieldError(field, "is required")
    return str(value)


def _amount(field: str, value: AmountLike, positive: bool = False) -> Decimal:
    """Parse a stored amount (2 decimals, half-even)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidFieldError(field, "is required")
    try:
        amount = parse_amount(value)
    except ValueError:
        raise InvalidFieldError(field, "must be numeric")
    stored = quantize_stored(amount)
    if positive and stored <= 0:
        raise InvalidFieldError(field, "must be positive")
    if amount < 0:
        raise InvalidFieldError(field, "must not be negative")
    return stored


def _rate(field: str, value: AmountLike) -> Decimal:
    """Parse a ratio (commission rate), kept at its given precision."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidFieldError(field, "is required")
    try:
        rate = parse_amount(value)
    except ValueError:
        raise InvalidFieldError(field, "must be numeric")
    if rate < 0:
        raise InvalidFieldError(field, "must not be negative")
    return rate


def _date(field: str, value: DateLike) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise InvalidFieldError(field, "is not a valid date")


def parse_category(value) -> Category:
    try:
        return Category(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidFieldError("category", f"unknown category {value!r}")


def _compensation(category: Category, rate: Decimal, commission_rate: Optional[Decimal]):
    if category is Category.HOURLY:
        return HourlyPay(hourly_rate=rate)
    if category is Category.SALARIED:
        return SalariedPay(monthly_salary=rate)
    return CommissionedPay(monthly_salary=rate, commission_rate=commission_rate)


def require_worker(registry: WorkerRegistry, worker_id: str) -> Worker:
    """Look up a worker or raise."""
    _required_text("id", worker_id)
    worker = registry.get_by_id(worker_id)
    if worker is None:
        raise WorkerNotFoundError(worker_id)
    return worker


# =============================================================================
# Hiring and editing
# =============================================================================


def hire_worker(
    registry: WorkerRegistry,
    name: str,
    address: str,
    category,
    rate: AmountLike,
    commission_rate: Optional[AmountLike] = None,
    hire_date: Optional[DateLike] = None,
    schedule: Optional[str] = None,
    schedules: Optional[ScheduleBook] = None,
) -> str:
    """Add a worker to the roster.

    Args:
        registry: Roster to add to
        name: Display name
        address: Postal address (used for mailed payments)
        category: "hourly", "salaried" or "commissioned"
        rate: Hourly rate or monthly salary
        commission_rate: Required for commissioned workers, rejected otherwise
        hire_date: Optional; hourly workers without one start at their first time entry
        schedule: Descriptor; defaults to the category's default schedule
        schedules: Schedule book to validate `schedule` against

    Returns:
        New worker id
    """
    name = _required_text("name", name)
    address = _required_text("address", address)
    category = parse_category(category)
    amount = _amount("rate", rate)

    if category is Category.COMMISSIONED:
        if commission_rate is None:
            raise WrongCategoryError("Commissioned workers need a commission rate")
        commission = _rate("commission", commission_rate)
    else:
        if commission_rate is not None:
            raise WrongCategoryError(f"Commission rate does not apply to {category.value} workers")
        commission = None

    if schedule is None:
        schedule = DEFAULT_SCHEDULES[category]
    elif schedules is not None:
        schedules.require(schedule)
    else:
        parse_schedule(schedule)

    worker = Worker(
        name=name,
        address=address,
        compensation=_compensation(category, amount, commission),
        hire_date=_date("hire_date", hire_date) if hire_date is not None else None,
        schedule=schedule,
    )
    worker_id = registry.add(worker)
    logger.debug(f"Hired {category.value} worker {worker_id} ({name})")
    return worker_id


def fire_worker(registry: WorkerRegistry, worker_id: str) -> None:
    _required_text("id", worker_id)
    if not registry.remove(worker_id):
        raise WorkerNotFoundError(worker_id)


def update_worker(
    registry: WorkerRegistry,
    worker_id: str,
    field: str,
    value,
    schedules: Optional[ScheduleBook] = None,
) -> Worker:
    """Change one scalar field of a worker.

    Fields: name, address, rate, commission, schedule, hire_date.
    """
    worker = require_worker(registry, worker_id)
    key = (field or "").lower()

    if key == "name":
        worker.name = _required_text("name", value)
    elif key == "address":
        worker.address = _required_text("address", value)
    elif key == "rate":
        amount = _amount("rate", value)
        comp = worker.compensation
        if isinstance(comp, HourlyPay):
            worker.compensation = comp.model_copy(update={"hourly_rate": amount})
        else:
            worker.compensation = comp.model_copy(update={"monthly_salary": amount})
    elif key == "commission":
        comp = worker.compensation
        if not isinstance(comp, CommissionedPay):
            raise WrongCategoryError(f"Worker {worker_id} is not commissioned")
        worker.compensation = comp.model_copy(update={"commission_rate": _rate("commission", value)})
    elif key == "schedule":
        text = _required_text("schedule", value)
        if schedules is not None:
            schedules.require(text)
        else:
            parse_schedule(text)
        worker.schedule = text
    elif key == "hire_date":
        worker.hire_date = _date("hire_date", value)
    else:
        raise InvalidFieldError(field, "unknown field")
    return worker


def change_category(
    registry: WorkerRegistry,
    worker_id: str,
    category,
    amount: Optional[AmountLike] = None,
    schedule: Optional[str] = None,
) -> Worker:
    """Switch a worker's compensation category.

    `amount` is the new rate for hourly/salaried (defaults to the current
    base rate) and the required commission rate for commissioned, which
    keep the current base rate as monthly salary.

    Moving to a different category also moves the worker to `schedule`,
    the new category's default when not given. Logs, union membership and
    payment method are kept.
    """
    worker = require_worker(registry, worker_id)
    category = parse_category(category)
    current_rate = worker.base_rate
    new_schedule = None
    if category is not worker.category:
        new_schedule = parse_schedule(schedule or DEFAULT_SCHEDULES[category]).text

    if category is Category.COMMISSIONED:
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            raise InvalidFieldError("commission", "is required")
        worker.compensation = CommissionedPay(
            monthly_salary=current_rate,
            commission_rate=_rate("commission", amount),
        )
    else:
        rate = current_rate if amount is None else _amount("rate", amount)
        worker.compensation = _compensation(category, rate, None)
    if new_schedule is not None:
        worker.schedule = new_schedule
    return worker


def set_payment_method(
    registry: WorkerRegistry,
    worker_id: str,
    method: str,
    bank: Optional[str] = None,
    branch: Optional[str] = None,
    account: Optional[str] = None,
) -> Worker:
    """Set how a worker is paid: "cash", "mail" or "bank"."""
    worker = require_worker(registry, worker_id)
    key = (method or "").lower()

    if key == "cash":
        worker.payment_method = Cash()
    elif key == "mail":
        worker.payment_method = Mail()
    elif key == "bank":
        worker.payment_method = BankDeposit(
            bank=_required_text("bank", bank),
            branch=_required_text("branch", branch),
            account=_required_text("account", account),
        )
    else:
        raise InvalidFieldError("payment_method", f"unknown method {method!r}")
    return worker


def join_union(
    registry: WorkerRegistry,
    worker_id: str,
    member_id: str,
    dues_rate: AmountLike,
) -> Worker:
    """Make a worker a union member.

    Raises:
        DuplicateUnionIdError: If another worker already has `member_id`
    """
    worker = require_worker(registry, worker_id)
    member_id = _required_text("member_id", member_id)
    rate = _amount("dues_rate", dues_rate)

    holder = registry.find_by_union_id(member_id)
    if holder is not None and holder.id != worker.id:
        raise DuplicateUnionIdError(f"Union id {member_id!r} already belongs to worker {holder.id}")

    worker.union = UnionMembership(member_id=member_id, dues_rate=rate)
    return worker


def leave_union(registry: WorkerRegistry, worker_id: str) -> Worker:
    worker = require_worker(registry, worker_id)
    worker.union = None
    return worker


# =============================================================================
# Posting
# =============================================================================


def post_time_entry(registry: WorkerRegistry, worker_id: str, day: DateLike, hours: AmountLike) -> TimeEntry:
    """Append a time entry to an hourly worker's log."""
    worker = require_worker(registry, worker_id)
    if worker.category is not Category.HOURLY:
        raise WrongCategoryError(f"Worker {worker_id} is not hourly")
    entry = TimeEntry(day=_date("date", day), hours=_amount("hours", hours, positive=True))
    worker.time_entries.append(entry)
    return entry


def post_sale(registry: WorkerRegistry, worker_id: str, day: DateLike, amount: AmountLike) -> SaleEntry:
    """Append a sale to a commissioned worker's log."""
    worker = require_worker(registry, worker_id)
    if worker.category is not Category.COMMISSIONED:
        raise WrongCategoryError(f"Worker {worker_id} is not commissioned")
    entry = SaleEntry(day=_date("date", day), amount=_amount("amount", amount, positive=True))
    worker.sales.append(entry)
    return entry


def post_service_fee(registry: WorkerRegistry, member_id: str, day: DateLike, amount: AmountLike) -> ServiceFee:
    """Append a service fee to the union member with `member_id`."""
    member_id = _required_text("member_id", member_id)
    worker = registry.find_by_union_id(member_id)
    if worker is None:
        raise UnionMemberNotFoundError(f"No union member with id {member_id!r}")
    entry = ServiceFee(day=_date("date", day), amount=_amount("amount", amount, positive=True))
    worker.service_fees.append(entry)
    return entry


# =============================================================================
# Queries
# =============================================================================


def _query_range(start: DateLike, end: DateLike) -> Tuple[date, date]:
    start_date = _date("start", start)
    end_date = _date("end", end)
    if start_date > end_date:
        raise InvalidFieldError("start", "must not be after end")
    return start_date, end_date


def hours_worked(registry: WorkerRegistry, worker_id: str, start: DateLike, end: DateLike) -> Tuple[Decimal, Decimal]:
    """(normal, overtime) hours for an hourly worker in [start, end)."""
    worker = require_worker(registry, worker_id)
    if worker.category is not Category.HOURLY:
        raise WrongCategoryError(f"Worker {worker_id} is not hourly")
    start_date, end_date = _query_range(start, end)
    return split_hours(worker.time_entries, start_date, end_date, inclusive_end=False)


def sales_total(registry: WorkerRegistry, worker_id: str, start: DateLike, end: DateLike) -> Decimal:
    """Total sales for a commissioned worker in [start, end)."""
    worker = require_worker(registry, worker_id)
    if worker.category is not Category.COMMISSIONED:
        raise WrongCategoryError(f"Worker {worker_id} is not commissioned")
    start_date, end_date = _query_range(start, end)
    return sum_amounts(worker.sales, start_date, end_date, inclusive_end=False)


def service_fees_total(registry: WorkerRegistry, worker_id: str, start: DateLike, end: DateLike) -> Decimal:
    """Total service fees for a union member in [start, end)."""
    worker = require_worker(registry, worker_id)
    if not worker.is_union_member:
        raise NotUnionMemberError(f"Worker {worker_id} is not a union member")
    start_date, end_date = _query_range(start, end)
    return sum_amounts(worker.service_fees, start_date, end_date, inclusive_end=False)


def find_worker_by_name(registry: WorkerRegistry, name: str, index: int = 1) -> str:
    """Id of the `index`-th (1-based) worker with this exact name."""
    matches = registry.find_by_name(name)
    if index < 1 or index > len(matches):
        raise WorkerNotFoundError(f"{name} #{index}")
    return matches[index - 1].id


__all__ = [
    "WorkerError",
    "WorkerNotFoundError",
    "InvalidFieldError",
    "WrongCategoryError",
    "NotUnionMemberError",
    "UnionMemberNotFoundError",
    "DuplicateUnionIdError",
    "parse_category",
    "require_worker",
    "hire_worker",
    "fire_worker",
    "update_worker",
    "change_category",
    "set_payment_method",
    "join_union",
    "leave_union",
    "post_time_entry",
    "post_sale",
    "post_service_fee",
    "hours_worked",
    "sales_total",
    "service_fees_total",
    "find_worker_by_name",
]
