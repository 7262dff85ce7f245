"""Salary and deduction calculation for one worker and one pay date.

SDK layer - pure functions of a worker and a date. Nothing here
mutates the worker.

Rules by category:
- Hourly: hours are summed per calendar day; the first 8 hours of a day
  pay 1x the rate, the rest 1.5x.
- Salaried: the monthly salary, or monthly * 12 * frequency / 52
  (truncated to cents) on weekly schedules.
- Commissioned: the salaried amount as a fixed part, plus sales in the
  period times the commission rate, floored to cents.

Union members pay dues and the service fees posted in the period.
Dues rates are daily: monthly schedules bill every day of the pay
date's month, weekly schedules bill each day in [period start, pay date].
Hourly workers with no pay for the period are charged nothing.

Net pay = gross - deductions, never below zero.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from .formats import ZERO, floor_cents, truncate_cents
from .schedule import PaySchedule, days_in_month, parse_schedule, period_start
from .schemas import (
    Category,
    CommissionedPay,
    HourlyPay,
    SalariedPay,
    SaleEntry,
    ServiceFee,
    TimeEntry,
    Worker,
)


OVERTIME_THRESHOLD = Decimal("8")
OVERTIME_MULTIPLIER = Decimal("1.5")
MONTHS_PER_YEAR = Decimal("12")
WEEKS_PER_YEAR = Decimal("52")


@dataclass
class PaymentResult:
    """Computed pay for one worker and one period. Never persisted."""

    worker_id: str
    category: Category
    period_start: date
    period_end: date
    gross: Decimal = ZERO
    deductions: Decimal = ZERO
    net: Decimal = ZERO
    # Hourly breakdown
    normal_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    # Commissioned breakdown (fixed also set for salaried)
    fixed: Decimal = ZERO
    sales: Decimal = ZERO
    commission: Decimal = ZERO
    # Deduction breakdown
    union_dues: Decimal = ZERO
    service_fees: Decimal = ZERO


def _in_range(day: date, start: date, end: date, inclusive_end: bool) -> bool:
    if day < start:
        return False
    return day <= end if inclusive_end else day < end


def split_hours(
    entries: Iterable[TimeEntry],
    start: date,
    end: date,
    inclusive_end: bool = True,
) -> Tuple[Decimal, Decimal]:
    """Split time entries in a date range into (normal, overtime) hours.

    Entries are summed per day before applying the 8-hour threshold,
    so 5h + 6h on one day is 8 normal + 3 overtime.
    """
    per_day: Dict[date, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        if _in_range(entry.day, start, end, inclusive_end):
            per_day[entry.day] += entry.hours

    normal = ZERO
    overtime = ZERO
    for hours in per_day.values():
        if hours > OVERTIME_THRESHOLD:
            normal += OVERTIME_THRESHOLD
            overtime += hours - OVERTIME_THRESHOLD
        else:
            normal += hours
    return normal, overtime


def sum_amounts(
    entries: Iterable[SaleEntry | ServiceFee],
    start: date,
    end: date,
    inclusive_end: bool = True,
) -> Decimal:
    """Total of sale or fee amounts dated within a range."""
    return sum(
        (e.amount for e in entries if _in_range(e.day, start, end, inclusive_end)),
        ZERO,
    )


def fixed_pay(monthly_salary: Decimal, schedule: PaySchedule) -> Decimal:
    """Salary owed per pay date for a monthly salary on `schedule`."""
    if schedule.is_monthly:
        return monthly_salary
    annual = monthly_salary * MONTHS_PER_YEAR
    return truncate_cents(annual * Decimal(schedule.frequency) / WEEKS_PER_YEAR)


def billing_days(schedule: PaySchedule, start: date, end: date) -> int:
    """Number of days union dues are charged for the period."""
    if schedule.is_monthly:
        return days_in_month(end)
    return (end - start).days + 1


def union_deductions(
    worker: Worker,
    schedule: PaySchedule,
    start: date,
    end: date,
) -> Tuple[Decimal, Decimal]:
    """Union (dues, service fees) for the period [start, end]."""
    if not worker.is_union_member:
        return ZERO, ZERO
    dues = worker.union.dues_rate * billing_days(schedule, start, end)
    fees = sum_amounts(worker.service_fees, start, end)
    return dues, fees


def compute_payment(
    worker: Worker,
    pay_date: date,
    schedule: Optional[PaySchedule] = None,
) -> PaymentResult:
    """Compute gross, deductions and net pay for `worker` on `pay_date`.

    Args:
        worker: Worker to pay (not modified)
        pay_date: Last day of the period
        schedule: Parsed schedule; defaults to the worker's own descriptor

    Returns:
        PaymentResult with category-specific breakdown
    """
    if schedule is None:
        schedule = parse_schedule(worker.schedule)

    start = period_start(schedule, pay_date, worker.last_paid, worker.effective_hire_date())
    result = PaymentResult(
        worker_id=worker.id,
        category=worker.category,
        period_start=start,
        period_end=pay_date,
    )

    comp = worker.compensation
    if isinstance(comp, HourlyPay):
        normal, overtime = split_hours(worker.time_entries, start, pay_date)
        result.normal_hours = normal
        result.overtime_hours = overtime
        result.gross = normal * comp.hourly_rate + overtime * comp.hourly_rate * OVERTIME_MULTIPLIER
    elif isinstance(comp, SalariedPay):
        result.fixed = fixed_pay(comp.monthly_salary, schedule)
        result.gross = result.fixed
    elif isinstance(comp, CommissionedPay):
        result.fixed = fixed_pay(comp.monthly_salary, schedule)
        result.sales = sum_amounts(worker.sales, start, pay_date)
        result.commission = floor_cents(result.sales * comp.commission_rate)
        result.gross = result.fixed + result.commission
    else:
        raise TypeError(f"Unknown compensation kind: {comp!r}")

    if isinstance(comp, HourlyPay) and result.gross <= ZERO:
        # Nothing to deduct from
        dues, fees = ZERO, ZERO
    else:
        dues, fees = union_deductions(worker, schedule, start, pay_date)

    result.union_dues = dues
    result.service_fees = fees
    result.deductions = dues + fees
    result.net = max(result.gross - result.deductions, ZERO)
    return result
