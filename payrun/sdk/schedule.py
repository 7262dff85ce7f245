"""Payment schedules: when a worker is due, and what period a payment covers.

SDK layer - pure date logic, no registry access.

Descriptor grammar:
    monthly <1..28>        fixed day of month
    monthly $              last business day of the month
    weekly <1..7>          every week on weekday (1 = Monday, 7 = Sunday)
    weekly <1..52> <1..7>  every N weeks on weekday

Weekly schedules count whole weeks from a fixed epoch Monday
(2004-12-27), so "weekly 2 5" is due on 2004-12-31, 2005-01-14, ...
Dates before the epoch are never due.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from .schemas import Category


EPOCH_MONDAY = date(2004, 12, 27)

DEFAULT_SCHEDULES: Dict[Category, str] = {
    Category.HOURLY: "weekly 5",
    Category.SALARIED: "monthly $",
    Category.COMMISSIONED: "weekly 2 5",
}

MONTHLY = "monthly"
WEEKLY = "weekly"
LAST_BUSINESS_DAY = "$"


class InvalidScheduleError(ValueError):
    """Raised when a schedule descriptor doesn't follow the grammar."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid schedule descriptor: {text!r}")


class ScheduleExistsError(Exception):
    """Raised when registering a descriptor that is already available."""


class UnknownScheduleError(Exception):
    """Raised when a worker is assigned a descriptor that isn't registered."""


@dataclass(frozen=True, eq=False)
class PaySchedule:
    """A parsed schedule descriptor.

    Identity is the descriptor text: two schedules are equal iff their
    text is equal.
    """

    text: str
    kind: str
    day: Optional[int] = None  # day of month (None = "$") or ISO weekday
    frequency: int = 1

    def __eq__(self, other) -> bool:
        if not isinstance(other, PaySchedule):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text

    @property
    def is_monthly(self) -> bool:
        return self.kind == MONTHLY

    @property
    def is_weekly(self) -> bool:
        return self.kind == WEEKLY


@lru_cache(maxsize=128)
def parse_schedule(text: str) -> PaySchedule:
    """Parse and validate a schedule descriptor.

    Raises:
        InvalidScheduleError: If the descriptor is malformed or out of range
    """
    parts = (text or "").split(" ")
    kind = parts[0]

    try:
        if kind == MONTHLY and len(parts) == 2:
            if parts[1] == LAST_BUSINESS_DAY:
                return PaySchedule(text=text, kind=MONTHLY)
            day = int(parts[1])
            if 1 <= day <= 28:
                return PaySchedule(text=text, kind=MONTHLY, day=day)

        elif kind == WEEKLY and len(parts) == 2:
            weekday = int(parts[1])
            if 1 <= weekday <= 7:
                return PaySchedule(text=text, kind=WEEKLY, day=weekday)

        elif kind == WEEKLY and len(parts) == 3:
            frequency = int(parts[1])
            weekday = int(parts[2])
            if 1 <= frequency <= 52 and 1 <= weekday <= 7:
                return PaySchedule(text=text, kind=WEEKLY, day=weekday, frequency=frequency)
    except ValueError:
        pass

    raise InvalidScheduleError(text)


def last_day_of_month(on: date) -> date:
    return on.replace(day=calendar.monthrange(on.year, on.month)[1])


def last_business_day(on: date) -> date:
    """Last weekday of `on`'s month (Saturday/Sunday walk back to Friday)."""
    candidate = last_day_of_month(on)
    while candidate.isoweekday() > 5:
        candidate -= timedelta(days=1)
    return candidate


def days_in_month(on: date) -> int:
    return calendar.monthrange(on.year, on.month)[1]


def weeks_since_epoch(on: date) -> int:
    """Whole weeks from the epoch Monday; negative before the epoch."""
    return (on - EPOCH_MONDAY).days // 7


def is_due(schedule: PaySchedule, hire_date: Optional[date], on: date) -> bool:
    """Check whether a worker on `schedule` is due for payment on `on`.

    Nobody is due before their hire date.
    """
    if hire_date is not None and on < hire_date:
        return False

    if schedule.is_monthly:
        if schedule.day is None:
            return on == last_business_day(on)
        if on.day == schedule.day:
            return True
        # Configured day past the end of a short month pays on the last day
        month_end = last_day_of_month(on)
        return schedule.day > month_end.day and on == month_end

    if on.isoweekday() != schedule.day:
        return False
    if on < EPOCH_MONDAY:
        return False
    return weeks_since_epoch(on) % schedule.frequency == 0


def implied_period_start(schedule: PaySchedule, on: date) -> date:
    """Start of the period the schedule itself implies for pay date `on`.

    Monthly: first of the month. Weekly: the day after `frequency` weeks back.
    """
    if schedule.is_monthly:
        return on.replace(day=1)
    return on - timedelta(weeks=schedule.frequency) + timedelta(days=1)


def period_start(
    schedule: PaySchedule,
    on: date,
    last_paid: Optional[date],
    hire_date: Optional[date] = None,
) -> date:
    """Derive the first day of the period [start, on] paid on `on`.

    The later of the day after the last payment and the schedule-implied
    start. Workers never paid are bounded by their hire date instead.
    """
    start = implied_period_start(schedule, on)
    if last_paid is not None:
        start = max(start, last_paid + timedelta(days=1))
    elif hire_date is not None:
        start = max(start, hire_date)
    return start


@dataclass
class ScheduleBook:
    """Descriptors available for assignment: built-ins plus custom ones."""

    custom: List[str] = field(default_factory=list)

    def __post_init__(self):
        for text in list(self.custom):
            parse_schedule(text)

    @property
    def builtins(self) -> List[str]:
        return list(DEFAULT_SCHEDULES.values())

    def available(self) -> List[str]:
        return self.builtins + [s for s in self.custom if s not in self.builtins]

    def __contains__(self, text: str) -> bool:
        return text in self.builtins or text in self.custom

    def register(self, text: str) -> PaySchedule:
        """Register a custom descriptor.

        Raises:
            InvalidScheduleError: If the descriptor is malformed
            ScheduleExistsError: If it's already available
        """
        schedule = parse_schedule(text)
        if text in self:
            raise ScheduleExistsError(f"Schedule already exists: {text!r}")
        self.custom.append(text)
        return schedule

    def require(self, text: str) -> PaySchedule:
        """Return the parsed schedule, or raise if it isn't available."""
        if text not in self:
            raise UnknownScheduleError(f"Schedule not available: {text!r}")
        return parse_schedule(text)

    def reset(self) -> None:
        self.custom.clear()

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[str]) -> "ScheduleBook":
        book = cls()
        for text in descriptors:
            if text not in book:
                book.register(text)
        return book
