"""Parsing and rounding rules for dates, amounts and hours.

Rounding policies:
- Stored values (rates, sale amounts, fees, hours): 2 decimals, half-even
- Aggregate totals (report totals, total payroll): 2 decimals, half-up
- Commission: 2 decimals, floor
- Weekly share of a monthly salary: 2 decimals, toward zero

Amounts use "," as the decimal separator on output and accept either
"," or "." on input.
"""

from datetime import date, datetime
from decimal import (
    Decimal,
    InvalidOperation,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
)
from typing import Optional, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0")

# ISO first, then day/month/year as typed by operators
DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")

DateLike = Union[date, str]
AmountLike = Union[Decimal, int, float, str]


def parse_date(value: DateLike) -> date:
    """Parse a date from a date object, YYYY-MM-DD or d/M/YYYY string.

    Raises:
        ValueError: If the value is empty or not a real calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValueError("Date is required")

    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {text!r}")


def format_date(value: Optional[date]) -> Optional[str]:
    """Format a date as d/M/YYYY (None passes through)."""
    if value is None:
        return None
    return f"{value.day}/{value.month}/{value.year}"


def parse_amount(value: AmountLike) -> Decimal:
    """Parse a numeric amount, accepting "," as decimal separator.

    Raises:
        ValueError: If the value is empty or not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    else:
        text = (value or "").strip().replace(",", ".")
        if not text:
            raise ValueError("Amount is required")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return amount


def quantize_stored(amount: Decimal) -> Decimal:
    """Round a stored value (rate, fee, hours) to cents, half-even."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def round_total(amount: Decimal) -> Decimal:
    """Round an aggregate total to cents, half-up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def floor_cents(amount: Decimal) -> Decimal:
    """Round toward negative infinity at cents (commission policy).

    Example: 49.999 -> 49.99 (never 50.00)
    """
    return amount.quantize(CENTS, rounding=ROUND_FLOOR)


def truncate_cents(amount: Decimal) -> Decimal:
    """Drop fractional cents (round toward zero)."""
    return amount.quantize(CENTS, rounding=ROUND_DOWN)


def format_amount(amount: Optional[Decimal], rounding: str = ROUND_HALF_EVEN) -> str:
    """Format an amount with 2 decimals and "," separator, no grouping.

    Example: Decimal("1500.5") -> "1500,50"
    """
    if amount is None:
        return "0,00"
    return f"{amount.quantize(CENTS, rounding=rounding):f}".replace(".", ",")


def format_total(amount: Optional[Decimal]) -> str:
    """Format an aggregate total (half-up)."""
    return format_amount(amount, rounding=ROUND_HALF_UP)


def format_hours(hours: Optional[Decimal]) -> str:
    """Format hours without trailing zeros: 8 -> "8", 2.50 -> "2,5"."""
    if hours is None or hours == 0:
        return "0"
    return f"{hours.normalize():f}".replace(".", ",")
