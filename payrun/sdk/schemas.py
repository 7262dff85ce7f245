"""Pydantic schemas for workers and their pay logs.

All schemas use extra='forbid' so a typo in a persisted roster fails
loudly instead of being dropped.

Compensation and payment method are closed discriminated unions keyed
on `kind`; consumers match on every variant.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Compensation category."""

    HOURLY = "hourly"
    SALARIED = "salaried"
    COMMISSIONED = "commissioned"


# =============================================================================
# Compensation
# =============================================================================


class HourlyPay(BaseModel):
    """Paid per hour worked, overtime beyond 8 hours/day at 1.5x."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["hourly"] = "hourly"
    hourly_rate: Decimal = Field(..., ge=0, description="Pay per normal hour")


class SalariedPay(BaseModel):
    """Fixed monthly salary."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["salaried"] = "salaried"
    monthly_salary: Decimal = Field(..., ge=0)


class CommissionedPay(BaseModel):
    """Fixed monthly salary plus a share of sales."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["commissioned"] = "commissioned"
    monthly_salary: Decimal = Field(..., ge=0)
    commission_rate: Decimal = Field(..., ge=0, description="Fraction of sales, e.g. 0.05")


Compensation = Annotated[
    Union[HourlyPay, SalariedPay, CommissionedPay],
    Field(discriminator="kind"),
]


# =============================================================================
# Payment method
# =============================================================================


class Cash(BaseModel):
    """Paid in hand."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["cash"] = "cash"


class Mail(BaseModel):
    """Check mailed to the worker's address."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["mail"] = "mail"


class BankDeposit(BaseModel):
    """Deposit into a bank account."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["bank"] = "bank"
    bank: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    account: str = Field(..., min_length=1)


PaymentMethod = Annotated[
    Union[Cash, Mail, BankDeposit],
    Field(discriminator="kind"),
]


# =============================================================================
# Union and log entries
# =============================================================================


class UnionMembership(BaseModel):
    """Union membership. `dues_rate` is charged per billing day."""

    model_config = ConfigDict(extra="forbid")

    member_id: str = Field(..., min_length=1, description="Union-local id, unique across members")
    dues_rate: Decimal = Field(..., ge=0)


class TimeEntry(BaseModel):
    """Hours worked on one day. A day may have several entries."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    day: date
    hours: Decimal = Field(..., gt=0)


class SaleEntry(BaseModel):
    """A sale made by a commissioned worker."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    day: date
    amount: Decimal = Field(..., gt=0)


class ServiceFee(BaseModel):
    """One-off union service charge."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    day: date
    amount: Decimal = Field(..., gt=0)


# =============================================================================
# Worker
# =============================================================================


class Worker(BaseModel):
    """A worker on the roster.

    Logs are append-only. `last_paid` only moves when a payroll run
    commits.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(default="", description="Registry key, assigned on add")
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    compensation: Compensation
    union: Optional[UnionMembership] = None
    payment_method: PaymentMethod = Field(default_factory=Cash)
    hire_date: Optional[date] = None
    last_paid: Optional[date] = None
    schedule: str = Field(..., min_length=1, description="Schedule descriptor text")
    time_entries: List[TimeEntry] = Field(default_factory=list)
    sales: List[SaleEntry] = Field(default_factory=list)
    service_fees: List[ServiceFee] = Field(default_factory=list)

    @property
    def category(self) -> Category:
        return Category(self.compensation.kind)

    @property
    def base_rate(self) -> Decimal:
        """Hourly rate or monthly salary, depending on category."""
        comp = self.compensation
        if isinstance(comp, HourlyPay):
            return comp.hourly_rate
        return comp.monthly_salary

    @property
    def is_union_member(self) -> bool:
        return self.union is not None

    def effective_hire_date(self) -> Optional[date]:
        """Hire date, or the first time entry for hourly workers hired without one."""
        if self.hire_date is not None:
            return self.hire_date
        if self.category is Category.HOURLY and self.time_entries:
            return min(entry.day for entry in self.time_entries)
        return None
