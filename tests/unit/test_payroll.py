"""Tests for payroll runs across the roster."""

import pytest
from datetime import date
from decimal import Decimal

from payrun.sdk.payroll import (
    build_payroll,
    commit_payroll,
    describe_payment_method,
    due_workers,
    run_payroll,
    total_payroll,
)
from payrun.sdk.registry import WorkerRegistry
from payrun.sdk.schemas import Category
from payrun.sdk.workers import (
    hire_worker,
    join_union,
    post_sale,
    post_time_entry,
    set_payment_method,
)


@pytest.fixture
def roster():
    """Ana hourly, Bia salaried, Caio commissioned, Duda hourly with no hours."""
    registry = WorkerRegistry()
    hire_worker(registry, "Ana", "Rua 1", "hourly", "10")
    hire_worker(registry, "Bia", "Rua 2", "salaried", "1500", hire_date="2005-01-01")
    hire_worker(registry, "Caio", "Rua 3", "commissioned", "1000",
                commission_rate="0.10", hire_date="2005-01-01")
    hire_worker(registry, "Duda", "Rua 4", "hourly", "12")

    post_time_entry(registry, "1", "2005-01-03", "5")
    post_time_entry(registry, "1", "2005-01-03", "6")
    post_time_entry(registry, "1", "2005-01-10", "8")
    post_sale(registry, "3", "2005-01-03", "300")
    post_sale(registry, "3", "2005-01-10", "200")
    return registry


class TestDue:
    def test_weekly_friday(self, roster):
        names = [w.name for w in due_workers(roster, date(2005, 1, 7))]
        assert names == ["Ana", "Duda"]

    def test_biweekly_and_weekly(self, roster):
        names = [w.name for w in due_workers(roster, date(2005, 1, 14))]
        assert names == ["Ana", "Caio", "Duda"]

    def test_month_end(self, roster):
        # 2005-01-31 is a Monday: only the monthly worker is due
        names = [w.name for w in due_workers(roster, date(2005, 1, 31))]
        assert names == ["Bia"]


class TestTotalPayroll:
    def test_sums_gross_of_due_workers(self, roster):
        assert total_payroll(roster, date(2005, 1, 7)) == Decimal("125.00")

    def test_read_only(self, roster):
        total_payroll(roster, date(2005, 1, 7))
        assert all(w.last_paid is None for w in roster)

    def test_nobody_due(self, roster):
        assert total_payroll(roster, date(2005, 1, 8)) == Decimal("0.00")


class TestRunPayroll:
    def test_marks_only_positive_net_paid(self, roster):
        report = run_payroll(roster, date(2005, 1, 7))
        assert [line.name for line in report.lines] == ["Ana", "Duda"]
        assert report.paid_count == 1
        assert roster.get_by_id("1").last_paid == date(2005, 1, 7)
        assert roster.get_by_id("4").last_paid is None

    def test_next_period_starts_after_last_payment(self, roster):
        run_payroll(roster, date(2005, 1, 7))
        report = run_payroll(roster, date(2005, 1, 14))

        ana = next(line for line in report.lines if line.name == "Ana")
        assert ana.result.period_start == date(2005, 1, 8)
        assert ana.result.gross == Decimal("80.00")

        caio = next(line for line in report.lines if line.name == "Caio")
        assert caio.result.gross == Decimal("511.53")
        assert report.total_gross == Decimal("591.53")

    def test_zero_net_stays_unpaid(self, roster):
        # Dues far above salary: net floors at zero
        join_union(roster, "2", "u1", "100")
        report = run_payroll(roster, date(2005, 1, 31))
        assert report.lines[0].result.net == Decimal("0")
        assert roster.get_by_id("2").last_paid is None

    def test_earlier_run_does_not_move_last_paid_back(self, roster):
        """Re-running an older pay date pays but leaves the later last-paid date."""
        run_payroll(roster, date(2005, 1, 28))
        assert roster.get_by_id("3").last_paid == date(2005, 1, 28)

        report = build_payroll(roster, date(2005, 1, 14))
        assert "Caio" in [line.name for line in report.lines]
        assert commit_payroll(roster, report) == 0
        assert roster.get_by_id("3").last_paid == date(2005, 1, 28)

    def test_totals_by_category(self, roster):
        report = build_payroll(roster, date(2005, 1, 14))
        totals = report.totals_by_category()
        # Never paid: the implied period 2005-01-08 .. 01-14 applies
        assert totals[Category.HOURLY].normal_hours == Decimal("8")
        assert totals[Category.HOURLY].overtime_hours == Decimal("0")
        assert totals[Category.COMMISSIONED].commission == Decimal("50.00")
        assert totals[Category.SALARIED].gross == Decimal("0")


class TestPaymentMethodDescription:
    def test_descriptions(self, roster):
        assert describe_payment_method(roster.get_by_id("1")) == "Cash"
        set_payment_method(roster, "2", "mail")
        assert describe_payment_method(roster.get_by_id("2")) == "Mail, Rua 2"
        set_payment_method(roster, "3", "bank", "Banco", "12", "345")
        assert describe_payment_method(roster.get_by_id("3")) == "Banco, Branch 12 Account 345"
