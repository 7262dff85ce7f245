"""Tests for the fixed-width payroll report."""

from datetime import date

from payrun.sdk.payroll import build_payroll
from payrun.sdk.registry import WorkerRegistry
from payrun.sdk.report import RULE, format_payroll_report, write_payroll_report
from payrun.sdk.workers import hire_worker, post_sale, post_time_entry, set_payment_method


def make_registry() -> WorkerRegistry:
    registry = WorkerRegistry()
    hire_worker(registry, "Ana", "Rua 1", "hourly", "10")
    hire_worker(registry, "Caio", "Rua 3", "commissioned", "1000",
                commission_rate="0.10", hire_date="2005-01-01")
    post_time_entry(registry, "1", "2005-01-10", "9,5")
    post_sale(registry, "2", "2005-01-03", "500")
    set_payment_method(registry, "2", "mail")
    return registry


class TestFormat:
    def test_sections_and_totals(self):
        text = format_payroll_report(build_payroll(make_registry(), date(2005, 1, 14)))
        lines = text.splitlines()

        assert lines[0] == "PAYROLL FOR 2005-01-14"
        assert RULE in lines
        assert text.index("HOURLY") < text.index("SALARIED") < text.index("COMMISSIONED")
        assert lines[-1] == "PAYROLL TOTAL: 614,03"

    def test_hourly_row(self):
        text = format_payroll_report(build_payroll(make_registry(), date(2005, 1, 14)))
        row = next(line for line in text.splitlines() if line.startswith("Ana "))
        assert " 8 " in row
        assert "1,5" in row
        assert "102,50" in row
        assert row.endswith("Cash")

    def test_commissioned_row(self):
        text = format_payroll_report(build_payroll(make_registry(), date(2005, 1, 14)))
        row = next(line for line in text.splitlines() if line.startswith("Caio "))
        for value in ["461,53", "500,00", "50,00", "511,53"]:
            assert value in row
        assert row.endswith("Mail, Rua 3")

    def test_empty_report_still_has_sections(self):
        text = format_payroll_report(build_payroll(WorkerRegistry(), date(2005, 1, 8)))
        assert "TOTAL SALARIED" in text
        assert text.rstrip().endswith("PAYROLL TOTAL: 0,00")


class TestWrite:
    def test_writes_file(self, tmp_path):
        report = build_payroll(make_registry(), date(2005, 1, 14))
        path = write_payroll_report(report, tmp_path / "out" / "payroll.txt")
        assert path.read_text() == format_payroll_report(report)
