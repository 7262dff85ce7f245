"""Fixed-width text rendering of a payroll report.

Layout: a title, then one section per category (hourly, salaried,
commissioned) with a header, one row per paid worker and a category
total line, then the grand total. Amounts use "," decimals, totals are
rounded half-up.
"""

from pathlib import Path
from typing import List

from .formats import format_hours, format_total
from .payroll import PayrollLine, PayrollReport
from .schemas import Category


RULE = "=" * 127

SECTION_TITLES = {
    Category.HOURLY: "HOURLY",
    Category.SALARIED: "SALARIED",
    Category.COMMISSIONED: "COMMISSIONED",
}


def _section_header(category: Category) -> List[str]:
    title = f"===================== {SECTION_TITLES[category]} "
    lines = [RULE, title.ljust(len(RULE), "="), RULE]

    if category is Category.HOURLY:
        lines.append(
            f"{'Name':<36} {'Hours':>5} {'Extra':>5} {'Gross Pay':>13} "
            f"{'Deductions':>10} {'Net Pay':>15} Method"
        )
        lines.append(f"{'=' * 36} {'=' * 5} {'=' * 5} {'=' * 13} {'=' * 10} {'=' * 15} {'=' * 38}")
    elif category is Category.SALARIED:
        lines.append(
            f"{'Name':<48} {'Gross Pay':>13} {'Deductions':>10} {'Net Pay':>15} Method"
        )
        lines.append(f"{'=' * 48} {'=' * 13} {'=' * 10} {'=' * 15} {'=' * 38}")
    else:
        lines.append(
            f"{'Name':<21} {'Fixed':>8} {'Sales':>8} {'Commission':>10} {'Gross Pay':>13} "
            f"{'Deductions':>10} {'Net Pay':>15} Method"
        )
        lines.append(
            f"{'=' * 21} {'=' * 8} {'=' * 8} {'=' * 10} {'=' * 13} {'=' * 10} {'=' * 15} {'=' * 38}"
        )
    return lines


def _row(line: PayrollLine) -> str:
    r = line.result
    if line.category is Category.HOURLY:
        return (
            f"{line.name:<36} {format_hours(r.normal_hours):>5} {format_hours(r.overtime_hours):>5} "
            f"{format_total(r.gross):>13} {format_total(r.deductions):>10} "
            f"{format_total(r.net):>15} {line.payment_method}"
        )
    if line.category is Category.SALARIED:
        return (
            f"{line.name:<48} {format_total(r.gross):>13} {format_total(r.deductions):>10} "
            f"{format_total(r.net):>15} {line.payment_method}"
        )
    return (
        f"{line.name:<21} {format_total(r.fixed):>8} {format_total(r.sales):>8} "
        f"{format_total(r.commission):>10} {format_total(r.gross):>13} "
        f"{format_total(r.deductions):>10} {format_total(r.net):>15} {line.payment_method}"
    )


def _total_line(report: PayrollReport, category: Category) -> str:
    t = report.totals(category)
    if category is Category.HOURLY:
        return (
            f"{'TOTAL HOURLY':<36} {format_hours(t.normal_hours):>5} {format_hours(t.overtime_hours):>5} "
            f"{format_total(t.gross):>13} {format_total(t.deductions):>10} {format_total(t.net):>15}"
        )
    if category is Category.SALARIED:
        return (
            f"{'TOTAL SALARIED':<48} {format_total(t.gross):>13} "
            f"{format_total(t.deductions):>10} {format_total(t.net):>15}"
        )
    return (
        f"{'TOTAL COMMISSIONED':<21} {format_total(t.fixed):>8} {format_total(t.sales):>8} "
        f"{format_total(t.commission):>10} {format_total(t.gross):>13} "
        f"{format_total(t.deductions):>10} {format_total(t.net):>15}"
    )


def format_payroll_report(report: PayrollReport) -> str:
    """Render the whole report as text."""
    lines = [
        f"PAYROLL FOR {report.pay_date.isoformat()}",
        "=" * 36,
        "",
    ]
    for category in SECTION_TITLES:
        lines.extend(_section_header(category))
        lines.extend(_row(line) for line in report.lines_for(category))
        lines.append("")
        lines.append(_total_line(report, category))
        lines.append("")

    lines.append(f"PAYROLL TOTAL: {format_total(report.total_gross)}")
    return "\n".join(lines) + "\n"


def write_payroll_report(report: PayrollReport, path: Path) -> Path:
    """Write the text report to `path`.

    Returns:
        Path to the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_payroll_report(report))
    return path
