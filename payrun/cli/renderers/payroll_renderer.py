"""Rich renderers for the roster and payroll reports.

Transforms SDK objects into formatted Rich tables.
"""

from typing import List

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from payrun.sdk import Category, PayrollReport, Worker
from payrun.sdk.formats import format_amount, format_date, format_hours, format_total
from payrun.sdk.payroll import CATEGORY_ORDER, describe_payment_method


def _union_cell(worker: Worker) -> str:
    if not worker.is_union_member:
        return "[dim]-[/dim]"
    return f"{worker.union.member_id} ({format_amount(worker.union.dues_rate)}/day)"


def _rate_cell(worker: Worker) -> str:
    comp = worker.compensation
    if worker.category is Category.HOURLY:
        return f"{format_amount(comp.hourly_rate)}/h"
    if worker.category is Category.COMMISSIONED:
        return f"{format_amount(comp.monthly_salary)} + {comp.commission_rate.normalize():f}"
    return format_amount(comp.monthly_salary)


def render_roster(console: Console, workers: List[Worker]) -> None:
    """Render the roster as one table.

    Args:
        console: Rich Console instance
        workers: Workers in roster order
    """
    if not workers:
        console.print(Panel(
            "No workers on the roster.\n\nRun 'pay-run hire' to add one.",
            title="Roster",
            border_style="dim"
        ))
        return

    table = Table(title="Roster", box=box.SIMPLE_HEAD)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Rate", justify="right")
    table.add_column("Schedule")
    table.add_column("Union")
    table.add_column("Payment")
    table.add_column("Last paid", style="dim")

    for worker in workers:
        table.add_row(
            worker.id,
            worker.name,
            worker.category.value,
            _rate_cell(worker),
            worker.schedule,
            _union_cell(worker),
            describe_payment_method(worker),
            format_date(worker.last_paid) or "-",
        )

    console.print(table)
    console.print(f"Total: {len(workers)} worker(s)")


def render_payroll(console: Console, report: PayrollReport, committed: bool = True) -> None:
    """Render a payroll report, one table per category with lines.

    Args:
        console: Rich Console instance
        report: SDK PayrollReport
        committed: False for previews (nothing was marked paid)
    """
    title = f"Payroll for {format_date(report.pay_date)}"
    if not committed:
        title += " (preview)"

    if not report.lines:
        console.print(Panel("Nobody is due on this date.", title=title, border_style="yellow"))
        return

    console.print(f"[bold]{title}[/bold]")

    for category in CATEGORY_ORDER:
        lines = report.lines_for(category)
        if not lines:
            continue

        table = Table(title=category.value.title(), box=box.SIMPLE_HEAD, show_footer=True)
        table.add_column("Name", footer="Total")
        totals = report.totals(category)

        if category is Category.HOURLY:
            table.add_column("Hours", justify="right", footer=format_hours(totals.normal_hours))
            table.add_column("Extra", justify="right", footer=format_hours(totals.overtime_hours))
        elif category is Category.COMMISSIONED:
            table.add_column("Fixed", justify="right", footer=format_total(totals.fixed))
            table.add_column("Sales", justify="right", footer=format_total(totals.sales))
            table.add_column("Commission", justify="right", footer=format_total(totals.commission))

        table.add_column("Gross", justify="right", footer=format_total(totals.gross))
        table.add_column("Deductions", justify="right", footer=format_total(totals.deductions))
        table.add_column("Net", justify="right", style="green", footer=format_total(totals.net))
        table.add_column("Method")

        for line in lines:
            r = line.result
            cells = [line.name]
            if category is Category.HOURLY:
                cells += [format_hours(r.normal_hours), format_hours(r.overtime_hours)]
            elif category is Category.COMMISSIONED:
                cells += [format_total(r.fixed), format_total(r.sales), format_total(r.commission)]
            cells += [
                format_total(r.gross),
                format_total(r.deductions),
                format_total(r.net),
                line.payment_method,
            ]
            table.add_row(*cells)

        console.print(table)

    console.print(f"[bold]Payroll total:[/bold] {format_total(report.total_gross)}")
    if committed:
        console.print(f"Paid: {report.paid_count} worker(s)")
