"""Pay Run CLI - Command-line interface for the payroll roster and pay runs."""

import json
from pathlib import Path
from typing import Callable, Optional, TypeVar

import click
from rich.console import Console

from payrun import __version__
from payrun.sdk import (
    HistoryError,
    PayrollSystem,
    UnknownScheduleError,
    WorkerError,
    format_hours,
    format_total,
    get_roster_path,
)

from .renderers.payroll_renderer import render_payroll, render_roster
from .schedules_commands import schedules as schedules_group
from .settings_commands import settings as settings_group

T = TypeVar("T")

# ValueError covers InvalidFieldError, InvalidScheduleError and pydantic's ValidationError.
# OSError comes from writing the payroll report.
DOMAIN_ERRORS = (WorkerError, HistoryError, UnknownScheduleError, ValueError, OSError)


def _mutate(action: Callable[[PayrollSystem], T]) -> T:
    """Load the system, apply one change and save it."""
    system = PayrollSystem.load()
    try:
        result = action(system)
    except DOMAIN_ERRORS as e:
        raise click.ClickException(str(e))
    system.save()
    return result


def _query(action: Callable[[PayrollSystem], T]) -> T:
    system = PayrollSystem.load()
    try:
        return action(system)
    except DOMAIN_ERRORS as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="pay-run")
def cli():
    """Pay Run - Payroll for hourly, salaried and commissioned workers.

    The roster is stored as roster.json in the data directory.

    \b
    Configuration is loaded from (in order):
    1. PAY_RUN_CONFIG_PATH environment variable
    2. ~/.config/pay-run/ (XDG default)

    Run 'pay-run settings show' to see effective paths.
    """
    pass


cli.add_command(settings_group)
cli.add_command(schedules_group)


# =============================================================================
# Roster
# =============================================================================


@cli.command("hire")
@click.argument("name")
@click.argument("address")
@click.argument("category", type=click.Choice(["hourly", "salaried", "commissioned"]))
@click.argument("rate")
@click.option("--commission", help="Commission rate (commissioned only), e.g. 0.05")
@click.option("--hire-date", help="Hire date (YYYY-MM-DD or d/M/YYYY)")
@click.option("--schedule", help="Schedule descriptor (default depends on category)")
def hire(name: str, address: str, category: str, rate: str,
         commission: Optional[str], hire_date: Optional[str], schedule: Optional[str]):
    """Hire a worker.

    RATE is the hourly rate for hourly workers, the monthly salary otherwise.

    \b
    Examples:
      pay-run hire "Ana Lima" "Rua 1" hourly 20,50 --hire-date 2005-01-01
      pay-run hire "Rui Melo" "Rua 2" commissioned 2000 --commission 0,05
    """
    worker_id = _mutate(lambda s: s.hire_worker(
        name, address, category, rate,
        commission_rate=commission,
        hire_date=hire_date,
        schedule=schedule,
    ))
    click.echo(f"Hired {name} (id {worker_id})")


@cli.command("fire")
@click.argument("worker_id")
def fire(worker_id: str):
    """Remove a worker from the roster."""
    _mutate(lambda s: s.fire_worker(worker_id))
    click.echo(f"Removed worker {worker_id}")


@cli.command("list")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def list_workers(output_format: str):
    """List workers on the roster."""
    workers = _query(lambda s: s.list_workers())

    if output_format == "json":
        click.echo(json.dumps([w.model_dump(mode="json") for w in workers], indent=2))
        return

    render_roster(Console(), workers)


@cli.command("edit")
@click.argument("worker_id")
@click.argument("field", type=click.Choice(["name", "address", "rate", "commission", "schedule", "hire_date"]))
@click.argument("value")
def edit(worker_id: str, field: str, value: str):
    """Change one FIELD of a worker."""
    _mutate(lambda s: s.update_worker(worker_id, field, value))
    click.echo(f"Updated {field} for worker {worker_id}")


@cli.command("category")
@click.argument("worker_id")
@click.argument("category", type=click.Choice(["hourly", "salaried", "commissioned"]))
@click.argument("amount", required=False)
def category(worker_id: str, category: str, amount: Optional[str]):
    """Move a worker to another CATEGORY.

    AMOUNT is the new rate for hourly/salaried (default: keep current)
    and the commission rate for commissioned (required).
    """
    _mutate(lambda s: s.change_category(worker_id, category, amount))
    click.echo(f"Worker {worker_id} is now {category}")


@cli.command("pay-method")
@click.argument("worker_id")
@click.argument("method", type=click.Choice(["cash", "mail", "bank"]))
@click.option("--bank", help="Bank name (bank only)")
@click.option("--branch", help="Branch (bank only)")
@click.option("--account", help="Account (bank only)")
def pay_method(worker_id: str, method: str, bank: Optional[str],
               branch: Optional[str], account: Optional[str]):
    """Set how a worker is paid."""
    _mutate(lambda s: s.set_payment_method(worker_id, method, bank, branch, account))
    click.echo(f"Worker {worker_id} paid by {method}")


# =============================================================================
# Union
# =============================================================================


@cli.group("union")
def union():
    """Manage union membership."""
    pass


@union.command("join")
@click.argument("worker_id")
@click.argument("member_id")
@click.argument("dues")
def union_join(worker_id: str, member_id: str, dues: str):
    """Make a worker a union member with MEMBER_ID and daily DUES."""
    _mutate(lambda s: s.join_union(worker_id, member_id, dues))
    click.echo(f"Worker {worker_id} joined the union as {member_id}")


@union.command("leave")
@click.argument("worker_id")
def union_leave(worker_id: str):
    """Remove a worker from the union."""
    _mutate(lambda s: s.leave_union(worker_id))
    click.echo(f"Worker {worker_id} left the union")


# =============================================================================
# Posting
# =============================================================================


@cli.group("post")
def post():
    """Post time entries, sales and union service fees."""
    pass


@post.command("hours")
@click.argument("worker_id")
@click.argument("day")
@click.argument("hours")
def post_hours(worker_id: str, day: str, hours: str):
    """Post HOURS worked on DAY by an hourly worker."""
    _mutate(lambda s: s.post_time_entry(worker_id, day, hours))
    click.echo(f"Posted {hours}h for worker {worker_id} on {day}")


@post.command("sale")
@click.argument("worker_id")
@click.argument("day")
@click.argument("amount")
def post_sale(worker_id: str, day: str, amount: str):
    """Post a sale of AMOUNT on DAY by a commissioned worker."""
    _mutate(lambda s: s.post_sale(worker_id, day, amount))
    click.echo(f"Posted sale of {amount} for worker {worker_id} on {day}")


@post.command("fee")
@click.argument("member_id")
@click.argument("day")
@click.argument("amount")
def post_fee(member_id: str, day: str, amount: str):
    """Post a union service fee for union member MEMBER_ID."""
    _mutate(lambda s: s.post_service_fee(member_id, day, amount))
    click.echo(f"Posted service fee of {amount} for member {member_id} on {day}")


# =============================================================================
# Queries and payroll
# =============================================================================


@cli.command("hours")
@click.argument("worker_id")
@click.argument("start")
@click.argument("end")
def hours(worker_id: str, start: str, end: str):
    """Show normal and overtime hours in [START, END)."""
    normal, overtime = _query(lambda s: s.hours_worked(worker_id, start, end))
    click.echo(f"Normal: {format_hours(normal)}")
    click.echo(f"Overtime: {format_hours(overtime)}")


@cli.command("total")
@click.argument("day")
def total(day: str):
    """Show the total gross payroll for DAY without paying anyone."""
    amount = _query(lambda s: s.total_payroll(day))
    click.echo(format_total(amount))


@cli.command("run")
@click.argument("day")
@click.option("--output", "-o", type=click.Path(), help="Write the text report to this file")
@click.option("--dry-run", is_flag=True, help="Show the payroll without marking anyone paid")
def run(day: str, output: Optional[str], dry_run: bool):
    """Run the payroll for DAY.

    Everyone due on DAY is paid; workers with positive net pay are
    marked paid so the next period starts after DAY.

    \b
    Examples:
      pay-run run 2005-01-31
      pay-run run 2005-01-31 --output payroll-2005-01-31.txt
      pay-run run 2005-01-31 --dry-run
    """
    if dry_run:
        report = _query(lambda s: s.preview_payroll(day))
        render_payroll(Console(), report, committed=False)
        return

    report = _mutate(lambda s: s.run_payroll(day, output=Path(output) if output else None))
    render_payroll(Console(), report)
    if output:
        click.echo(f"Report written to: {output}")
    click.echo(f"Roster saved to: {get_roster_path()}")


@cli.command("show")
@click.argument("worker_id")
def show(worker_id: str):
    """Show one worker as JSON."""
    worker = _query(lambda s: s.get_worker(worker_id))
    click.echo(json.dumps(worker.model_dump(mode="json"), indent=2))


@cli.command("reset")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def reset(force: bool):
    """Remove every worker and custom schedule."""
    if not force:
        click.confirm("Remove all workers and custom schedules?", abort=True)
    _mutate(lambda s: s.reset())
    click.echo(click.style("Reset complete.", fg="green"))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
