"""Schedules command group: list and register payment schedules."""

import click

from payrun.sdk import (
    InvalidScheduleError,
    PayrollSystem,
    ScheduleExistsError,
    get_schedules_path,
)


@click.group()
def schedules():
    """Manage payment schedules (schedules.yaml).

    \b
    Descriptor grammar:
      monthly <1..28>        fixed day of month
      monthly $              last business day of the month
      weekly <1..7>          every week on weekday (1 = Monday)
      weekly <1..52> <1..7>  every N weeks on weekday
    """
    pass


@schedules.command("list")
def schedules_list():
    """List built-in and registered schedules."""
    system = PayrollSystem.load()
    builtins = set(system.schedules.builtins)
    for descriptor in system.available_schedules():
        tag = " (built-in)" if descriptor in builtins else ""
        click.echo(f"{descriptor}{tag}")


@schedules.command("add")
@click.argument("descriptor")
def schedules_add(descriptor: str):
    """Register a custom schedule DESCRIPTOR.

    \b
    Examples:
      pay-run schedules add "monthly 15"
      pay-run schedules add "weekly 4 5"
    """
    system = PayrollSystem.load()
    try:
        system.register_schedule(descriptor)
    except (InvalidScheduleError, ScheduleExistsError) as e:
        raise click.ClickException(str(e))
    system.save()
    click.echo(f"Registered schedule: {descriptor}")
    click.echo(f"Saved to: {get_schedules_path()}")
