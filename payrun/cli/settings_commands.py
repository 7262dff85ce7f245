"""settings.json commands: where the roster lives and which schedule new hires get."""

import click
from pathlib import Path

from payrun.sdk import (
    DEFAULT_SCHEDULES,
    InvalidScheduleError,
    get_data_path,
    get_roster_path,
    get_settings_path,
    load_settings,
    parse_schedule,
    save_settings,
    set_setting,
)

BUILT_IN = {category.value: text for category, text in DEFAULT_SCHEDULES.items()}


def _drop_setting(key: str) -> None:
    current = load_settings()
    if current.pop(key, None) is not None:
        save_settings(current)


@click.group()
def settings():
    """Show or change settings.json (data_dir, default_schedules)."""
    pass


@settings.command("show")
def settings_show():
    """Print the settings file and the values in effect."""
    current = load_settings()
    overrides = current.get("default_schedules") or {}

    click.echo(f"Settings file: {get_settings_path()}")
    for key, value in current.items():
        click.echo(f"  {key}: {value}")
    click.echo(f"Roster: {get_roster_path()}")
    click.echo("Default schedules:")
    for category, descriptor in BUILT_IN.items():
        click.echo(f"  {category}: {overrides.get(category, descriptor)}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path(file_okay=False))
@click.option("--clear", is_flag=True, help="Go back to the XDG data directory")
def settings_data_dir(path, clear):
    """Point the roster at PATH, or print the current data directory."""
    if clear:
        _drop_setting("data_dir")
    elif path:
        set_setting("data_dir", str(Path(path).expanduser().resolve()))
    click.echo(f"Data directory: {get_data_path()}")


@settings.command("schedule")
@click.argument("category", type=click.Choice(list(BUILT_IN)))
@click.argument("descriptor", required=False)
@click.option("--clear", is_flag=True, help="Use the built-in schedule again")
def settings_schedule(category, descriptor, clear):
    """Set the schedule new CATEGORY hires (and category changes) get.

    \b
    Examples:
      pay-run settings schedule hourly "weekly 2 5"
      pay-run settings schedule hourly --clear
    """
    overrides = dict(load_settings().get("default_schedules") or {})
    if clear:
        overrides.pop(category, None)
    elif descriptor:
        try:
            overrides[category] = parse_schedule(descriptor).text
        except InvalidScheduleError as e:
            raise click.ClickException(str(e))
    else:
        raise click.UsageError("Give a DESCRIPTOR or --clear")

    if overrides:
        set_setting("default_schedules", overrides)
    else:
        _drop_setting("default_schedules")
    click.echo(f"{category}: {overrides.get(category, BUILT_IN[category])}")
