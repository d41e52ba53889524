"""Cadence CLI - recurrence and scheduling."""

import json
import logging
import sys
from datetime import datetime

import click

from .config import load_config
from .core.recurrence import (
    InvalidRecurrenceError,
    RecurrencePattern,
    RecurrenceType,
    calculate_next_occurrence,
    format_pattern,
    normalize_pattern,
)
from .core.tasks import Priority, SchedulableTask
from .ports.task_store import TaskStoreError
from .workflows import complete_task, get_store, suggest_time_slots


def _parse_int_list(value: str | None) -> tuple[int, ...] | None:
    if not value:
        return None
    try:
        return tuple(int(v.strip()) for v in value.split(",") if v.strip())
    except ValueError:
        raise click.BadParameter("expected comma-separated integers, e.g. 1,3,5")


@click.group()
@click.version_option(package_name="cadence-planner")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Cadence - recurring tasks and time slot suggestions."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--estimate", "-e", type=int, required=True, help="Task duration in minutes")
@click.option(
    "--priority",
    "-p",
    type=click.Choice([p.value for p in Priority]),
    default=Priority.NONE.value,
    show_default=True,
)
@click.option("--deadline", default=None, help="Deadline (YYYY-MM-DDTHH:MM)")
@click.option("--count", "-n", type=click.IntRange(1, 20), default=None, help="Number of suggestions (1-20)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def suggest(estimate: int, priority: str, deadline: str | None, count: int | None, as_json: bool):
    """Suggest time slots for a task."""
    if estimate <= 0:
        click.echo("Error: estimate must be a positive number of minutes", err=True)
        sys.exit(1)

    try:
        deadline_dt = datetime.fromisoformat(deadline) if deadline else None
    except ValueError:
        click.echo(f"Error: invalid deadline {deadline!r}", err=True)
        sys.exit(1)

    config = load_config()
    task = SchedulableTask(estimate=estimate, priority=Priority(priority), deadline=deadline_dt)
    try:
        suggestions = suggest_time_slots(task, get_store(config), count=count, config=config)
    except TaskStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([s.to_dict() for s in suggestions], indent=2))
        return

    if not suggestions:
        click.echo("No available time slots found.")
        return

    for s in suggestions:
        click.echo(f"[{s.score:3}] {s.slot.format()}  {s.reason}")


@main.command("next")
@click.argument("current")
@click.option(
    "--type",
    "-t",
    "kind",
    type=click.Choice([t.value for t in RecurrenceType]),
    required=True,
)
@click.option("--interval", "-i", type=int, default=None)
@click.option("--weekdays", default=None, help="Comma-separated weekdays, 0=Sunday (custom)")
@click.option("--ordinal", type=int, default=None, help="Nth weekday of the month (custom)")
@click.option("--ordinal-weekday", type=int, default=None, help="Weekday for --ordinal, 0=Sunday")
@click.option("--month-day", type=int, default=None, help="Day of month (custom)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def next_occurrence(
    current: str,
    kind: str,
    interval: int | None,
    weekdays: str | None,
    ordinal: int | None,
    ordinal_weekday: int | None,
    month_day: int | None,
    as_json: bool,
):
    """Show the occurrence after CURRENT (YYYY-MM-DD or YYYY-MM-DDTHH:MM)."""
    try:
        current_dt = datetime.fromisoformat(current)
    except ValueError:
        click.echo(f"Error: invalid date {current!r}", err=True)
        sys.exit(1)

    try:
        pattern = normalize_pattern(
            RecurrencePattern(
                type=RecurrenceType(kind),
                interval=interval,
                weekdays=_parse_int_list(weekdays),
                ordinal=ordinal,
                ordinal_weekday=ordinal_weekday,
                month_day=month_day,
            )
        )
    except InvalidRecurrenceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    next_dt = calculate_next_occurrence(current_dt, pattern)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "pattern": pattern.to_dict(),
                    "description": format_pattern(pattern),
                    "next": next_dt.isoformat() if next_dt else None,
                },
                indent=2,
            )
        )
        return

    click.echo(format_pattern(pattern))
    if next_dt is None:
        click.echo("No next occurrence.")
    else:
        click.echo(f"Next: {next_dt.strftime('%A, %B %d, %Y %H:%M')}")


@main.command()
@click.argument("task_id")
def complete(task_id: str):
    """Toggle completion of TASK_ID, spawning the next occurrence if recurring."""
    config = load_config()
    try:
        task, spawned_id = complete_task(task_id, get_store(config))
    except TaskStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    state = "completed" if task.completed else "reopened"
    click.echo(f"✓ {task.name} {state}")
    if spawned_id:
        click.echo(f"  Next occurrence created: {spawned_id}")


if __name__ == "__main__":
    main()
