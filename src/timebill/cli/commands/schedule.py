"""Schedule command."""

import click
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.formatting import format_hours
from timebill.domain.errors import DomainError
from timebill.domain.scheduler import ScheduleService
from timebill.utils.date_parser import parse_date


@click.command("schedule")
@click.argument("project_id", metavar="PROJECT_ID")
@click.option("--today", help="Start date for projects without one (YYYY-MM-DD)")
@click.pass_context
def schedule(ctx, project_id: str, today: str | None):
    """Show a project's tasks laid out over business days.

    Tasks run one after another from the project start date. Weekends are
    skipped; tasks with pinned dates are marked with '*'.
    """
    db = ctx.obj["db"]
    service = ScheduleService(db)

    try:
        reference = parse_date(today) if today is not None else None
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        items = service.project_schedule(project_id, today=reference)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not items:
        click.echo("No tasks found.")
        return

    click.echo(f"\n{'Task':30s} {'Hours':>7s} {'Start':>10s} {'End':>10s}")
    click.echo("-" * 62)
    for item in items:
        marker = "*" if item.overridden else ""
        click.echo(
            f"{item.title[:30]:30s} {format_hours(item.hours):>7s} "
            f"{item.start.isoformat():>10s} {item.end.isoformat():>10s}{marker}"
        )


def register_commands(cli):
    """Register schedule command with main CLI."""
    cli.add_command(schedule)
