"""Work entry commands."""

import io

import click
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.formatting import format_hours, format_limit
from timebill.domain.entities import EntryType, TaskStatus
from timebill.domain.errors import DomainError
from timebill.domain.ledger import WorkEntryService
from timebill.domain.ledger_export import LedgerExportService
from timebill.utils.amount_parser import parse_hours
from timebill.utils.date_parser import parse_date, parse_time_of_day


@click.group()
def entry_group():
    """Log and review time spent on tasks."""
    pass


@entry_group.command("log")
@click.argument("task_id", metavar="TASK_ID")
@click.argument("hours", metavar="HOURS")
@click.option("--date", "entry_date", default="today", help="Work date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--time", "time_of_day", help="Start time of day (HH:MM)")
@click.option("--description", help="What was done")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice([t.value for t in EntryType]),
    default=EntryType.EXECUTION.value,
    show_default=True,
    help="Kind of work",
)
@click.option(
    "--status",
    "task_status",
    type=click.Choice([s.value for s in TaskStatus]),
    help="Task status to record with the entry (derived from the hours if omitted)",
)
@click.pass_context
def log_entry(
    ctx,
    task_id: str,
    hours: str,
    entry_date: str,
    time_of_day: str | None,
    description: str | None,
    entry_type: str,
    task_status: str | None,
):
    """Log hours against a task.

    Examples:
        timebill entry log TASK_ID 3
        timebill entry log TASK_ID 1,5 --date yesterday --time 14:00 --type meeting
    """
    db = ctx.obj["db"]
    service = WorkEntryService(db)

    try:
        parsed_hours = parse_hours(hours)
        parsed_date = parse_date(entry_date)
        parsed_time = parse_time_of_day(time_of_day)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        entry_id = service.log_entry(
            task_id=task_id,
            entry_date=parsed_date,
            hours=parsed_hours,
            time_of_day=parsed_time,
            description=description,
            entry_type=EntryType(entry_type),
            task_status=TaskStatus(task_status) if task_status else None,
        )
        click.echo(f"Logged {format_hours(parsed_hours)} on {parsed_date.isoformat()} (ID: {entry_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("list")
@click.option("--task", "task_id", help="Task ID")
@click.option("--project", "project_id", help="Project ID")
@click.pass_context
def list_entries(ctx, task_id: str | None, project_id: str | None):
    """Show the hour ledger of a task or project.

    HD is the balance available before each entry, HU the hours it used.
    Negative balances mean the task went over its estimate.
    """
    db = ctx.obj["db"]
    service = WorkEntryService(db)

    if (task_id is None) == (project_id is None):
        click.echo("Error: Provide exactly one of --task or --project", err=True)
        ctx.exit(1)

    try:
        if task_id is not None:
            lines = service.task_ledger(task_id)
        else:
            lines = service.project_ledger(project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not lines:
        click.echo("No work entries found.")
        return

    titles = {}
    click.echo(f"\n{'Date':10s} {'Time':5s} {'Task':20s} {'HD':>9s} {'HU':>7s} {'After':>9s}  ID")
    click.echo("-" * 100)
    for line in lines:
        if line.task_id not in titles:
            task = db.get_task(line.task_id)
            titles[line.task_id] = task.title if task else line.task_id
        click.echo(
            f"{line.entry_date.isoformat():10s} {line.time_of_day or '':5s} "
            f"{titles[line.task_id][:20]:20s} "
            f"{format_limit(line.available_before):>9s} "
            f"{format_hours(line.used):>7s} "
            f"{format_limit(line.available_after):>9s}  {line.entry_id}"
        )


@entry_group.command("edit")
@click.argument("entry_id", metavar="ENTRY_ID")
@click.option("--hours", help="Hours used")
@click.option("--date", "entry_date", help="Work date (YYYY-MM-DD or relative)")
@click.option("--time", "time_of_day", help="Start time of day (HH:MM), or empty string to clear")
@click.option("--description", help="What was done")
@click.option("--type", "entry_type", type=click.Choice([t.value for t in EntryType]), help="Kind of work")
@click.pass_context
def edit_entry(
    ctx,
    entry_id: str,
    hours: str | None,
    entry_date: str | None,
    time_of_day: str | None,
    description: str | None,
    entry_type: str | None,
):
    """Edit a work entry. The task ledger is recomputed.

    Examples:
        timebill entry edit ENTRY_ID --hours 4
        timebill entry edit ENTRY_ID --time ""  # Clear time of day
    """
    db = ctx.obj["db"]
    service = WorkEntryService(db)

    clear_time = time_of_day is not None and not time_of_day.strip()
    try:
        parsed_hours = parse_hours(hours) if hours is not None else None
        parsed_date = parse_date(entry_date) if entry_date is not None else None
        parsed_time = parse_time_of_day(time_of_day)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        service.update_entry(
            entry_id,
            entry_date=parsed_date,
            hours=parsed_hours,
            time_of_day=parsed_time,
            description=description,
            clear_time_of_day=clear_time,
            entry_type=EntryType(entry_type) if entry_type else None,
        )
        click.echo(f"Updated work entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("export")
@click.option("--task", "task_id", help="Task ID")
@click.option("--project", "project_id", help="Project ID")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="CSV file to write (defaults to stdout)")
@click.pass_context
def export_entries(ctx, task_id: str | None, project_id: str | None, output: str | None):
    """Export the hour ledger of a task or project as CSV.

    Columns: #, Date, Start, Project, Task, Type, Status, HD, HU, Description.

    Examples:
        timebill entry export --project PROJECT_ID -o ledger.csv
    """
    db = ctx.obj["db"]
    service = LedgerExportService(db)

    if (task_id is None) == (project_id is None):
        click.echo("Error: Provide exactly one of --task or --project", err=True)
        ctx.exit(1)

    try:
        if output is None:
            buffer = io.StringIO()
            service.export_csv(buffer, task_id=task_id, project_id=project_id)
            click.echo(buffer.getvalue(), nl=False)
            return
        with open(output, "w", newline="", encoding="utf-8") as handle:
            count = service.export_csv(handle, task_id=task_id, project_id=project_id)
        click.echo(f"Exported {count} work entries to {output}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("delete")
@click.argument("entry_id", metavar="ENTRY_ID")
@click.pass_context
def delete_entry(ctx, entry_id: str):
    """Delete a work entry."""
    db = ctx.obj["db"]
    service = WorkEntryService(db)

    try:
        service.delete_entry(entry_id)
        click.echo(f"Deleted work entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register work entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
