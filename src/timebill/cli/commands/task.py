"""Task management commands."""

import click
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.formatting import format_hours, format_limit, format_money
from timebill.domain import config
from timebill.domain.entities import Bounded
from timebill.domain.errors import DomainError
from timebill.domain.ledger import remaining_hours, task_cost
from timebill.domain.project import ProjectService, TaskService
from timebill.domain.scheduler import estimate_end_date
from timebill.utils.amount_parser import parse_amount, parse_hours
from timebill.utils.date_parser import parse_iso_date


@click.group()
def task_group():
    """Manage project tasks."""
    pass


@task_group.command("add")
@click.argument("project_id", metavar="PROJECT_ID")
@click.argument("title", metavar="TITLE")
@click.option("--hours", help="Hour estimate (e.g., 10 or 2,5)")
@click.option("--unscoped", is_flag=True, help="Ad-hoc task without an hour ceiling")
@click.option("--cost", help="Manual cost replacing estimate x hourly rate")
@click.option("--start", "start_override", help="Pin the task start date (YYYY-MM-DD)")
@click.option("--end", "end_override", help="Pin the task end date (YYYY-MM-DD)")
@click.pass_context
def add_task(
    ctx,
    project_id: str,
    title: str,
    hours: str | None,
    unscoped: bool,
    cost: str | None,
    start_override: str | None,
    end_override: str | None,
):
    """Add a task at the end of a project's schedule.

    Examples:
        timebill task add PROJECT_ID "Landing page" --hours 16
        timebill task add PROJECT_ID "Support" --unscoped
        timebill task add PROJECT_ID "Launch" --hours 8 --start 2024-04-01
    """
    db = ctx.obj["db"]
    service = TaskService(db)

    if unscoped and hours is not None:
        click.echo("Error: --hours and --unscoped are mutually exclusive", err=True)
        ctx.exit(1)
    if not unscoped and hours is None:
        click.echo("Error: Provide --hours or --unscoped", err=True)
        ctx.exit(1)

    try:
        estimate_hours = None if unscoped else parse_hours(hours)
        cost_override = parse_amount(cost) if cost is not None else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        task_id = service.create_task(
            project_id=project_id,
            title=title,
            estimate_hours=estimate_hours,
            cost_override=cost_override,
            start_override=start_override,
            end_override=end_override,
        )
        click.echo(f"Created task '{title}' (ID: {task_id})")
        pinned_start = parse_iso_date(start_override)
        if estimate_hours is not None and pinned_start is not None and end_override is None:
            project = ProjectService(db).get_project(project_id)
            billing = db.get_billing_config(project.company_id)
            daily = config.resolve_daily_hours(
                project.daily_hours, billing.daily_hours if billing else None
            )
            end = estimate_end_date(pinned_start, estimate_hours, daily)
            click.echo(f"Estimated end date: {end.isoformat()}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@task_group.command("list")
@click.argument("project_id", metavar="PROJECT_ID")
@click.pass_context
def list_tasks(ctx, project_id: str):
    """List the tasks of a project in schedule order."""
    db = ctx.obj["db"]
    try:
        project = ProjectService(db).get_project(project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    tasks = TaskService(db).list_tasks(project_id)
    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo(f"\nTasks of '{project.title}':")
    click.echo("-" * 110)
    for task in tasks:
        left = remaining_hours(task.estimate, task.consumed_hours)
        flag = " (over budget)" if isinstance(left, Bounded) and left.hours < 0 else ""
        click.echo(
            f"ID: {task.id} | {task.title:20s} | {task.status.value:11s} | "
            f"Estimate: {format_limit(task.estimate):>9s} | "
            f"Used: {format_hours(task.consumed_hours):>7s} | "
            f"Left: {format_limit(left):>9s}{flag} | "
            f"Cost: {format_money(task_cost(task, project.hourly_rate))}"
        )


@task_group.command("estimate")
@click.argument("task_id", metavar="TASK_ID")
@click.argument("hours", metavar="HOURS")
@click.pass_context
def change_estimate(ctx, task_id: str, hours: str):
    """Change a task's hour estimate.

    HOURS is a number of hours or 'unscoped'. Work already logged keeps the
    estimate it was logged against.
    """
    db = ctx.obj["db"]
    service = TaskService(db)

    try:
        estimate_hours = None if hours.strip().lower() == "unscoped" else parse_hours(hours)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        task = service.change_estimate(task_id, estimate_hours)
        click.echo(f"Estimate of '{task.title}' set to {format_limit(task.estimate)}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@task_group.command("delete")
@click.argument("task_id", metavar="TASK_ID")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_task(ctx, task_id: str, yes: bool):
    """Delete a task. Its work entries are kept as history."""
    db = ctx.obj["db"]
    service = TaskService(db)

    try:
        task = service.get_task(task_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete task '{task.title}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_task(task_id)
        click.echo(f"Deleted task '{task.title}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register task commands with main CLI."""
    cli.add_command(task_group, name="task")
