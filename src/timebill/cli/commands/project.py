"""Project management commands."""

import click
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.formatting import format_hours, format_money
from timebill.domain.company import CompanyService
from timebill.domain.errors import DomainError
from timebill.domain.project import ProjectService
from timebill.utils.amount_parser import parse_amount, parse_hours
from timebill.utils.date_parser import parse_date


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("company", metavar="COMPANY")
@click.argument("title", metavar="TITLE")
@click.option("--start-date", help="Project start date (YYYY-MM-DD or relative like 'today')")
@click.option("--rate", help="Hourly rate (e.g., 120 or 'R$ 120,00')")
@click.option("--daily-hours", help="Work hours per day, overriding the company default")
@click.pass_context
def create_project(
    ctx,
    company: str,
    title: str,
    start_date: str | None,
    rate: str | None,
    daily_hours: str | None,
):
    """Create a project for a company.

    COMPANY can be a company name or ID.

    Examples:
        timebill project create "Acme" "Website" --start-date 2024-03-04 --rate 120
    """
    db = ctx.obj["db"]
    service = ProjectService(db)

    try:
        start = parse_date(start_date) if start_date is not None else None
        hourly_rate = parse_amount(rate) if rate is not None else None
        hours = parse_hours(daily_hours) if daily_hours is not None else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        company_id = CompanyService(db).resolve_company(company)
        project_id = service.create_project(
            company_id=company_id,
            title=title,
            start_date=start,
            hourly_rate=hourly_rate,
            daily_hours=hours,
        )
        click.echo(f"Created project '{title}' (ID: {project_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@project_group.command("list")
@click.option("--company", help="Company name or ID")
@click.pass_context
def list_projects(ctx, company: str | None):
    """List projects with their estimated hours and cost."""
    db = ctx.obj["db"]
    service = ProjectService(db)

    company_id = None
    if company is not None:
        try:
            company_id = CompanyService(db).resolve_company(company)
        except DomainError as e:
            handle_domain_error(ctx, e)

    projects = service.list_projects(company_id=company_id)
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 100)
    for proj in projects:
        start = proj.start_date.isoformat() if proj.start_date else "-"
        click.echo(
            f"ID: {proj.id} | {proj.title:20s} | Start: {start:10s} | "
            f"Rate: {format_money(proj.hourly_rate)} | "
            f"Daily: {format_hours(proj.daily_hours)} | "
            f"Hours: {format_hours(service.estimated_hours(proj.id))} | "
            f"Cost: {format_money(service.project_cost(proj.id))}"
        )


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
