"""Company management commands."""

import click
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.formatting import format_hours
from timebill.domain import config
from timebill.domain.company import CompanyService
from timebill.domain.errors import DomainError
from timebill.utils.amount_parser import parse_hours


def _parse_daily_hours(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_hours(value)
    except ValueError as e:
        click.echo(f"Error: Invalid daily hours: {e}", err=True)
        ctx.exit(1)


@click.group()
def company_group():
    """Manage companies and their billing cycle."""
    pass


@company_group.command("create")
@click.argument("name", metavar="COMPANY_NAME")
@click.option("--start-day", type=int, help="First day of the billing cycle (1-31)")
@click.option("--end-day", type=int, help="Last day of the billing cycle (1-31)")
@click.option("--daily-hours", help="Default work hours per day (1-24)")
@click.pass_context
def create_company(
    ctx, name: str, start_day: int | None, end_day: int | None, daily_hours: str | None
):
    """Create a new company.

    Without --start-day/--end-day the billing cycle is the calendar month.
    A start day after the end day makes the cycle cross the month boundary.

    Examples:
        timebill company create "Acme"
        timebill company create "Acme" --start-day 26 --end-day 25
    """
    db = ctx.obj["db"]
    service = CompanyService(db)
    hours = _parse_daily_hours(ctx, daily_hours)

    try:
        company_id = service.create_company(
            name=name,
            billing_start_day=start_day,
            billing_end_day=end_day,
            daily_hours=hours,
        )
        click.echo(f"Created company '{name}' (ID: {company_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    db = ctx.obj["db"]
    service = CompanyService(db)

    companies = service.list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 80)
    for company in companies:
        start_day, end_day = config.resolve_billing_days(
            company.billing_start_day, company.billing_end_day
        )
        daily = config.resolve_daily_hours(company.daily_hours)
        click.echo(
            f"ID: {company.id} | {company.name:20s} | "
            f"Cycle: {start_day:2d} -> {end_day:2d} | Daily: {format_hours(daily)}"
        )


@company_group.command("billing")
@click.argument("company", metavar="COMPANY")
@click.option("--start-day", type=int, help="First day of the billing cycle (1-31)")
@click.option("--end-day", type=int, help="Last day of the billing cycle (1-31)")
@click.option("--daily-hours", help="Default work hours per day (1-24)")
@click.pass_context
def set_billing(
    ctx, company: str, start_day: int | None, end_day: int | None, daily_hours: str | None
):
    """Set a company's billing cycle.

    COMPANY can be a company name or ID. Omitted days reset to the
    calendar-month default.

    Examples:
        timebill company billing "Acme" --start-day 26 --end-day 25
        timebill company billing "Acme" --daily-hours 6
    """
    db = ctx.obj["db"]
    service = CompanyService(db)
    hours = _parse_daily_hours(ctx, daily_hours)

    try:
        company_id = service.resolve_company(company)
        service.update_billing(
            company_id,
            billing_start_day=start_day,
            billing_end_day=end_day,
            daily_hours=hours,
        )
        resolved_start, resolved_end = config.resolve_billing_days(start_day, end_day)
        click.echo(f"Billing cycle set to day {resolved_start} -> day {resolved_end}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
