"""Billing period commands."""

import click
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.formatting import format_money
from timebill.domain import config
from timebill.domain.billing_periods import BillingPeriodService, format_period_label
from timebill.domain.company import CompanyService
from timebill.domain.errors import DomainError
from timebill.domain.period_status import PeriodStatusService
from timebill.utils.date_parser import parse_date


def _reference_date(ctx, today: str | None):
    if today is None:
        return None
    try:
        return parse_date(today)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


@click.group()
def period_group():
    """Billing periods and their invoice status."""
    pass


@period_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.option("--from", "start_offset", type=int, default=config.DEFAULT_PERIOD_OFFSETS[0], show_default=True, help="First month offset")
@click.option("--to", "end_offset", type=int, default=config.DEFAULT_PERIOD_OFFSETS[1], show_default=True, help="Last month offset")
@click.option("--today", help="Reference date (defaults to today)")
@click.pass_context
def list_periods(ctx, company: str, start_offset: int, end_offset: int, today: str | None):
    """List a company's billing periods with invoice totals.

    COMPANY can be a company name or ID.

    Examples:
        timebill period list "Acme"
        timebill period list "Acme" --from -3 --to 0
    """
    db = ctx.obj["db"]
    service = PeriodStatusService(db)
    reference = _reference_date(ctx, today)

    try:
        company_id = CompanyService(db).resolve_company(company)
        summaries = service.period_summaries(
            company_id, start_offset=start_offset, end_offset=end_offset, today=reference
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\n{'Period':25s} {'Status':15s} {'Total':>14s} {'Paid':>14s} {'Pending':>14s}")
    click.echo("-" * 86)
    for summary in summaries:
        label = format_period_label(summary.period_start, summary.period_end)
        click.echo(
            f"{label:25s} {summary.status.value:15s} "
            f"{format_money(summary.total_amount):>14s} "
            f"{format_money(summary.total_paid):>14s} "
            f"{format_money(summary.total_pending):>14s}"
        )


@period_group.command("default")
@click.argument("company", metavar="COMPANY")
@click.option("--today", help="Reference date (defaults to today)")
@click.pass_context
def default_period(ctx, company: str, today: str | None):
    """Show the oldest period that still needs attention."""
    db = ctx.obj["db"]
    reference = _reference_date(ctx, today)

    try:
        company_id = CompanyService(db).resolve_company(company)
        period = BillingPeriodService(db).default_period(company_id, today=reference)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if period is None:
        click.echo("No billing periods.")
        return
    click.echo(f"{period.label} ({period.value})")


@period_group.command("finances")
@click.argument("company", metavar="COMPANY")
@click.option("--today", help="Reference date (defaults to today)")
@click.pass_context
def finances(ctx, company: str, today: str | None):
    """Show money received this month, receivable and overdue."""
    db = ctx.obj["db"]
    reference = _reference_date(ctx, today)

    try:
        company_id = CompanyService(db).resolve_company(company)
        summary = PeriodStatusService(db).finances(company_id, today=reference)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Received this month: {format_money(summary.received_this_month)}")
    click.echo(f"Receivable:          {format_money(summary.receivable)}")
    click.echo(f"Overdue:             {format_money(summary.overdue)}")


def register_commands(cli):
    """Register period commands with main CLI."""
    cli.add_command(period_group, name="period")
