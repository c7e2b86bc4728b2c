"""Invoice commands."""

import click
from decimal import Decimal
from timebill.cli.error_handling import handle_domain_error
from timebill.cli.formatting import format_money
from timebill.domain.company import CompanyService
from timebill.domain.entities import (
    FixedReminder,
    Frequency,
    InvoiceDraft,
    InvoiceStatus,
    Recurrence,
    RelativeReminder,
)
from timebill.domain.errors import DomainError
from timebill.domain.recurrence import InvoiceService
from timebill.utils.amount_parser import parse_amount, parse_hours
from timebill.utils.date_parser import parse_date


@click.group()
def invoice_group():
    """Manage invoices and their reminders."""
    pass


@invoice_group.command("create")
@click.argument("project_id", metavar="PROJECT_ID")
@click.argument("title", metavar="TITLE")
@click.argument("amount", metavar="AMOUNT")
@click.option("--due", "due_date", required=True, help="Due date (YYYY-MM-DD or relative)")
@click.option("--period-start", help="Billing period start (YYYY-MM-DD)")
@click.option("--period-end", help="Billing period end (YYYY-MM-DD)")
@click.option("--hours", "hours_worked", help="Hours worked in the period")
@click.option("--task", "task_id", help="Task ID the invoice bills")
@click.option("--notes", help="Notes")
@click.option("--repeat", type=int, default=1, show_default=True, help="Number of occurrences")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency]),
    default=Frequency.MONTHLY.value,
    show_default=True,
    help="Interval between occurrences",
)
@click.option("--remind-days", type=int, multiple=True, help="Reminder N days before the due date (repeatable)")
@click.option("--remind-on", multiple=True, help="Reminder on a fixed date, repeated with the series (repeatable)")
@click.option("--reminder-title", help="Title for the reminders given with --remind-days/--remind-on")
@click.pass_context
def create_invoice(
    ctx,
    project_id: str,
    title: str,
    amount: str,
    due_date: str,
    period_start: str | None,
    period_end: str | None,
    hours_worked: str | None,
    task_id: str | None,
    notes: str | None,
    repeat: int,
    frequency: str,
    remind_days: tuple[int, ...],
    remind_on: tuple[str, ...],
    reminder_title: str | None,
):
    """Create an invoice, optionally as a recurring series.

    Every occurrence gets a 'Receive payment' reminder on its due date.

    Examples:
        timebill invoice create PROJECT_ID "March" 4800 --due 2024-04-05 \\
            --period-start 2024-02-26 --period-end 2024-03-25
        timebill invoice create PROJECT_ID "Retainer" 1500 --due 2024-01-31 \\
            --period-start 2024-01-01 --period-end 2024-01-31 --repeat 3 --remind-days 5
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)

    try:
        draft = InvoiceDraft(
            project_id=project_id,
            title=title,
            amount=parse_amount(amount),
            due_date=parse_date(due_date),
            period_start=parse_date(period_start) if period_start else None,
            period_end=parse_date(period_end) if period_end else None,
            task_id=task_id,
            hours_worked=parse_hours(hours_worked) if hours_worked else Decimal("0"),
            notes=notes,
            reminders=tuple(
                [RelativeReminder(title=reminder_title or "", days_before=days) for days in remind_days]
                + [FixedReminder(title=reminder_title or "", date=value) for value in remind_on]
            ),
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        invoices = service.create_invoices(
            draft, Recurrence(frequency=Frequency(frequency), count=repeat)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    for invoice in invoices:
        click.echo(
            f"Created invoice '{invoice.title}' due {invoice.due_date.isoformat()} "
            f"(ID: {invoice.id}, {len(invoice.reminders)} reminders)"
        )


@invoice_group.command("list")
@click.option("--company", help="Company name or ID")
@click.option("--project", "project_id", help="Project ID")
@click.option("--reminders", "show_reminders", is_flag=True, help="Show reminders of each invoice")
@click.pass_context
def list_invoices(ctx, company: str | None, project_id: str | None, show_reminders: bool):
    """List invoices ordered by due date."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    company_id = None
    if company is not None:
        try:
            company_id = CompanyService(db).resolve_company(company)
        except DomainError as e:
            handle_domain_error(ctx, e)

    invoices = service.list_invoices(company_id=company_id, project_id=project_id)
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo(f"\n{'Due':10s} {'Title':30s} {'Amount':>14s} {'Status':10s} {'Period':23s} ID")
    click.echo("-" * 120)
    for invoice in invoices:
        period = f"{invoice.period_start.isoformat()}..{invoice.period_end.isoformat()}"
        click.echo(
            f"{invoice.due_date.isoformat():10s} {invoice.title[:30]:30s} "
            f"{format_money(invoice.amount):>14s} {invoice.status.value:10s} "
            f"{period:23s} {invoice.id}"
        )
        if show_reminders:
            for reminder in invoice.reminders:
                mark = "x" if reminder.done else " "
                click.echo(f"    [{mark}] {reminder.date.isoformat()} {reminder.title} ({reminder.id})")


@invoice_group.command("pay")
@click.argument("invoice_id", metavar="INVOICE_ID")
@click.option("--date", "payment_date", help="Payment date (defaults to today)")
@click.pass_context
def pay_invoice(ctx, invoice_id: str, payment_date: str | None):
    """Record the payment of an invoice."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    try:
        paid_on = parse_date(payment_date) if payment_date is not None else None
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        invoice = service.mark_paid(invoice_id, paid_on)
        click.echo(f"Invoice '{invoice.title}' paid on {invoice.payment_date.isoformat()}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@invoice_group.command("status")
@click.argument("invoice_id", metavar="INVOICE_ID")
@click.argument("status", type=click.Choice([s.value for s in InvoiceStatus]))
@click.pass_context
def set_status(ctx, invoice_id: str, status: str):
    """Change the status of an invoice."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    try:
        invoice = service.set_status(invoice_id, InvoiceStatus(status))
        click.echo(f"Invoice '{invoice.title}' is now {invoice.status.value}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@invoice_group.command("remind-done")
@click.argument("reminder_id", metavar="REMINDER_ID")
@click.option("--undo", is_flag=True, help="Mark the reminder as not done")
@click.pass_context
def complete_reminder(ctx, reminder_id: str, undo: bool):
    """Mark an invoice reminder as done."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    try:
        service.complete_reminder(reminder_id, done=not undo)
        click.echo(f"Reminder {reminder_id} marked as {'not done' if undo else 'done'}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
