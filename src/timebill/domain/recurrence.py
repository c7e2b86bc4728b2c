"""Recurring invoice expansion.

One invoice definition becomes ``count`` independent invoices whose due
dates, titles and reminders are offset by the chosen frequency.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from timebill.database.base import Database
from timebill.domain import config
from timebill.domain.entities import (
    FixedReminder,
    Frequency,
    Invoice,
    InvoiceDraft,
    InvoiceStatus,
    Recurrence,
    RelativeReminder,
    Reminder,
    ReminderTemplate,
)
from timebill.domain.errors import (
    InvalidPeriodError,
    InvalidRecurrenceError,
    MissingPeriodError,
    NotFoundError,
    entity_not_found,
    occurrence_count_too_low,
    period_bounds_required,
    period_end_before_start,
)
from timebill.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


def advance_date(base: date, frequency: Optional[Frequency], index: int) -> date:
    """Advance ``base`` by ``index`` periods of ``frequency``.

    Month and year steps land on the last day of the target month when the
    base day does not exist there (Jan 31 + 1 month = Feb 29 in 2024).
    """
    if index == 0 or frequency is None:
        return base
    if frequency == Frequency.WEEKLY:
        return base + timedelta(days=7 * index)
    if frequency == Frequency.BIWEEKLY:
        return base + timedelta(days=14 * index)
    if frequency == Frequency.MONTHLY:
        return base + relativedelta(months=index)
    if frequency == Frequency.YEARLY:
        return base + relativedelta(years=index)
    raise ValueError(f"Unsupported frequency: {frequency!r}")


def resolve_reminder_date(
    template: ReminderTemplate,
    due_date: date,
    frequency: Optional[Frequency],
    index: int,
) -> Optional[date]:
    """Resolve a reminder template for occurrence ``index``.

    Returns None when a fixed template carries an unparseable date.
    """
    if isinstance(template, RelativeReminder):
        return due_date - timedelta(days=template.days_before)
    if isinstance(template, FixedReminder):
        pinned = parse_iso_date(template.date)
        if pinned is None:
            return None
        return advance_date(pinned, frequency, index)
    raise TypeError(f"Unknown reminder template: {template!r}")


def _validate_draft(draft: InvoiceDraft) -> None:
    if draft.period_start is None or draft.period_end is None:
        raise MissingPeriodError(period_bounds_required())
    if draft.period_end < draft.period_start:
        raise InvalidPeriodError(
            period_end_before_start(draft.period_start, draft.period_end)
        )


def expand_invoice(
    draft: InvoiceDraft,
    recurrence: Optional[Recurrence] = None,
    id_factory: Callable[[], str] = new_id,
) -> list[Invoice]:
    """Expand an invoice definition into its occurrences.

    Args:
        draft: Base invoice fields and reminder templates
        recurrence: Frequency and occurrence count; None means one invoice
        id_factory: Generator for invoice and reminder IDs

    Returns:
        One pending invoice per occurrence, each with its own reminders:
        the templates in order, then a "Receive payment" reminder on the
        due date

    Raises:
        MissingPeriodError: If the draft has no period bounds
        InvalidPeriodError: If the period ends before it starts
        InvalidRecurrenceError: If the occurrence count is below one
    """
    _validate_draft(draft)

    count = 1
    frequency = None
    if recurrence is not None:
        if recurrence.count < 1:
            raise InvalidRecurrenceError(occurrence_count_too_low(recurrence.count))
        count = recurrence.count
        if count > 1:
            frequency = recurrence.frequency

    invoices = []
    for index in range(count):
        invoice_id = id_factory()
        due_date = advance_date(draft.due_date, frequency, index)

        reminders = []
        for template in draft.reminders:
            reminder_date = resolve_reminder_date(template, due_date, frequency, index)
            if reminder_date is None:
                logger.warning(
                    "Dropping reminder %r: invalid date %r",
                    template.title,
                    getattr(template, "date", None),
                )
                continue
            reminders.append(
                Reminder(
                    id=id_factory(),
                    invoice_id=invoice_id,
                    title=config.resolve_reminder_title(template.title),
                    date=reminder_date,
                )
            )
        reminders.append(
            Reminder(
                id=id_factory(),
                invoice_id=invoice_id,
                title=config.PAYMENT_REMINDER_TITLE,
                date=due_date,
            )
        )

        title = draft.title
        if count > 1:
            title = f"{draft.title} ({index + 1}/{count})"

        invoices.append(
            Invoice(
                id=invoice_id,
                project_id=draft.project_id,
                title=title,
                amount=draft.amount,
                due_date=due_date,
                period_start=draft.period_start,
                period_end=draft.period_end,
                status=InvoiceStatus.PENDING,
                hours_worked=draft.hours_worked,
                reminders=tuple(reminders),
                company_id=draft.company_id,
                task_id=draft.task_id,
                user_id=draft.user_id,
                notes=draft.notes,
            )
        )

    return invoices


class InvoiceService:
    """Service for creating and updating invoices."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_invoices(
        self, draft: InvoiceDraft, recurrence: Optional[Recurrence] = None
    ) -> list[Invoice]:
        """Expand a draft and persist every occurrence.

        Raises:
            NotFoundError: If the project doesn't exist
            MissingPeriodError, InvalidPeriodError, InvalidRecurrenceError:
                See expand_invoice
        """
        project = self.db.get_project(draft.project_id)
        if project is None:
            raise NotFoundError(entity_not_found("Project", draft.project_id))
        if draft.company_id is None:
            draft = replace(draft, company_id=project.company_id)

        invoices = expand_invoice(draft, recurrence)
        for invoice in invoices:
            self.db.create_invoice(invoice)
        logger.info("Created %d invoice(s) for project %s", len(invoices), draft.project_id)
        return invoices

    def get_invoice(self, invoice_id: str) -> Invoice:
        """Get invoice by ID.

        Raises:
            NotFoundError: If the invoice doesn't exist
        """
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(entity_not_found("Invoice", invoice_id))
        return invoice

    def list_invoices(
        self,
        company_id: Optional[str] = None,
        project_id: Optional[str] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> list[Invoice]:
        """List invoices ordered by due date."""
        invoices = self.db.list_invoices(
            company_id=company_id,
            project_id=project_id,
            period_start=period_start,
            period_end=period_end,
        )
        return sorted(invoices, key=lambda invoice: invoice.due_date)

    def mark_paid(self, invoice_id: str, payment_date: Optional[date] = None) -> Invoice:
        """Record a payment; an invoice with a payment date is paid."""
        self.get_invoice(invoice_id)
        self.db.update_invoice_status(
            invoice_id,
            status=InvoiceStatus.PAID,
            payment_date=payment_date or date.today(),
        )
        return self.get_invoice(invoice_id)

    def set_status(self, invoice_id: str, status: InvoiceStatus) -> Invoice:
        """Change an invoice status."""
        self.get_invoice(invoice_id)
        self.db.update_invoice_status(invoice_id, status=status)
        return self.get_invoice(invoice_id)

    def complete_reminder(self, reminder_id: str, done: bool = True) -> None:
        """Mark a reminder as done (or not done)."""
        if not self.db.set_reminder_done(reminder_id, done):
            raise NotFoundError(entity_not_found("Reminder", reminder_id))
