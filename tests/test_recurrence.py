"""Tests for recurring invoice expansion and the invoice service."""

import pytest
from datetime import date
from decimal import Decimal
from itertools import count

from timebill.domain.entities import (
    FixedReminder,
    Frequency,
    InvoiceDraft,
    InvoiceStatus,
    Recurrence,
    RelativeReminder,
)
from timebill.domain.errors import (
    InvalidPeriodError,
    InvalidRecurrenceError,
    MissingPeriodError,
    NotFoundError,
)
from timebill.domain.recurrence import advance_date, expand_invoice, resolve_reminder_date


def _draft(**overrides):
    fields = dict(
        project_id="project-1",
        title="Retainer",
        amount=Decimal("1500.00"),
        due_date=date(2024, 1, 31),
        period_start=date(2024, 1, 1),
        period_end=date(2024, 1, 31),
    )
    fields.update(overrides)
    return InvoiceDraft(**fields)


def _sequential_ids():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


class TestAdvanceDate:
    """Tests for advance_date."""

    @pytest.mark.parametrize(
        "frequency,index,expected",
        [
            (Frequency.WEEKLY, 2, date(2024, 1, 24)),
            (Frequency.BIWEEKLY, 2, date(2024, 2, 7)),
            (Frequency.MONTHLY, 2, date(2024, 3, 10)),
            (Frequency.YEARLY, 2, date(2026, 1, 10)),
        ],
    )
    def test_frequencies(self, frequency, index, expected):
        assert advance_date(date(2024, 1, 10), frequency, index) == expected

    def test_index_zero_is_unchanged(self):
        assert advance_date(date(2024, 1, 10), Frequency.MONTHLY, 0) == date(2024, 1, 10)

    def test_month_end_is_clamped(self):
        """Test that Jan 31 + 1 month lands on the last day of February."""
        assert advance_date(date(2024, 1, 31), Frequency.MONTHLY, 1) == date(2024, 2, 29)
        assert advance_date(date(2023, 1, 31), Frequency.MONTHLY, 1) == date(2023, 2, 28)

    def test_leap_day_yearly(self):
        assert advance_date(date(2024, 2, 29), Frequency.YEARLY, 1) == date(2025, 2, 28)


class TestResolveReminderDate:
    """Tests for reminder template resolution."""

    def test_relative_reminder(self):
        template = RelativeReminder(title="Send", days_before=5)

        assert resolve_reminder_date(template, date(2024, 3, 10), Frequency.MONTHLY, 2) == date(2024, 3, 5)

    def test_fixed_reminder_moves_with_series(self):
        template = FixedReminder(title="Call", date="2024-01-20")

        assert resolve_reminder_date(template, date(2024, 3, 31), Frequency.MONTHLY, 2) == date(2024, 3, 20)

    def test_invalid_fixed_date(self):
        template = FixedReminder(title="Call", date="not-a-date")

        assert resolve_reminder_date(template, date(2024, 3, 31), Frequency.MONTHLY, 0) is None


class TestExpandInvoice:
    """Tests for expand_invoice."""

    def test_single_occurrence(self):
        """Test that count 1 yields one invoice without a title suffix."""
        invoices = expand_invoice(_draft(), Recurrence(Frequency.MONTHLY, 1))

        assert len(invoices) == 1
        assert invoices[0].title == "Retainer"
        assert invoices[0].due_date == date(2024, 1, 31)
        assert invoices[0].status == InvoiceStatus.PENDING

    def test_no_recurrence(self):
        invoices = expand_invoice(_draft())

        assert [inv.title for inv in invoices] == ["Retainer"]

    def test_monthly_series(self):
        """Test that count 3 monthly gives due, due + 1 month, due + 2 months."""
        invoices = expand_invoice(
            _draft(due_date=date(2024, 1, 10)), Recurrence(Frequency.MONTHLY, 3)
        )

        assert [inv.due_date for inv in invoices] == [
            date(2024, 1, 10),
            date(2024, 2, 10),
            date(2024, 3, 10),
        ]
        assert [inv.title for inv in invoices] == [
            "Retainer (1/3)",
            "Retainer (2/3)",
            "Retainer (3/3)",
        ]

    @pytest.mark.parametrize("frequency", list(Frequency))
    def test_due_dates_strictly_increase(self, frequency):
        invoices = expand_invoice(_draft(), Recurrence(frequency, 13))

        due_dates = [inv.due_date for inv in invoices]
        assert all(a < b for a, b in zip(due_dates, due_dates[1:]))

    def test_occurrences_are_independent(self):
        invoices = expand_invoice(_draft(), Recurrence(Frequency.WEEKLY, 3))

        assert len({inv.id for inv in invoices}) == 3
        for invoice in invoices:
            assert invoice.amount == Decimal("1500.00")
            assert invoice.period_start == date(2024, 1, 1)
            assert invoice.period_end == date(2024, 1, 31)
            assert all(rem.invoice_id == invoice.id for rem in invoice.reminders)

    def test_reminders_per_occurrence(self):
        """Test relative, fixed and implicit payment reminders in order."""
        draft = _draft(
            due_date=date(2024, 1, 10),
            reminders=(
                RelativeReminder(title="Send invoice", days_before=5),
                FixedReminder(title="Call client", date="2024-01-02"),
            ),
        )

        invoices = expand_invoice(draft, Recurrence(Frequency.MONTHLY, 2), id_factory=_sequential_ids())

        second = invoices[1]
        assert [(r.title, r.date) for r in second.reminders] == [
            ("Send invoice", date(2024, 2, 5)),
            ("Call client", date(2024, 2, 2)),
            ("Receive payment", date(2024, 2, 10)),
        ]

    def test_payment_reminder_always_added(self):
        invoices = expand_invoice(_draft())

        assert [(r.title, r.date) for r in invoices[0].reminders] == [
            ("Receive payment", date(2024, 1, 31))
        ]

    def test_invalid_fixed_reminder_is_dropped(self, caplog):
        """Test that a bad fixed date drops only that reminder."""
        draft = _draft(
            reminders=(
                FixedReminder(title="Broken", date="2024-02-30"),
                RelativeReminder(title="Heads up", days_before=1),
            )
        )

        invoices = expand_invoice(draft)

        assert [r.title for r in invoices[0].reminders] == ["Heads up", "Receive payment"]
        assert "Dropping reminder" in caplog.text

    def test_blank_reminder_title_uses_default(self):
        draft = _draft(reminders=(RelativeReminder(title="  ", days_before=3),))

        invoices = expand_invoice(draft)

        assert invoices[0].reminders[0].title == "Reminder"

    def test_count_below_two_ignores_frequency(self):
        invoices = expand_invoice(_draft(), Recurrence(Frequency.YEARLY, 1))

        assert invoices[0].due_date == date(2024, 1, 31)

    def test_count_below_one_raises(self):
        with pytest.raises(InvalidRecurrenceError):
            expand_invoice(_draft(), Recurrence(Frequency.MONTHLY, 0))

    def test_missing_period_raises(self):
        with pytest.raises(MissingPeriodError):
            expand_invoice(_draft(period_start=None))
        with pytest.raises(MissingPeriodError):
            expand_invoice(_draft(period_end=None))

    def test_inverted_period_raises(self):
        with pytest.raises(InvalidPeriodError):
            expand_invoice(_draft(period_start=date(2024, 2, 1), period_end=date(2024, 1, 1)))


class TestInvoiceService:
    """Tests for InvoiceService."""

    def test_create_invoices_persists_series(self, invoice_service, sample_project, sample_company):
        draft = _draft(
            project_id=sample_project.id,
            reminders=(RelativeReminder(title="Send", days_before=3),),
        )

        created = invoice_service.create_invoices(draft, Recurrence(Frequency.MONTHLY, 3))
        stored = invoice_service.list_invoices(project_id=sample_project.id)

        assert [inv.id for inv in stored] == [inv.id for inv in created]
        assert all(inv.company_id == sample_company.id for inv in stored)
        assert [r.title for r in stored[0].reminders] == ["Send", "Receive payment"]

    def test_create_invoices_unknown_project(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.create_invoices(_draft(project_id="missing"))

    def test_mark_paid_sets_status_and_date(self, invoice_service, sample_project):
        [invoice] = invoice_service.create_invoices(_draft(project_id=sample_project.id))

        paid = invoice_service.mark_paid(invoice.id, date(2024, 2, 2))

        assert paid.status == InvoiceStatus.PAID
        assert paid.payment_date == date(2024, 2, 2)

    def test_set_status(self, invoice_service, sample_project):
        [invoice] = invoice_service.create_invoices(_draft(project_id=sample_project.id))

        updated = invoice_service.set_status(invoice.id, InvoiceStatus.GENERATED)

        assert updated.status == InvoiceStatus.GENERATED

    def test_complete_reminder(self, invoice_service, sample_project):
        [invoice] = invoice_service.create_invoices(_draft(project_id=sample_project.id))
        reminder = invoice.reminders[0]

        invoice_service.complete_reminder(reminder.id)

        assert invoice_service.get_invoice(invoice.id).reminders[0].done is True

    def test_complete_unknown_reminder(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.complete_reminder("missing")
