"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from timebill.database.models import (
    Company as ORMCompany,
    Task as ORMTask,
    WorkEntry as ORMWorkEntry,
    Invoice as ORMInvoice,
    Reminder as ORMReminder,
)
from timebill.database.mappers import (
    company_to_domain,
    invoice_to_domain,
    invoice_to_orm,
    limit_from_columns,
    limit_to_columns,
    task_to_domain,
    work_entry_to_domain,
)
from timebill.domain.entities import (
    UNBOUNDED,
    Bounded,
    Company,
    EntryType,
    Invoice,
    InvoiceStatus,
    Reminder,
    Task,
    TaskStatus,
    WorkEntry,
)


class TestLimitColumns:
    """Tests for the estimate column translation."""

    def test_bounded(self):
        assert limit_to_columns(Bounded(Decimal("7.5"))) == (Decimal("7.5"), False)
        assert limit_from_columns(Decimal("7.5"), False) == Bounded(Decimal("7.5"))

    def test_unbounded(self):
        assert limit_to_columns(UNBOUNDED) == (None, True)
        assert limit_from_columns(Decimal("0"), True) == UNBOUNDED
        assert limit_from_columns(None, False) == UNBOUNDED


class TestCompanyMapper:
    """Tests for Company mapper."""

    def test_company_to_domain(self):
        """Test converting ORM Company to domain Company."""
        orm_company = ORMCompany(
            id="c1",
            name="Acme",
            billing_start_day=26,
            billing_end_day=25,
            daily_hours=Decimal("6"),
            created_at=datetime.now(UTC),
        )
        company = company_to_domain(orm_company)

        assert isinstance(company, Company)
        assert company.id == "c1"
        assert company.billing_start_day == 26
        assert company.daily_hours == Decimal("6")


class TestTaskMapper:
    """Tests for Task mapper."""

    def test_unscoped_task_to_domain(self):
        orm_task = ORMTask(
            id="t1",
            project_id="p1",
            title="Support",
            estimate_hours=Decimal("0"),
            is_unscoped=True,
            consumed_hours=Decimal("3"),
            status="in_progress",
            position=2,
            created_at=datetime.now(UTC),
        )
        task = task_to_domain(orm_task)

        assert isinstance(task, Task)
        assert task.estimate == UNBOUNDED
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.position == 2


class TestWorkEntryMapper:
    """Tests for WorkEntry mapper."""

    def test_work_entry_to_domain(self):
        orm_entry = ORMWorkEntry(
            id="e1",
            task_id="t1",
            project_id="p1",
            entry_date=date(2024, 3, 4),
            time_of_day="09:00",
            hours=Decimal("2.5"),
            estimate_snapshot=Decimal("10"),
            snapshot_unscoped=False,
            created_at=datetime.now(UTC),
            entry_type="meeting",
            status_snapshot="done",
        )
        entry = work_entry_to_domain(orm_entry)

        assert isinstance(entry, WorkEntry)
        assert entry.hours == Decimal("2.5")
        assert entry.estimate_snapshot == Bounded(Decimal("10"))
        assert entry.time_of_day == "09:00"
        assert entry.entry_type == EntryType.MEETING
        assert entry.status_snapshot == TaskStatus.DONE


class TestInvoiceMapper:
    """Tests for Invoice mappers."""

    def _invoice(self):
        return Invoice(
            id="i1",
            project_id="p1",
            title="March",
            amount=Decimal("4800"),
            due_date=date(2024, 4, 5),
            period_start=date(2024, 2, 26),
            period_end=date(2024, 3, 25),
            status=InvoiceStatus.PENDING,
            hours_worked=Decimal("40"),
            reminders=(
                Reminder(id="r1", invoice_id="i1", title="Send", date=date(2024, 4, 1)),
                Reminder(id="r2", invoice_id="i1", title="Receive payment", date=date(2024, 4, 5)),
            ),
            company_id="c1",
        )

    def test_invoice_to_orm_keeps_reminder_order(self):
        orm_invoice = invoice_to_orm(self._invoice())

        assert orm_invoice.status == "pending"
        assert [(r.id, r.position) for r in orm_invoice.reminders] == [("r1", 0), ("r2", 1)]

    def test_invoice_to_domain(self):
        orm_invoice = ORMInvoice(
            id="i1",
            project_id="p1",
            company_id="c1",
            title="March",
            amount=Decimal("4800"),
            due_date=date(2024, 4, 5),
            period_start=date(2024, 2, 26),
            period_end=date(2024, 3, 25),
            status="paid",
            hours_worked=Decimal("40"),
            payment_date=date(2024, 4, 4),
            reminders=[
                ORMReminder(id="r1", invoice_id="i1", title="Send", date=date(2024, 4, 1), done=True)
            ],
        )
        invoice = invoice_to_domain(orm_invoice)

        assert isinstance(invoice, Invoice)
        assert invoice.status == InvoiceStatus.PAID
        assert invoice.payment_date == date(2024, 4, 4)
        assert invoice.reminders[0].done is True
        assert invoice.reminders[0].title == "Send"
