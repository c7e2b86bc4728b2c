"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the translation between
the ``Bounded | Unbounded`` estimate type and its two-column storage.
"""

from decimal import Decimal
from typing import Optional

from timebill.domain import entities as domain
from timebill.database.models import (
    Company as ORMCompany,
    Project as ORMProject,
    Task as ORMTask,
    WorkEntry as ORMWorkEntry,
    Invoice as ORMInvoice,
    Reminder as ORMReminder,
)


def limit_from_columns(hours: Optional[Decimal], unscoped: bool) -> domain.HourLimit:
    """Build an hour limit from stored hours and unscoped flag."""
    if unscoped or hours is None:
        return domain.UNBOUNDED
    return domain.Bounded(Decimal(hours))


def limit_to_columns(limit: domain.HourLimit) -> tuple[Optional[Decimal], bool]:
    """Split an hour limit into (hours, unscoped) for storage."""
    if isinstance(limit, domain.Unbounded):
        return None, True
    return limit.hours, False


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        billing_start_day=orm_company.billing_start_day,
        billing_end_day=orm_company.billing_end_day,
        daily_hours=orm_company.daily_hours,
        created_at=orm_company.created_at,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        company_id=orm_project.company_id,
        title=orm_project.title,
        start_date=orm_project.start_date,
        hourly_rate=orm_project.hourly_rate,
        daily_hours=orm_project.daily_hours,
        created_at=orm_project.created_at,
    )


def task_to_domain(orm_task: ORMTask) -> domain.Task:
    """Convert SQLAlchemy Task model to domain Task entity."""
    return domain.Task(
        id=orm_task.id,
        project_id=orm_task.project_id,
        title=orm_task.title,
        estimate=limit_from_columns(orm_task.estimate_hours, orm_task.is_unscoped),
        cost_override=orm_task.cost_override,
        consumed_hours=Decimal(orm_task.consumed_hours or 0),
        status=domain.TaskStatus(orm_task.status),
        position=orm_task.position,
        start_override=orm_task.start_override,
        end_override=orm_task.end_override,
        created_at=orm_task.created_at,
    )


def work_entry_to_domain(orm_entry: ORMWorkEntry) -> domain.WorkEntry:
    """Convert SQLAlchemy WorkEntry model to domain WorkEntry entity."""
    return domain.WorkEntry(
        id=orm_entry.id,
        task_id=orm_entry.task_id,
        entry_date=orm_entry.entry_date,
        time_of_day=orm_entry.time_of_day,
        hours=Decimal(orm_entry.hours),
        estimate_snapshot=limit_from_columns(
            orm_entry.estimate_snapshot, orm_entry.snapshot_unscoped
        ),
        description=orm_entry.description,
        created_at=orm_entry.created_at,
        entry_type=domain.EntryType(orm_entry.entry_type),
        status_snapshot=domain.TaskStatus(orm_entry.status_snapshot),
    )


def reminder_to_domain(orm_reminder: ORMReminder) -> domain.Reminder:
    """Convert SQLAlchemy Reminder model to domain Reminder entity."""
    return domain.Reminder(
        id=orm_reminder.id,
        invoice_id=orm_reminder.invoice_id,
        title=orm_reminder.title,
        date=orm_reminder.date,
        done=orm_reminder.done,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        project_id=orm_invoice.project_id,
        title=orm_invoice.title,
        amount=orm_invoice.amount,
        due_date=orm_invoice.due_date,
        period_start=orm_invoice.period_start,
        period_end=orm_invoice.period_end,
        status=domain.InvoiceStatus(orm_invoice.status),
        hours_worked=Decimal(orm_invoice.hours_worked or 0),
        reminders=tuple(reminder_to_domain(rem) for rem in orm_invoice.reminders),
        company_id=orm_invoice.company_id,
        task_id=orm_invoice.task_id,
        user_id=orm_invoice.user_id,
        payment_date=orm_invoice.payment_date,
        notes=orm_invoice.notes,
    )


def invoice_to_orm(invoice: domain.Invoice) -> ORMInvoice:
    """Convert a domain Invoice (with reminders) to new SQLAlchemy models."""
    return ORMInvoice(
        id=invoice.id,
        company_id=invoice.company_id,
        project_id=invoice.project_id,
        task_id=invoice.task_id,
        user_id=invoice.user_id,
        title=invoice.title,
        amount=invoice.amount,
        due_date=invoice.due_date,
        period_start=invoice.period_start,
        period_end=invoice.period_end,
        status=invoice.status.value,
        hours_worked=invoice.hours_worked,
        payment_date=invoice.payment_date,
        notes=invoice.notes,
        reminders=[
            ORMReminder(
                id=reminder.id,
                title=reminder.title,
                date=reminder.date,
                done=reminder.done,
                position=position,
            )
            for position, reminder in enumerate(invoice.reminders)
        ],
    )
