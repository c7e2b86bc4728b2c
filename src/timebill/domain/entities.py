"""Domain model entities for timebill.

These are pure data classes representing business concepts, independent of
database schema. The temporal accounting functions only ever see these types,
so they can be exercised without any storage behind them.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Bounded:
    """A finite number of hours (an estimate or a ledger balance)."""

    hours: Decimal


@dataclass(frozen=True)
class Unbounded:
    """No hour ceiling. Used for unscoped/ad-hoc tasks."""


UNBOUNDED = Unbounded()

HourLimit = Union[Bounded, Unbounded]


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class EntryType(str, Enum):
    MEETING = "meeting"
    EXECUTION = "execution"
    PLANNING = "planning"


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    GENERATED = "generated"
    PAID = "paid"
    CANCELED = "canceled"


class PeriodStatus(str, Enum):
    NO_INVOICES = "no_invoices"
    PAID = "paid"
    GENERATED = "generated"
    PARTIALLY_PAID = "partially_paid"
    PENDING = "pending"


class Frequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class Company:
    """Company domain entity with its billing-cycle configuration."""

    id: str
    name: str
    billing_start_day: Optional[int]
    billing_end_day: Optional[int]
    daily_hours: Optional[Decimal]
    created_at: datetime


@dataclass(frozen=True)
class BillingConfig:
    """Resolved billing configuration; every field carries a value."""

    start_day: int
    end_day: int
    daily_hours: Decimal


@dataclass(frozen=True)
class Project:
    """Project domain entity."""

    id: str
    company_id: str
    title: str
    start_date: Optional[date]
    hourly_rate: Optional[Decimal]
    daily_hours: Optional[Decimal]
    created_at: datetime


@dataclass(frozen=True)
class Task:
    """Task ("atividade") domain entity."""

    id: str
    project_id: str
    title: str
    estimate: HourLimit
    cost_override: Optional[Decimal]
    consumed_hours: Decimal
    status: TaskStatus
    position: int
    start_override: Optional[str]
    end_override: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class WorkEntry:
    """Work entry ("atuação") domain entity.

    ``estimate_snapshot`` is the task estimate in force when the entry was
    created and ``status_snapshot`` the task status it left behind; both are
    stored with the entry and never recomputed.
    """

    id: str
    task_id: str
    entry_date: date
    time_of_day: Optional[str]
    hours: Decimal
    estimate_snapshot: HourLimit
    description: Optional[str]
    created_at: datetime
    entry_type: EntryType = EntryType.EXECUTION
    status_snapshot: TaskStatus = TaskStatus.IN_PROGRESS


@dataclass(frozen=True)
class LedgerLine:
    """One work entry positioned in its task ledger."""

    entry_id: str
    task_id: str
    entry_date: date
    time_of_day: Optional[str]
    available_before: HourLimit
    used: Decimal
    available_after: HourLimit
    entry_type: EntryType = EntryType.EXECUTION
    status_snapshot: TaskStatus = TaskStatus.IN_PROGRESS
    description: Optional[str] = None


@dataclass(frozen=True)
class BillingPeriod:
    """Concrete billing period. Never persisted."""

    start: date
    end: date
    label: str
    value: str


@dataclass(frozen=True)
class Recurrence:
    frequency: Frequency
    count: int


@dataclass(frozen=True)
class RelativeReminder:
    """Reminder dated a number of days before the invoice due date."""

    title: str
    days_before: int


@dataclass(frozen=True)
class FixedReminder:
    """Reminder pinned to an absolute ISO date, repeated with the series."""

    title: str
    date: str


ReminderTemplate = Union[RelativeReminder, FixedReminder]


@dataclass(frozen=True)
class InvoiceDraft:
    """Invoice definition before it is expanded into occurrences."""

    project_id: str
    title: str
    amount: Decimal
    due_date: date
    period_start: Optional[date]
    period_end: Optional[date]
    company_id: Optional[str] = None
    task_id: Optional[str] = None
    user_id: Optional[str] = None
    hours_worked: Decimal = Decimal("0")
    notes: Optional[str] = None
    reminders: tuple[ReminderTemplate, ...] = ()


@dataclass(frozen=True)
class Reminder:
    """Reminder ("lembrete") domain entity."""

    id: str
    invoice_id: str
    title: str
    date: date
    done: bool = False


@dataclass(frozen=True)
class Invoice:
    """Invoice ("fatura") domain entity."""

    id: str
    project_id: str
    title: str
    amount: Decimal
    due_date: date
    period_start: date
    period_end: date
    status: InvoiceStatus
    hours_worked: Decimal
    reminders: tuple[Reminder, ...] = ()
    company_id: Optional[str] = None
    task_id: Optional[str] = None
    user_id: Optional[str] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ScheduleRequest:
    """Scheduler input for one task."""

    task_id: str
    title: str
    hours: Decimal
    start_override: Optional[str] = None
    end_override: Optional[str] = None


@dataclass(frozen=True)
class ScheduleItem:
    """Scheduler output for one task."""

    task_id: str
    title: str
    hours: Decimal
    start: date
    end: date
    overridden: bool = False


@dataclass(frozen=True)
class PeriodSummary:
    """Invoices of one billing period with totals and aggregate status."""

    period_start: date
    period_end: date
    value: str
    status: PeriodStatus
    total_amount: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_pending: Decimal = Decimal("0")
    invoices: tuple[Invoice, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FinancialSummary:
    received_this_month: Decimal
    receivable: Decimal
    overdue: Decimal
