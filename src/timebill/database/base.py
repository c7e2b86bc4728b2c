"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from timebill.domain.entities import (
    BillingConfig,
    Company,
    EntryType,
    HourLimit,
    Invoice,
    InvoiceStatus,
    Project,
    Task,
    TaskStatus,
    WorkEntry,
)
from timebill.domain import config


class Database(ABC):
    """Abstract database interface for timebill."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Company operations
    @abstractmethod
    def create_company(
        self,
        name: str,
        billing_start_day: Optional[int] = None,
        billing_end_day: Optional[int] = None,
        daily_hours: Optional[Decimal] = None,
    ) -> str:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: str) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies."""
        pass

    @abstractmethod
    def update_company_billing(
        self,
        company_id: str,
        billing_start_day: Optional[int],
        billing_end_day: Optional[int],
        daily_hours: Optional[Decimal] = None,
    ) -> None:
        """Update a company's billing cycle configuration."""
        pass

    def get_billing_config(self, company_id: str) -> Optional[BillingConfig]:
        """Read a company's billing configuration with defaults applied."""
        company = self.get_company(company_id)
        if company is None:
            return None
        start_day, end_day = config.resolve_billing_days(
            company.billing_start_day, company.billing_end_day
        )
        return BillingConfig(
            start_day=start_day,
            end_day=end_day,
            daily_hours=config.resolve_daily_hours(company.daily_hours),
        )

    # Project operations
    @abstractmethod
    def create_project(
        self,
        company_id: str,
        title: str,
        start_date: Optional[date] = None,
        hourly_rate: Optional[Decimal] = None,
        daily_hours: Optional[Decimal] = None,
    ) -> str:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(self, company_id: Optional[str] = None) -> list[Project]:
        """List projects, optionally filtered by company."""
        pass

    # Task operations
    @abstractmethod
    def create_task(
        self,
        project_id: str,
        title: str,
        estimate: HourLimit,
        cost_override: Optional[Decimal] = None,
        position: int = 0,
        start_override: Optional[str] = None,
        end_override: Optional[str] = None,
    ) -> str:
        """Create a task. Returns task ID."""
        pass

    @abstractmethod
    def get_task(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        pass

    @abstractmethod
    def list_tasks(self, project_id: str) -> list[Task]:
        """List tasks of a project ordered by position, then creation."""
        pass

    @abstractmethod
    def update_task_progress(
        self, task_id: str, consumed_hours: Decimal, status: TaskStatus
    ) -> None:
        """Store a task's accumulated hours and status."""
        pass

    @abstractmethod
    def update_task_estimate(self, task_id: str, estimate: HourLimit) -> None:
        """Change a task's estimate."""
        pass

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        """Delete a task. Work entries are kept."""
        pass

    # Work entry operations
    @abstractmethod
    def create_work_entry(
        self,
        task_id: str,
        entry_date: date,
        hours: Decimal,
        estimate_snapshot: HourLimit,
        time_of_day: Optional[str] = None,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
        entry_type: EntryType = EntryType.EXECUTION,
        status_snapshot: TaskStatus = TaskStatus.IN_PROGRESS,
    ) -> str:
        """Create a work entry. Returns work entry ID."""
        pass

    @abstractmethod
    def get_work_entry(self, entry_id: str) -> Optional[WorkEntry]:
        """Get work entry by ID."""
        pass

    @abstractmethod
    def list_work_entries(
        self, task_id: Optional[str] = None, project_id: Optional[str] = None
    ) -> list[WorkEntry]:
        """List work entries, optionally filtered by task or project."""
        pass

    @abstractmethod
    def update_work_entry(
        self,
        entry_id: str,
        entry_date: Optional[date] = None,
        hours: Optional[Decimal] = None,
        time_of_day: Optional[str] = None,
        description: Optional[str] = None,
        clear_time_of_day: bool = False,
        entry_type: Optional[EntryType] = None,
    ) -> None:
        """Update work entry fields. The estimate and status snapshots never change."""
        pass

    @abstractmethod
    def delete_work_entry(self, entry_id: str) -> None:
        """Delete a work entry."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(self, invoice: Invoice) -> str:
        """Store an invoice with its reminders. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        """Get invoice by ID, with reminders."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        company_id: Optional[str] = None,
        project_id: Optional[str] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> list[Invoice]:
        """List invoices with optional filters.

        Period filters match by equality of the stored period bounds.
        """
        pass

    @abstractmethod
    def update_invoice_status(
        self,
        invoice_id: str,
        status: InvoiceStatus,
        payment_date: Optional[date] = None,
    ) -> None:
        """Update invoice status and, optionally, its payment date."""
        pass

    @abstractmethod
    def set_reminder_done(self, reminder_id: str, done: bool) -> bool:
        """Set a reminder's completion flag. Returns False if not found."""
        pass
