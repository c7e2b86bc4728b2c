"""Shared pytest fixtures for timebill tests."""

import tempfile
import os
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal
import pytest

from timebill.database.factories import create_sqlite_database
from timebill.domain.billing_periods import BillingPeriodService
from timebill.domain.company import CompanyService
from timebill.domain.entities import Bounded, WorkEntry
from timebill.domain.ledger import WorkEntryService
from timebill.domain.period_status import PeriodStatusService
from timebill.domain.project import ProjectService, TaskService
from timebill.domain.recurrence import InvoiceService
from timebill.domain.scheduler import ScheduleService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def task_service(temp_db):
    """Create a TaskService with a temporary database."""
    return TaskService(temp_db)


@pytest.fixture
def work_entry_service(temp_db):
    """Create a WorkEntryService with a temporary database."""
    return WorkEntryService(temp_db)


@pytest.fixture
def schedule_service(temp_db):
    return ScheduleService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    return InvoiceService(temp_db)


@pytest.fixture
def billing_period_service(temp_db):
    return BillingPeriodService(temp_db)


@pytest.fixture
def period_status_service(temp_db):
    return PeriodStatusService(temp_db)


@pytest.fixture
def sample_company(company_service):
    """Create a company with a 26 -> 25 billing cycle."""
    company_id = company_service.create_company(
        name="Acme", billing_start_day=26, billing_end_day=25
    )
    return company_service.get_company(company_id)


@pytest.fixture
def sample_project(project_service, sample_company):
    """Create a project starting on Monday 2024-03-04 at 100/hour."""
    project_id = project_service.create_project(
        company_id=sample_company.id,
        title="Website",
        start_date=date(2024, 3, 4),
        hourly_rate=Decimal("100"),
    )
    return project_service.get_project(project_id)


@pytest.fixture
def sample_task(task_service, sample_project):
    """Create a 10 hour task."""
    task_id = task_service.create_task(
        project_id=sample_project.id, title="Landing page", estimate_hours=Decimal("10")
    )
    return task_service.get_task(task_id)


@pytest.fixture
def make_entry():
    """Build in-memory work entries with increasing creation timestamps."""
    base = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    counter = {"n": 0}

    def _make(
        hours,
        entry_date=date(2024, 3, 4),
        task_id="task-1",
        estimate=Bounded(Decimal("10")),
        time_of_day=None,
        created_at=None,
        entry_id=None,
    ):
        counter["n"] += 1
        return WorkEntry(
            id=entry_id or f"entry-{counter['n']}",
            task_id=task_id,
            entry_date=entry_date,
            time_of_day=time_of_day,
            hours=Decimal(str(hours)),
            estimate_snapshot=estimate,
            description=None,
            created_at=created_at or base + timedelta(minutes=counter["n"]),
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
