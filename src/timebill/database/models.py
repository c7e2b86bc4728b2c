"""SQLAlchemy models for timebill database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

# Hours are kept at full precision; rounding happens only on display.
HOURS_PRECISION = (16, 6)


def _new_id() -> str:
    return uuid.uuid4().hex


class Company(Base):
    """Company model with billing cycle configuration."""

    __tablename__ = "companies"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, unique=True, nullable=False)
    billing_start_day = Column(Integer, nullable=True)
    billing_end_day = Column(Integer, nullable=True)
    daily_hours = Column(Numeric(*HOURS_PRECISION), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    projects = relationship("Project", back_populates="company", cascade="all, delete-orphan")


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=_new_id)
    company_id = Column(String, ForeignKey("companies.id"), nullable=False)
    title = Column(String, nullable=False)
    start_date = Column(Date, nullable=True)
    hourly_rate = Column(Numeric(12, 2), nullable=True)
    daily_hours = Column(Numeric(*HOURS_PRECISION), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    company = relationship("Company", back_populates="projects")
    tasks = relationship("Task", back_populates="project")


class Task(Base):
    """Task model.

    ``is_unscoped`` marks tasks without an hour ceiling; their
    ``estimate_hours`` is ignored.
    """

    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=_new_id)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False)
    title = Column(String, nullable=False)
    estimate_hours = Column(Numeric(*HOURS_PRECISION), nullable=False, default=0)
    is_unscoped = Column(Boolean, default=False, nullable=False)
    cost_override = Column(Numeric(12, 2), nullable=True)
    consumed_hours = Column(Numeric(*HOURS_PRECISION), nullable=False, default=0)
    status = Column(String, nullable=False, default="pending")
    position = Column(Integer, nullable=False, default=0)
    start_override = Column(String, nullable=True)
    end_override = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="tasks")


class WorkEntry(Base):
    """Work entry model.

    ``task_id`` is not a foreign key: entries outlive deleted tasks as
    history. ``project_id`` is copied from the task at creation, and the
    estimate and status snapshots are written once and never updated.
    """

    __tablename__ = "work_entries"

    id = Column(String, primary_key=True, default=_new_id)
    task_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    time_of_day = Column(String(5), nullable=True)
    hours = Column(Numeric(*HOURS_PRECISION), nullable=False)
    estimate_snapshot = Column(Numeric(*HOURS_PRECISION), nullable=True)
    snapshot_unscoped = Column(Boolean, default=False, nullable=False)
    entry_type = Column(String, nullable=False, default="execution")
    status_snapshot = Column(String, nullable=False, default="in_progress")
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(String, primary_key=True, default=_new_id)
    company_id = Column(String, nullable=True, index=True)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False)
    task_id = Column(String, nullable=True)
    user_id = Column(String, nullable=True)
    title = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="pending")
    hours_worked = Column(Numeric(*HOURS_PRECISION), nullable=False, default=0)
    payment_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    reminders = relationship(
        "Reminder",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="Reminder.position",
    )


class Reminder(Base):
    """Invoice reminder model."""

    __tablename__ = "reminders"

    id = Column(String, primary_key=True, default=_new_id)
    invoice_id = Column(String, ForeignKey("invoices.id"), nullable=False)
    title = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    done = Column(Boolean, default=False, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    invoice = relationship("Invoice", back_populates="reminders")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
