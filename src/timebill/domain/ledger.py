"""Chronological hour ledger per task.

Each work entry is shown with the hours that were available on its task
immediately before it (HD) and the hours it used (HU). Balances are
recomputed from the full entry collection on every call.
"""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Collection, Iterable, Optional

from timebill.database.base import Database
from timebill.domain.entities import (
    UNBOUNDED,
    Bounded,
    EntryType,
    HourLimit,
    LedgerLine,
    Task,
    TaskStatus,
    Unbounded,
    WorkEntry,
)
from timebill.domain.errors import NotFoundError, ValidationError, entity_not_found

logger = logging.getLogger(__name__)


def ledger_sort_key(entry: WorkEntry) -> tuple[str, str, str]:
    """Return the ledger ordering key of an entry.

    Entries are compared as (ISO date, HH:MM or "", creation timestamp)
    strings, so same-day entries without a time of day come first and full
    ties keep their input order (sorted() is stable).
    """
    return (
        entry.entry_date.isoformat(),
        entry.time_of_day or "",
        entry.created_at.isoformat(),
    )


def subtract_hours(limit: HourLimit, hours: Decimal) -> HourLimit:
    """Subtract hours from a limit; unbounded limits stay unbounded."""
    if isinstance(limit, Unbounded):
        return UNBOUNDED
    return Bounded(limit.hours - hours)


def sum_bounded(limits: Iterable[HourLimit]) -> Decimal:
    """Sum the finite limits, skipping unbounded ones."""
    return sum(
        (limit.hours for limit in limits if isinstance(limit, Bounded)), Decimal("0")
    )


def _ordered_entries(
    entries: Iterable[WorkEntry], known_task_ids: Optional[Collection[str]]
) -> list[WorkEntry]:
    kept = []
    for entry in entries:
        if known_task_ids is not None and entry.task_id not in known_task_ids:
            logger.warning(
                "Skipping work entry %s: task %s no longer exists",
                entry.id,
                entry.task_id,
            )
            continue
        kept.append(entry)
    return sorted(kept, key=ledger_sort_key)


def build_ledger(
    entries: Iterable[WorkEntry],
    known_task_ids: Optional[Collection[str]] = None,
) -> list[LedgerLine]:
    """Build ledger lines for work entries of one or more tasks.

    Args:
        entries: Work entries, in any order
        known_task_ids: If given, entries of other tasks are dropped

    Returns:
        Ledger lines in ledger order
    """
    consumed: dict[str, Decimal] = {}
    lines = []
    for entry in _ordered_entries(entries, known_task_ids):
        used_so_far = consumed.get(entry.task_id, Decimal("0"))
        available_before = subtract_hours(entry.estimate_snapshot, used_so_far)
        consumed[entry.task_id] = used_so_far + entry.hours
        lines.append(
            LedgerLine(
                entry_id=entry.id,
                task_id=entry.task_id,
                entry_date=entry.entry_date,
                time_of_day=entry.time_of_day,
                available_before=available_before,
                used=entry.hours,
                available_after=subtract_hours(available_before, entry.hours),
                entry_type=entry.entry_type,
                status_snapshot=entry.status_snapshot,
                description=entry.description,
            )
        )
    return lines


def compute_available_hours(
    entries: Iterable[WorkEntry],
    known_task_ids: Optional[Collection[str]] = None,
) -> dict[str, HourLimit]:
    """Map each work entry ID to the hours available before it (HD).

    HD may be negative; over-allocation is reported, not rejected.
    """
    return {
        line.entry_id: line.available_before
        for line in build_ledger(entries, known_task_ids)
    }


def total_consumed(entries: Iterable[WorkEntry], task_id: str) -> Decimal:
    """Sum the hours logged against a task."""
    return sum(
        (entry.hours for entry in entries if entry.task_id == task_id), Decimal("0")
    )


def remaining_hours(estimate: HourLimit, consumed: Decimal) -> HourLimit:
    """Hours left on a task after ``consumed`` hours."""
    return subtract_hours(estimate, consumed)


def resolve_task_status(consumed: Decimal, estimate: HourLimit) -> TaskStatus:
    """Derive a task's status from its consumed hours."""
    if consumed <= 0:
        return TaskStatus.PENDING
    if isinstance(estimate, Unbounded) or consumed < estimate.hours:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.DONE


def task_cost(task: Task, hourly_rate: Optional[Decimal]) -> Decimal:
    """Cost of a task: its manual override, else estimate × hourly rate."""
    if task.cost_override is not None:
        return task.cost_override
    if hourly_rate is None or isinstance(task.estimate, Unbounded):
        return Decimal("0")
    return task.estimate.hours * hourly_rate


class WorkEntryService:
    """Service for logging work entries and keeping task progress in sync."""

    def __init__(self, db: Database):
        """Initialize work entry service.

        Args:
            db: Database instance
        """
        self.db = db

    def log_entry(
        self,
        task_id: str,
        entry_date: date,
        hours: Decimal,
        time_of_day: Optional[str] = None,
        description: Optional[str] = None,
        entry_type: EntryType = EntryType.EXECUTION,
        task_status: Optional[TaskStatus] = None,
    ) -> str:
        """Log time against a task.

        The task's current estimate is captured on the entry, together with
        the task status as of this entry: ``task_status`` when given,
        otherwise the status the task reaches once these hours are counted.
        The task's consumed hours and status are then recomputed.

        Returns:
            Work entry ID

        Raises:
            NotFoundError: If the task doesn't exist
            ValidationError: If hours is negative
        """
        task = self._require_task(task_id)
        if hours < 0:
            raise ValidationError(f"Hours must not be negative (got {hours})")

        if task_status is None:
            consumed = total_consumed(self.db.list_work_entries(task_id=task_id), task_id)
            task_status = resolve_task_status(consumed + hours, task.estimate)

        entry_id = self.db.create_work_entry(
            task_id=task_id,
            entry_date=entry_date,
            hours=hours,
            estimate_snapshot=task.estimate,
            time_of_day=time_of_day,
            description=description,
            created_at=datetime.now(UTC),
            entry_type=entry_type,
            status_snapshot=task_status,
        )
        self.sync_task_progress(task_id)
        return entry_id

    def update_entry(
        self,
        entry_id: str,
        entry_date: Optional[date] = None,
        hours: Optional[Decimal] = None,
        time_of_day: Optional[str] = None,
        description: Optional[str] = None,
        clear_time_of_day: bool = False,
        entry_type: Optional[EntryType] = None,
    ) -> None:
        """Edit a work entry and recompute its task.

        The estimate and status snapshots are kept as captured at creation.

        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If hours is negative
        """
        entry = self.db.get_work_entry(entry_id)
        if entry is None:
            raise NotFoundError(entity_not_found("Work entry", entry_id))
        if hours is not None and hours < 0:
            raise ValidationError(f"Hours must not be negative (got {hours})")

        self.db.update_work_entry(
            entry_id=entry_id,
            entry_date=entry_date,
            hours=hours,
            time_of_day=time_of_day,
            description=description,
            clear_time_of_day=clear_time_of_day,
            entry_type=entry_type,
        )
        self._sync_if_present(entry.task_id)

    def delete_entry(self, entry_id: str) -> None:
        """Delete a work entry and recompute its task.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        entry = self.db.get_work_entry(entry_id)
        if entry is None:
            raise NotFoundError(entity_not_found("Work entry", entry_id))
        self.db.delete_work_entry(entry_id)
        self._sync_if_present(entry.task_id)

    def sync_task_progress(self, task_id: str) -> Task:
        """Recompute a task's consumed hours and status from its entries."""
        task = self._require_task(task_id)
        entries = self.db.list_work_entries(task_id=task_id)
        consumed = total_consumed(entries, task_id)
        status = resolve_task_status(consumed, task.estimate)
        self.db.update_task_progress(task_id, consumed_hours=consumed, status=status)
        logger.debug(
            "Task %s progress: %s hours consumed, status %s",
            task_id,
            consumed,
            status.value,
        )
        return self._require_task(task_id)

    def task_ledger(self, task_id: str) -> list[LedgerLine]:
        """Ledger lines for one task."""
        self._require_task(task_id)
        return build_ledger(self.db.list_work_entries(task_id=task_id))

    def project_ledger(self, project_id: str) -> list[LedgerLine]:
        """Ledger lines for every task of a project.

        Entries whose task has been deleted are left out.
        """
        task_ids = {task.id for task in self.db.list_tasks(project_id)}
        entries = self.db.list_work_entries(project_id=project_id)
        return build_ledger(entries, known_task_ids=task_ids)

    def _sync_if_present(self, task_id: str) -> None:
        # Entries of deleted tasks can still be edited as history.
        if self.db.get_task(task_id) is not None:
            self.sync_task_progress(task_id)

    def _require_task(self, task_id: str) -> Task:
        task = self.db.get_task(task_id)
        if task is None:
            raise NotFoundError(entity_not_found("Task", task_id))
        return task
