"""Sequential task scheduling over business days.

Tasks are laid out one after another from the project start, each taking
``ceil(hours / daily_hours)`` business days. Saturdays and Sundays are
skipped; holidays are not.
"""

import logging
import math
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional, Sequence

from timebill.database.base import Database
from timebill.domain import config
from timebill.domain.entities import ScheduleItem, ScheduleRequest, Task, Unbounded
from timebill.domain.errors import NotFoundError, entity_not_found
from timebill.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def is_business_day(day: date) -> bool:
    return day.weekday() < 5


def next_business_day(day: date) -> date:
    """Return the first business day strictly after ``day``."""
    candidate = day + ONE_DAY
    while not is_business_day(candidate):
        candidate += ONE_DAY
    return candidate


def add_business_days(start: date, days: int) -> date:
    """Move ``days`` business days away from ``start``.

    The start day is the departure point and is not counted: two business
    days from Tuesday 2024-12-24 is Thursday 2024-12-26. Negative values walk
    backwards.
    """
    step = ONE_DAY if days >= 0 else -ONE_DAY
    remaining = abs(days)
    current = start
    while remaining > 0:
        current += step
        if is_business_day(current):
            remaining -= 1
    return current


def business_days_for_hours(hours: Decimal, daily_hours: Decimal) -> int:
    """Number of business days needed for ``hours`` at ``daily_hours`` a day."""
    if hours <= 0:
        return 0
    return math.ceil(hours / daily_hours)


def estimate_end_date(start: date, hours: Decimal, daily_hours: Any = None) -> date:
    """Estimated end date of ``hours`` of work starting on ``start``."""
    capacity = config.resolve_daily_hours(daily_hours)
    return add_business_days(start, business_days_for_hours(hours, capacity))


def estimate_start_date(end: date, hours: Decimal, daily_hours: Any = None) -> date:
    """Latest start date for ``hours`` of work to finish on ``end``."""
    capacity = config.resolve_daily_hours(daily_hours)
    return add_business_days(end, -business_days_for_hours(hours, capacity))


def _override(request: ScheduleRequest, value: Optional[str], bound: str) -> Optional[date]:
    if value is None or not value.strip():
        return None
    parsed = parse_iso_date(value)
    if parsed is None:
        logger.warning(
            "Ignoring invalid %s override %r for task %s", bound, value, request.task_id
        )
    return parsed


def build_sequential_schedule(
    project_start: date,
    requests: Sequence[ScheduleRequest],
    daily_hours: Any = None,
) -> list[ScheduleItem]:
    """Lay out tasks sequentially from the project start date.

    Args:
        project_start: Date the first non-pinned task starts on
        requests: Tasks in schedule order
        daily_hours: Work hours per day; invalid or missing means 8

    Returns:
        One schedule item per request, in input order. Pinned tasks use
        their override dates; a missing bound is derived from the present
        one. The next task starts on the business day after the previous
        end.
    """
    capacity = config.resolve_daily_hours(daily_hours)
    cursor = project_start
    items = []

    for request in requests:
        days = business_days_for_hours(request.hours, capacity)
        start_override = _override(request, request.start_override, "start")
        end_override = _override(request, request.end_override, "end")

        if start_override is not None and end_override is not None:
            start, end = start_override, end_override
        elif start_override is not None:
            start = start_override
            end = add_business_days(start, days)
        elif end_override is not None:
            end = end_override
            start = add_business_days(end, -days)
        else:
            start = cursor
            end = add_business_days(start, days)

        overridden = start_override is not None or end_override is not None
        if overridden or days > 0:
            cursor = next_business_day(end)

        items.append(
            ScheduleItem(
                task_id=request.task_id,
                title=request.title,
                hours=request.hours,
                start=start,
                end=end,
                overridden=overridden,
            )
        )

    return items


def schedule_request_for(task: Task) -> ScheduleRequest:
    """Scheduler input for a task; unscoped tasks take no days."""
    hours = Decimal("0") if isinstance(task.estimate, Unbounded) else task.estimate.hours
    return ScheduleRequest(
        task_id=task.id,
        title=task.title,
        hours=hours,
        start_override=task.start_override,
        end_override=task.end_override,
    )


class ScheduleService:
    """Service for building project schedules."""

    def __init__(self, db: Database):
        """Initialize schedule service.

        Args:
            db: Database instance
        """
        self.db = db

    def project_schedule(
        self,
        project_id: str,
        task_order: Optional[Sequence[str]] = None,
        today: Optional[date] = None,
    ) -> list[ScheduleItem]:
        """Build the schedule of a project.

        Args:
            project_id: Project ID
            task_order: Optional explicit task ID order; IDs of tasks that no
                longer exist are rendered with a placeholder title and zero
                hours
            today: Start date used when the project has none

        Raises:
            NotFoundError: If the project doesn't exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(entity_not_found("Project", project_id))

        tasks = self.db.list_tasks(project_id)
        if task_order is None:
            requests = [schedule_request_for(task) for task in tasks]
        else:
            tasks_by_id = {task.id: task for task in tasks}
            requests = []
            for task_id in task_order:
                task = tasks_by_id.get(task_id)
                if task is None:
                    logger.warning("Task %s missing from project %s", task_id, project_id)
                    requests.append(
                        ScheduleRequest(
                            task_id=task_id,
                            title=config.REMOVED_TASK_TITLE,
                            hours=Decimal("0"),
                        )
                    )
                else:
                    requests.append(schedule_request_for(task))

        company_hours = None
        billing = self.db.get_billing_config(project.company_id)
        if billing is not None:
            company_hours = billing.daily_hours
        daily_hours = config.resolve_daily_hours(project.daily_hours, company_hours)

        start = project.start_date or today or date.today()
        return build_sequential_schedule(start, requests, daily_hours=daily_hours)
