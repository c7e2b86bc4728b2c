"""Project and task domain services."""

from datetime import date
from decimal import Decimal
from typing import Optional

from timebill.database.base import Database
from timebill.domain.entities import UNBOUNDED, Bounded, HourLimit, Project, Task
from timebill.domain.errors import NotFoundError, ValidationError, entity_not_found
from timebill.domain.ledger import resolve_task_status, sum_bounded, task_cost
from timebill.utils.date_parser import parse_iso_date


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_project(
        self,
        company_id: str,
        title: str,
        start_date: Optional[date] = None,
        hourly_rate: Optional[Decimal] = None,
        daily_hours: Optional[Decimal] = None,
    ) -> str:
        """Create a project.

        Returns:
            Project ID

        Raises:
            NotFoundError: If the company doesn't exist
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(entity_not_found("Company", company_id))
        return self.db.create_project(
            company_id=company_id,
            title=title,
            start_date=start_date,
            hourly_rate=hourly_rate,
            daily_hours=daily_hours,
        )

    def get_project(self, project_id: str) -> Project:
        """Get project by ID.

        Raises:
            NotFoundError: If the project doesn't exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(entity_not_found("Project", project_id))
        return project

    def list_projects(self, company_id: Optional[str] = None) -> list[Project]:
        """List projects, optionally filtered by company."""
        return self.db.list_projects(company_id=company_id)

    def estimated_hours(self, project_id: str) -> Decimal:
        """Total estimate of a project. Unscoped tasks add nothing."""
        self.get_project(project_id)
        return sum_bounded(task.estimate for task in self.db.list_tasks(project_id))

    def project_cost(self, project_id: str) -> Decimal:
        """Sum of task costs of a project."""
        project = self.get_project(project_id)
        return sum(
            (task_cost(task, project.hourly_rate) for task in self.db.list_tasks(project_id)),
            Decimal("0"),
        )


class TaskService:
    """Service for managing tasks."""

    def __init__(self, db: Database):
        """Initialize task service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_task(
        self,
        project_id: str,
        title: str,
        estimate_hours: Optional[Decimal],
        cost_override: Optional[Decimal] = None,
        start_override: Optional[str] = None,
        end_override: Optional[str] = None,
    ) -> str:
        """Create a task at the end of the project schedule.

        Args:
            project_id: Project ID
            title: Task title
            estimate_hours: Hour estimate; None creates an unscoped task
            cost_override: Manual cost replacing estimate × hourly rate
            start_override: Pinned start date (YYYY-MM-DD)
            end_override: Pinned end date (YYYY-MM-DD)

        Returns:
            Task ID

        Raises:
            NotFoundError: If the project doesn't exist
            ValidationError: If the estimate is negative or an override is
                not a calendar date
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(entity_not_found("Project", project_id))
        estimate = self._estimate(estimate_hours)
        for label, value in (("start", start_override), ("end", end_override)):
            if value is not None and parse_iso_date(value) is None:
                raise ValidationError(f"Invalid {label} date '{value}' (expected YYYY-MM-DD)")

        position = len(self.db.list_tasks(project_id))
        return self.db.create_task(
            project_id=project_id,
            title=title,
            estimate=estimate,
            cost_override=cost_override,
            position=position,
            start_override=start_override,
            end_override=end_override,
        )

    def get_task(self, task_id: str) -> Task:
        """Get task by ID.

        Raises:
            NotFoundError: If the task doesn't exist
        """
        task = self.db.get_task(task_id)
        if task is None:
            raise NotFoundError(entity_not_found("Task", task_id))
        return task

    def list_tasks(self, project_id: str) -> list[Task]:
        """List the tasks of a project in schedule order."""
        return self.db.list_tasks(project_id)

    def change_estimate(self, task_id: str, estimate_hours: Optional[Decimal]) -> Task:
        """Change a task's estimate and re-derive its status.

        Existing work entries keep the estimate captured when they were
        logged; only new entries see the new value.
        """
        task = self.get_task(task_id)
        estimate = self._estimate(estimate_hours)
        self.db.update_task_estimate(task_id, estimate)
        self.db.update_task_progress(
            task_id,
            consumed_hours=task.consumed_hours,
            status=resolve_task_status(task.consumed_hours, estimate),
        )
        return self.get_task(task_id)

    def delete_task(self, task_id: str) -> None:
        """Delete a task. Its work entries remain as history."""
        self.get_task(task_id)
        self.db.delete_task(task_id)

    @staticmethod
    def _estimate(estimate_hours: Optional[Decimal]) -> HourLimit:
        if estimate_hours is None:
            return UNBOUNDED
        if estimate_hours < 0:
            raise ValidationError(f"Estimate must not be negative (got {estimate_hours})")
        return Bounded(estimate_hours)
