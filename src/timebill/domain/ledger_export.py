"""CSV export of work-entry ledgers."""

import csv
import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence, TextIO

from timebill.database.base import Database
from timebill.domain.entities import Bounded, HourLimit, LedgerLine
from timebill.domain.errors import NotFoundError, ValidationError, entity_not_found
from timebill.domain.ledger import WorkEntryService

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    "#",
    "Date",
    "Start",
    "Project",
    "Task",
    "Type",
    "Status",
    "HD",
    "HU",
    "Description",
)


def _hours_cell(value: Decimal) -> str:
    return f"{value.normalize():f}"


def _available_cell(limit: HourLimit) -> str:
    # Unscoped tasks have no balance to report
    if isinstance(limit, Bounded):
        return _hours_cell(limit.hours)
    return "0"


def ledger_export_rows(
    lines: Sequence[LedgerLine],
    task_labels: Mapping[str, tuple[str, str]],
) -> list[dict[str, str]]:
    """Turn ledger lines into export rows.

    Args:
        lines: Ledger lines in ledger order
        task_labels: Task ID -> (project title, task title)

    Returns:
        One dict per line keyed by EXPORT_COLUMNS, numbered from 1
    """
    rows = []
    for number, line in enumerate(lines, start=1):
        project_title, task_title = task_labels.get(line.task_id, ("", ""))
        rows.append(
            {
                "#": str(number),
                "Date": line.entry_date.isoformat(),
                "Start": line.time_of_day or "",
                "Project": project_title,
                "Task": task_title,
                "Type": line.entry_type.value,
                "Status": line.status_snapshot.value,
                "HD": _available_cell(line.available_before),
                "HU": _hours_cell(line.used),
                "Description": line.description or "",
            }
        )
    return rows


def write_ledger_csv(rows: Sequence[Mapping[str, str]], output: TextIO) -> None:
    """Write export rows with a header line."""
    writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    writer.writerows(rows)


class LedgerExportService:
    """Service for exporting task or project ledgers as CSV."""

    def __init__(self, db: Database):
        """Initialize ledger export service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_csv(
        self,
        output: TextIO,
        task_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> int:
        """Write the ledger of a task or a project to ``output``.

        Returns:
            Number of exported entries

        Raises:
            ValidationError: Unless exactly one of task_id or project_id is given
            NotFoundError: If the task or project doesn't exist
        """
        if (task_id is None) == (project_id is None):
            raise ValidationError("Provide exactly one of task_id or project_id")

        entries = WorkEntryService(self.db)
        if task_id is not None:
            lines = entries.task_ledger(task_id)
        else:
            if self.db.get_project(project_id) is None:
                raise NotFoundError(entity_not_found("Project", project_id))
            lines = entries.project_ledger(project_id)

        rows = ledger_export_rows(lines, self._task_labels(lines))
        write_ledger_csv(rows, output)
        logger.info("Exported %d work entries", len(rows))
        return len(rows)

    def _task_labels(self, lines: Sequence[LedgerLine]) -> dict[str, tuple[str, str]]:
        labels: dict[str, tuple[str, str]] = {}
        project_titles: dict[str, str] = {}
        for line in lines:
            if line.task_id in labels:
                continue
            task = self.db.get_task(line.task_id)
            if task is None:
                continue
            if task.project_id not in project_titles:
                project = self.db.get_project(task.project_id)
                project_titles[task.project_id] = project.title if project else ""
            labels[line.task_id] = (project_titles[task.project_id], task.title)
        return labels
