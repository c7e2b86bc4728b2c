"""Shared domain error messages and error types."""

from datetime import date


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidPeriodError(ValidationError):
    """Period bounds where the end falls before the start."""


class MissingPeriodError(ValidationError):
    """Invoice request without period bounds."""


class InvalidRecurrenceError(ValidationError):
    """Recurring invoice request with an occurrence count below one."""


def entity_not_found(kind: str, entity_id: str) -> str:
    """Return message for a missing entity of the given kind."""
    return f"{kind} {entity_id} not found"


def period_end_before_start(start: date, end: date) -> str:
    """Return message for a period whose end precedes its start."""
    return f"Period end {end.isoformat()} is before period start {start.isoformat()}"


def period_bounds_required() -> str:
    """Return message for an invoice without a billing period."""
    return "Invoice requires both period start and period end"


def occurrence_count_too_low(count: int) -> str:
    """Return message for a recurrence with fewer than one occurrence."""
    return f"Occurrence count must be at least 1 (got {count})"


def offset_range_inverted(start_offset: int, end_offset: int) -> str:
    """Return message for an inverted month offset window."""
    return f"Start offset {start_offset} is after end offset {end_offset}"
