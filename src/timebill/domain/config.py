"""Defaults for the temporal accounting components.

Every fallback value lives here, together with the function that applies it,
so each component resolves its configuration in exactly one step.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

DEFAULT_START_DAY = 1
# Clamped to the month length, so this means "last day of the month".
DEFAULT_END_DAY = 31

DEFAULT_DAILY_HOURS = Decimal("8")
MIN_DAILY_HOURS = Decimal("1")
MAX_DAILY_HOURS = Decimal("24")

# Month offsets relative to the current month: one month back, a year ahead.
DEFAULT_PERIOD_OFFSETS = (-1, 12)

PERIOD_LABEL_FORMAT = "%d/%m/%Y"
PERIOD_LABEL_SEPARATOR = " a "

PAYMENT_REMINDER_TITLE = "Receive payment"
DEFAULT_REMINDER_TITLE = "Reminder"
REMOVED_TASK_TITLE = "(removed task)"


def _valid_day(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        day = int(value)
    except (TypeError, ValueError):
        return None
    if day != value and not isinstance(value, str):
        # Reject fractional days such as 2.5
        return None
    if 1 <= day <= 31:
        return day
    return None


def resolve_billing_days(start_day: Any, end_day: Any) -> tuple[int, int]:
    """Resolve a company's billing cycle days.

    Args:
        start_day: Configured first day of the cycle (1..31) or None
        end_day: Configured last day of the cycle (1..31) or None

    Returns:
        Tuple of (start_day, end_day); missing or invalid values fall back to
        a calendar-month cycle.
    """
    resolved_start = _valid_day(start_day)
    resolved_end = _valid_day(end_day)
    return (
        resolved_start if resolved_start is not None else DEFAULT_START_DAY,
        resolved_end if resolved_end is not None else DEFAULT_END_DAY,
    )


def resolve_daily_hours(*candidates: Any) -> Decimal:
    """Return the first usable daily capacity among candidates.

    Candidates are tried in order (e.g. project value, then company value).
    A usable value is a finite number between 1 and 24 hours.
    """
    for candidate in candidates:
        if candidate is None or isinstance(candidate, bool):
            continue
        try:
            hours = Decimal(str(candidate))
        except (InvalidOperation, ValueError):
            continue
        if not hours.is_finite():
            continue
        if MIN_DAILY_HOURS <= hours <= MAX_DAILY_HOURS:
            return hours
    return DEFAULT_DAILY_HOURS


def resolve_reminder_title(title: Optional[str]) -> str:
    """Return the reminder title, or the default one for blank titles."""
    if title is None or not title.strip():
        return DEFAULT_REMINDER_TITLE
    return title.strip()

