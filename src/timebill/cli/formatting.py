"""Display helpers shared by CLI commands."""

from decimal import Decimal
from typing import Optional

from timebill.domain.entities import Bounded, HourLimit


def format_hours(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return f"{value.normalize():f}h"


def format_limit(limit: HourLimit) -> str:
    """Render an hour limit; unbounded limits show as 'unscoped'."""
    if isinstance(limit, Bounded):
        return format_hours(limit.hours)
    return "unscoped"


def format_money(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return f"${value:,.2f}"
