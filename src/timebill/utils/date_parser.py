"""Date parsing utilities."""

import calendar
import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024"
    - Relative dates: "today", "yesterday", "tomorrow",
      "last/this/next month", "last/this/next week", "last/this/next year"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    for prefix, months in (("last ", -1), ("this ", 0), ("next ", 1)):
        if not date_str.startswith(prefix):
            continue
        period = date_str[len(prefix):]
        if period == "month":
            return first_day_of_month(today) + relativedelta(months=months)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=months)
        if period == "week":
            # Monday of the week
            return today - timedelta(days=today.weekday()) + timedelta(weeks=months)

    iso_date = parse_iso_date(date_str)
    if iso_date is not None:
        return iso_date

    try:
        # Day-first: the product's locale writes 05/03/2024 for 5 March
        dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a strict ``YYYY-MM-DD`` calendar date.

    Returns None for anything else, including impossible dates such as
    2024-02-30. Callers decide whether a missing date is an error.
    """
    if value is None:
        return None
    match = ISO_DATE_PATTERN.match(value.strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_time_of_day(value: Optional[str]) -> Optional[str]:
    """Normalize a time of day to zero-padded ``HH:MM``.

    Args:
        value: Time string such as "9:05" or "09:05", or None/blank

    Returns:
        Zero-padded "HH:MM" string, or None when no time was given

    Raises:
        ValueError: If the value is not a valid time of day
    """
    if value is None or not value.strip():
        return None
    match = TIME_OF_DAY_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Could not parse time of day '{value}' (expected HH:MM)")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time of day '{value}' is out of range")
    return f"{hours:02d}:{minutes:02d}"


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month."""
    return calendar.monthrange(year, month)[1]


def first_day_of_month(value: date) -> date:
    """Return the first day of the month containing value."""
    return value.replace(day=1)


def clamp_to_month(year: int, month: int, day: int) -> date:
    """Return the given day in a month, capped at the month's last day."""
    return date(year, month, min(day, days_in_month(year, month)))
