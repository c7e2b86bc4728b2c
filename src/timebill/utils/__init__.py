"""Utility functions for timebill."""

from timebill.utils.date_parser import parse_date, parse_iso_date, parse_time_of_day
from timebill.utils.amount_parser import parse_amount, parse_hours

__all__ = ["parse_date", "parse_iso_date", "parse_time_of_day", "parse_amount", "parse_hours"]
