"""Tests for date parsing helpers."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from timebill.utils.date_parser import (
    clamp_to_month,
    days_in_month,
    parse_date,
    parse_iso_date,
    parse_time_of_day,
)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_day_first_date():
    """Test that slash dates are read day first."""
    assert parse_date("05/03/2024") == date(2024, 3, 5)


def test_parse_today():
    """Test parsing 'today'."""
    result = parse_date("today")
    assert result == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    result = parse_date("yesterday")
    assert result == date.today() - timedelta(days=1)


def test_parse_next_month():
    """Test parsing 'next month'."""
    expected = date.today().replace(day=1) + relativedelta(months=1)
    assert parse_date("next month") == expected


def test_parse_this_week():
    """Test parsing 'this week' as Monday of the current week."""
    today = date.today()
    assert parse_date("this week") == today - timedelta(days=today.weekday())


def test_parse_invalid_date():
    """Test that invalid dates raise ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date at all")


class TestParseIsoDate:
    """Tests for strict ISO parsing."""

    def test_valid(self):
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["2024-02-30", "2023-02-29", "24-01-01", "2024/01/01", "", None])
    def test_invalid_returns_none(self, value):
        assert parse_iso_date(value) is None


class TestParseTimeOfDay:
    """Tests for time of day normalization."""

    def test_zero_pads(self):
        assert parse_time_of_day("9:05") == "09:05"

    def test_blank_is_none(self):
        assert parse_time_of_day(None) is None
        assert parse_time_of_day("  ") is None

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "9h"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_time_of_day(value)


def test_days_in_month():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28


def test_clamp_to_month():
    assert clamp_to_month(2024, 4, 31) == date(2024, 4, 30)
    assert clamp_to_month(2024, 4, 12) == date(2024, 4, 12)
