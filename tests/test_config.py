"""Tests for default resolution."""

import pytest
from decimal import Decimal

from timebill.domain import config


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (None, None, (1, 31)),
        (26, 25, (26, 25)),
        (0, 32, (1, 31)),
        ("10", "20", (10, 20)),
        (2.5, 15, (1, 15)),
        (True, 15, (1, 15)),
    ],
)
def test_resolve_billing_days(start, end, expected):
    assert config.resolve_billing_days(start, end) == expected


@pytest.mark.parametrize(
    "candidates,expected",
    [
        ((), Decimal("8")),
        ((None,), Decimal("8")),
        ((Decimal("6"),), Decimal("6")),
        ((None, Decimal("4")), Decimal("4")),
        ((0, Decimal("5")), Decimal("5")),
        ((25,), Decimal("8")),
        (("abc",), Decimal("8")),
        ((float("inf"),), Decimal("8")),
        ((float("nan"),), Decimal("8")),
    ],
)
def test_resolve_daily_hours(candidates, expected):
    assert config.resolve_daily_hours(*candidates) == expected


def test_resolve_reminder_title():
    assert config.resolve_reminder_title(None) == "Reminder"
    assert config.resolve_reminder_title("  ") == "Reminder"
    assert config.resolve_reminder_title(" Call ") == "Call"
