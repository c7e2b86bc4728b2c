"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from timebill.domain.entities import (
    UNBOUNDED,
    BillingPeriod,
    Bounded,
    FixedReminder,
    InvoiceDraft,
    RelativeReminder,
    Unbounded,
    WorkEntry,
)


class TestHourLimit:
    """Tests for the Bounded | Unbounded estimate type."""

    def test_bounded_equality(self):
        assert Bounded(Decimal("10")) == Bounded(Decimal("10.00"))
        assert Bounded(Decimal("10")) != UNBOUNDED

    def test_unbounded_is_a_single_value(self):
        assert Unbounded() == UNBOUNDED

    def test_bounded_is_immutable(self):
        limit = Bounded(Decimal("10"))
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            limit.hours = Decimal("5")


class TestWorkEntry:
    """Tests for WorkEntry entity."""

    def test_work_entry_immutability(self):
        """Test that a work entry's snapshot cannot be reassigned."""
        entry = WorkEntry(
            id="e1",
            task_id="t1",
            entry_date=date(2024, 3, 4),
            time_of_day=None,
            hours=Decimal("3"),
            estimate_snapshot=Bounded(Decimal("10")),
            description=None,
            created_at=datetime.now(UTC),
        )
        with pytest.raises(Exception):
            entry.estimate_snapshot = Bounded(Decimal("20"))


class TestInvoiceDraft:
    """Tests for InvoiceDraft defaults."""

    def test_defaults(self):
        draft = InvoiceDraft(
            project_id="p1",
            title="March",
            amount=Decimal("100"),
            due_date=date(2024, 4, 5),
            period_start=date(2024, 3, 1),
            period_end=date(2024, 3, 31),
        )
        assert draft.reminders == ()
        assert draft.hours_worked == Decimal("0")
        assert draft.company_id is None

    def test_reminder_templates_are_distinct_variants(self):
        relative = RelativeReminder(title="Send", days_before=3)
        fixed = FixedReminder(title="Send", date="2024-04-01")

        assert relative != fixed
        assert isinstance(relative, RelativeReminder)
        assert not isinstance(fixed, RelativeReminder)


def test_billing_period_equality():
    first = BillingPeriod(date(2024, 1, 1), date(2024, 1, 31), "label", "2024-01-01_2024-01-31")
    second = BillingPeriod(date(2024, 1, 1), date(2024, 1, 31), "label", "2024-01-01_2024-01-31")
    assert first == second
