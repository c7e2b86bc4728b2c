"""Tests for billing period generation."""

import pytest
from datetime import date
from decimal import Decimal

from timebill.domain.billing_periods import (
    build_period,
    clamp_day,
    find_default_period,
    format_period_label,
    generate_billing_periods,
    period_value_key,
)
from timebill.domain.entities import Invoice, InvoiceStatus
from timebill.domain.errors import InvalidPeriodError, NotFoundError, ValidationError


def _invoice(period, status, invoice_id="inv"):
    return Invoice(
        id=invoice_id,
        project_id="p",
        title="Invoice",
        amount=Decimal("100"),
        due_date=period.end,
        period_start=period.start,
        period_end=period.end,
        status=status,
        hours_worked=Decimal("0"),
    )


class TestGenerateBillingPeriods:
    """Tests for generate_billing_periods."""

    def test_crossing_cycle_example(self):
        """Test that the 26 -> 25 cycle starting in February ends on Mar 25."""
        periods = generate_billing_periods(26, 25, -1, 0, today=date(2024, 3, 15))

        assert len(periods) == 2
        assert periods[0].start == date(2024, 2, 26)
        assert periods[0].end == date(2024, 3, 25)
        assert periods[0].value == "2024-02-26_2024-03-25"
        assert periods[0].label == "26/02/2024 a 25/03/2024"
        assert periods[1].start == date(2024, 3, 26)
        assert periods[1].end == date(2024, 4, 25)

    def test_one_period_per_offset(self):
        """Test that the offset window is inclusive on both ends."""
        periods = generate_billing_periods(1, 31, -1, 12, today=date(2024, 3, 15))

        assert len(periods) == 14
        assert periods[0].start == date(2024, 2, 1)
        assert periods[-1].start == date(2025, 3, 1)

    def test_crossing_periods_span_consecutive_months(self):
        """Test that every crossing period ends in the month after it starts."""
        for start_day, end_day in [(26, 25), (31, 1), (15, 14), (2, 1)]:
            periods = generate_billing_periods(
                start_day, end_day, -12, 12, today=date(2024, 1, 31)
            )
            for period in periods:
                months_apart = (period.end.year - period.start.year) * 12 + (
                    period.end.month - period.start.month
                )
                assert months_apart == 1
                assert period.end >= period.start

    def test_non_crossing_periods_stay_in_one_month(self):
        """Test that start_day <= end_day keeps both bounds in the same month."""
        for start_day, end_day in [(1, 31), (5, 20), (10, 10), (29, 31)]:
            periods = generate_billing_periods(
                start_day, end_day, -12, 12, today=date(2024, 6, 1)
            )
            for period in periods:
                assert (period.start.year, period.start.month) == (
                    period.end.year,
                    period.end.month,
                )

    def test_equal_days_are_single_day_periods(self):
        """Test that start_day == end_day is treated as non-crossing."""
        periods = generate_billing_periods(10, 10, 0, 0, today=date(2024, 3, 1))

        assert periods[0].start == periods[0].end == date(2024, 3, 10)

    def test_days_are_clamped_to_month_end(self):
        """Test that day 31 in February becomes the last day of February."""
        periods = generate_billing_periods(31, 30, 0, 1, today=date(2024, 1, 10))

        assert periods[0].start == date(2024, 1, 31)
        assert periods[0].end == date(2024, 2, 29)
        assert periods[1].start == date(2024, 2, 29)
        assert periods[1].end == date(2024, 3, 30)

    def test_missing_configuration_defaults_to_calendar_month(self):
        """Test that absent days give a calendar-month period."""
        periods = generate_billing_periods(None, None, 0, 0, today=date(2023, 2, 14))

        assert periods[0].start == date(2023, 2, 1)
        assert periods[0].end == date(2023, 2, 28)

    def test_invalid_days_fall_back_to_defaults(self):
        """Test that out-of-range days resolve through defaults, not errors."""
        periods = generate_billing_periods(0, 45, 0, 0, today=date(2024, 4, 3))

        assert periods[0].start == date(2024, 4, 1)
        assert periods[0].end == date(2024, 4, 30)

    def test_year_boundary(self):
        """Test a crossing cycle from December into January."""
        periods = generate_billing_periods(26, 25, 0, 0, today=date(2024, 12, 2))

        assert periods[0].start == date(2024, 12, 26)
        assert periods[0].end == date(2025, 1, 25)

    def test_inverted_offsets_raise(self):
        """Test that start_offset > end_offset is rejected."""
        with pytest.raises(ValidationError, match="Start offset"):
            generate_billing_periods(1, 31, 3, 1, today=date(2024, 3, 1))


class TestPeriodHelpers:
    """Tests for clamping, labels and keys."""

    def test_clamp_day(self):
        assert clamp_day(31, date(2023, 4, 1)) == date(2023, 4, 30)
        assert clamp_day(15, date(2023, 4, 1)) == date(2023, 4, 15)

    def test_period_value_key(self):
        assert period_value_key(date(2024, 1, 1), date(2024, 1, 31)) == "2024-01-01_2024-01-31"

    def test_format_period_label_custom_format(self):
        label = format_period_label(
            date(2024, 1, 1), date(2024, 1, 31), date_format="%Y-%m-%d", separator=" to "
        )
        assert label == "2024-01-01 to 2024-01-31"

    def test_build_period_rejects_end_before_start(self):
        with pytest.raises(InvalidPeriodError):
            build_period(date(2024, 3, 2), date(2024, 3, 1))


class TestFindDefaultPeriod:
    """Tests for find_default_period."""

    def test_first_period_without_invoices(self):
        """Test that the oldest period without invoices is chosen."""
        periods = generate_billing_periods(1, 31, -1, 1, today=date(2024, 3, 1))
        invoices = [_invoice(periods[0], InvoiceStatus.PAID)]

        assert find_default_period(periods, invoices) == periods[1]

    def test_first_period_not_fully_paid(self):
        """Test that a period with an open invoice is chosen."""
        periods = generate_billing_periods(1, 31, -1, 1, today=date(2024, 3, 1))
        invoices = [
            _invoice(periods[0], InvoiceStatus.PAID, "a"),
            _invoice(periods[0], InvoiceStatus.PENDING, "b"),
        ]

        assert find_default_period(periods, invoices) == periods[0]

    def test_all_paid_returns_oldest(self):
        periods = generate_billing_periods(1, 31, 0, 1, today=date(2024, 3, 1))
        invoices = [_invoice(period, InvoiceStatus.PAID, period.value) for period in periods]

        assert find_default_period(periods, invoices) == periods[0]

    def test_canceled_invoices_are_ignored(self):
        periods = generate_billing_periods(1, 31, 0, 1, today=date(2024, 3, 1))
        invoices = [_invoice(periods[0], InvoiceStatus.CANCELED)]

        assert find_default_period(periods, invoices) == periods[0]

    def test_no_periods(self):
        assert find_default_period([], []) is None


class TestBillingPeriodService:
    """Tests for BillingPeriodService."""

    def test_list_periods_uses_company_cycle(self, billing_period_service, sample_company):
        """Test that the stored billing days drive the generated periods."""
        periods = billing_period_service.list_periods(
            sample_company.id, start_offset=0, end_offset=0, today=date(2024, 3, 10)
        )

        assert periods[0].start == date(2024, 3, 26)
        assert periods[0].end == date(2024, 4, 25)

    def test_list_periods_unknown_company(self, billing_period_service):
        with pytest.raises(NotFoundError):
            billing_period_service.list_periods("missing")

    def test_default_period(self, billing_period_service, sample_company):
        period = billing_period_service.default_period(
            sample_company.id, today=date(2024, 3, 10)
        )

        # No invoices yet: the oldest generated period (offset -1)
        assert period.start == date(2024, 2, 26)
