"""Billing period generation from a company's cyclic billing days."""

from datetime import date
from typing import Any, Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from timebill.database.base import Database
from timebill.domain import config
from timebill.domain.entities import BillingPeriod, Invoice, InvoiceStatus
from timebill.domain.errors import (
    InvalidPeriodError,
    NotFoundError,
    ValidationError,
    entity_not_found,
    offset_range_inverted,
    period_end_before_start,
)
from timebill.utils.date_parser import clamp_to_month, first_day_of_month


def clamp_day(day: int, month: date) -> date:
    """Return ``day`` within the month of ``month``, capped at its last day."""
    return clamp_to_month(month.year, month.month, day)


def period_value_key(start: date, end: date) -> str:
    """Return the lookup key used to join periods and invoices."""
    return f"{start.isoformat()}_{end.isoformat()}"


def format_period_label(
    start: date,
    end: date,
    date_format: str = config.PERIOD_LABEL_FORMAT,
    separator: str = config.PERIOD_LABEL_SEPARATOR,
) -> str:
    """Return the display label for a period, e.g. ``26/02/2024 a 25/03/2024``."""
    return f"{start.strftime(date_format)}{separator}{end.strftime(date_format)}"


def build_period(start: date, end: date) -> BillingPeriod:
    """Build a BillingPeriod from normalized bounds.

    Raises:
        InvalidPeriodError: If end falls before start
    """
    if end < start:
        raise InvalidPeriodError(period_end_before_start(start, end))
    return BillingPeriod(
        start=start,
        end=end,
        label=format_period_label(start, end),
        value=period_value_key(start, end),
    )


def generate_billing_periods(
    start_day: Any = None,
    end_day: Any = None,
    start_offset: int = config.DEFAULT_PERIOD_OFFSETS[0],
    end_offset: int = config.DEFAULT_PERIOD_OFFSETS[1],
    today: Optional[date] = None,
) -> list[BillingPeriod]:
    """Generate one billing period per month offset.

    When ``start_day > end_day`` the cycle crosses a month boundary: it starts
    in the offset month and ends in the following one (e.g. 26 → 25).
    Otherwise both bounds fall in the offset month. Days beyond the length of
    a month are clamped to its last day.

    Args:
        start_day: First day of the cycle (1..31); None means 1
        end_day: Last day of the cycle (1..31); None means end of month
        start_offset: First month offset relative to the current month
        end_offset: Last month offset (inclusive)
        today: Reference date; defaults to date.today()

    Returns:
        Periods ordered by offset, oldest first

    Raises:
        ValidationError: If start_offset is greater than end_offset
    """
    if start_offset > end_offset:
        raise ValidationError(offset_range_inverted(start_offset, end_offset))

    resolved_start, resolved_end = config.resolve_billing_days(start_day, end_day)
    crosses_month = resolved_start > resolved_end
    current_month = first_day_of_month(today or date.today())

    periods = []
    for offset in range(start_offset, end_offset + 1):
        base_month = current_month + relativedelta(months=offset)
        if crosses_month:
            start = clamp_day(resolved_start, base_month)
            end = clamp_day(resolved_end, base_month + relativedelta(months=1))
        else:
            start = clamp_day(resolved_start, base_month)
            end = clamp_day(resolved_end, base_month)
        periods.append(build_period(start, end))
    return periods


def find_default_period(
    periods: Sequence[BillingPeriod], invoices: Iterable[Invoice]
) -> Optional[BillingPeriod]:
    """Pick the period a user most likely wants to work on.

    The oldest period that has no invoices yet, or whose invoices are not all
    paid. When every period is fully paid, the oldest period is returned.
    """
    if not periods:
        return None

    by_key: dict[str, list[Invoice]] = {}
    for invoice in invoices:
        if invoice.status == InvoiceStatus.CANCELED:
            continue
        key = period_value_key(invoice.period_start, invoice.period_end)
        by_key.setdefault(key, []).append(invoice)

    ordered = sorted(periods, key=lambda period: period.start)
    for period in ordered:
        period_invoices = by_key.get(period.value, [])
        if not period_invoices:
            return period
        if not all(inv.status == InvoiceStatus.PAID for inv in period_invoices):
            return period
    return ordered[0]


class BillingPeriodService:
    """Service for computing a company's billing periods."""

    def __init__(self, db: Database):
        """Initialize billing period service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_periods(
        self,
        company_id: str,
        start_offset: int = config.DEFAULT_PERIOD_OFFSETS[0],
        end_offset: int = config.DEFAULT_PERIOD_OFFSETS[1],
        today: Optional[date] = None,
    ) -> list[BillingPeriod]:
        """List billing periods for a company.

        Raises:
            NotFoundError: If the company does not exist
        """
        billing = self.db.get_billing_config(company_id)
        if billing is None:
            raise NotFoundError(entity_not_found("Company", company_id))
        return generate_billing_periods(
            billing.start_day,
            billing.end_day,
            start_offset=start_offset,
            end_offset=end_offset,
            today=today,
        )

    def default_period(
        self, company_id: str, today: Optional[date] = None
    ) -> Optional[BillingPeriod]:
        """Return the first period of the company that still needs attention."""
        periods = self.list_periods(company_id, today=today)
        invoices = self.db.list_invoices(company_id=company_id)
        return find_default_period(periods, invoices)
