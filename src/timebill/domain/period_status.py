"""Aggregate status and totals of the invoices in a billing period."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from timebill.database.base import Database
from timebill.domain import config
from timebill.domain.billing_periods import BillingPeriodService, period_value_key
from timebill.domain.entities import (
    BillingPeriod,
    FinancialSummary,
    Invoice,
    InvoiceStatus,
    PeriodStatus,
    PeriodSummary,
)

OPEN_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.GENERATED)


def resolve_period_status(statuses: Iterable[InvoiceStatus]) -> PeriodStatus:
    """Resolve the status of a period from its invoice statuses.

    Canceled invoices are ignored. The first matching rule wins:
    no invoices, all paid, all generated, some paid alongside open ones
    (partially paid), otherwise pending. The input order does not matter.
    """
    present = {status for status in statuses if status != InvoiceStatus.CANCELED}
    if not present:
        return PeriodStatus.NO_INVOICES
    if present == {InvoiceStatus.PAID}:
        return PeriodStatus.PAID
    if present == {InvoiceStatus.GENERATED}:
        return PeriodStatus.GENERATED
    if InvoiceStatus.PAID in present and present & set(OPEN_STATUSES):
        return PeriodStatus.PARTIALLY_PAID
    return PeriodStatus.PENDING


def summarize_period(start: date, end: date, invoices: Sequence[Invoice]) -> PeriodSummary:
    """Totals and status for the invoices of one period."""
    active = [inv for inv in invoices if inv.status != InvoiceStatus.CANCELED]
    return PeriodSummary(
        period_start=start,
        period_end=end,
        value=period_value_key(start, end),
        status=resolve_period_status(inv.status for inv in active),
        total_amount=sum((inv.amount for inv in active), Decimal("0")),
        total_paid=sum(
            (inv.amount for inv in active if inv.status == InvoiceStatus.PAID),
            Decimal("0"),
        ),
        total_pending=sum(
            (inv.amount for inv in active if inv.status in OPEN_STATUSES),
            Decimal("0"),
        ),
        invoices=tuple(active),
    )


def summarize_periods(
    invoices: Iterable[Invoice],
    periods: Optional[Sequence[BillingPeriod]] = None,
) -> list[PeriodSummary]:
    """Group invoices by period bounds and summarize each group.

    Invoices join periods by equality of their period start and end. When
    ``periods`` is given, every one of them is summarized (periods without
    invoices resolve to ``no_invoices``) and invoices of other periods are
    left out.

    Returns:
        Summaries, most recent period first
    """
    grouped: dict[tuple[date, date], list[Invoice]] = {}
    for invoice in invoices:
        grouped.setdefault((invoice.period_start, invoice.period_end), []).append(invoice)

    if periods is None:
        bounds = list(grouped)
    else:
        bounds = [(period.start, period.end) for period in periods]

    summaries = [summarize_period(start, end, grouped.get((start, end), [])) for start, end in bounds]
    return sorted(summaries, key=lambda summary: summary.period_start, reverse=True)


def summarize_finances(invoices: Iterable[Invoice], today: Optional[date] = None) -> FinancialSummary:
    """Money received this month, still receivable, and overdue."""
    today = today or date.today()
    received = Decimal("0")
    receivable = Decimal("0")
    overdue = Decimal("0")

    for invoice in invoices:
        if invoice.status == InvoiceStatus.PAID:
            paid_on = invoice.payment_date
            if paid_on is not None and (paid_on.year, paid_on.month) == (today.year, today.month):
                received += invoice.amount
            continue
        if invoice.status == InvoiceStatus.CANCELED:
            continue
        if invoice.due_date < today:
            overdue += invoice.amount
        if invoice.status == InvoiceStatus.PENDING:
            receivable += invoice.amount

    return FinancialSummary(
        received_this_month=received,
        receivable=receivable,
        overdue=overdue,
    )


class PeriodStatusService:
    """Service for period-level invoice reporting."""

    def __init__(self, db: Database):
        """Initialize period status service.

        Args:
            db: Database instance
        """
        self.db = db
        self.periods = BillingPeriodService(db)

    def period_summaries(
        self,
        company_id: str,
        start_offset: int = config.DEFAULT_PERIOD_OFFSETS[0],
        end_offset: int = config.DEFAULT_PERIOD_OFFSETS[1],
        today: Optional[date] = None,
    ) -> list[PeriodSummary]:
        """Summaries for each generated period of a company."""
        periods = self.periods.list_periods(
            company_id, start_offset=start_offset, end_offset=end_offset, today=today
        )
        invoices = self.db.list_invoices(company_id=company_id)
        return summarize_periods(invoices, periods)

    def period_status(self, company_id: str, period: BillingPeriod) -> PeriodStatus:
        """Status of one period of a company."""
        invoices = self.db.list_invoices(
            company_id=company_id, period_start=period.start, period_end=period.end
        )
        return resolve_period_status(invoice.status for invoice in invoices)

    def finances(self, company_id: str, today: Optional[date] = None) -> FinancialSummary:
        """Financial summary over all invoices of a company."""
        return summarize_finances(self.db.list_invoices(company_id=company_id), today)
