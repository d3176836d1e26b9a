"""
Portfolio-level summaries over a collection of invoices.

Pure functions; each one consumes a collection (already filtered by the
caller when a scoped view is wanted) and today's date.

Design Decisions:
- Decimal sums with an explicit Decimal(0) start so an empty collection
  yields Decimal("0.00") and many additions never drift
- "Paid this month" is the calendar month of today, not a rolling 30 days
- Average delay rounds half toward +infinity, matching a dashboard's
  conventional Math.round behaviour, and is 0 when nothing is paid
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from fractions import Fraction

from .dates import as_date, compute_status, payment_delay
from .models import CENT, Invoice, InvoiceStatus


ZERO = Decimal("0.00")


@dataclass(frozen=True)
class StatusBucket:
    """Count and amount of invoices sharing one status."""
    status: InvoiceStatus
    count: int = 0
    amount: Decimal = ZERO


@dataclass(frozen=True)
class PortfolioSummary:
    """Summary cards for a set of invoices."""
    total_outstanding: Decimal
    total_overdue: Decimal
    total_paid_this_month: Decimal
    average_payment_delay: int
    invoice_count: int
    breakdown: list[StatusBucket] = field(default_factory=list)


def _sum_amounts(invoices: Iterable[Invoice]) -> Decimal:
    return sum((inv.amount for inv in invoices), Decimal(0)).quantize(CENT)


def total_outstanding(invoices: Iterable[Invoice], today: date) -> Decimal:
    """Sum of amounts over Pending and Overdue invoices."""
    return _sum_amounts(
        inv for inv in invoices
        if compute_status(inv, today) in (InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)
    )


def total_overdue(invoices: Iterable[Invoice], today: date) -> Decimal:
    """Sum of amounts over Overdue invoices."""
    return _sum_amounts(
        inv for inv in invoices
        if compute_status(inv, today) is InvoiceStatus.OVERDUE
    )


def total_paid_this_month(invoices: Iterable[Invoice], today: date) -> Decimal:
    """Sum of amounts over invoices paid in today's calendar month and year."""
    today = as_date(today)
    return _sum_amounts(
        inv for inv in invoices
        if inv.payment_date is not None
        and inv.payment_date.year == today.year
        and inv.payment_date.month == today.month
    )


def average_payment_delay(invoices: Iterable[Invoice]) -> int:
    """
    Mean of (payment_date - due_date) in days over paid invoices.

    Positive means customers pay late on average, negative early.
    Returns 0 when no invoice has been paid.
    """
    delays = [d for d in (payment_delay(inv) for inv in invoices) if d is not None]
    if not delays:
        return 0
    mean = Fraction(sum(delays), len(delays))
    return math.floor(mean + Fraction(1, 2))


def status_breakdown(invoices: Iterable[Invoice], today: date) -> list[StatusBucket]:
    """
    Count and total amount per status, in Paid, Pending, Overdue order.

    Statuses with no invoices are still reported with a zero count.
    """
    counts = {status: 0 for status in InvoiceStatus}
    amounts = {status: Decimal(0) for status in InvoiceStatus}
    for inv in invoices:
        status = compute_status(inv, today)
        counts[status] += 1
        amounts[status] += inv.amount

    order = (InvoiceStatus.PAID, InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)
    return [
        StatusBucket(status=s, count=counts[s], amount=amounts[s].quantize(CENT))
        for s in order
    ]


def summarize(invoices: Iterable[Invoice], today: date) -> PortfolioSummary:
    """Compute every summary figure for a collection in one call."""
    invoices = list(invoices)
    return PortfolioSummary(
        total_outstanding=total_outstanding(invoices, today),
        total_overdue=total_overdue(invoices, today),
        total_paid_this_month=total_paid_this_month(invoices, today),
        average_payment_delay=average_payment_delay(invoices),
        invoice_count=len(invoices),
        breakdown=status_breakdown(invoices, today),
    )
