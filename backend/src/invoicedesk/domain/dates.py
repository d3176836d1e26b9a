"""
Status and day-delta derivation for invoices.

This module contains pure functions that derive an invoice's lifecycle
status and its human-readable day-delta relative to "today".
No side effects, no I/O, no clock reads - today is always passed in.

Design Decisions:
- Status is recomputed on every call, never cached, so a day rollover
  between two renders can never produce a stale status
- All deltas are computed on calendar dates; datetimes are truncated
  to their date first so time-of-day never shifts a result by one
- Signs follow the display convention: positive "paid early" days,
  positive "overdue by" days, positive "due in" days
"""

from datetime import date, datetime, timedelta

from .models import DaysCategory, DaysInfo, Invoice, InvoiceStatus


DATE_FORMAT = "%Y-%m-%d"


def as_date(value: date) -> date:
    """Truncate a datetime to its calendar date (midnight); dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date(value: str) -> date:
    """
    Parse an ISO calendar date (YYYY-MM-DD).

    Raises:
        ValueError: If the string is not a valid date
    """
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def format_date(value: date) -> str:
    """Format a date as a normalized ISO string (YYYY-MM-DD)."""
    return as_date(value).strftime(DATE_FORMAT)


def days_between(later: date, earlier: date) -> int:
    """
    Whole days from `earlier` to `later` (negative if later is before earlier).

    Both operands are truncated to midnight before subtracting, so the
    difference is always an exact number of days.
    """
    return (as_date(later) - as_date(earlier)).days


def calculate_due_date(invoice_date: date, payment_terms: int) -> date:
    """
    Add payment_terms whole days to invoice_date.

    Calendar-correct: rolls over month and year boundaries
    (e.g. 2024-12-15 + 30 days = 2025-01-14).
    """
    return as_date(invoice_date) + timedelta(days=int(payment_terms))


def compute_status(invoice: Invoice, today: date) -> InvoiceStatus:
    """
    Derive the lifecycle status of an invoice.

    Rules:
    - Paid if payment_date is present, regardless of how late or early
    - Overdue if the due date is strictly before today
    - Pending otherwise (including on the due date itself)
    """
    if invoice.payment_date is not None:
        return InvoiceStatus.PAID
    if as_date(invoice.due_date) < as_date(today):
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.PENDING


def payment_delay(invoice: Invoice) -> int | None:
    """
    Signed payment delay in days: payment_date - due_date.

    Positive means paid late, negative means paid early.
    Returns None for unpaid invoices.
    """
    if invoice.payment_date is None:
        return None
    return days_between(invoice.payment_date, invoice.due_date)


def days_info(invoice: Invoice, today: date) -> DaysInfo:
    """
    Build the day-delta descriptor shown next to an invoice.

    Examples:
        Paid on 2024-01-25, due 2024-01-31   -> "Paid 6 days early"
        Unpaid, due 2024-01-31, today 02-05  -> "Overdue by 5 days"
        Unpaid, due 2024-01-31, today 01-01  -> "Due in 30 days"
    """
    status = compute_status(invoice, today)

    if status is InvoiceStatus.PAID:
        delta = days_between(invoice.due_date, invoice.payment_date)
        if delta > 0:
            return DaysInfo(f"Paid {delta} days early", DaysCategory.PAID_EARLY, delta)
        if delta < 0:
            return DaysInfo(f"Paid {abs(delta)} days late", DaysCategory.PAID_LATE, abs(delta))
        return DaysInfo("Paid on time", DaysCategory.PAID_ON_TIME, 0)

    if status is InvoiceStatus.OVERDUE:
        delta = days_between(today, invoice.due_date)
        return DaysInfo(f"Overdue by {delta} days", DaysCategory.OVERDUE, delta)

    delta = days_between(invoice.due_date, today)
    return DaysInfo(f"Due in {delta} days", DaysCategory.DUE, delta)
