"""
Sequential invoice numbering.

Ids look like INV-10001. The next id is one past the highest numeric
suffix in the collection, so numbering never reuses an id even when the
collection is not in creation order.
"""

from collections.abc import Iterable

from .models import INVOICE_ID_PATTERN, Invoice


FIRST_INVOICE_NUMBER = 10001


def parse_invoice_number(invoice_id: str) -> int | None:
    """Numeric suffix of an invoice id, or None if it is not INV-NNNNN."""
    match = INVOICE_ID_PATTERN.match(invoice_id)
    if match is None:
        return None
    return int(match.group(1))


def format_invoice_id(number: int) -> str:
    return f"INV-{number:05d}"


def next_invoice_id(invoices: Iterable[Invoice]) -> str:
    """
    Generate the next id for a collection.

    Examples:
        []                   -> "INV-10001"
        [..., "INV-10007"]   -> "INV-10008"
    """
    numbers = [
        n for n in (parse_invoice_number(inv.id) for inv in invoices)
        if n is not None
    ]
    if not numbers:
        return format_invoice_id(FIRST_INVOICE_NUMBER)
    return format_invoice_id(max(numbers) + 1)
