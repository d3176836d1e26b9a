"""
CSV export of invoices.

Consumes the filtered but unpaginated query result, so the download
matches what the user is looking at across all pages.
"""

import csv
import io
from collections.abc import Sequence
from datetime import date

from invoicedesk.domain.dates import compute_status, format_date
from invoicedesk.domain.models import Invoice


CSV_HEADERS = [
    "Invoice #",
    "Customer Name",
    "Amount",
    "Invoice Date",
    "Due Date",
    "Payment Date",
    "Status",
    "Payment Terms",
]

CSV_CONTENT_TYPE = "text/csv; charset=utf-8"


def invoice_row(invoice: Invoice, today: date) -> list[str]:
    """One CSV row; an unpaid invoice shows N/A as its payment date."""
    return [
        invoice.id,
        invoice.customer_name,
        format(invoice.amount, "f"),
        format_date(invoice.invoice_date),
        format_date(invoice.due_date),
        format_date(invoice.payment_date) if invoice.payment_date else "N/A",
        compute_status(invoice, today).value,
        f"{invoice.payment_terms} days",
    ]


def export_csv(invoices: Sequence[Invoice], today: date) -> str:
    """
    Render invoices as CSV text.

    Every cell is double-quoted and rows are joined by a bare newline
    with no trailing newline after the last row.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(invoice_row(inv, today) for inv in invoices)
    return buffer.getvalue().removesuffix("\n")


def export_filename(today: date) -> str:
    """Download name stamped with the current date, e.g. invoices_2024-03-01.csv."""
    return f"invoices_{format_date(today)}.csv"
