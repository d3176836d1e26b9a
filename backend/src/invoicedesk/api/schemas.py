"""
Pydantic schemas for API request/response validation.

These schemas define the contract between frontend and backend.
All monetary values use strings to avoid floating point issues.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from invoicedesk.domain.aggregation import PortfolioSummary, StatusBucket
from invoicedesk.domain.dates import compute_status, days_info
from invoicedesk.domain.models import DEFAULT_PAYMENT_TERMS, Invoice


# =============================================================================
# Request Schemas
# =============================================================================

class CreateInvoiceRequest(BaseModel):
    """Add-invoice form submission. Field rules are checked by the domain."""
    customer_name: str = Field(default="", description="Customer being billed")
    amount: Decimal | str = Field(default="", description="Invoice amount, e.g. \"1250.00\"")
    invoice_date: date | None = Field(default=None, description="Date the invoice was issued")
    payment_terms: int = Field(
        default=DEFAULT_PAYMENT_TERMS,
        description="Days until due: 7, 15, 30, 45 or 60",
    )


class MarkPaidRequest(BaseModel):
    """Mark one invoice as paid."""
    payment_date: date | None = Field(
        default=None,
        description="Date the payment was received (defaults to today)",
    )


class BulkMarkPaidRequest(BaseModel):
    """Mark several selected invoices as paid at once."""
    ids: list[str] = Field(..., min_length=1, description="Selected invoice ids")
    payment_date: date | None = Field(
        default=None,
        description="Date the payments were received (defaults to today)",
    )


# =============================================================================
# Response Schemas
# =============================================================================

class DaysInfoResponse(BaseModel):
    """Day-delta descriptor, e.g. "Overdue by 5 days"."""
    text: str
    category: str
    days: int


class InvoiceResponse(BaseModel):
    """Invoice with its derived status and day-delta."""
    id: str
    customer_name: str
    amount: str
    invoice_date: date
    due_date: date
    payment_terms: int
    payment_date: date | None = None
    status: str
    days_info: DaysInfoResponse

    @classmethod
    def build(cls, invoice: Invoice, today: date) -> "InvoiceResponse":
        info = days_info(invoice, today)
        return cls(
            id=invoice.id,
            customer_name=invoice.customer_name,
            amount=format(invoice.amount, "f"),
            invoice_date=invoice.invoice_date,
            due_date=invoice.due_date,
            payment_terms=invoice.payment_terms,
            payment_date=invoice.payment_date,
            status=compute_status(invoice, today).value,
            days_info=DaysInfoResponse(
                text=info.text,
                category=info.category.value,
                days=info.days,
            ),
        )


class StatusBucketResponse(BaseModel):
    """Count and amount for one status (status chart slice)."""
    status: str
    count: int
    amount: str

    @classmethod
    def build(cls, bucket: StatusBucket) -> "StatusBucketResponse":
        return cls(
            status=bucket.status.value,
            count=bucket.count,
            amount=format(bucket.amount, "f"),
        )


class SummaryResponse(BaseModel):
    """Dashboard summary cards."""
    total_outstanding: str
    total_overdue: str
    total_paid_this_month: str
    average_payment_delay: int
    invoice_count: int
    breakdown: list[StatusBucketResponse] = []

    @classmethod
    def build(cls, summary: PortfolioSummary) -> "SummaryResponse":
        return cls(
            total_outstanding=format(summary.total_outstanding, "f"),
            total_overdue=format(summary.total_overdue, "f"),
            total_paid_this_month=format(summary.total_paid_this_month, "f"),
            average_payment_delay=summary.average_payment_delay,
            invoice_count=summary.invoice_count,
            breakdown=[StatusBucketResponse.build(b) for b in summary.breakdown],
        )


class InvoicePageResponse(BaseModel):
    """One table page plus summary over the filtered result."""
    items: list[InvoiceResponse]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    start_item: int
    end_item: int
    page_numbers: list[int | None]
    summary: SummaryResponse


class BulkMarkPaidResponse(BaseModel):
    """Result of a bulk payment."""
    updated: list[str]
    invoices: list[InvoiceResponse]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    storage_backend: str
    invoice_count: int


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str | None = None
    fields: dict[str, str] | None = None
