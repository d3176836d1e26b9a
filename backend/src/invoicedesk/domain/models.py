"""
Domain models for invoice tracking.

These models represent the invoices a small business issues to its
customers and the display descriptors derived from them.

Design Decisions:
- Using frozen dataclasses for immutable, typed domain objects
- Status is never stored on the invoice; it is derived from dates
- Decimal for all monetary values to avoid floating-point errors
- paymentDate is the only field that changes, via Invoice.with_payment()
"""

import re
from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum


# Allowed payment terms in days
PAYMENT_TERMS: tuple[int, ...] = (7, 15, 30, 45, 60)

DEFAULT_PAYMENT_TERMS = 30

# INV-NNNNN, zero-padded five digit sequence
INVOICE_ID_PATTERN = re.compile(r"^INV-(\d{5,})$")

CENT = Decimal("0.01")


class InvoiceStatus(Enum):
    """Lifecycle status of an invoice, derived at read time."""
    PENDING = "Pending"
    OVERDUE = "Overdue"
    PAID = "Paid"


class DaysCategory(Enum):
    """Kind of day-delta shown next to an invoice."""
    PAID_EARLY = "paid_early"
    PAID_ON_TIME = "paid_on_time"
    PAID_LATE = "paid_late"
    OVERDUE = "overdue"
    DUE = "due"


@dataclass(frozen=True)
class DaysInfo:
    """
    Human-readable day-delta for an invoice.

    `days` is always the non-negative magnitude shown in `text`.
    """
    text: str
    category: DaysCategory
    days: int


@dataclass(frozen=True)
class Invoice:
    """
    An invoice issued to a customer.

    The due date is computed once at creation from invoice_date and
    payment_terms and is never recomputed afterwards. Presence of
    payment_date is the sole source of truth for "paid".
    """
    id: str
    customer_name: str
    amount: Decimal
    invoice_date: date
    due_date: date
    payment_terms: int
    payment_date: date | None = None

    def __post_init__(self) -> None:
        """Validate field contracts."""
        if not INVOICE_ID_PATTERN.match(self.id):
            raise ValueError(f"Invalid invoice id: {self.id!r}")
        if not self.customer_name.strip():
            raise ValueError("Customer name must not be empty")
        if self.amount <= 0:
            raise ValueError(f"Amount must be positive, got {self.amount}")
        if self.payment_terms not in PAYMENT_TERMS:
            raise ValueError(f"Unsupported payment terms: {self.payment_terms}")
        if self.due_date < self.invoice_date:
            raise ValueError(
                f"Due date {self.due_date} is before invoice date {self.invoice_date}"
            )

    @property
    def is_paid(self) -> bool:
        return self.payment_date is not None

    @classmethod
    def create(
        cls,
        id: str,
        customer_name: str,
        amount: Decimal,
        invoice_date: date,
        payment_terms: int,
    ) -> "Invoice":
        """
        Create a new unpaid invoice, deriving the due date from the terms.

        The amount is normalized to two decimal places.
        """
        return cls(
            id=id,
            customer_name=customer_name.strip(),
            amount=amount.quantize(CENT),
            invoice_date=invoice_date,
            due_date=invoice_date + timedelta(days=payment_terms),
            payment_terms=payment_terms,
        )

    def with_payment(self, payment_date: date) -> "Invoice":
        """Return a copy of this invoice marked as paid on payment_date."""
        return replace(self, payment_date=payment_date)


@dataclass(frozen=True)
class InvoiceDraft:
    """
    Raw add-invoice form fields, before validation.

    Values are kept as the user typed them; validation decides whether
    they can become an Invoice.
    """
    customer_name: str = ""
    amount: str | Decimal = ""
    invoice_date: date | None = None
    payment_terms: int = DEFAULT_PAYMENT_TERMS
