"""
Invoice lifecycle store.

Owns the canonical invoice collection and is its only writer. Every
other component receives a read-only snapshot (a tuple) and derives
status, summaries and pages from it.

Design Decisions:
- Collection is newest-added-first: add() prepends
- Each successful mutation persists a full snapshot exactly once
  (bulk_mark_paid included), never one save per invoice
- Validation happens before any state change, so a rejected add leaves
  the collection untouched
- A failed save is logged and does not roll back the in-memory change
- Unknown ids are ignored; re-marking a paid invoice overwrites its date
"""

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from invoicedesk.domain.models import Invoice, InvoiceDraft
from invoicedesk.domain.seed import generate_sample_invoices
from invoicedesk.domain.sequence import next_invoice_id
from invoicedesk.domain.validation import FieldErrors, parse_amount, validate_draft
from invoicedesk.infrastructure.storage import StorageBackend

logger = logging.getLogger(__name__)


@dataclass
class AddInvoiceResult:
    """Outcome of add(): either the new invoice or per-field errors."""
    invoice: Invoice | None = None
    errors: FieldErrors = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.invoice is not None and not self.errors


class InvoiceStore:
    """
    In-memory invoice collection synchronized with a storage backend.

    Example:
        store = InvoiceStore(LocalStorageBackend(Path("invoices.json")))
        store.load_or_seed(today=date.today())

        result = store.add(InvoiceDraft("Acme Corp", "1200", date.today(), 30))
        if result.ok:
            store.mark_paid(result.invoice.id, date.today())
    """

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend
        self._invoices: list[Invoice] = []

    @property
    def invoices(self) -> tuple[Invoice, ...]:
        """Read-only snapshot of the collection, newest first."""
        return tuple(self._invoices)

    def __len__(self) -> int:
        return len(self._invoices)

    def get(self, invoice_id: str) -> Invoice | None:
        """Look up an invoice by id."""
        for invoice in self._invoices:
            if invoice.id == invoice_id:
                return invoice
        return None

    def load_or_seed(
        self,
        today: date,
        seed_count: int = 10,
        paid_ratio: float = 0.4,
        rng: random.Random | None = None,
    ) -> tuple[Invoice, ...]:
        """
        Load the saved collection, or seed sample data on first start.

        An absent, corrupt or empty saved collection counts as a first
        start: sample invoices are generated and persisted immediately.
        """
        stored = self.backend.load()
        if stored:
            self._invoices = list(stored)
            logger.info(f"Store loaded with {len(self._invoices)} invoices")
            return self.invoices

        self._invoices = generate_sample_invoices(
            today, count=seed_count, paid_ratio=paid_ratio, rng=rng,
        )
        logger.info(f"Store seeded with {len(self._invoices)} sample invoices")
        self._persist()
        return self.invoices

    def add(self, draft: InvoiceDraft) -> AddInvoiceResult:
        """
        Validate a draft and prepend it as a new unpaid invoice.

        The id is the next in sequence, the due date is invoice date plus
        payment terms and the amount is normalized to two decimals.
        """
        errors = validate_draft(draft)
        if errors:
            logger.info(f"Rejected new invoice: {errors}")
            return AddInvoiceResult(errors=errors)

        invoice = Invoice.create(
            id=next_invoice_id(self._invoices),
            customer_name=draft.customer_name,
            amount=parse_amount(draft.amount),
            invoice_date=draft.invoice_date,
            payment_terms=draft.payment_terms,
        )
        self._invoices.insert(0, invoice)
        logger.info(f"Added {invoice.id} for {invoice.customer_name}: {invoice.amount}")
        self._persist()
        return AddInvoiceResult(invoice=invoice)

    def mark_paid(self, invoice_id: str, payment_date: date) -> Invoice | None:
        """
        Record a payment date on one invoice.

        Returns:
            The updated invoice, or None if the id is unknown (no-op)
        """
        updated = self._apply_payment({invoice_id}, payment_date)
        if not updated:
            logger.debug(f"mark_paid ignored unknown invoice {invoice_id}")
            return None
        self._persist()
        return updated[0]

    def bulk_mark_paid(self, invoice_ids: Iterable[str], payment_date: date) -> list[Invoice]:
        """
        Record the same payment date on every matching invoice.

        Unknown ids are skipped. The collection is persisted once.

        Returns:
            The updated invoices, in collection order
        """
        wanted = set(invoice_ids)
        updated = self._apply_payment(wanted, payment_date)
        missing = wanted - {inv.id for inv in updated}
        if missing:
            logger.debug(f"bulk_mark_paid ignored unknown invoices {sorted(missing)}")
        if updated:
            self._persist()
        return updated

    def _apply_payment(self, invoice_ids: set[str], payment_date: date) -> list[Invoice]:
        updated: list[Invoice] = []
        for index, invoice in enumerate(self._invoices):
            if invoice.id in invoice_ids:
                paid = invoice.with_payment(payment_date)
                self._invoices[index] = paid
                updated.append(paid)
        if updated:
            logger.info(f"Marked {len(updated)} invoice(s) paid on {payment_date}")
        return updated

    def _persist(self) -> None:
        if not self.backend.save(list(self._invoices)):
            logger.warning("Invoice changes are kept in memory but were not saved")
