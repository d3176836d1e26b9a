"""Pytest fixtures for InvoiceDesk tests."""

from collections.abc import AsyncGenerator
from datetime import date, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from invoicedesk.api.dependencies import get_store, get_today
from invoicedesk.domain.models import Invoice
from invoicedesk.infrastructure.storage import MemoryStorageBackend
from invoicedesk.main import app
from invoicedesk.services.store import InvoiceStore


TODAY = date(2024, 2, 5)


def make_invoice(
    number: int,
    customer_name: str = "Acme Corp",
    amount: str = "1000.00",
    invoice_date: date = date(2024, 1, 1),
    payment_terms: int = 30,
    payment_date: date | None = None,
) -> Invoice:
    """Build an invoice with the due date derived from its terms."""
    return Invoice(
        id=f"INV-{number:05d}",
        customer_name=customer_name,
        amount=Decimal(amount),
        invoice_date=invoice_date,
        due_date=invoice_date + timedelta(days=payment_terms),
        payment_terms=payment_terms,
        payment_date=payment_date,
    )


class RecordingBackend(MemoryStorageBackend):
    """Memory backend that counts writes and can be told to fail."""

    def __init__(self, fail: bool = False) -> None:
        super().__init__()
        self.fail = fail
        self.writes = 0

    def write_blob(self, payload):
        self.writes += 1
        if self.fail:
            raise OSError("disk full")
        super().write_blob(payload)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def sample_invoices() -> list[Invoice]:
    """
    Five invoices as seen on 2024-02-05, newest first.

    INV-10005 Pending, due 02-12       INV-10004 Paid 02-02 (13 days late)
    INV-10003 Paid 01-25 (6 early)     INV-10002 Pending, due 02-19
    INV-10001 Overdue since 01-31
    """
    return [
        make_invoice(10005, "Prime Industries", "4200.00", date(2024, 2, 5), 7),
        make_invoice(10004, "Swift Solutions", "300.00", date(2024, 1, 5), 15,
                     payment_date=date(2024, 2, 2)),
        make_invoice(10003, "Global Traders", "750.25", date(2024, 1, 1), 30,
                     payment_date=date(2024, 1, 25)),
        make_invoice(10002, "TechStart Inc", "2500.50", date(2024, 1, 20), 30),
        make_invoice(10001, "Acme Corp", "1000.00", date(2024, 1, 1), 30),
    ]


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def store(backend, sample_invoices) -> InvoiceStore:
    """Store preloaded with the sample invoices (one write on save)."""
    backend.save(sample_invoices)
    backend.writes = 0
    store = InvoiceStore(backend)
    store.load_or_seed(today=TODAY)
    return store


@pytest_asyncio.fixture
async def async_client(store) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient wired to the FastAPI app with a test store and date."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_today] = lambda: TODAY

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
