"""
Shared FastAPI dependencies.

The store is created once at startup by the application lifespan and
handed to routes through get_store(); tests swap it out with
app.dependency_overrides, and pin the date by overriding get_today().
"""

from datetime import date

from fastapi import HTTPException, status

from invoicedesk.services.store import InvoiceStore


_store: InvoiceStore | None = None


def set_store(store: InvoiceStore | None) -> None:
    """Install (or clear) the process-wide store."""
    global _store
    _store = store


def get_store() -> InvoiceStore:
    """Get the store initialized at startup."""
    if _store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Invoice store is not initialized",
        )
    return _store


def get_today() -> date:
    """Current calendar date, the single clock read of a request."""
    return date.today()
