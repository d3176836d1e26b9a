"""
Health check endpoint.

Provides system health status for monitoring and load balancers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from invoicedesk import __version__
from invoicedesk.api.dependencies import get_store
from invoicedesk.api.schemas import HealthResponse
from invoicedesk.config import get_settings
from invoicedesk.services.store import InvoiceStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(store: Annotated[InvoiceStore, Depends(get_store)]) -> HealthResponse:
    """
    Check system health.

    Reports the configured storage backend and how many invoices are
    loaded, for monitoring dashboards and load balancer checks.
    """
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=__version__,
        storage_backend=settings.storage_backend,
        invoice_count=len(store),
    )
