"""
FastAPI application entry point.

This is the main application that ties together all components:
- API routes for listing, adding, paying and exporting invoices
- Invoice store lifecycle (load saved data or seed samples on startup)
- CORS configuration for frontend access
- Error handling and logging
"""

import logging
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invoicedesk import __version__
from invoicedesk.api.dependencies import set_store
from invoicedesk.api.routes import health, invoices
from invoicedesk.config import get_settings
from invoicedesk.infrastructure.database import close_db
from invoicedesk.infrastructure.storage import create_storage_backend
from invoicedesk.services.store import InvoiceStore

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Open the configured storage backend
    - Load the saved invoices, or seed sample invoices on first start
    - Release database connections on shutdown
    """
    settings = get_settings()

    logger.info(f"Starting InvoiceDesk v{__version__}")
    logger.info(f"Storage backend: {settings.storage_backend}")
    logger.info(f"Debug mode: {settings.debug}")

    store = InvoiceStore(create_storage_backend(settings))
    store.load_or_seed(
        today=date.today(),
        seed_count=settings.seed_count,
        paid_ratio=settings.seed_paid_ratio,
    )
    set_store(store)

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down InvoiceDesk")
    set_store(None)
    store.backend.close()
    close_db()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance ready to serve requests.
    """
    settings = get_settings()

    app = FastAPI(
        title="InvoiceDesk API",
        description=(
            "Invoice tracking dashboard for small businesses.\n\n"
            "Lists invoices with derived payment status, summarizes "
            "outstanding and overdue amounts, and records payments."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(invoices.router, prefix="/api/v1")

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler for unhandled errors."""
        logger.exception(f"Unhandled error: {exc}")

        # Don't expose internal errors in production
        if settings.debug:
            detail = str(exc)
        else:
            detail = "An internal error occurred"

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": detail,
            },
        )

    return app


# Create the application instance
app = create_app()


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "invoicedesk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
