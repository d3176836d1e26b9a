"""
Application configuration loaded from environment variables.

All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with validation.

    All settings are loaded from environment variables prefixed with
    INVOICEDESK_ (e.g. INVOICEDESK_STORAGE_BACKEND=database).
    Use .env file for local development.
    """

    model_config = SettingsConfigDict(
        env_prefix="INVOICEDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Persistence
    storage_backend: Literal["memory", "file", "database"] = Field(
        default="file",
        description="Where the invoice collection is persisted"
    )
    storage_path: Path = Field(
        default=Path("./storage/invoices.json"),
        description="JSON file holding the invoice collection (file backend)"
    )
    database_url: str = Field(
        default="sqlite:///./storage/invoicedesk.db",
        description="SQLAlchemy connection string (database backend)"
    )
    storage_key: str = Field(
        default="invoicedesk_invoices",
        min_length=1,
        description="Fixed key the invoice collection is stored under"
    )

    # Dashboard
    page_size: int = Field(
        default=15,
        ge=1,
        le=100,
        description="Invoices shown per table page"
    )

    # Sample data for first start
    seed_count: int = Field(
        default=10,
        ge=0,
        description="Number of sample invoices generated when the store is empty"
    )
    seed_paid_ratio: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Fraction of sample invoices generated as already paid"
    )

    # Server
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed error messages"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root logging level"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once at startup and cached for subsequent calls.
    This ensures consistent configuration across the application lifecycle.
    """
    return Settings()
