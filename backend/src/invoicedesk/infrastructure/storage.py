"""
Persistence for the invoice collection.

The store treats persistence as an opaque key-value blob store: load the
last saved collection, or save a full snapshot after every mutation.
Supports an in-memory backend for tests, a local JSON file for
development and a SQL table for deployments.

Design Decisions:
- Abstract backend only reads and writes raw JSON blobs under a key;
  encoding, decoding and error handling live once in the base class
- load() returns None for a missing or corrupt blob, never raises
- save() is best-effort: failures are logged and swallowed so a storage
  hiccup never halts the dashboard
- Records use the dashboard's camelCase field names and string amounts
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy import Engine

from invoicedesk.config import Settings, get_settings
from invoicedesk.domain.models import Invoice

from .database import StoredBlob, build_engine, get_engine, get_session, init_db

logger = logging.getLogger(__name__)


class InvoiceRecord(BaseModel):
    """Persisted shape of one invoice."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    customer_name: str
    amount: Decimal
    invoice_date: date
    due_date: date
    payment_terms: int
    payment_date: date | None = None

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceRecord":
        return cls(
            id=invoice.id,
            customer_name=invoice.customer_name,
            amount=invoice.amount,
            invoice_date=invoice.invoice_date,
            due_date=invoice.due_date,
            payment_terms=invoice.payment_terms,
            payment_date=invoice.payment_date,
        )

    def to_invoice(self) -> Invoice:
        return Invoice(
            id=self.id,
            customer_name=self.customer_name,
            amount=self.amount,
            invoice_date=self.invoice_date,
            due_date=self.due_date,
            payment_terms=self.payment_terms,
            payment_date=self.payment_date,
        )


_records = TypeAdapter(list[InvoiceRecord])


def encode_invoices(invoices: list[Invoice]) -> list[dict[str, Any]]:
    """Convert invoices into JSON-ready dicts (amounts as strings)."""
    return _records.dump_python(
        [InvoiceRecord.from_invoice(inv) for inv in invoices],
        mode="json",
        by_alias=True,
    )


def decode_invoices(payload: Any) -> list[Invoice]:
    """
    Convert stored dicts back into invoices.

    Raises:
        ValidationError: If the payload does not have the record shape
        ValueError: If a record breaks an invoice invariant
    """
    return [record.to_invoice() for record in _records.validate_python(payload)]


class StorageBackend(ABC):
    """Abstract key-value blob store for the invoice collection."""

    def __init__(self, key: str) -> None:
        self.key = key

    @abstractmethod
    def read_blob(self) -> Any | None:
        """Return the decoded JSON stored under self.key, or None."""
        pass

    @abstractmethod
    def write_blob(self, payload: Any) -> None:
        """Store a JSON-ready payload under self.key."""
        pass

    def load(self) -> list[Invoice] | None:
        """
        Load the last saved collection.

        Returns:
            The invoices, or None if nothing was saved or the blob is corrupt
        """
        try:
            payload = self.read_blob()
        except Exception as e:
            logger.error(f"Failed to read invoices from {self.describe()}: {e}")
            return None

        if payload is None:
            return None

        try:
            invoices = decode_invoices(payload)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring corrupt invoice data in {self.describe()}: {e}")
            return None

        logger.info(f"Loaded {len(invoices)} invoices from {self.describe()}")
        return invoices

    def save(self, invoices: list[Invoice]) -> bool:
        """
        Save a full snapshot of the collection.

        Best-effort: any failure is logged and swallowed.

        Returns:
            True if the snapshot was written
        """
        try:
            self.write_blob(encode_invoices(invoices))
        except Exception:
            logger.exception(f"Failed to save {len(invoices)} invoices to {self.describe()}")
            return False
        logger.debug(f"Saved {len(invoices)} invoices to {self.describe()}")
        return True

    def close(self) -> None:
        """Release any resources held by the backend."""

    def describe(self) -> str:
        return f"{type(self).__name__}[{self.key}]"


class MemoryStorageBackend(StorageBackend):
    """
    In-process storage for tests and throwaway sessions.

    Blobs are kept as JSON text so saving and loading go through the
    same encoding as the persistent backends.
    """

    def __init__(self, key: str = "invoicedesk_invoices") -> None:
        super().__init__(key)
        self.blobs: dict[str, str] = {}

    def read_blob(self) -> Any | None:
        text = self.blobs.get(self.key)
        if text is None:
            return None
        return json.loads(text)

    def write_blob(self, payload: Any) -> None:
        self.blobs[self.key] = json.dumps(payload)


class LocalStorageBackend(StorageBackend):
    """
    Local JSON file storage for development.

    The file holds a JSON object mapping storage keys to blobs, so the
    invoice collection never collides with other data in the same file:
    {"invoicedesk_invoices": [{...}, ...]}
    """

    def __init__(self, path: Path, key: str = "invoicedesk_invoices") -> None:
        """
        Initialize local storage.

        Args:
            path: JSON file location; parent directories are created
            key: Key the collection is stored under
        """
        super().__init__(key)
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local storage initialized at {self.path}")

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        document = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return document

    def read_blob(self) -> Any | None:
        try:
            document = self._read_document()
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Storage file {self.path} is not valid JSON: {e}")
            return None
        return document.get(self.key)

    def write_blob(self, payload: Any) -> None:
        try:
            document = self._read_document()
        except (json.JSONDecodeError, ValueError):
            document = {}
        document[self.key] = payload

        # Write atomically (write to temp, then rename)
        temp_path = self.path.with_suffix(".tmp")
        try:
            temp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def describe(self) -> str:
        return f"{self.path}[{self.key}]"


class DatabaseStorageBackend(StorageBackend):
    """Storage in the stored_blobs table, one row per key."""

    def __init__(self, engine: Engine | None = None, key: str = "invoicedesk_invoices") -> None:
        """
        Initialize database storage and make sure the table exists.

        Args:
            engine: SQLAlchemy engine. Uses the configured engine if None.
            key: Row key the collection is stored under
        """
        super().__init__(key)
        self.engine = engine or get_engine()
        init_db(self.engine)

    def read_blob(self) -> Any | None:
        with get_session(self.engine) as session:
            record = session.get(StoredBlob, self.key)
            return record.payload if record is not None else None

    def write_blob(self, payload: Any) -> None:
        with get_session(self.engine) as session, session.begin():
            session.merge(StoredBlob(key=self.key, payload=payload))

    def close(self) -> None:
        self.engine.dispose()

    def describe(self) -> str:
        return f"database[{self.key}]"


def create_storage_backend(settings: Settings | None = None) -> StorageBackend:
    """Build the backend selected by settings.storage_backend."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryStorageBackend(key=settings.storage_key)
    if settings.storage_backend == "database":
        engine = build_engine(settings.database_url, echo=settings.debug)
        return DatabaseStorageBackend(engine=engine, key=settings.storage_key)
    return LocalStorageBackend(settings.storage_path, key=settings.storage_key)
