"""
Database configuration and session management with SQLAlchemy.

The database backend keeps the whole invoice collection as one JSON blob
under a fixed key, so the schema is a single key-value table.

Design Decisions:
- Synchronous engine: the invoice store is single-threaded and every
  mutation runs to completion on the caller's thread
- Explicit transaction management (session.begin())
- Engine created lazily from settings, or injected for tests
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Engine, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from invoicedesk.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class StoredBlob(Base):
    """
    A named JSON document.

    The invoice collection is stored under Settings.storage_key; other
    keys are left untouched.
    """
    __tablename__ = "stored_blobs"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[Any] = mapped_column(JSON)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


# Engine and session factory (initialized lazily)
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine, with pooling options only where the driver supports them."""
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo)
    return create_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
    )


def get_engine() -> Engine:
    """Get or create the database engine from settings."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url, echo=settings.debug)
        logger.info(f"Database engine created for {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def get_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    """Get the session factory for creating database sessions."""
    global _session_factory
    if engine is not None:
        return sessionmaker(engine, expire_on_commit=False)
    if _session_factory is None:
        _session_factory = sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


@contextmanager
def get_session(engine: Engine | None = None) -> Generator[Session, None, None]:
    """
    Get a database session.

    Usage:
        with get_session() as session, session.begin():
            session.merge(record)
    """
    session = get_session_factory(engine)()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine | None = None) -> None:
    """
    Initialize database tables.

    Call this on application startup to ensure tables exist.
    """
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Database tables initialized")


def close_db() -> None:
    """Close database connections on shutdown."""
    global _engine, _session_factory
    if _engine:
        _engine.dispose()
        _engine = None
        _session_factory = None
    logger.info("Database connections closed")
