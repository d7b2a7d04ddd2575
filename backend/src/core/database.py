# pyright: reportMissingTypeStubs=false
"""
Database configuration and session management.

This module sets up the SQLAlchemy engine and session factory for the
well guide tables, and provides the session dependency used by FastAPI
routes and the context manager used by background jobs.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator

from fastapi import HTTPException
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from core.config import DATABASE_URL
from core.constants import DB_POOL_RECYCLE_SECONDS

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> Dict[str, Any]:
    """Build engine options for the configured backend."""
    kwargs: Dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connections before use
        "echo": False,
        "future": True,
    }
    if url.startswith("sqlite"):
        # SQLite connections are shared with the TestClient worker thread
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_recycle"] = DB_POOL_RECYCLE_SECONDS
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Don't expire objects after commit
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


@event.listens_for(Base, "before_insert", propagate=True)  # type: ignore
def receive_before_insert(mapper, connection, target):  # type: ignore
    """Set created_at and updated_at on ORM inserts (UTC)."""
    # Import here to avoid circular import
    from utils.datetime_utils import utc_now
    now = utc_now()
    for column in ("created_at", "updated_at"):
        if hasattr(mapper, "columns") and column in mapper.columns:  # type: ignore
            if getattr(target, column, None) is None:
                setattr(target, column, now)


@event.listens_for(Base, "before_update", propagate=True)  # type: ignore
def receive_before_update(mapper, connection, target):  # type: ignore
    """Set updated_at on ORM updates (UTC)."""
    from utils.datetime_utils import utc_now
    if hasattr(mapper, "columns") and "updated_at" in mapper.columns:  # type: ignore
        setattr(target, "updated_at", utc_now())


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency to provide database sessions.

    Yields a database session that is automatically closed after the request.
    Handles cleanup even if an exception occurs during request processing.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.exception(f"Database error: {e}")
        db.rollback()
        raise
    except HTTPException:
        # Expected business errors, not worth an error log
        db.rollback()
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in database session: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI dependency injection.

    Used by the status refresh job and the seed script. Commits on success,
    rolls back on any error.

    Example:
        ```python
        with get_db_context() as db:
            WellGuideService.refresh_statuses(db)
        ```
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception(f"Database transaction failed: {e}")
        raise
    finally:
        db.close()


def create_tables() -> None:
    """
    Create all database tables defined in SQLAlchemy models.

    Note:
        In production, prefer the Alembic migrations. This is used by the
        seed script for local setups and by tests.
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        logger.exception(f"Failed to create database tables: {e}")
        raise
