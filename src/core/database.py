"""Database connection and session management.

This module handles the database connection using SQLAlchemy and provides
the transactional scope used by multi-statement operations.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import DATA_DIR, DATABASE_URL
from core.exceptions import FlashcardError, StoreError
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    """Create an engine for the given URL.

    Args:
        url: SQLAlchemy database URL.

    Returns:
        Configured Engine instance.
    """
    if url.startswith("sqlite"):
        if ":memory:" in url or url == "sqlite://":
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,
    )


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY constraints unless asked per connection
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if DATABASE_URL.startswith("sqlite"):
    # Ensure data directory exists
    DATA_DIR.mkdir(parents=True, exist_ok=True)

engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    Base.metadata.create_all(bind=bind)

# Initialize DB (create tables if not exist)
init_db()


def get_db() -> Iterator[Session]:
    """Dependency for getting a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a block of writes as one transaction.

    Commits when the block completes. On any failure every write issued in
    the block is rolled back; persistence errors are logged and re-raised as
    an opaque StoreError, any other exception is re-raised unchanged.

    Args:
        db: Session the block writes through.

    Yields:
        The same session.

    Raises:
        StoreError: If the database rejects any statement or the commit.
    """
    try:
        yield db
        db.commit()
    except FlashcardError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Transaction rolled back")
        raise StoreError() from exc
    except Exception:
        db.rollback()
        raise
