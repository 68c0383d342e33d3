"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db(), and every money movement runs inside
unit_of_work().
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase

from wallet_ledger.config import get_settings
from wallet_ledger.exceptions import InternalError

settings = get_settings()

# --- Engine ---
# The engine manages a pool of database connections.
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. autoflush=False means SQL is only sent when we
# flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks. Closing a session
    with an open transaction rolls it back.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Run a block as one all-or-nothing database transaction.

    Commits when the block finishes. On any exception, including
    KeyboardInterrupt or task cancellation, the session is rolled
    back before the exception propagates, so no partial balance
    change or orphaned transaction row can survive.

    Driver and connection errors are re-raised as InternalError.
    Errors already typed by the wallet (WalletError) pass through
    unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError(f"Storage error: {e.__class__.__name__}") from e
    except BaseException:
        db.rollback()
        raise
