"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the real
database. Tables are created before each test and dropped after,
so no test data persists between tests.
"""

import os

# Must be set before wallet_ledger.models.base builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wallet_ledger.main import app
from wallet_ledger.models import Base
from wallet_ledger.models.base import get_db
from wallet_ledger.models.enums import AccountStatus
from wallet_ledger.services.account_store import AccountStore
from wallet_ledger.services.ledger_engine import LedgerEngine


# A file database rather than :memory: so that several sessions,
# including ones on other threads, see the same data.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    """Session factory for tests that need more than one session."""
    return TestSessionLocal


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def open_account(db_session):
    """
    Factory: open a committed account for an owner, optionally
    funded through the ledger engine so the balance is backed by
    a COMPLETED credit, and optionally moved to another status.
    """
    def _open(
        owner_id,
        balance="0",
        status=AccountStatus.ACTIVE,
        account_number=None,
    ):
        store = AccountStore(db_session)
        account = store.create(owner_id, account_number)
        db_session.commit()

        if Decimal(balance) > 0:
            LedgerEngine(db_session).fund(owner_id, Decimal(balance), "Opening balance")

        if status != AccountStatus.ACTIVE:
            store.update_status(account.id, status)
            db_session.commit()

        return account

    return _open
