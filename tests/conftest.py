"""
Shared test fixtures.

Every test runs against a throwaway SQLite ledger: tables are
created before the test and dropped after it, so one test's
transactions never leak into another's statements.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from portfolio_financials.main import app
from portfolio_financials.models.base import Base, get_db
from portfolio_financials.services.ledger_service import LedgerService

TEST_DATABASE_URL = "sqlite:///./test_portfolio_financials.db"

engine = create_engine(
    TEST_DATABASE_URL,
    # TestClient serves requests from a worker thread
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh ledger table for each test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Session for calling services directly."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def ledger_service(db_session):
    return LedgerService(db_session)


@pytest.fixture
def client(db_session):
    """
    HTTP client bound to the test ledger.

    get_db is overridden so requests share db_session, which lets
    a test post through the API and inspect through a service.
    The app's lifespan hook is not run, so the real database is
    never touched.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
