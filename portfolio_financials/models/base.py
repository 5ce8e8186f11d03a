"""
Database engine, session management, and base model.

The database holds the transaction ledger and nothing else.
Statements are derived from the ledger on every request and
never written back.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from portfolio_financials.config import get_settings

settings = get_settings()


def _connect_args(url: str) -> dict:
    # FastAPI runs sync endpoints on a worker thread, not the one
    # that opened the SQLite connection
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# --- Engine ---
engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
)

# --- Session Factory ---
# Services flush; the caller (router or test) commits or rolls back.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """Yield one session per request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
