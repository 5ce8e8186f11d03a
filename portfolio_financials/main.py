"""
Portfolio Financials: FastAPI Application.

This is the entry point for the application.
Logging is configured and all routers are registered here.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from portfolio_financials.config import get_settings
from portfolio_financials.logging_setup import configure_logging, get_logger
from portfolio_financials.models.base import Base, engine
from portfolio_financials.api.health import router as health_router
from portfolio_financials.api.transactions import router as transactions_router
from portfolio_financials.api.financials import router as financials_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The ledger is the only table; statements are never stored
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started (%s)",
                settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Financial statements derived on demand from a transaction ledger",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(transactions_router)
app.include_router(financials_router)
