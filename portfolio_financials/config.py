"""
Application configuration.

All configuration is loaded from environment variables.
The statement engine itself never reads these values; the
service layer passes them in as explicit arguments.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Portfolio Financials"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database (transaction ledger only)
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./portfolio_financials.db"
    )

    # Statement engine
    BALANCE_TOLERANCE: Decimal = Decimal(os.getenv("BALANCE_TOLERANCE", "0.01"))
    DEFAULT_GRANULARITY: str = os.getenv("DEFAULT_GRANULARITY", "month")
    PORTFOLIO_CONCURRENCY: int = int(os.getenv("PORTFOLIO_CONCURRENCY", "4"))

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls, so environment variables are read a
    single time per process.
    """
    return Settings()
