"""Business logic services."""

from portfolio_financials.services.ledger_service import LedgerService
from portfolio_financials.services.financials_service import FinancialsService

__all__ = ["LedgerService", "FinancialsService"]
