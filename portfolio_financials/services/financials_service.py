"""
Financials service: statements derived on demand from the ledger.

Every call reads the ledger fresh and runs the statement engine
over it. Nothing is cached and nothing is stored, so repeated
calls over an unchanged ledger return identical results.

Invalid (out-of-balance) statements are returned, not raised,
and logged as warnings so operators can find the bad data.
"""

import re
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

from sqlalchemy.orm import Session

from portfolio_financials.config import Settings, get_settings
from portfolio_financials.engine import (
    calculate_financials,
    calculate_financials_by_period,
    consolidate,
    next_period,
    normalize_transactions,
)
from portfolio_financials.logging_setup import get_logger
from portfolio_financials.models.enums import Granularity
from portfolio_financials.schemas.statements import (
    ZERO,
    ConsolidatedStatements,
    PeriodStatement,
    StatementSet,
)
from portfolio_financials.services.ledger_service import LedgerService

logger = get_logger(__name__)

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def month_range(month: str) -> tuple[date, date]:
    """
    Return the first and last day of a "YYYY-MM" month.

    Raises ValueError for anything else.
    """
    match = _MONTH_PATTERN.match(month.strip())
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise ValueError(f"Invalid month '{month}': expected YYYY-MM")
    first = date(int(match.group(1)), int(match.group(2)), 1)
    last = next_period(first, Granularity.MONTH) - timedelta(days=1)
    return first, last


class FinancialsService:
    """
    Computes company and portfolio statements from the ledger.

    Engine parameters (tolerance, default granularity) come from
    Settings and are passed to the engine explicitly.
    """

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.ledger_service = LedgerService(db)

    def calculate(
        self,
        company_id: str,
        opening_cash=ZERO,
        month: str | None = None,
    ) -> StatementSet:
        """
        Compute one snapshot over a company's ledger.

        With month ("YYYY-MM"), only that month's transactions
        are included.
        """
        start, end = month_range(month) if month else (None, None)
        transactions = self.ledger_service.list_transactions(
            company_id, start, end
        )

        statements = calculate_financials(
            transactions,
            opening_cash,
            tolerance=self.settings.BALANCE_TOLERANCE,
        )
        if not statements.is_valid:
            logger.warning(
                "[%s] Financial statements invalid: %s",
                company_id, statements.errors,
            )
        return statements

    def calculate_by_period(
        self,
        company_id: str,
        granularity: str | None = None,
        opening_cash=ZERO,
        dense: bool = False,
        start: date | None = None,
        end: date | None = None,
    ) -> list[PeriodStatement]:
        """
        Compute a per-period series over a company's full ledger.

        The full ledger is always read, because each period's
        balance sheet is cumulative from the first transaction.
        start and end only extend the series with empty periods.
        """
        granularity = granularity or self.settings.DEFAULT_GRANULARITY
        try:
            granularity = Granularity(granularity)
        except ValueError:
            raise ValueError(
                f"Unknown granularity '{granularity}': expected one of "
                f"{', '.join(g.value for g in Granularity)}"
            ) from None

        transactions = self.ledger_service.list_transactions(company_id)
        periods = calculate_financials_by_period(
            transactions,
            granularity,
            opening_cash,
            dense=dense,
            start=start,
            end=end,
            tolerance=self.settings.BALANCE_TOLERANCE,
        )

        invalid = [p.period_label for p in periods if not p.statements.is_valid]
        if invalid:
            logger.warning(
                "[%s] Financial statements invalid for periods: %s",
                company_id, ", ".join(invalid),
            )
        return periods

    def calculate_portfolio(
        self, company_ids: list[str] | None = None
    ) -> ConsolidatedStatements:
        """
        Compute and consolidate statements across companies.

        Ledgers are read sequentially (the session is not
        thread-safe), then each company's statements are
        computed in parallel. With no company ids, every company
        with a ledger is included.
        """
        if not company_ids:
            company_ids = self.ledger_service.list_companies()
        company_ids = list(dict.fromkeys(company_ids))

        ledgers = {
            company_id: normalize_transactions(
                self.ledger_service.list_transactions(company_id)
            )
            for company_id in company_ids
        }

        tolerance = self.settings.BALANCE_TOLERANCE
        workers = max(1, min(self.settings.PORTFOLIO_CONCURRENCY, len(ledgers)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(
                lambda txs: calculate_financials(txs, tolerance=tolerance),
                ledgers.values(),
            ))

        portfolio = consolidate(dict(zip(ledgers, results)), tolerance)
        if not portfolio.is_valid:
            logger.warning(
                "Portfolio statements invalid: %s", portfolio.errors
            )
        return portfolio
