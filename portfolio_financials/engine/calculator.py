"""
Public entry points of the statement engine.

Both functions are pure: same ledger in, same statements out.
No clock, no randomness, no I/O, no state kept between calls,
which is what makes delete-and-recompute workflows safe to
retry.
"""

import datetime as dt
from collections.abc import Iterable
from typing import Any

from portfolio_financials.engine.accumulator import accumulate
from portfolio_financials.engine.bucketer import bucket
from portfolio_financials.engine.normalizer import (
    normalize_transactions,
    sort_by_date,
)
from portfolio_financials.engine.validator import DEFAULT_TOLERANCE, validate
from portfolio_financials.models.enums import Granularity
from portfolio_financials.schemas.statements import (
    ZERO,
    OpeningBalances,
    PeriodStatement,
    StatementSet,
)


def calculate_financials(
    transactions: Iterable[Any],
    opening_cash=ZERO,
    *,
    opening_balances: OpeningBalances | None = None,
    tolerance=DEFAULT_TOLERANCE,
) -> StatementSet:
    """
    Compute one cumulative snapshot as of the latest transaction.

    Records are normalized, sorted by date, folded in a single
    pass and validated. Raises MalformedTransaction for records
    that cannot be normalized; never raises for an
    out-of-balance ledger.
    """
    ordered = sort_by_date(normalize_transactions(transactions))
    statements = accumulate(ordered, opening_cash, opening_balances)
    return validate(statements, tolerance)


def calculate_financials_by_period(
    transactions: Iterable[Any],
    granularity=Granularity.MONTH,
    opening_cash=ZERO,
    opening_balances: OpeningBalances | None = None,
    *,
    dense: bool = False,
    start: dt.date | None = None,
    end: dt.date | None = None,
    tolerance=DEFAULT_TOLERANCE,
) -> list[PeriodStatement]:
    """
    Compute an ordered series of per-period statements.

    Each period's P&L and cash flow cover that period only; its
    balance sheet is the cumulative position at period end.
    Every period is validated on its own.
    """
    ordered = sort_by_date(normalize_transactions(transactions))
    periods = bucket(
        ordered,
        granularity,
        opening_cash,
        opening_balances,
        dense=dense,
        start=start,
        end=end,
    )
    return [
        period.model_copy(update={
            "statements": validate(period.statements, tolerance),
        })
        for period in periods
    ]
