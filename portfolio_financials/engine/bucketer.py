"""
Period bucketer.

Splits a date-ordered ledger into calendar buckets and runs one
accumulator per bucket, oldest first.

P&L and Cash Flow are bucket-local: they describe activity
during the period. The Balance Sheet is cumulative: each bucket
starts from the previous bucket's closing position, and its
beginning cash is the previous bucket's ending cash.

Empty buckets are omitted unless a dense series is requested,
either with dense=True or by passing a start/end date.
"""

import datetime as dt
from collections.abc import Iterable

from portfolio_financials.engine.accumulator import accumulate, as_decimal
from portfolio_financials.logging_setup import get_logger
from portfolio_financials.models.enums import Granularity
from portfolio_financials.schemas.statements import (
    ZERO,
    OpeningBalances,
    PeriodStatement,
)
from portfolio_financials.schemas.transaction import Transaction

logger = get_logger(__name__)

_MONTHS_PER_BUCKET = {
    Granularity.MONTH: 1,
    Granularity.QUARTER: 3,
    Granularity.YEAR: 12,
}


def period_start(day: dt.date, granularity=Granularity.MONTH) -> dt.date:
    """Truncate a date to the first day of its bucket."""
    width = _MONTHS_PER_BUCKET[Granularity(granularity)]
    month = (day.month - 1) // width * width + 1
    return dt.date(day.year, month, 1)


def next_period(start: dt.date, granularity=Granularity.MONTH) -> dt.date:
    """First day of the bucket after the one starting at start."""
    index = start.year * 12 + (start.month - 1)
    index += _MONTHS_PER_BUCKET[Granularity(granularity)]
    return dt.date(index // 12, index % 12 + 1, 1)


def period_label(start: dt.date, granularity=Granularity.MONTH) -> str:
    """Human-readable bucket label: 2025-01, 2025-Q1 or 2025."""
    granularity = Granularity(granularity)
    if granularity is Granularity.MONTH:
        return f"{start.year}-{start.month:02d}"
    if granularity is Granularity.QUARTER:
        return f"{start.year}-Q{(start.month - 1) // 3 + 1}"
    return str(start.year)


def _periods_between(first: dt.date, last: dt.date, granularity) -> list[dt.date]:
    periods = []
    current = first
    while current <= last:
        periods.append(current)
        current = next_period(current, granularity)
    return periods


def bucket(
    transactions: Iterable[Transaction],
    granularity=Granularity.MONTH,
    opening_cash=ZERO,
    opening_balances: OpeningBalances | None = None,
    *,
    dense: bool = False,
    start: dt.date | None = None,
    end: dt.date | None = None,
) -> list[PeriodStatement]:
    """
    Produce one unvalidated PeriodStatement per bucket, oldest first.

    transactions must already be sorted by date. Passing start
    or end implies dense=True; transactions outside that range
    widen the series rather than being dropped.
    """
    granularity = Granularity(granularity)

    groups: dict[dt.date, list[Transaction]] = {}
    for tx in transactions:
        groups.setdefault(period_start(tx.date, granularity), []).append(tx)

    bounds = list(groups)
    for edge in (start, end):
        if edge is not None:
            bounds.append(period_start(edge, granularity))
            dense = True

    if not bounds:
        return []

    if dense:
        periods = _periods_between(min(bounds), max(bounds), granularity)
    else:
        periods = sorted(groups)

    results = []
    cash = as_decimal(opening_cash)
    position = opening_balances
    for period in periods:
        period_txs = groups.get(period, [])
        statements = accumulate(period_txs, cash, position)
        results.append(PeriodStatement(
            period=period,
            period_label=period_label(period, granularity),
            transaction_count=len(period_txs),
            statements=statements,
        ))

        # Carry forward to the next bucket
        cash = statements.cash_flow.ending_cash
        position = OpeningBalances.from_balance_sheet(statements.balance_sheet)

    logger.debug(
        "Bucketed %d transactions into %d %s periods",
        sum(len(txs) for txs in groups.values()), len(results), granularity.value,
    )
    return results
