"""Financial statement derivation engine."""

from portfolio_financials.engine.accumulator import StatementAccumulator, accumulate
from portfolio_financials.engine.bucketer import (
    bucket,
    next_period,
    period_label,
    period_start,
)
from portfolio_financials.engine.calculator import (
    calculate_financials,
    calculate_financials_by_period,
)
from portfolio_financials.engine.consolidation import consolidate
from portfolio_financials.engine.errors import MalformedTransaction
from portfolio_financials.engine.normalizer import (
    normalize_transaction,
    normalize_transactions,
)
from portfolio_financials.engine.validator import validate

__all__ = [
    "StatementAccumulator",
    "accumulate",
    "bucket",
    "next_period",
    "period_label",
    "period_start",
    "calculate_financials",
    "calculate_financials_by_period",
    "consolidate",
    "MalformedTransaction",
    "normalize_transaction",
    "normalize_transactions",
    "validate",
]
