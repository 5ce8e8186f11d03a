"""
Invariant validator.

Checks a computed StatementSet and records what it finds. It
never raises and never changes a computed figure: an
out-of-balance ledger still produces statements an operator can
inspect, just with is_valid=False and a list of reasons.

The balance check compares the plug equity (assets minus
liabilities) against equity accumulated independently from
contributed capital and retained earnings. Comparing the plug
with itself would always pass.
"""

from decimal import Decimal

from portfolio_financials.engine.accumulator import as_decimal
from portfolio_financials.logging_setup import get_logger
from portfolio_financials.schemas.statements import StatementSet

logger = get_logger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")


def _within(difference: Decimal, tolerance: Decimal) -> bool:
    return abs(difference) < tolerance


def validate(statements: StatementSet, tolerance=DEFAULT_TOLERANCE) -> StatementSet:
    """
    Return a copy of statements with balances, is_valid and errors set.

    Errors already present on the input are kept, ahead of any
    found here; a finding already on the input is not repeated.
    """
    tolerance = as_decimal(tolerance)
    pl = statements.pl
    sheet = statements.balance_sheet
    cash_flow = statements.cash_flow
    found = []

    # --- Accounting identity ---
    liabilities_and_equity = sheet.total_liabilities + sheet.recorded_equity
    balances = _within(sheet.total_assets - liabilities_and_equity, tolerance)
    if not balances:
        found.append(
            f"Balance sheet does not balance: "
            f"assets={sheet.total_assets}, "
            f"liabilities+equity={liabilities_and_equity} "
            f"(difference {sheet.total_assets - liabilities_and_equity})"
        )

    # --- Cash reconciliation ---
    if not _within(sheet.cash - cash_flow.ending_cash, tolerance):
        found.append(
            f"Cash mismatch: balance sheet cash={sheet.cash}, "
            f"cash flow ending cash={cash_flow.ending_cash}"
        )

    # --- P&L arithmetic ---
    expected_profit = pl.revenue - pl.cogs - pl.operating_expenses
    if not _within(pl.net_profit - expected_profit, tolerance):
        found.append(
            f"Net profit does not reconcile: reported={pl.net_profit}, "
            f"revenue-cogs-operating_expenses={expected_profit}"
        )

    # Re-validating an already checked set must not repeat diagnostics
    errors = list(statements.errors)
    for error in found:
        if error not in errors:
            logger.warning(error)
            errors.append(error)

    return statements.model_copy(update={
        "balance_sheet": sheet.model_copy(update={"balances": balances}),
        "is_valid": not errors,
        "errors": errors,
    })
