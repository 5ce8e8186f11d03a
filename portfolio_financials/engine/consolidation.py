"""
Portfolio consolidation.

Sums per-company statements line by line into one portfolio
view and validates the result. Company-level diagnostics are
carried through, prefixed with the company id.

Intercompany balances are not eliminated here: matching them
is a separate classifier's job, upstream of this engine.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

from pydantic import BaseModel

from portfolio_financials.engine.accumulator import profit_margin
from portfolio_financials.engine.validator import DEFAULT_TOLERANCE, validate
from portfolio_financials.schemas.statements import (
    ZERO,
    BalanceSheet,
    CashFlow,
    ConsolidatedStatements,
    ProfitAndLoss,
    StatementSet,
)


def _sum_lines(items: Iterable[BaseModel], model_cls: type[BaseModel]) -> dict:
    items = list(items)
    return {
        name: sum((getattr(item, name) for item in items), ZERO)
        for name, field in model_cls.model_fields.items()
        if field.annotation is Decimal
    }


def consolidate(
    statements_by_company: Mapping[str, StatementSet],
    tolerance=DEFAULT_TOLERANCE,
) -> ConsolidatedStatements:
    """Roll per-company StatementSets up into a validated portfolio total."""
    sets = list(statements_by_company.values())

    pl_lines = _sum_lines((s.pl for s in sets), ProfitAndLoss)
    pl_lines["profit_margin"] = profit_margin(
        pl_lines["net_profit"], pl_lines["revenue"]
    )

    sheet_lines = _sum_lines((s.balance_sheet for s in sets), BalanceSheet)
    sheet_lines["total_equity"] = (
        sheet_lines["total_assets"] - sheet_lines["total_liabilities"]
    )

    consolidated = validate(StatementSet(
        pl=ProfitAndLoss(**pl_lines),
        balance_sheet=BalanceSheet(**sheet_lines),
        cash_flow=CashFlow(**_sum_lines((s.cash_flow for s in sets), CashFlow)),
    ), tolerance)

    errors = [
        f"{company}: {error}"
        for company, statements in statements_by_company.items()
        for error in statements.errors
    ]
    errors.extend(f"Consolidated: {error}" for error in consolidated.errors)

    return ConsolidatedStatements(
        companies=dict(statements_by_company),
        consolidated=consolidated,
        is_valid=not errors,
        errors=errors,
    )
