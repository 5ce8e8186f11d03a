"""
Pydantic schemas for derived financial statements.

Statements are pure outputs of the engine. They are never the
source of truth: any stored copy can be thrown away and
recomputed from the transaction ledger.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

ZERO = Decimal("0")


class ProfitAndLoss(BaseModel):
    """Flow statement: revenue and expenses over an interval."""
    revenue: Decimal = ZERO
    cogs: Decimal = ZERO
    operating_expenses: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_profit: Decimal = ZERO
    profit_margin: Decimal = ZERO

    model_config = {"frozen": True}


class BalanceSheet(BaseModel):
    """
    Snapshot statement: position at an instant.

    total_equity is the plug figure (assets minus liabilities).
    contributed_capital and retained_earnings are accumulated
    independently from equity transactions and net profit so
    the validator has something real to compare the plug to.
    """
    cash: Decimal = ZERO
    accounts_receivable: Decimal = ZERO
    fixed_assets: Decimal = ZERO
    other_assets: Decimal = ZERO
    total_assets: Decimal = ZERO

    accounts_payable: Decimal = ZERO
    short_term_debt: Decimal = ZERO
    long_term_debt: Decimal = ZERO
    other_liabilities: Decimal = ZERO
    total_liabilities: Decimal = ZERO

    contributed_capital: Decimal = ZERO
    retained_earnings: Decimal = ZERO
    total_equity: Decimal = ZERO

    # Set by the validator
    balances: bool = False

    model_config = {"frozen": True}

    @property
    def recorded_equity(self) -> Decimal:
        return self.contributed_capital + self.retained_earnings


class CashFlow(BaseModel):
    """Flow statement: cash movement over an interval."""
    beginning_cash: Decimal = ZERO
    operating_cash_flow: Decimal = ZERO
    investing_cash_flow: Decimal = ZERO
    financing_cash_flow: Decimal = ZERO
    net_cash_flow: Decimal = ZERO
    ending_cash: Decimal = ZERO

    model_config = {"frozen": True}


class StatementSet(BaseModel):
    """
    The three reconciled statements plus validation diagnostics.

    is_valid and errors are only meaningful once the set has
    been through validate().
    """
    pl: ProfitAndLoss = Field(default_factory=ProfitAndLoss)
    balance_sheet: BalanceSheet = Field(default_factory=BalanceSheet)
    cash_flow: CashFlow = Field(default_factory=CashFlow)
    is_valid: bool = False
    errors: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class OpeningBalances(BaseModel):
    """
    Balance-sheet position carried into a calculation.

    Cash is not part of the seed: it travels separately as the
    opening cash so it can be reconciled against the cash flow.
    Leaving retained_earnings unset means "whatever makes the
    opening position balance".
    """
    accounts_receivable: Decimal = ZERO
    fixed_assets: Decimal = ZERO
    other_assets: Decimal = ZERO
    accounts_payable: Decimal = ZERO
    short_term_debt: Decimal = ZERO
    long_term_debt: Decimal = ZERO
    other_liabilities: Decimal = ZERO
    contributed_capital: Decimal = ZERO
    retained_earnings: Decimal | None = None

    model_config = {"frozen": True}

    def resolve_retained_earnings(self, opening_cash: Decimal) -> Decimal:
        """Return retained earnings, deriving the balancing figure when unset."""
        if self.retained_earnings is not None:
            return self.retained_earnings
        assets = (
            opening_cash
            + self.accounts_receivable
            + self.fixed_assets
            + self.other_assets
        )
        liabilities = (
            self.accounts_payable
            + self.short_term_debt
            + self.long_term_debt
            + self.other_liabilities
        )
        return assets - liabilities - self.contributed_capital

    @classmethod
    def from_balance_sheet(cls, sheet: BalanceSheet) -> "OpeningBalances":
        """The closing position of a computed sheet, as the next opening."""
        return cls(
            accounts_receivable=sheet.accounts_receivable,
            fixed_assets=sheet.fixed_assets,
            other_assets=sheet.other_assets,
            accounts_payable=sheet.accounts_payable,
            short_term_debt=sheet.short_term_debt,
            long_term_debt=sheet.long_term_debt,
            other_liabilities=sheet.other_liabilities,
            contributed_capital=sheet.contributed_capital,
            retained_earnings=sheet.retained_earnings,
        )


class PeriodStatement(BaseModel):
    """Statements for one calendar bucket."""
    period: dt.date
    period_label: str
    transaction_count: int = 0
    statements: StatementSet

    model_config = {"frozen": True}


class ConsolidatedStatements(BaseModel):
    """Portfolio rollup: per-company sets and their line-by-line sum."""
    companies: dict[str, StatementSet]
    consolidated: StatementSet
    is_valid: bool
    errors: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


# --- API Schemas ---

class CompanyStatementsResponse(BaseModel):
    """Response for a single-snapshot calculation."""
    company_id: str
    month: str | None = None
    statements: StatementSet


class PeriodStatementsResponse(BaseModel):
    """Response for a per-period calculation."""
    company_id: str
    granularity: str
    periods: list[PeriodStatement]
