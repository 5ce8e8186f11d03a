"""
Statement accumulator: the single-pass fold.

Walks date-ordered transactions once and builds the P&L, the
Cash Flow and the Balance Sheet together. Each transaction's
flags decide which of the three it reaches:

    affects_pl         -> revenue / cogs / operating expenses
    affects_cash_flow  -> operating / investing / financing
    affects_balance    -> receivables, fixed assets, payables,
                          debt, contributed capital

Balance-sheet cash is never posted directly. It is always the
cash flow's ending cash, so there is exactly one cash ledger.

Revenue and expenses hit receivables/payables only when they
are ACCRUED (not settled in cash). A settled sale already shows
up as cash; posting it to receivables too would count the same
event twice.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, localcontext

from portfolio_financials.logging_setup import get_logger
from portfolio_financials.models.enums import (
    Category,
    Settlement,
    TransactionType,
)
from portfolio_financials.schemas.statements import (
    ZERO,
    BalanceSheet,
    CashFlow,
    OpeningBalances,
    ProfitAndLoss,
    StatementSet,
)
from portfolio_financials.schemas.transaction import Transaction

logger = get_logger(__name__)

CENT = Decimal("0.01")
FIXED_ASSET_CATEGORIES = (Category.EQUIPMENT, Category.INVENTORY)
DEBT_CATEGORIES = (Category.SHORT_TERM_DEBT, Category.LONG_TERM_DEBT)


def as_decimal(value) -> Decimal:
    """Coerce an int, float, str or Decimal to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def profit_margin(net_profit: Decimal, revenue: Decimal) -> Decimal:
    """Net profit as a percentage of revenue, to the cent; zero without revenue."""
    if revenue <= 0:
        return ZERO
    with localcontext() as ctx:
        # quantize needs every integer digit of the ratio plus two decimals
        estimate = net_profit * 100 / revenue
        ctx.prec = max(ctx.prec, estimate.adjusted() + 3)
        margin = net_profit * 100 / revenue
        return margin.quantize(CENT, rounding=ROUND_HALF_UP)


class StatementAccumulator:
    """
    Running totals for one calculation.

    Flow totals (P&L, cash flow) start at zero. Balance-sheet
    positions start from the opening balances, so a sequence of
    accumulators can carry a cumulative position forward.
    """

    def __init__(
        self,
        beginning_cash=ZERO,
        opening: OpeningBalances | None = None,
    ):
        opening = opening or OpeningBalances()
        self.beginning_cash = as_decimal(beginning_cash)
        self.transaction_count = 0

        # --- P&L ---
        self.revenue = ZERO
        self.cogs = ZERO
        self.operating_expenses = ZERO

        # --- Cash Flow ---
        self.operating_cash_flow = ZERO
        self.investing_cash_flow = ZERO
        self.financing_cash_flow = ZERO

        # --- Balance Sheet ---
        self.accounts_receivable = opening.accounts_receivable
        self.fixed_assets = opening.fixed_assets
        self.other_assets = opening.other_assets
        self.accounts_payable = opening.accounts_payable
        self.short_term_debt = opening.short_term_debt
        self.long_term_debt = opening.long_term_debt
        self.other_liabilities = opening.other_liabilities
        self.contributed_capital = opening.contributed_capital
        self.opening_retained_earnings = opening.resolve_retained_earnings(
            self.beginning_cash
        )

    def add(self, tx: Transaction) -> None:
        """Fold one transaction into the running totals."""
        if tx.affects_pl:
            self._post_pl(tx)
        if tx.affects_cash_flow:
            self._post_cash_flow(tx)
        if tx.affects_balance:
            self._post_balance(tx)
        self.transaction_count += 1

    def _post_pl(self, tx: Transaction) -> None:
        if tx.type is TransactionType.REVENUE:
            self.revenue += tx.amount
        elif tx.type is TransactionType.EXPENSE:
            if tx.account.is_cogs:
                self.cogs += tx.amount
            else:
                self.operating_expenses += tx.amount
        # asset, liability and equity are non-operating

    def _post_cash_flow(self, tx: Transaction) -> None:
        account = tx.account

        if tx.type is TransactionType.REVENUE:
            self.operating_cash_flow += tx.amount
        elif tx.type is TransactionType.EXPENSE:
            self.operating_cash_flow -= tx.amount
        elif tx.type is TransactionType.EQUITY:
            self.financing_cash_flow += tx.amount
        elif tx.type is TransactionType.ASSET:
            if account is Category.CASH:
                self.operating_cash_flow += tx.amount
            elif account in FIXED_ASSET_CATEGORIES:
                self.investing_cash_flow -= tx.amount
            else:
                # Cash spent on a non-cash operating asset
                self.operating_cash_flow -= tx.amount
        elif tx.type is TransactionType.LIABILITY:
            if account in DEBT_CATEGORIES:
                self.financing_cash_flow += tx.amount
            elif account is Category.ACCOUNTS_PAYABLE:
                self.operating_cash_flow -= tx.amount
            else:
                self.operating_cash_flow += tx.amount

    def _post_balance(self, tx: Transaction) -> None:
        account = tx.account

        if tx.type is TransactionType.ASSET:
            if account is Category.CASH:
                # Cash comes from the cash flow statement only
                if not tx.affects_cash_flow:
                    logger.warning(
                        "Transaction %s posts %s to cash without a cash "
                        "flow effect; it appears in no statement",
                        tx.id, tx.amount,
                    )
                return
            if account is Category.ACCOUNTS_RECEIVABLE:
                self.accounts_receivable += tx.amount
            elif account in FIXED_ASSET_CATEGORIES:
                self.fixed_assets += tx.amount
            else:
                self.other_assets += tx.amount
        elif tx.type is TransactionType.LIABILITY:
            if account is Category.ACCOUNTS_PAYABLE:
                self.accounts_payable += tx.amount
            elif account is Category.SHORT_TERM_DEBT:
                self.short_term_debt += tx.amount
            elif account is Category.LONG_TERM_DEBT:
                self.long_term_debt += tx.amount
            else:
                self.other_liabilities += tx.amount
        elif tx.type is TransactionType.EQUITY:
            self.contributed_capital += tx.amount
        elif tx.settlement is Settlement.ACCRUED:
            if tx.type is TransactionType.REVENUE:
                self.accounts_receivable += tx.amount
            else:
                self.accounts_payable += tx.amount

    def result(self) -> StatementSet:
        """
        Build the (unvalidated) StatementSet from the running totals.

        Pass the result through validate() to populate balances,
        is_valid and errors.
        """
        total_expenses = self.cogs + self.operating_expenses
        net_profit = self.revenue - total_expenses

        pl = ProfitAndLoss(
            revenue=self.revenue,
            cogs=self.cogs,
            operating_expenses=self.operating_expenses,
            total_expenses=total_expenses,
            net_profit=net_profit,
            profit_margin=profit_margin(net_profit, self.revenue),
        )

        net_cash_flow = (
            self.operating_cash_flow
            + self.investing_cash_flow
            + self.financing_cash_flow
        )
        cash_flow = CashFlow(
            beginning_cash=self.beginning_cash,
            operating_cash_flow=self.operating_cash_flow,
            investing_cash_flow=self.investing_cash_flow,
            financing_cash_flow=self.financing_cash_flow,
            net_cash_flow=net_cash_flow,
            ending_cash=self.beginning_cash + net_cash_flow,
        )

        cash = cash_flow.ending_cash
        total_assets = (
            cash
            + self.accounts_receivable
            + self.fixed_assets
            + self.other_assets
        )
        total_liabilities = (
            self.accounts_payable
            + self.short_term_debt
            + self.long_term_debt
            + self.other_liabilities
        )
        balance_sheet = BalanceSheet(
            cash=cash,
            accounts_receivable=self.accounts_receivable,
            fixed_assets=self.fixed_assets,
            other_assets=self.other_assets,
            total_assets=total_assets,
            accounts_payable=self.accounts_payable,
            short_term_debt=self.short_term_debt,
            long_term_debt=self.long_term_debt,
            other_liabilities=self.other_liabilities,
            total_liabilities=total_liabilities,
            contributed_capital=self.contributed_capital,
            retained_earnings=self.opening_retained_earnings + net_profit,
            total_equity=total_assets - total_liabilities,
        )

        logger.debug(
            "Accumulated %d transactions: net_profit=%s ending_cash=%s",
            self.transaction_count, net_profit, cash_flow.ending_cash,
        )
        return StatementSet(
            pl=pl,
            balance_sheet=balance_sheet,
            cash_flow=cash_flow,
        )


def accumulate(
    transactions: Iterable[Transaction],
    beginning_cash=ZERO,
    opening: OpeningBalances | None = None,
) -> StatementSet:
    """Fold date-ordered transactions into one StatementSet in a single pass."""
    accumulator = StatementAccumulator(beginning_cash, opening)
    for tx in transactions:
        accumulator.add(tx)
    return accumulator.result()
