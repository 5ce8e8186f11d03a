"""
Shared enumerations for the ledger and the statement engine.

Using closed enums instead of free-form strings means a typo
or casing drift in a category lands in Category.OTHER, where
it is visible, rather than being silently misclassified.
"""

import enum
import re


class TransactionType(str, enum.Enum):
    """The five fundamental accounting categories."""
    REVENUE = "revenue"
    EXPENSE = "expense"
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"


class Category(str, enum.Enum):
    """
    Well-known transaction categories that drive statement placement.

    Anything outside the vocabulary classifies as OTHER and is
    treated as a generic operating item.
    """
    DIRECT_COSTS = "direct_costs"
    INFRASTRUCTURE = "infrastructure"
    CASH = "cash"
    ACCOUNTS_RECEIVABLE = "accounts_receivable"
    EQUIPMENT = "equipment"
    INVENTORY = "inventory"
    ACCOUNTS_PAYABLE = "accounts_payable"
    SHORT_TERM_DEBT = "short_term_debt"
    LONG_TERM_DEBT = "long_term_debt"
    OTHER = "other"

    @classmethod
    def classify(cls, raw: str | None) -> "Category":
        """Map a free-form category string onto the closed vocabulary."""
        if raw is None:
            return cls.OTHER
        key = re.sub(r"[\s\-]+", "_", raw.strip().lower())
        return _CATEGORY_ALIASES.get(key, cls.OTHER)

    @property
    def is_cogs(self) -> bool:
        return self in (Category.DIRECT_COSTS, Category.INFRASTRUCTURE)


_CATEGORY_ALIASES = {member.value: member for member in Category}
del _CATEGORY_ALIASES[Category.OTHER.value]
_CATEGORY_ALIASES.update({
    "direct_cost": Category.DIRECT_COSTS,
    "cogs": Category.DIRECT_COSTS,
    "infrastructure_costs": Category.INFRASTRUCTURE,
    "fixed": Category.EQUIPMENT,
    "fixed_assets": Category.EQUIPMENT,
    "property": Category.EQUIPMENT,
    "property_and_equipment": Category.EQUIPMENT,
    "loan": Category.LONG_TERM_DEBT,
    "loans": Category.LONG_TERM_DEBT,
    "long_term_loan": Category.LONG_TERM_DEBT,
    "short_term_loan": Category.SHORT_TERM_DEBT,
})


class Settlement(str, enum.Enum):
    """
    Whether a revenue/expense is settled in cash or left open.

    SETTLED transactions move cash and never touch receivables
    or payables. ACCRUED transactions post to receivables or
    payables and never move cash.
    """
    SETTLED = "settled"
    ACCRUED = "accrued"

    @classmethod
    def from_flag(cls, affects_cash_flow: bool) -> "Settlement":
        return cls.SETTLED if affects_cash_flow else cls.ACCRUED


class Granularity(str, enum.Enum):
    """Calendar bucket size for period reporting."""
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
