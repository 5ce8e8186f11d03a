"""
Pydantic schemas for ledger transactions.

TransactionRecord is the loose shape records arrive in: from
the database, from a JSON import, from a spreadsheet upload.
Transaction is the canonical, immutable shape the statement
engine folds over. The normalizer turns one into the other.
"""

import datetime as dt
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field, field_validator

from portfolio_financials.models.enums import (
    Category,
    Settlement,
    TransactionType,
)

UNCATEGORIZED = "Uncategorized"


# --- Engine Schemas ---

class TransactionRecord(BaseModel):
    """
    A raw ledger record before normalization.

    Accepts camelCase or snake_case keys, and ORM rows via
    from_attributes. Flags stay None when absent so the
    normalizer can tell "missing" apart from "false".
    """
    id: str | None = None
    date: dt.date
    type: str | None = None
    category: str | None = None
    amount: Decimal = Field(allow_inf_nan=False)
    description: str | None = None
    affects_pl: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("affects_pl", "affectsPL"),
    )
    affects_cash_flow: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("affects_cash_flow", "affectsCashFlow"),
    )
    affects_balance: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("affects_balance", "affectsBalance"),
    )

    model_config = {"from_attributes": True, "extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v):
        return None if v is None else str(v)

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, v):
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and len(v.strip()) > 10:
            # Full ISO timestamps carry a time part we do not keep
            return dt.datetime.fromisoformat(
                v.strip().replace("Z", "+00:00")
            ).date()
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        if isinstance(v, bool):
            raise ValueError("amount must be numeric, not a boolean")
        if isinstance(v, float):
            # repr keeps 0.1 as 0.1 instead of its binary expansion
            return repr(v)
        if isinstance(v, str):
            cleaned = v.strip().replace(",", "")
            if cleaned.startswith("$"):
                cleaned = cleaned[1:]
            elif cleaned.startswith("-$"):
                cleaned = "-" + cleaned[2:]
            return cleaned
        return v

    @field_validator("type", "category", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Transaction(BaseModel):
    """
    A canonical, immutable ledger entry.

    The engine only ever reads these. The three flags decide
    which statements the transaction contributes to.
    """
    id: str | None = None
    date: dt.date
    type: TransactionType
    category: str = UNCATEGORIZED
    amount: Decimal
    description: str | None = None
    affects_pl: bool = True
    affects_cash_flow: bool = True
    affects_balance: bool = True

    model_config = {"frozen": True}

    @property
    def account(self) -> Category:
        """The category mapped onto the closed vocabulary."""
        return Category.classify(self.category)

    @property
    def settlement(self) -> Settlement:
        return Settlement.from_flag(self.affects_cash_flow)


# --- API Schemas ---

class TransactionCreate(BaseModel):
    """Request to append a transaction to a company's ledger."""
    date: dt.date
    type: TransactionType
    category: str | None = Field(default=None, max_length=100)
    amount: Decimal = Field(allow_inf_nan=False, decimal_places=4)
    description: str | None = Field(default=None, max_length=255)
    affects_pl: bool | None = None
    affects_cash_flow: bool | None = None
    affects_balance: bool | None = None


class TransactionResponse(BaseModel):
    """Ledger transaction in API responses."""
    id: int
    company_id: str
    date: dt.date
    type: str
    category: str | None
    amount: Decimal
    description: str | None
    affects_pl: bool | None
    affects_cash_flow: bool | None
    affects_balance: bool | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}
