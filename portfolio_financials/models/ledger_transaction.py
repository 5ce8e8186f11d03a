"""
Ledger transaction model.

One row per business transaction for a portfolio company. Rows
are append-only: they are inserted and read, never updated.

type is stored as plain text rather than a database enum, and
the three flags are nullable. Legacy imports contain both odd
type values and missing flags, and the normalizer decides what
they mean (missing flag = True, unknown type = expense).
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_financials.models.base import Base


class LedgerTransaction(Base):
    __tablename__ = "ledger_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    description: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    affects_pl: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    affects_cash_flow: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True
    )
    affects_balance: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerTransaction {self.company_id} {self.date} "
            f"{self.type} {self.amount}>"
        )
