"""
Ledger service: the transaction ledger for portfolio companies.

The ledger is append-only and is the single source of truth for
every financial statement. This service:
1. Appends transactions for a company
2. Reads a company's ledger, optionally restricted to a date range
3. Lists the companies that have a ledger

It offers no update or delete. Statements are derived from the
ledger by FinancialsService and never written back.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from portfolio_financials.models.ledger_transaction import LedgerTransaction
from portfolio_financials.schemas.transaction import TransactionCreate


class LedgerService:
    """
    All ledger reads and writes pass through this service.

    The service takes a database session as a constructor
    argument, so the caller controls the transaction boundary
    and decides when to commit or rollback.
    """

    def __init__(self, db: Session):
        self.db = db

    def post_transaction(
        self, company_id: str, request: TransactionCreate
    ) -> LedgerTransaction:
        """
        Append a transaction to a company's ledger.

        Flags left unset are stored as NULL, which the statement
        engine reads as True.

        Raises ValueError if the company id is blank.
        """
        if not company_id or not company_id.strip():
            raise ValueError("company_id is required")

        txn = LedgerTransaction(
            company_id=company_id.strip(),
            date=request.date,
            type=request.type.value,
            category=request.category,
            amount=request.amount,
            description=request.description,
            affects_pl=request.affects_pl,
            affects_cash_flow=request.affects_cash_flow,
            affects_balance=request.affects_balance,
        )
        self.db.add(txn)
        self.db.flush()
        return txn

    def list_transactions(
        self,
        company_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[LedgerTransaction]:
        """
        Return a company's transactions, oldest first.

        start and end are inclusive. Raises ValueError if start
        is after end.
        """
        if start and end and start > end:
            raise ValueError(
                f"Invalid date range: start {start} is after end {end}"
            )

        query = select(LedgerTransaction).where(
            LedgerTransaction.company_id == company_id
        )
        if start:
            query = query.where(LedgerTransaction.date >= start)
        if end:
            query = query.where(LedgerTransaction.date <= end)

        transactions = self.db.execute(
            query.order_by(LedgerTransaction.date, LedgerTransaction.id)
        ).scalars().all()
        return list(transactions)

    def list_companies(self) -> list[str]:
        """Return every company id that has at least one transaction."""
        companies = self.db.execute(
            select(LedgerTransaction.company_id)
            .distinct()
            .order_by(LedgerTransaction.company_id)
        ).scalars().all()
        return list(companies)
