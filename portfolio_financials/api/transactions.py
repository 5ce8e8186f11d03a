"""
Ledger transaction API endpoints.

The ledger is append-only, so there is a create and a list
endpoint and nothing else.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portfolio_financials.models.base import get_db
from portfolio_financials.services.ledger_service import LedgerService
from portfolio_financials.schemas.transaction import (
    TransactionCreate,
    TransactionResponse,
)

router = APIRouter(prefix="/companies", tags=["Transactions"])


@router.post(
    "/{company_id}/transactions",
    response_model=TransactionResponse,
    status_code=201,
)
def post_transaction(
    company_id: str,
    request: TransactionCreate,
    db: Session = Depends(get_db),
):
    """Append a transaction to a company's ledger."""
    service = LedgerService(db)
    try:
        txn = service.post_transaction(company_id, request)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "/{company_id}/transactions",
    response_model=list[TransactionResponse],
)
def list_transactions(
    company_id: str,
    db: Session = Depends(get_db),
):
    """Get a company's ledger, oldest first."""
    service = LedgerService(db)
    return service.list_transactions(company_id)
