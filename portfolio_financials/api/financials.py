"""
Financial statement API endpoints.

Statements are calculated on demand from the ledger and never
stored. An out-of-balance ledger still returns 200: the body
carries is_valid=false and the reasons, so the data can be
inspected and repaired.
"""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from portfolio_financials.engine import MalformedTransaction
from portfolio_financials.models.base import get_db
from portfolio_financials.services.financials_service import FinancialsService
from portfolio_financials.schemas.statements import (
    CompanyStatementsResponse,
    ConsolidatedStatements,
    PeriodStatementsResponse,
)

router = APIRouter(tags=["Financials"])


@router.get(
    "/companies/{company_id}/financials/calculate",
    response_model=CompanyStatementsResponse,
)
def calculate_financials(
    company_id: str,
    opening_cash: Decimal = Decimal("0"),
    month: str | None = None,
    db: Session = Depends(get_db),
):
    """
    Calculate P&L, balance sheet and cash flow for a company.

    month ("YYYY-MM") restricts the calculation to that month's
    transactions.
    """
    service = FinancialsService(db)
    try:
        statements = service.calculate(company_id, opening_cash, month)
    except MalformedTransaction as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CompanyStatementsResponse(
        company_id=company_id,
        month=month,
        statements=statements,
    )


@router.get(
    "/companies/{company_id}/financials/statements",
    response_model=PeriodStatementsResponse,
)
def period_statements(
    company_id: str,
    granularity: str | None = None,
    opening_cash: Decimal = Decimal("0"),
    dense: bool = False,
    start: date | None = None,
    end: date | None = None,
    db: Session = Depends(get_db),
):
    """
    Calculate a per-period series of statements for a company.

    Empty periods are left out unless dense=true or a start/end
    date is given.
    """
    service = FinancialsService(db)
    try:
        periods = service.calculate_by_period(
            company_id, granularity, opening_cash, dense, start, end
        )
    except MalformedTransaction as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PeriodStatementsResponse(
        company_id=company_id,
        granularity=granularity or service.settings.DEFAULT_GRANULARITY,
        periods=periods,
    )


@router.get(
    "/portfolio/financials",
    response_model=ConsolidatedStatements,
)
def portfolio_financials(
    company_id: list[str] | None = Query(default=None),
    db: Session = Depends(get_db),
):
    """
    Consolidated statements across portfolio companies.

    Without company_id parameters every company with a ledger
    is included.
    """
    service = FinancialsService(db)
    try:
        return service.calculate_portfolio(company_id)
    except MalformedTransaction as e:
        raise HTTPException(status_code=422, detail=str(e))
