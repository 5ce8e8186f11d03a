"""
Tests for the LedgerService.

Tests cover:
- Appending transactions, with unset flags stored as NULL
- Blank company id rejection
- Date-ordered reads and date range filtering
- Company listing
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_financials.models.enums import TransactionType
from portfolio_financials.schemas.transaction import TransactionCreate


# --- Helper to reduce repetition ---

def post(service, company_id, day, amount="100", type_=TransactionType.REVENUE,
         **fields):
    """Append a transaction and return it."""
    return service.post_transaction(company_id, TransactionCreate(
        date=day,
        type=type_,
        amount=Decimal(amount),
        **fields,
    ))


class TestPostTransaction:

    def test_post_transaction_succeeds(self, db_session, ledger_service):
        txn = post(
            ledger_service, "acme", date(2026, 1, 15), "1000.50",
            category="product_revenue", description="Invoice 42",
        )
        db_session.commit()

        assert txn.id is not None
        assert txn.company_id == "acme"
        assert txn.type == "revenue"
        assert txn.category == "product_revenue"
        assert txn.amount == Decimal("1000.50")
        assert txn.created_at is not None

    def test_unset_flags_are_stored_as_null(self, db_session, ledger_service):
        txn = post(ledger_service, "acme", date(2026, 1, 15), affects_cash_flow=False)
        db_session.commit()

        assert txn.affects_pl is None
        assert txn.affects_cash_flow is False
        assert txn.affects_balance is None

    def test_company_id_is_trimmed(self, ledger_service):
        txn = post(ledger_service, "  acme ", date(2026, 1, 15))
        assert txn.company_id == "acme"

    @pytest.mark.parametrize("company_id", ["", "   "])
    def test_blank_company_rejected(self, ledger_service, company_id):
        with pytest.raises(ValueError, match="company_id is required"):
            post(ledger_service, company_id, date(2026, 1, 15))


class TestListTransactions:

    def test_transactions_are_ordered_by_date(self, db_session, ledger_service):
        post(ledger_service, "acme", date(2026, 3, 1), "3")
        post(ledger_service, "acme", date(2026, 1, 1), "1")
        post(ledger_service, "acme", date(2026, 2, 1), "2")
        db_session.commit()

        txns = ledger_service.list_transactions("acme")

        assert [t.amount for t in txns] == [
            Decimal("1"), Decimal("2"), Decimal("3"),
        ]

    def test_same_day_transactions_keep_posting_order(self, db_session, ledger_service):
        first = post(ledger_service, "acme", date(2026, 1, 1), "1")
        second = post(ledger_service, "acme", date(2026, 1, 1), "2")
        db_session.commit()

        txns = ledger_service.list_transactions("acme")

        assert [t.id for t in txns] == [first.id, second.id]

    def test_only_the_companys_transactions(self, db_session, ledger_service):
        post(ledger_service, "acme", date(2026, 1, 1))
        post(ledger_service, "globex", date(2026, 1, 1))
        db_session.commit()

        txns = ledger_service.list_transactions("acme")

        assert len(txns) == 1
        assert txns[0].company_id == "acme"

    def test_date_range_is_inclusive(self, db_session, ledger_service):
        for day in (date(2026, 1, 31), date(2026, 2, 1),
                    date(2026, 2, 28), date(2026, 3, 1)):
            post(ledger_service, "acme", day)
        db_session.commit()

        txns = ledger_service.list_transactions(
            "acme", start=date(2026, 2, 1), end=date(2026, 2, 28)
        )

        assert [t.date for t in txns] == [date(2026, 2, 1), date(2026, 2, 28)]

    def test_inverted_range_rejected(self, ledger_service):
        with pytest.raises(ValueError, match="Invalid date range"):
            ledger_service.list_transactions(
                "acme", start=date(2026, 3, 1), end=date(2026, 2, 1)
            )

    def test_unknown_company_has_empty_ledger(self, ledger_service):
        assert ledger_service.list_transactions("nobody") == []


class TestListCompanies:

    def test_companies_are_distinct_and_sorted(self, db_session, ledger_service):
        post(ledger_service, "globex", date(2026, 1, 1))
        post(ledger_service, "acme", date(2026, 1, 1))
        post(ledger_service, "acme", date(2026, 2, 1))
        db_session.commit()

        assert ledger_service.list_companies() == ["acme", "globex"]

    def test_no_companies(self, ledger_service):
        assert ledger_service.list_companies() == []
