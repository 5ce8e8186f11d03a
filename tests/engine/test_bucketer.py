"""
Tests for the period bucketer.

Tests cover:
- Period boundaries and labels for month, quarter and year
- Sparse and dense series
- Carrying cash and balance-sheet positions between buckets
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_financials.engine import (
    bucket,
    next_period,
    period_label,
    period_start,
)
from portfolio_financials.models.enums import Granularity, TransactionType
from portfolio_financials.schemas.transaction import Transaction


def make_tx(day, type_=TransactionType.REVENUE, amount=100, category="Sales",
            **flags):
    return Transaction(
        date=day,
        type=type_,
        category=category,
        amount=Decimal(str(amount)),
        **flags,
    )


class TestPeriodBoundaries:

    @pytest.mark.parametrize("day, granularity, expected", [
        (date(2026, 1, 31), Granularity.MONTH, date(2026, 1, 1)),
        (date(2026, 2, 14), Granularity.QUARTER, date(2026, 1, 1)),
        (date(2026, 6, 30), Granularity.QUARTER, date(2026, 4, 1)),
        (date(2026, 12, 31), Granularity.QUARTER, date(2026, 10, 1)),
        (date(2026, 9, 9), Granularity.YEAR, date(2026, 1, 1)),
    ])
    def test_period_start(self, day, granularity, expected):
        assert period_start(day, granularity) == expected

    @pytest.mark.parametrize("start, granularity, expected", [
        (date(2026, 1, 1), Granularity.MONTH, date(2026, 2, 1)),
        (date(2026, 12, 1), Granularity.MONTH, date(2027, 1, 1)),
        (date(2026, 10, 1), Granularity.QUARTER, date(2027, 1, 1)),
        (date(2026, 1, 1), Granularity.YEAR, date(2027, 1, 1)),
    ])
    def test_next_period(self, start, granularity, expected):
        assert next_period(start, granularity) == expected

    @pytest.mark.parametrize("start, granularity, expected", [
        (date(2025, 1, 1), Granularity.MONTH, "2025-01"),
        (date(2025, 11, 1), Granularity.MONTH, "2025-11"),
        (date(2025, 7, 1), Granularity.QUARTER, "2025-Q3"),
        (date(2025, 1, 1), Granularity.YEAR, "2025"),
    ])
    def test_period_label(self, start, granularity, expected):
        assert period_label(start, granularity) == expected

    def test_granularity_accepts_plain_strings(self):
        assert period_label(date(2025, 4, 1), "quarter") == "2025-Q2"


class TestSeries:

    def test_empty_ledger_yields_no_periods(self):
        assert bucket([]) == []

    def test_groups_transactions_by_month(self):
        periods = bucket([
            make_tx(date(2026, 1, 5)),
            make_tx(date(2026, 1, 20)),
            make_tx(date(2026, 2, 3)),
        ])

        assert [p.period_label for p in periods] == ["2026-01", "2026-02"]
        assert [p.transaction_count for p in periods] == [2, 1]
        assert periods[0].statements.pl.revenue == Decimal("200")

    def test_gaps_are_omitted_by_default(self):
        periods = bucket([
            make_tx(date(2026, 1, 5)),
            make_tx(date(2026, 4, 5)),
        ])
        assert [p.period_label for p in periods] == ["2026-01", "2026-04"]

    def test_dense_fills_gaps(self):
        periods = bucket(
            [make_tx(date(2026, 1, 5)), make_tx(date(2026, 4, 5))],
            dense=True,
        )

        assert [p.period_label for p in periods] == [
            "2026-01", "2026-02", "2026-03", "2026-04",
        ]
        assert periods[1].transaction_count == 0

    def test_range_extends_series(self):
        periods = bucket(
            [make_tx(date(2026, 2, 5))],
            start=date(2026, 1, 1),
            end=date(2026, 3, 31),
        )
        assert [p.period_label for p in periods] == [
            "2026-01", "2026-02", "2026-03",
        ]

    def test_range_without_transactions(self):
        periods = bucket(
            [], Granularity.QUARTER,
            start=date(2026, 1, 1), end=date(2026, 12, 31),
        )
        assert [p.period_label for p in periods] == [
            "2026-Q1", "2026-Q2", "2026-Q3", "2026-Q4",
        ]

    def test_transactions_outside_range_are_kept(self):
        periods = bucket(
            [make_tx(date(2026, 5, 1))],
            start=date(2026, 1, 1), end=date(2026, 2, 28),
        )

        assert periods[-1].period_label == "2026-05"
        assert sum(p.transaction_count for p in periods) == 1

    def test_yearly_buckets(self):
        periods = bucket(
            [make_tx(date(2025, 3, 1)), make_tx(date(2026, 8, 1))],
            Granularity.YEAR,
        )
        assert [p.period_label for p in periods] == ["2025", "2026"]


class TestCarryForward:

    def test_cash_carries_between_buckets(self):
        periods = bucket(
            [make_tx(date(2026, 1, 5), amount=1000),
             make_tx(date(2026, 3, 5), amount=250)],
            opening_cash=Decimal("100"),
            dense=True,
        )

        assert periods[0].statements.cash_flow.beginning_cash == Decimal("100")
        for previous, current in zip(periods, periods[1:]):
            assert (current.statements.cash_flow.beginning_cash
                    == previous.statements.cash_flow.ending_cash)
        assert periods[-1].statements.cash_flow.ending_cash == Decimal("1350")

    def test_flows_are_local_to_each_bucket(self):
        periods = bucket([
            make_tx(date(2026, 1, 5), amount=1000),
            make_tx(date(2026, 2, 5), amount=300),
        ])

        assert periods[0].statements.pl.revenue == Decimal("1000")
        assert periods[1].statements.pl.revenue == Decimal("300")
        assert periods[1].statements.cash_flow.net_cash_flow == Decimal("300")

    def test_balance_sheet_is_cumulative(self):
        periods = bucket([
            make_tx(date(2026, 1, 5), amount=1000, affects_cash_flow=False),
            make_tx(date(2026, 2, 5), type_=TransactionType.LIABILITY,
                    category="long_term_debt", amount=400, affects_pl=False),
        ])
        january, february = (p.statements.balance_sheet for p in periods)

        assert january.accounts_receivable == Decimal("1000")
        assert february.accounts_receivable == Decimal("1000")
        assert february.long_term_debt == Decimal("400")
        assert february.retained_earnings == Decimal("1000")
        assert february.cash == Decimal("400")

    def test_bucket_results_are_unvalidated(self):
        periods = bucket([make_tx(date(2026, 1, 5))])

        assert periods[0].statements.is_valid is False
        assert periods[0].statements.errors == []
