"""
Transaction normalizer.

Canonicalizes heterogeneous ledger records into Transaction:
- missing category becomes "Uncategorized"
- missing flags default to True, so records imported without
  explicit flags take part in all three statements
- amounts become Decimal, never float
- a missing or unknown type falls back to expense, the
  least surprising place for an unexplained amount

The only failure is MalformedTransaction, for records whose
amount or date cannot be coerced.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from portfolio_financials.engine.errors import MalformedTransaction
from portfolio_financials.logging_setup import get_logger
from portfolio_financials.models.enums import TransactionType
from portfolio_financials.schemas.transaction import (
    UNCATEGORIZED,
    Transaction,
    TransactionRecord,
)

logger = get_logger(__name__)


def _record_id(raw: Any) -> str | None:
    value = raw.get("id") if isinstance(raw, Mapping) else getattr(raw, "id", None)
    return None if value is None else str(value)


def _parse_record(raw: Any) -> TransactionRecord:
    if isinstance(raw, TransactionRecord):
        return raw
    try:
        if isinstance(raw, Mapping):
            return TransactionRecord.model_validate(dict(raw))
        return TransactionRecord.model_validate(raw, from_attributes=True)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        raise MalformedTransaction(problems, _record_id(raw)) from e


def _resolve_type(record: TransactionRecord) -> TransactionType:
    raw_type = (record.type or "").strip().lower()
    try:
        return TransactionType(raw_type)
    except ValueError:
        logger.warning(
            "Transaction %s has unknown type %r; treating as expense",
            record.id, record.type,
        )
        return TransactionType.EXPENSE


def normalize_transaction(raw: Any) -> Transaction:
    """
    Produce a canonical Transaction from one raw record.

    Accepts a Transaction (returned as is), a TransactionRecord,
    a mapping with camelCase or snake_case keys, or any object
    exposing the same attributes (such as an ORM row).

    Raises MalformedTransaction if the amount or date cannot
    be coerced.
    """
    if isinstance(raw, Transaction):
        return raw

    record = _parse_record(raw)

    return Transaction(
        id=record.id,
        date=record.date,
        type=_resolve_type(record),
        category=record.category if record.category is not None else UNCATEGORIZED,
        amount=record.amount,
        description=record.description,
        affects_pl=record.affects_pl if record.affects_pl is not None else True,
        affects_cash_flow=(
            record.affects_cash_flow
            if record.affects_cash_flow is not None else True
        ),
        affects_balance=(
            record.affects_balance
            if record.affects_balance is not None else True
        ),
    )


def normalize_transactions(
    records: Iterable[Any],
    *,
    skip_malformed: bool = False,
) -> list[Transaction]:
    """
    Normalize a batch of records, preserving input order.

    By default the first malformed record aborts the batch.
    With skip_malformed=True each malformed record is logged
    and dropped instead.
    """
    transactions = []
    for raw in records:
        try:
            transactions.append(normalize_transaction(raw))
        except MalformedTransaction as e:
            if not skip_malformed:
                raise
            logger.warning("Dropping record: %s", e)
    return transactions


def sort_by_date(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Stable ascending sort; same-day transactions keep their input order."""
    return sorted(transactions, key=lambda tx: tx.date)
