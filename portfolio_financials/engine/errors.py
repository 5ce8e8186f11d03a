"""
Structural errors raised by the statement engine.

Semantic problems (an out-of-balance ledger) are never raised;
they are reported in StatementSet.errors instead.
"""


class MalformedTransaction(ValueError):
    """
    A ledger record could not be turned into a Transaction.

    Raised before any accumulation starts, so the caller can
    decide whether to drop the record or abort the calculation.
    """

    def __init__(self, reason: str, transaction_id: str | None = None):
        self.reason = reason
        self.transaction_id = transaction_id
        label = transaction_id if transaction_id is not None else "<no id>"
        super().__init__(f"Malformed transaction {label}: {reason}")
