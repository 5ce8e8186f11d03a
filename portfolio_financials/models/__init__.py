"""
Database models and shared enumerations.

Importing this package does not create a database engine, so
the statement engine can use the enums without pulling in the
storage layer. Table models live in their own modules and are
imported explicitly by the services that need them.
"""

from portfolio_financials.models.enums import (
    Category,
    Granularity,
    Settlement,
    TransactionType,
)

__all__ = [
    "Category",
    "Granularity",
    "Settlement",
    "TransactionType",
]
