"""Database infrastructure - shared engine, session and model primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    TransactionError,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "TransactionError",
]
