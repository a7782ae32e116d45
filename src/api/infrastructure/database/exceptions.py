"""Database-specific exceptions.

Storage failures are reported with these types so that callers never
mistake them for tenant resolution or isolation errors.
"""


class DatabaseError(Exception):
    """Base exception for database operations."""

    code = "STORAGE_ERROR"


class DatabaseConnectionError(DatabaseError):
    """Raised when the database cannot be reached."""

    pass


class TransactionError(DatabaseError):
    """Raised when committing a unit of work fails.

    The unit of work has been rolled back when this is raised.
    """

    pass
