"""Custom exception hierarchy for sqlbrick.

All public errors inherit from SqlBrickError so callers can catch the base
class for any sqlbrick-specific failure.  Errors raised by the database
driver (``sqlalchemy.exc.SQLAlchemyError``) are never wrapped.
"""
from __future__ import annotations


class SqlBrickError(Exception):
    """Base exception for all sqlbrick errors."""


class UnsafeQueryError(SqlBrickError):
    """Raised when a statement is refused before reaching the database.

    This happens when the :class:`~sqlbrick.safety.scanner.SafetyScanner`
    vetoes the composed SQL, or when a destructive operation (unconditional
    DELETE, DROP TABLE) is attempted without its force flag.

    Args:
        message: Human-readable description.
        sql: The SQL text that was refused, if one was composed.
        reason: Machine-readable reason (e.g. ``"tautology"``).
    """

    def __init__(
        self,
        message: str = "unsafe query",
        sql: str | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.sql = sql
        self.reason = reason or ""


class InvalidDataSourceError(SqlBrickError):
    """Raised when a driver kind or data-source descriptor cannot be used.

    Args:
        message: Human-readable description.
        driver: The driver kind passed to ``Database.open``.
    """

    def __init__(self, message: str, driver: str | None = None) -> None:
        super().__init__(message)
        self.driver = driver


class UnboundQueryError(SqlBrickError):
    """Raised when a terminal operation runs on a Query with no database."""


class CompilationError(SqlBrickError):
    """Raised when builder input cannot be turned into SQL.

    Args:
        message: Human-readable description.
        clause: The clause being built when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause
