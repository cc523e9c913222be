"""SQLite dialect."""
from __future__ import annotations

from sqlbrick.compile.base import SQLDialect


class SQLiteDialect(SQLDialect):
    """SQLite through Python's built-in ``sqlite3`` module.

    Parameter style: ``?`` (qmark).  SQLite allows a single writer, so the
    database always runs on a single pooled connection.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    @property
    def drivername(self) -> str:
        return "sqlite"

    @property
    def file_backed(self) -> bool:
        return True

    def param_placeholder(self) -> str:
        return "?"
