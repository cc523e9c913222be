"""PostgreSQL dialect."""

from __future__ import annotations

from sqlbrick.compile.base import SQLDialect


class PostgresDialect(SQLDialect):
    """PostgreSQL through ``psycopg``.

    Parameter style: ``%s`` – ``psycopg`` positional execution.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    @property
    def drivername(self) -> str:
        return "postgresql+psycopg"

    def param_placeholder(self) -> str:
        return "%s"
