"""MySQL dialect."""

from __future__ import annotations

from sqlbrick.compile.base import SQLDialect


class MySQLDialect(SQLDialect):
    """MySQL / MariaDB through ``PyMySQL``.

    Parameter style: ``%s`` (format), which ``PyMySQL`` interpolates
    client-side with proper escaping.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    @property
    def drivername(self) -> str:
        return "mysql+pymysql"

    def param_placeholder(self) -> str:
        return "%s"
