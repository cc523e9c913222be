"""Column type descriptors used when a table is first declared.

Each constructor returns an immutable :class:`ColumnType` whose
``definition`` is spliced into ``CREATE TABLE IF NOT EXISTS``.  Column
names and enum members are reduced to identifier characters; string
defaults are quoted and escaped, numeric and date/time defaults are
emitted verbatim so expressions like ``CURRENT_TIMESTAMP`` work.

Example::

    db.table(
        "users",
        INT("id").primary_key(),
        VARCHAR("username", 64).not_null().unique(),
        DATETIME("created").default("CURRENT_TIMESTAMP"),
    )

A list of SQL data types can be found at
https://www.w3schools.com/sql/sql_datatypes.asp; use :func:`TYPE` for any
type without a constructor here.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from sqlbrick.sanitize import escape_quotes, to_identifier

ValueKind = Literal["string", "numeric", "datetime", "custom"]


def _to_text(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, bytes):
        return value.decode()
    return str(value)


class ColumnType(BaseModel):
    """A column declaration for ``CREATE TABLE``.

    Modifier methods return a new descriptor; the receiver is unchanged.

    Attributes:
        clause: Identifier, SQL type and modifiers (e.g. ``'id INT UNIQUE'``).
        kind: Controls whether :meth:`default` quotes its argument.
        default_clause: Rendered default value, or ``''`` for none.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    clause: str
    kind: ValueKind = "custom"
    default_clause: str = ""

    @property
    def definition(self) -> str:
        """The full column definition including any ``DEFAULT`` clause."""
        if self.default_clause:
            return f"{self.clause} DEFAULT {self.default_clause}"
        return self.clause

    def default(self, value: Any) -> ColumnType:
        """Set a DEFAULT value; string columns get a quoted, escaped literal."""
        text = _to_text(value)
        if self.kind == "string":
            text = f"'{escape_quotes(text)}'"
        return self.model_copy(update={"default_clause": text})

    def append(self, modifier: str) -> ColumnType:
        """Add a raw constraint that has no dedicated method."""
        return self.model_copy(update={"clause": f"{self.clause} {modifier}"})

    def unique(self) -> ColumnType:
        return self.append("UNIQUE")

    def not_null(self) -> ColumnType:
        return self.append("NOT NULL")

    def auto_increment(self) -> ColumnType:
        """Mark the column AUTO_INCREMENT (MySQL syntax; SQLite rejects it)."""
        return self.append("AUTO_INCREMENT")

    def primary_key(self) -> ColumnType:
        return self.append("PRIMARY KEY")


def _column(key: str, sql_type: str, kind: ValueKind, *sizes: int | None) -> ColumnType:
    clause = f"{to_identifier(key)} {sql_type}"
    given = [str(int(s)) for s in sizes if s is not None]
    if given:
        clause += f"({', '.join(given)})"
    return ColumnType(clause=clause, kind=kind)


def _members(key: str, sql_type: str, values: tuple[str, ...], limit: int) -> ColumnType:
    clause = f"{to_identifier(key)} {sql_type}"
    if values:
        clause += f"({', '.join(to_identifier(v) for v in values[:limit])})"
    return ColumnType(clause=clause, kind="string")


def _fsp(key: str, sql_type: str, fsp: str | None) -> ColumnType:
    clause = f"{to_identifier(key)} {sql_type}"
    if fsp is not None:
        clause += f"('{escape_quotes(fsp)}')"
    return ColumnType(clause=clause, kind="datetime")


def TYPE(key: str, data_type: str) -> ColumnType:
    """A custom data type, emitted verbatim after the column name."""
    return ColumnType(clause=f"{to_identifier(key)} {data_type}", kind="custom")


# ---------------------------------------------------------------------------
# String data types
# ---------------------------------------------------------------------------


def CHAR(key: str, size: int | None = None) -> ColumnType:
    """Fixed-length string, size 0 to 255 (default 1)."""
    return _column(key, "CHAR", "string", size)


def VARCHAR(key: str, size: int | None = None) -> ColumnType:
    """Variable-length string, size 0 to 65535."""
    return _column(key, "VARCHAR", "string", size)


def BINARY(key: str, size: int | None = None) -> ColumnType:
    return _column(key, "BINARY", "string", size)


def VARBINARY(key: str, size: int | None = None) -> ColumnType:
    return _column(key, "VARBINARY", "string", size)


def TINYBLOB(key: str) -> ColumnType:
    return _column(key, "TINYBLOB", "string")


def TINYTEXT(key: str) -> ColumnType:
    return _column(key, "TINYTEXT", "string")


def TEXT(key: str, size: int | None = None) -> ColumnType:
    """Text column, size 0 to 65535 characters."""
    return _column(key, "TEXT", "string", size)


def BLOB(key: str, size: int | None = None) -> ColumnType:
    return _column(key, "BLOB", "string", size)


def MEDIUMTEXT(key: str) -> ColumnType:
    return _column(key, "MEDIUMTEXT", "string")


def MEDIUMBLOB(key: str) -> ColumnType:
    return _column(key, "MEDIUMBLOB", "string")


def LONGTEXT(key: str) -> ColumnType:
    return _column(key, "LONGTEXT", "string")


def LONGBLOB(key: str) -> ColumnType:
    return _column(key, "LONGBLOB", "string")


def ENUM(key: str, *values: str) -> ColumnType:
    """A string holding exactly one of up to 65535 listed values.

    Members are reduced to identifier characters and kept in the order
    given.
    """
    return _members(key, "ENUM", values, 65535)


def SET(key: str, *values: str) -> ColumnType:
    """A string holding zero or more of up to 64 listed values."""
    return _members(key, "SET", values, 64)


# ---------------------------------------------------------------------------
# Numeric data types
# ---------------------------------------------------------------------------


def BIT(key: str, size: int | None = None) -> ColumnType:
    """Bit-value type, size 1 to 64 (larger sizes are clamped to 64)."""
    if size is not None:
        size = min(size, 64)
    return _column(key, "BIT", "numeric", size)


def BOOL(key: str) -> ColumnType:
    """Zero is false, any other value is true."""
    return _column(key, "BOOL", "numeric")


def TINYINT(key: str) -> ColumnType:
    return _column(key, "TINYINT", "numeric")


def SMALLINT(key: str) -> ColumnType:
    return _column(key, "SMALLINT", "numeric")


def MEDIUMINT(key: str) -> ColumnType:
    return _column(key, "MEDIUMINT", "numeric")


def INT(key: str) -> ColumnType:
    return _column(key, "INT", "numeric")


def BIGINT(key: str) -> ColumnType:
    return _column(key, "BIGINT", "numeric")


def FLOAT(key: str, p: int | None = None) -> ColumnType:
    """Floating point number.

    MySQL picks FLOAT for ``p`` from 0 to 24 and DOUBLE for 25 to 53;
    larger values are clamped to 53.
    """
    if p is not None:
        p = min(p, 53)
    return _column(key, "FLOAT", "numeric", p)


def DOUBLE(key: str, size: int | None = None, d: int | None = None) -> ColumnType:
    """Double precision number with ``size`` total digits, ``d`` after the point."""
    if size is None:
        d = None
    return _column(key, "DOUBLE", "numeric", size, d)


def DECIMAL(key: str, size: int | None = None, d: int | None = None) -> ColumnType:
    """Exact fixed-point number.

    ``size`` is capped at 65 and ``d`` at 30.  ``d`` is ignored unless
    ``size`` is given.
    """
    if size is None:
        d = None
    else:
        size = min(size, 65)
    if d is not None:
        d = min(d, 30)
    return _column(key, "DECIMAL", "numeric", size, d)


# ---------------------------------------------------------------------------
# Date and time data types
# ---------------------------------------------------------------------------


def DATE(key: str) -> ColumnType:
    """A date, format ``YYYY-MM-DD``."""
    return _column(key, "DATE", "datetime")


def DATETIME(key: str, fsp: str | None = None) -> ColumnType:
    """A date and time, format ``YYYY-MM-DD hh:mm:ss``.

    Combine with ``.default("CURRENT_TIMESTAMP")`` for automatic
    initialization.
    """
    return _fsp(key, "DATETIME", fsp)


def TIMESTAMP(key: str, fsp: str | None = None) -> ColumnType:
    """Seconds since the Unix epoch, format ``YYYY-MM-DD hh:mm:ss``."""
    return _fsp(key, "TIMESTAMP", fsp)


def TIME(key: str, fsp: str | None = None) -> ColumnType:
    return _fsp(key, "TIME", fsp)


def YEAR(key: str) -> ColumnType:
    """A four-digit year, 1901 to 2155 and 0000."""
    return _column(key, "YEAR", "datetime")
