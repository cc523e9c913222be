"""sqlbrick – SQL statement builder with a built-in safety scanner.

Declare tables, chain WHERE predicates and run SELECT / INSERT / UPDATE /
DELETE / DROP without writing SQL text.  Every statement is compiled to
positional SQL plus a parameter list and vetted by a heuristic scanner
before it reaches the database.

Public API
----------
``Database.open``
    Open a SQLite file / in-memory database or a MySQL / PostgreSQL server.

``Database.table``
    Get a :class:`Query` on a table, creating it on first declaration.

``Query``
    Immutable predicate chain with terminal operations ``get``, ``all``,
    ``has``, ``set``, ``delete`` and ``drop``.

``add_safety_check`` / ``add_safety_pattern``
    Extend the process-wide safety rules.

Example::

    from sqlbrick import Database, TEXT

    with Database.open("sqlite", "app.db") as db:
        users = db.table("users", TEXT("username"), TEXT("password"))
        users.set({"username": "admin", "password": "12345"}, unique=["username"])
        if users.has({"username": "admin"}):
            users.where("username").equal("admin").get(["password"], print)

Extensibility
-------------
New backends can be registered via::

    from sqlbrick.compile.registry import DialectFactory

    @DialectFactory.register("mssql")
    class MSSQLDialect(SQLDialect):
        ...
"""

from __future__ import annotations

from sqlbrick.compile.base import CompiledStatement, SQLDialect
from sqlbrick.compile.fragment import Fragment
from sqlbrick.compile.mysql import MySQLDialect
from sqlbrick.compile.postgres import PostgresDialect
from sqlbrick.compile.registry import DialectFactory
from sqlbrick.compile.sqlite import SQLiteDialect
from sqlbrick.compile.statements import StatementCompiler
from sqlbrick.db.config import PoolSettings, ServerDSN
from sqlbrick.db.database import Database
from sqlbrick.errors import (
    CompilationError,
    InvalidDataSourceError,
    SqlBrickError,
    UnboundQueryError,
    UnsafeQueryError,
)
from sqlbrick.query.builder import Query, WhereCursor
from sqlbrick.safety.scanner import (
    DEFAULT_POLICY,
    SafetyPolicy,
    SafetyScanner,
    add_safety_check,
    add_safety_pattern,
)
from sqlbrick.sanitize import escape_quotes, to_identifier
from sqlbrick.schema.registry import SchemaRegistry
from sqlbrick.schema.types import (
    BIGINT,
    BINARY,
    BIT,
    BLOB,
    BOOL,
    CHAR,
    DATE,
    DATETIME,
    DECIMAL,
    DOUBLE,
    ENUM,
    FLOAT,
    INT,
    LONGBLOB,
    LONGTEXT,
    MEDIUMBLOB,
    MEDIUMINT,
    MEDIUMTEXT,
    SET,
    SMALLINT,
    TEXT,
    TIME,
    TIMESTAMP,
    TINYBLOB,
    TINYINT,
    TINYTEXT,
    TYPE,
    VARBINARY,
    VARCHAR,
    YEAR,
    ColumnType,
)

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectFactory
# ---------------------------------------------------------------------------

DialectFactory.register_class(SQLiteDialect, "sqlite", "sqlite3")
DialectFactory.register_class(MySQLDialect, "mysql")
DialectFactory.register_class(PostgresDialect, "postgres", "postgresql")

__all__ = [
    # Database
    "Database",
    "ServerDSN",
    "PoolSettings",
    # Queries
    "Query",
    "WhereCursor",
    "SchemaRegistry",
    # Compilation
    "CompiledStatement",
    "Fragment",
    "StatementCompiler",
    "SQLDialect",
    "DialectFactory",
    "SQLiteDialect",
    "MySQLDialect",
    "PostgresDialect",
    # Safety
    "SafetyPolicy",
    "SafetyScanner",
    "DEFAULT_POLICY",
    "add_safety_check",
    "add_safety_pattern",
    # Text normalization
    "to_identifier",
    "escape_quotes",
    # Column types
    "ColumnType",
    "TYPE",
    "CHAR",
    "VARCHAR",
    "BINARY",
    "VARBINARY",
    "TINYBLOB",
    "TINYTEXT",
    "TEXT",
    "BLOB",
    "MEDIUMTEXT",
    "MEDIUMBLOB",
    "LONGTEXT",
    "LONGBLOB",
    "ENUM",
    "SET",
    "BIT",
    "BOOL",
    "TINYINT",
    "SMALLINT",
    "MEDIUMINT",
    "INT",
    "BIGINT",
    "FLOAT",
    "DOUBLE",
    "DECIMAL",
    "DATE",
    "DATETIME",
    "TIMESTAMP",
    "TIME",
    "YEAR",
    # Errors
    "SqlBrickError",
    "UnsafeQueryError",
    "InvalidDataSourceError",
    "UnboundQueryError",
    "CompilationError",
]
