"""sqlbrick compilation layer: builder state → positional SQL."""
from sqlbrick.compile.base import CompiledStatement, SQLDialect
from sqlbrick.compile.fragment import Fragment
from sqlbrick.compile.mysql import MySQLDialect
from sqlbrick.compile.postgres import PostgresDialect
from sqlbrick.compile.registry import DialectFactory
from sqlbrick.compile.sqlite import SQLiteDialect
from sqlbrick.compile.statements import StatementCompiler, checked_identifier, ordered_pairs

__all__ = [
    "CompiledStatement",
    "SQLDialect",
    "Fragment",
    "DialectFactory",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "StatementCompiler",
    "checked_identifier",
    "ordered_pairs",
]
