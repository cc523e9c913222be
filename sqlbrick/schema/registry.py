"""Per-database record of tables already created.

``SchemaRegistry.ensure_table`` issues ``CREATE TABLE IF NOT EXISTS`` the
first time a table is declared with columns and remembers the name, so
later declarations are free.  Names are only ever added.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from sqlbrick.compile.statements import StatementCompiler
from sqlbrick.errors import SqlBrickError
from sqlbrick.query.builder import Query
from sqlbrick.schema.types import ColumnType

if TYPE_CHECKING:
    from sqlbrick.db.database import Database

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Tracks which tables have had their CREATE TABLE issued."""

    def __init__(self) -> None:
        self._tables: set[str] = set()
        self._lock = threading.Lock()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tables

    @property
    def tables(self) -> frozenset[str]:
        """Snapshot of the created table names."""
        with self._lock:
            return frozenset(self._tables)

    def ensure_table(
        self,
        db: Database,
        name: str,
        columns: Sequence[ColumnType] = (),
    ) -> Query:
        """Return a Query on ``name``, creating the table first if needed.

        The table is created when ``columns`` is non-empty and the name has
        not been recorded yet.  A failed CREATE is logged and not recorded,
        so the next declaration tries again; the Query is returned either
        way.
        """
        query = Query(name, placeholder=db.dialect.param_placeholder(), db=db)
        if not columns:
            return query

        with self._lock:
            if query.table in self._tables:
                return query
            stmt = StatementCompiler(query.placeholder).create_table(
                query.table, (col.definition for col in columns)
            )
            try:
                db.execute(stmt.sql)
            except (SqlBrickError, SQLAlchemyError) as exc:
                logger.warning("could not create table %s: %s", query.table, exc)
                return query
            self._tables.add(query.table)

        logger.info("table %s ready (%d columns)", query.table, len(columns))
        return query
