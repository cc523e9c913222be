"""Database handle: SQLAlchemy engine + safety scanner + schema registry.

Statements are sent with ``Connection.exec_driver_sql`` so positional
placeholders reach the DBAPI driver exactly as compiled.  Every statement
except ``DROP TABLE`` (see :meth:`sqlbrick.query.builder.Query.drop`) is
vetted by the :class:`~sqlbrick.safety.scanner.SafetyScanner` first.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from sqlbrick.compile.base import SQLDialect
from sqlbrick.compile.registry import DialectFactory
from sqlbrick.db.config import (
    PoolSettings,
    ServerDSN,
    build_url,
    describe_source,
    engine_options,
)
from sqlbrick.errors import UnsafeQueryError
from sqlbrick.query.builder import Query
from sqlbrick.safety.scanner import SafetyScanner
from sqlbrick.schema.registry import SchemaRegistry
from sqlbrick.schema.types import ColumnType

logger = logging.getLogger(__name__)


def _driver_params(params: Sequence[Any]) -> tuple[Any, ...] | None:
    return tuple(params) or None


class Database:
    """An open database.

    Args:
        engine: SQLAlchemy engine that owns the connection pool.
        dialect: Backend specifics (placeholder style, driver name).
        scanner: Safety scanner; defaults to one using the process-wide
            policy and the dialect's placeholder.
    """

    def __init__(
        self,
        engine: Engine,
        dialect: SQLDialect,
        scanner: SafetyScanner | None = None,
    ) -> None:
        self.engine = engine
        self.dialect = dialect
        self.scanner = scanner or SafetyScanner(placeholder=dialect.param_placeholder())
        self.schema = SchemaRegistry()

    @classmethod
    def open(
        cls,
        driver: str,
        dsn: str | ServerDSN | dict[str, Any] = "",
        *,
        pool: PoolSettings | None = None,
        scanner: SafetyScanner | None = None,
    ) -> Database:
        """Open and ping a database.

        Args:
            driver: Driver kind (``'sqlite'``, ``'mysql'``, ``'postgres'``).
            dsn: Filesystem path for SQLite (``''`` for in-memory), or a
                :class:`ServerDSN` / dict for servers.
            pool: Pool bounds for servers; ignored for SQLite.
            scanner: Custom safety scanner.

        Raises:
            InvalidDataSourceError: Unknown driver or unusable descriptor.
            sqlalchemy.exc.SQLAlchemyError: The database cannot be reached.
        """
        dialect = DialectFactory.create(driver)
        url = build_url(dialect, dsn)
        engine = create_engine(url, **engine_options(dialect, pool or PoolSettings()))
        try:
            with engine.connect():
                pass
        except SQLAlchemyError:
            engine.dispose()
            raise
        logger.info("opened %s %s", dialect.dialect_name, describe_source(dsn))
        return cls(engine, dialect, scanner)

    def close(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("closed %s", self.engine.url.render_as_string(hide_password=True))

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def table(self, name: str, *columns: ColumnType) -> Query:
        """Return a Query on table ``name``.

        When ``columns`` are given and the table has not been created through
        this handle yet, ``CREATE TABLE IF NOT EXISTS`` runs first.
        """
        return self.schema.ensure_table(self, name, columns)

    # ------------------------------------------------------------------
    # Raw statements
    # ------------------------------------------------------------------

    @contextmanager
    def query(self, sql: str, params: Sequence[Any] = ()) -> Iterator[CursorResult]:
        """Run a row-returning statement; the result is closed on exit.

        Raises:
            UnsafeQueryError: The scanner refused ``sql``.
        """
        self._vet(sql, params)
        logger.debug("query: %s (%d params)", sql, len(params))
        with self.engine.connect() as conn:
            result = conn.exec_driver_sql(sql, _driver_params(params))
            try:
                yield result
            finally:
                result.close()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> CursorResult:
        """Run a statement in its own transaction and commit it.

        Raises:
            UnsafeQueryError: The scanner refused ``sql``.
        """
        self._vet(sql, params)
        logger.debug("execute: %s (%d params)", sql, len(params))
        with self.engine.begin() as conn:
            return conn.exec_driver_sql(sql, _driver_params(params))

    def _vet(self, sql: str, params: Sequence[Any]) -> None:
        reason = self.scanner.check(sql, params)
        if reason is not None:
            logger.warning("refused unsafe query (%s): %s", reason, sql)
            raise UnsafeQueryError(f"unsafe query ({reason})", sql=sql, reason=reason)
