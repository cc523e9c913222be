"""Table-bound query builder.

A :class:`Query` carries a table name, an accumulated WHERE
:class:`~sqlbrick.compile.fragment.Fragment` and an ORDER BY clause.  It is
immutable: every chained call returns a new Query, so a shared "base" query
can be reused from any number of threads.

Predicate chains alternate between two objects::

    Query ──where/and_/or_──▶ WhereCursor ──equal/like/in_/…──▶ Query

``where(col)`` opens the clause with ``WHERE``; ``and_`` and ``or_`` do the
same when no clause exists yet, otherwise they join with ``AND`` / ``OR``.
A :class:`WhereCursor` holds the pending ``[NOT] column`` prefix until a
terminal predicate completes it.

Example::

    users = db.table("users", TEXT("username"), TEXT("password"))
    admins = users.where("role").equal("admin").and_("active").equal(1)
    admins.order_by("username").get(["username"], print)
    admins.set({"active": 0})
"""
from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError

from sqlbrick.compile.base import CompiledStatement
from sqlbrick.compile.fragment import Fragment
from sqlbrick.compile.statements import StatementCompiler, checked_identifier, ordered_pairs
from sqlbrick.errors import SqlBrickError, UnboundQueryError

if TYPE_CHECKING:
    from sqlbrick.db.database import Database

logger = logging.getLogger(__name__)

#: Row callback for :meth:`Query.get`; return ``False`` to stop iterating.
RowCallback = Callable[[Row], Any]


def _int_literal(value: Any) -> int:
    """Accept only true integers for predicates that are inlined as text."""
    if isinstance(value, bool):
        raise TypeError("expected an integer, got bool")
    return operator.index(value)


@dataclass(frozen=True)
class Query:
    """An immutable, table-bound statement under construction.

    Attributes:
        table: Sanitized table name.
        condition: Accumulated ``WHERE …`` text and its bound parameters.
        order: Accumulated ``ORDER BY …`` text, or ``''``.
        placeholder: Positional placeholder of the target database.
        db: Database that terminal operations run against.
    """

    table: str
    condition: Fragment = field(default_factory=Fragment)
    order: str = ""
    placeholder: str = "?"
    db: Database | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "table", checked_identifier(self.table, "FROM"))

    @property
    def parameters(self) -> tuple[Any, ...]:
        """Values bound to the WHERE placeholders, in order."""
        return self.condition.params

    # ------------------------------------------------------------------
    # Clause builders
    # ------------------------------------------------------------------

    def where(self, column: str, negate: bool = False) -> WhereCursor:
        """Start a predicate on ``column``.

        On a query that already has a condition this joins with ``AND``,
        exactly like :meth:`and_`.
        """
        return self._connect("AND", column, negate)

    def and_(self, column: str, negate: bool = False) -> WhereCursor:
        return self._connect("AND", column, negate)

    def or_(self, column: str, negate: bool = False) -> WhereCursor:
        return self._connect("OR", column, negate)

    def order_by(self, column: str, desc: bool = False) -> Query:
        """Append ``column ASC`` (or ``DESC``) to the ORDER BY clause."""
        order = f"{self.order}, " if self.order else "ORDER BY "
        column = checked_identifier(column, "ORDER BY")
        order += f"{column} {'DESC' if desc else 'ASC'}"
        return replace(self, order=order)

    def _connect(self, keyword: str, column: str, negate: bool) -> WhereCursor:
        prefix = f" {keyword} " if self.condition else "WHERE "
        if negate:
            prefix += "NOT "
        return WhereCursor(self, prefix + checked_identifier(column, "WHERE"))

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def get(self, keys: Sequence[str] | None, callback: RowCallback) -> None:
        """SELECT ``keys`` (all columns when empty) and feed each row to ``callback``.

        Iteration stops when ``callback`` returns ``False`` or the rows run
        out.  The result set is closed on every exit path, including an
        exception raised by ``callback``.
        """
        stmt = self.compiler.select(self.table, keys, self.condition, self.order)
        with self._database.query(stmt.sql, stmt.params) as rows:
            for row in rows:
                if callback(row) is False:
                    break

    def all(self, keys: Sequence[str] | None = None) -> list[Row]:
        """Return every selected row."""
        found: list[Row] = []
        self.get(keys, found.append)
        return found

    def has(self, values: Mapping[str, Any]) -> bool:
        """Return ``True`` if a row matches every ``column = value`` pair.

        Any existing condition on this query must match as well.  An empty
        mapping returns ``False`` without querying.  Errors of any kind
        (refused SQL, driver failures) also return ``False``.
        """
        if not values:
            return False
        try:
            stmt = self.compiler.exists(self.table, ordered_pairs(values), self.condition)
            return self._exists(stmt)
        except (SqlBrickError, SQLAlchemyError) as exc:
            logger.debug("existence probe on %s failed: %s", self.table, exc)
            return False

    def set(self, values: Mapping[str, Any], unique: Sequence[str] = ()) -> None:
        """INSERT or UPDATE ``values``.

        * With a condition on this query: always UPDATE the matching rows;
          ``unique`` is ignored.
        * With ``unique`` columns: UPDATE the rows whose unique columns
          match ``values``, if there are any.
        * Otherwise: INSERT a new row.

        An empty mapping does nothing.
        """
        pairs = ordered_pairs(values)
        if not pairs:
            return

        if self.condition:
            self._execute(self.compiler.update(self.table, pairs, self.condition))
            return

        if unique:
            keyed = self.compiler.key_condition(pairs, unique)
            if keyed:
                probe = self.compiler.select(self.table, None, keyed)
                if self._exists(probe):
                    self._execute(self.compiler.update(self.table, pairs, keyed))
                    return

        self._execute(self.compiler.insert(self.table, pairs))

    def delete(self, force: bool = False) -> None:
        """DELETE the matching rows.

        Without a condition this raises
        :class:`~sqlbrick.errors.UnsafeQueryError` unless ``force`` is set,
        in which case every row of the table is removed.
        """
        self._execute(self.compiler.delete(self.table, self.condition, force))

    def drop(self, force: bool = False) -> None:
        """DROP the whole table, ignoring any condition.

        ``DROP`` is always refused by the safety scanner, so this statement
        goes to the engine directly; ``force=True`` is the only gate.
        """
        stmt = self.compiler.drop(self.table, force)
        db = self._database
        logger.info("dropping table %s", self.table)
        with db.engine.begin() as conn:
            conn.exec_driver_sql(stmt.sql)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def compiler(self) -> StatementCompiler:
        return StatementCompiler(self.placeholder)

    @property
    def _database(self) -> Database:
        if self.db is None:
            raise UnboundQueryError(f"Query on '{self.table}' is not bound to a database.")
        return self.db

    def _exists(self, stmt: CompiledStatement) -> bool:
        with self._database.query(stmt.sql, stmt.params) as rows:
            return rows.first() is not None

    def _execute(self, stmt: CompiledStatement) -> None:
        self._database.execute(stmt.sql, stmt.params)


@dataclass(frozen=True)
class WhereCursor:
    """A pending predicate: ``[AND|OR|WHERE] [NOT] column`` awaiting its operator.

    Every method returns the parent :class:`Query` extended with the
    completed predicate.
    """

    query: Query
    prefix: str

    def _complete(self, predicate: Fragment) -> Query:
        condition = self.query.condition.text(self.prefix) + predicate
        return replace(self.query, condition=condition)

    def _bind(self, operator_sql: str, value: Any) -> Query:
        return self._complete(Fragment(operator_sql).bind(value, self.query.placeholder))

    def equal(self, value: Any) -> Query:
        """``=``"""
        return self._bind(" = ", value)

    def not_equal(self, value: Any) -> Query:
        """``<>``"""
        return self._bind(" <> ", value)

    def like(self, value: Any) -> Query:
        return self._bind(" LIKE ", value)

    def in_(self, *values: Any) -> Query:
        """``IN (?, …)``; with no values the predicate is dropped."""
        if not values:
            return self.query
        frag = Fragment(" IN (").bind_all(values, self.query.placeholder).text(")")
        return self._complete(frag)

    def greater_than(self, value: int) -> Query:
        return self._complete(Fragment(f" > {_int_literal(value)}"))

    def less_than(self, value: int) -> Query:
        return self._complete(Fragment(f" < {_int_literal(value)}"))

    def greater_equal(self, value: int) -> Query:
        return self._complete(Fragment(f" >= {_int_literal(value)}"))

    def less_equal(self, value: int) -> Query:
        return self._complete(Fragment(f" <= {_int_literal(value)}"))

    def between(self, low: int, high: int) -> Query:
        return self._complete(
            Fragment(f" BETWEEN {_int_literal(low)} AND {_int_literal(high)}")
        )

    def is_null(self) -> Query:
        return self._complete(Fragment(" IS NULL"))

    def is_not_null(self) -> Query:
        return self._complete(Fragment(" IS NOT NULL"))
