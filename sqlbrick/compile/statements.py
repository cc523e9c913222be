"""Statement assembly: builder state → SQL text + positional parameters.

``StatementCompiler`` is pure.  It never touches a database; the
:class:`~sqlbrick.query.builder.Query` terminal operations hand the
:class:`~sqlbrick.compile.base.CompiledStatement` it returns to the
database layer.

Column values arrive as a mapping.  :func:`ordered_pairs` materializes it
once, in the caller's insertion order, and every column list, placeholder
list and parameter list of a statement is derived from that single list.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlbrick.compile.base import CompiledStatement
from sqlbrick.compile.fragment import Fragment
from sqlbrick.errors import CompilationError, UnsafeQueryError
from sqlbrick.sanitize import to_identifier

Pairs = list[tuple[str, Any]]


def checked_identifier(name: str, clause: str | None = None) -> str:
    """Sanitize a table or column name that is spliced into SQL text.

    Raises:
        CompilationError: If nothing survives sanitization, or the result
            contains ``--``, which would comment out the rest of the
            statement.
    """
    identifier = to_identifier(name)
    if not identifier:
        raise CompilationError(f"Identifier {name!r} is empty after sanitization.", clause=clause)
    if "--" in identifier:
        raise CompilationError(
            f"Identifier {name!r} contains an SQL comment marker.", clause=clause
        )
    return identifier


def ordered_pairs(values: Mapping[str, Any]) -> Pairs:
    """Return ``(column, value)`` pairs with sanitized column names.

    When two keys sanitize to the same column, the later value wins and the
    column keeps the position of its first appearance.

    Raises:
        CompilationError: If a key has no identifier characters at all, or
            contains ``--``.
    """
    pairs: dict[str, Any] = {}
    for key, value in values.items():
        pairs[checked_identifier(key)] = value
    return list(pairs.items())


def _strip_where(condition: Fragment) -> Fragment:
    return Fragment(condition.sql.removeprefix("WHERE "), condition.params)


class StatementCompiler:
    """Builds SELECT / INSERT / UPDATE / DELETE / DROP / CREATE statements.

    Args:
        placeholder: Positional placeholder for bound values (``'?'`` or
            ``'%s'``).
    """

    def __init__(self, placeholder: str = "?") -> None:
        self._ph = placeholder

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        keys: Sequence[str] | None,
        condition: Fragment,
        order: str = "",
    ) -> CompiledStatement:
        """``SELECT <keys | *> FROM <table> [<where>] [<order>]``."""
        columns = [checked_identifier(k, "SELECT") for k in keys or () if to_identifier(k)]
        sql = f"SELECT {', '.join(columns) or '*'} FROM {table}"
        if condition:
            sql += f" {condition.sql}"
        if order:
            sql += f" {order}"
        return CompiledStatement(sql, condition.params)

    def exists(self, table: str, pairs: Pairs, condition: Fragment) -> CompiledStatement:
        """Existence probe: every pair must match, plus any prior condition.

        A prior condition is parenthesized so an ``OR`` inside it cannot
        escape the equality chain.
        """
        frag = Fragment(f"SELECT * FROM {table} WHERE ") + self.equalities(pairs)
        if condition:
            frag = frag.text(" AND (") + _strip_where(condition)
            frag = frag.text(")")
        return CompiledStatement(frag.sql, frag.params)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, table: str, pairs: Pairs) -> CompiledStatement:
        """``INSERT INTO <table> (<cols>) VALUES (<placeholders>)``."""
        columns = ", ".join(col for col, _ in pairs)
        frag = Fragment(f"INSERT INTO {table} ({columns}) VALUES (")
        frag = frag.bind_all((value for _, value in pairs), self._ph, sep=", ").text(")")
        return CompiledStatement(frag.sql, frag.params)

    def update(self, table: str, pairs: Pairs, condition: Fragment) -> CompiledStatement:
        """``UPDATE <table> SET c = ?, ... <where>``; values bind before the condition."""
        frag = Fragment(f"UPDATE {table} SET ")
        for i, (column, value) in enumerate(pairs):
            if i:
                frag = frag.text(", ")
            frag = frag.text(f"{column} = ").bind(value, self._ph)
        if condition:
            frag = frag.text(" ") + condition
        return CompiledStatement(frag.sql, frag.params)

    def delete(self, table: str, condition: Fragment, force: bool = False) -> CompiledStatement:
        """``DELETE FROM <table> [<where>]``.

        Raises:
            UnsafeQueryError: If there is no condition and ``force`` is not set.
        """
        if not condition:
            if not force:
                raise UnsafeQueryError(
                    f"Refusing to delete every row of '{table}' without force=True.",
                    sql=f"DELETE FROM {table}",
                    reason="missing_where",
                )
            return CompiledStatement(f"DELETE FROM {table}")
        return CompiledStatement(f"DELETE FROM {table} {condition.sql}", condition.params)

    def drop(self, table: str, force: bool = False) -> CompiledStatement:
        """``DROP TABLE <table>``.

        Raises:
            UnsafeQueryError: If ``force`` is not set.
        """
        if not force:
            raise UnsafeQueryError(
                f"Refusing to drop table '{table}' without force=True.",
                reason="missing_force",
            )
        return CompiledStatement(f"DROP TABLE {table}")

    def create_table(self, table: str, definitions: Iterable[str]) -> CompiledStatement:
        """``CREATE TABLE IF NOT EXISTS <table> (<definitions>)``."""
        return CompiledStatement(
            f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(definitions)})"
        )

    # ------------------------------------------------------------------
    # Conditions
    # ------------------------------------------------------------------

    def equalities(self, pairs: Pairs) -> Fragment:
        """``c1 = ? AND c2 = ?`` over ``pairs``."""
        frag = Fragment()
        for i, (column, value) in enumerate(pairs):
            if i:
                frag = frag.text(" AND ")
            frag = frag.text(f"{column} = ").bind(value, self._ph)
        return frag

    def key_condition(self, pairs: Pairs, unique: Iterable[str]) -> Fragment:
        """``WHERE`` over the ``unique`` columns that appear in ``pairs``.

        Returns an empty fragment when none of them do.
        """
        values = dict(pairs)
        keyed: Pairs = []
        for key in unique:
            column = to_identifier(key)
            if column in values and all(column != c for c, _ in keyed):
                keyed.append((column, values[column]))
        if not keyed:
            return Fragment()
        return Fragment("WHERE ") + self.equalities(keyed)
