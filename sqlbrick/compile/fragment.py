"""SQL fragment accumulator.

A :class:`Fragment` pairs a piece of SQL text with the ordered values for
the placeholders it contains.  Text and values only grow together through
:meth:`Fragment.bind`, so the number of placeholders always matches the
number of parameters.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Fragment:
    """Immutable SQL text plus its bound parameters.

    Attributes:
        sql: SQL text, possibly empty.
        params: Values for every placeholder in ``sql``, in order.
    """

    sql: str = ""
    params: tuple[Any, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.sql)

    def text(self, sql: str) -> Fragment:
        """Return a new fragment with placeholder-free ``sql`` appended."""
        return Fragment(self.sql + sql, self.params)

    def bind(self, value: Any, placeholder: str = "?") -> Fragment:
        """Return a new fragment with one placeholder bound to ``value``."""
        return Fragment(self.sql + placeholder, self.params + (value,))

    def bind_all(
        self,
        values: Iterable[Any],
        placeholder: str = "?",
        sep: str = ",",
    ) -> Fragment:
        """Return a new fragment with ``sep``-joined placeholders for ``values``."""
        values = tuple(values)
        marks = sep.join(placeholder for _ in values)
        return Fragment(self.sql + marks, self.params + values)

    def __add__(self, other: Fragment) -> Fragment:
        if not isinstance(other, Fragment):
            return NotImplemented
        return Fragment(self.sql + other.sql, self.params + other.params)
