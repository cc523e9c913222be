"""Dialect registry (Open/Closed Principle).

``DialectFactory`` maps driver kinds, as passed to
:meth:`sqlbrick.db.database.Database.open`, to :class:`SQLDialect`
implementations.  Adding a backend means registering one class; nothing in
the database layer changes.

Usage::

    from sqlbrick.compile.registry import DialectFactory

    @DialectFactory.register("mssql")
    class MSSQLDialect(SQLDialect):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from sqlbrick.compile.base import SQLDialect
from sqlbrick.errors import InvalidDataSourceError


class DialectFactory:
    """Registry mapping driver kinds to :class:`SQLDialect` classes.

    Several names may point to the same class (``"sqlite"`` and
    ``"sqlite3"``).

    Example::

        @DialectFactory.register("mysql")
        class MySQLDialect(SQLDialect):
            ...

        dialect = DialectFactory.create("mysql")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}

    @classmethod
    def register(cls, *names: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under each of ``names``.

        Args:
            names: Driver kinds (e.g. ``"postgres"``, ``"postgresql"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            for name in names:
                cls._dialects[name.lower()] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, dialect_cls: type[SQLDialect], *names: str) -> None:
        """Register a dialect class without using the decorator form."""
        for name in names:
            cls._dialects[name.lower()] = dialect_cls

    @classmethod
    def create(cls, name: str) -> SQLDialect:
        """Instantiate the dialect registered for ``name``.

        Raises:
            InvalidDataSourceError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name.lower())
        if dialect_cls is None:
            raise InvalidDataSourceError(
                f"Unsupported driver: '{name}'. Registered drivers: {cls.registered_drivers()}.",
                driver=name,
            )
        return dialect_cls()

    @classmethod
    def registered_drivers(cls) -> list[str]:
        """Return the sorted list of registered driver kinds."""
        return sorted(cls._dialects)
