"""Compiler abstractions: CompiledStatement and the SQLDialect ABC.

The Strategy pattern is used: ``SQLDialect`` captures what differs between
backends (positional placeholder style, SQLAlchemy driver name, whether the
store is file-backed).  Statement assembly in
:mod:`sqlbrick.compile.statements` is identical for every backend.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CompiledStatement:
    """The output of statement compilation.

    Attributes:
        sql: Complete SQL text with positional placeholders.
        params: Values for the placeholders, in left-to-right order.
    """

    sql: str
    params: tuple[Any, ...] = ()


class SQLDialect(ABC):
    """Abstract base for backend dialects.

    Subclasses declare the backend specifics; everything else about a
    statement is backend independent.
    """

    @abstractmethod
    def param_placeholder(self) -> str:
        """Return the positional placeholder understood by the DBAPI driver.

        Returns:
            ``'?'`` for qmark drivers, ``'%s'`` for format drivers.
        """

    @property
    @abstractmethod
    def drivername(self) -> str:
        """Return the SQLAlchemy driver name (e.g. ``'mysql+pymysql'``)."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'sqlite'``, ``'mysql'``, ...)."""

    @property
    def file_backed(self) -> bool:
        """Whether the store is a single-writer file or in-memory database."""
        return False
