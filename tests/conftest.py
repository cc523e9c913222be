"""Shared pytest fixtures for sqlbrick unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from sqlbrick import TEXT, Database, Query, SafetyPolicy, SafetyScanner


@pytest.fixture()
def policy() -> SafetyPolicy:
    """A fresh, empty rule set so tests never touch the process-wide one."""
    return SafetyPolicy()


@pytest.fixture()
def scanner(policy: SafetyPolicy) -> SafetyScanner:
    return SafetyScanner(policy)


@pytest.fixture()
def db(tmp_path: Path, policy: SafetyPolicy) -> Iterator[Database]:
    """SQLite file database in a per-test temporary directory."""
    database = Database.open(
        "sqlite", str(tmp_path / "test.db"), scanner=SafetyScanner(policy)
    )
    yield database
    database.close()


@pytest.fixture()
def users(db: Database) -> Query:
    """The ``users(username TEXT, password TEXT)`` table."""
    return db.table("users", TEXT("username"), TEXT("password"))
