"""Integration tests: build → compile → scan → execute against PostgreSQL.

Uses SQLBRICK_PG_DSN, a JSON object with ServerDSN fields, e.g.
``{"username": "postgres", "password": "pw", "host": "localhost", "port": 5432, "database": "test"}``.
Skips all tests if the env var is unset or the connection fails.
Mirrors the core SQLite integration tests with the ``%s`` placeholder style.
"""
from __future__ import annotations

import json
import os
from collections.abc import Iterator

import pytest
from sqlalchemy.exc import SQLAlchemyError

from sqlbrick import TEXT, Database, Query, UnsafeQueryError

pytest.importorskip("psycopg", reason="psycopg required for Postgres integration tests")


def _open_pg() -> Database:
    raw = os.environ.get("SQLBRICK_PG_DSN")
    if not raw:
        pytest.skip("SQLBRICK_PG_DSN not set")
    try:
        return Database.open("postgres", json.loads(raw))
    except SQLAlchemyError as e:
        pytest.skip(f"Cannot connect to Postgres: {e}")


@pytest.fixture(scope="module")
def pg() -> Iterator[Database]:
    db = _open_pg()
    yield db
    db.close()


@pytest.fixture()
def users(pg: Database) -> Iterator[Query]:
    table = pg.table("sqlbrick_users", TEXT("username"), TEXT("password"))
    table.delete(force=True)
    yield table
    table.delete(force=True)


def test_placeholder_style(users: Query):
    assert users.placeholder == "%s"
    assert users.where("username").equal("a").condition.sql == "WHERE username = %s"


def test_upsert_keeps_one_row(users: Query):
    users.set({"username": "admin", "password": "12345"}, unique=["username"])
    users.set({"username": "admin", "password": "x"}, unique=["username"])
    assert [tuple(row) for row in users.all()] == [("admin", "x")]


def test_like_value_is_bound(users: Query):
    users.set({"username": "admin", "password": "12345"})
    users.set({"username": "guest", "password": "x"})
    names = [row.username for row in users.where("username").like("ad%").all(["username"])]
    assert names == ["admin"]


def test_has_and_delete(users: Query):
    users.set({"username": "admin", "password": "12345"})
    users.set({"username": "user", "password": "p@ssw0rd!"})
    assert users.has({"username": "user"})

    users.where("password").equal("p@ssw0rd!").delete()
    assert not users.has({"username": "user"})
    assert users.has({"username": "admin"})


def test_delete_without_where_needs_force(users: Query):
    users.set({"username": "admin", "password": "12345"})
    with pytest.raises(UnsafeQueryError):
        users.delete()
    assert len(users.all()) == 1


def test_bound_credential_wildcard_is_refused(users: Query):
    with pytest.raises(UnsafeQueryError) as info:
        users.where("password").equal("*").all()
    assert info.value.reason == "credential_wildcard"


def test_drop(pg: Database):
    scratch = pg.table("sqlbrick_scratch", TEXT("name"))
    with pytest.raises(UnsafeQueryError):
        scratch.drop()
    scratch.drop(force=True)
    assert not scratch.has({"name": "x"})
