"""Unit tests for SafetyScanner and SafetyPolicy."""

from __future__ import annotations

import re
import threading

import pytest

from sqlbrick.safety import scanner as scanner_module
from sqlbrick.safety.scanner import (
    SafetyPolicy,
    SafetyScanner,
    add_safety_check,
    add_safety_pattern,
)


def _scan(sql: str, params=(), policy: SafetyPolicy | None = None) -> str | None:
    return SafetyScanner(policy or SafetyPolicy()).check(sql, params)


# ---------------------------------------------------------------------------
# Built-in checks
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("sql", ["", "   ", "\n\t"])
def test_empty_is_unsafe(sql):
    assert _scan(sql) == "empty"


@pytest.mark.parametrize(
    "sql",
    [
        "DROP *",
        "drop table users",
        "SELECT * FROM backdrop",
        "SELECT * FROM users WHERE username = 'admin'; SELECT * FROM users",
        "SELECT 1;",
    ],
)
def test_drop_and_separator_are_unsafe(sql):
    assert _scan(sql) == "forbidden_token"


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT * FROM users WHERE username = '*'",
        "SELECT * FROM users WHERE password='*'",
        'SELECT * FROM users WHERE "uid" = "*"',
        "SELECT * FROM users WHERE a = ? OR USER = *",
        "SELECT * FROM users WHERE userid = `*`",
    ],
)
def test_credential_wildcard_is_unsafe(sql):
    assert _scan(sql) == "credential_wildcard"


def test_wildcard_on_other_columns_is_allowed():
    assert _scan("SELECT * FROM files WHERE pattern = '*'") is None


def test_bound_credential_wildcard_is_unsafe():
    sql = "SELECT * FROM users WHERE role = ? AND username = ?"
    assert _scan(sql, ("admin", "*")) == "credential_wildcard"
    assert _scan(sql, ("*", "admin")) is None


def test_bound_credential_counts_placeholders_before_where():
    sql = "UPDATE users SET password = ? WHERE username = ?"
    assert _scan(sql, ("*", "admin")) is None
    assert _scan(sql, ("x", "*")) == "credential_wildcard"


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT * FROM users WHERE note = 'why?' AND username = ?",
        "SELECT * FROM users WHERE note = 'it''s ??' AND password = ?",
        "SELECT * FROM users WHERE note = 'a\\'?' AND uid = ?",
    ],
)
def test_question_marks_inside_literals_are_not_placeholders(sql):
    assert _scan(sql, ("*",)) == "credential_wildcard"


def test_credential_text_inside_literal_is_not_a_column():
    sql = "SELECT * FROM notes WHERE body = 'password = ?' AND id = ?"
    assert _scan(sql, ("*",)) is None


def test_bound_credential_with_format_placeholder():
    scanner = SafetyScanner(SafetyPolicy(), placeholder="%s")
    assert not scanner.scan("SELECT * FROM users WHERE password = %s", ("*",))
    assert scanner.scan("SELECT * FROM users WHERE password = %s", ("hunter2",))


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT * FROM users WHERE username = 'admin' OR 1=1",
        "SELECT * FROM users WHERE id=id",
        "SELECT * FROM users WHERE 'x' = 'x'",
        'SELECT * FROM users WHERE a = ? OR "b" = "b"',
        "SELECT * FROM users WHERE name = '' OR '' = ''",
        "select * from users where 2 = 2",
    ],
)
def test_tautology_is_unsafe(sql):
    assert _scan(sql) == "tautology"


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT * FROM users WHERE username = 'distinct-value'",
        "SELECT * FROM users WHERE username = ? AND password = ?",
        "SELECT * FROM users WHERE age >= 18 AND age <= 65",
        "SELECT * FROM users WHERE age >= ?",
        "SELECT * FROM users WHERE a BETWEEN 1 AND 5 ORDER BY a ASC",
        "SELECT * FROM users WHERE NOT deleted IS NULL",
        "SELECT username FROM users",
        "INSERT INTO users (a, b) VALUES (?, ?)",
        "CREATE TABLE IF NOT EXISTS users (username TEXT, password TEXT)",
    ],
)
def test_ordinary_statements_are_safe(sql):
    assert _scan(sql) is None


def test_tautology_outside_where_is_not_checked():
    assert _scan("UPDATE t SET a = a") is None


def test_scan_returns_bool():
    scanner = SafetyScanner(SafetyPolicy())
    assert scanner.scan("SELECT * FROM t WHERE a = ?") is True
    assert scanner.scan("SELECT * FROM t WHERE 1 = 1") is False


# ---------------------------------------------------------------------------
# Custom rules
# ---------------------------------------------------------------------------


def test_where_pattern_only_applies_to_statements_with_where(policy):
    policy.add_pattern(r"secret", where=True)
    scanner = SafetyScanner(policy)
    assert scanner.check("SELECT secret FROM t WHERE a = ?") == "where_pattern"
    assert scanner.check("SELECT secret FROM t") is None


def test_full_text_pattern(policy):
    policy.add_pattern(re.compile(r"(?i)\bsleep\s*\("))
    scanner = SafetyScanner(policy)
    assert scanner.check("SELECT SLEEP(5)") == "pattern"
    assert scanner.check("SELECT sleepy FROM t") is None


def test_custom_check_veto(policy):
    seen: list[str] = []

    def no_catalog(sql: str) -> bool:
        seen.append(sql)
        return "pg_catalog" not in sql

    policy.add_check(no_catalog)
    scanner = SafetyScanner(policy)
    assert scanner.check("SELECT * FROM pg_catalog.pg_user") == "custom_check"
    assert scanner.check("SELECT * FROM users") is None
    assert seen == ["SELECT * FROM pg_catalog.pg_user", "SELECT * FROM users"]


def test_builtin_checks_run_before_custom_checks(policy):
    called: list[str] = []
    policy.add_check(lambda sql: called.append(sql) or True)
    assert SafetyScanner(policy).check("DROP TABLE t") == "forbidden_token"
    assert called == []


def test_policy_accepts_patterns_at_construction():
    policy = SafetyPolicy(patterns=["union"], where_patterns=[r"\bor\b"])
    scanner = SafetyScanner(policy)
    assert scanner.check("SELECT a FROM t union SELECT b FROM u") == "pattern"
    assert scanner.check("SELECT a FROM t WHERE a = ? or b = ?") == "where_pattern"


def test_policy_snapshot_is_immutable(policy):
    policy.add_pattern("x")
    checks, patterns, where_patterns = policy.snapshot()
    policy.add_pattern("y")
    assert len(patterns) == 1
    assert checks == () and where_patterns == ()


def test_concurrent_registration_keeps_every_rule(policy):
    def register(n: int) -> None:
        for i in range(50):
            policy.add_pattern(f"rule_{n}_{i}")

    threads = [threading.Thread(target=register, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(policy.snapshot()[1]) == 400


def test_process_wide_registration(monkeypatch):
    fresh = SafetyPolicy()
    monkeypatch.setattr(scanner_module, "DEFAULT_POLICY", fresh)

    add_safety_pattern("forbidden_table")
    add_safety_check(lambda sql: "audit" not in sql)

    scanner = SafetyScanner()
    assert scanner.policy is fresh
    assert not scanner.scan("SELECT * FROM forbidden_table")
    assert not scanner.scan("SELECT * FROM audit")
    assert scanner.scan("SELECT * FROM users")
