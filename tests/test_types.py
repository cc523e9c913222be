"""Unit tests for column type descriptors."""

from __future__ import annotations

import pydantic
import pytest

from sqlbrick.schema import types as t


def test_sized_string_types():
    assert t.CHAR("code").definition == "code CHAR"
    assert t.CHAR("code", 2).definition == "code CHAR(2)"
    assert t.VARCHAR("name", 255).definition == "name VARCHAR(255)"
    assert t.TEXT("bio").definition == "bio TEXT"


def test_column_name_is_sanitized():
    assert t.TEXT("user name;").definition == "username TEXT"


def test_modifiers_chain_and_leave_receiver_unchanged():
    base = t.INT("id")
    col = base.primary_key().not_null().unique()
    assert col.definition == "id INT PRIMARY KEY NOT NULL UNIQUE"
    assert base.definition == "id INT"
    assert t.INT("n").auto_increment().clause == "n INT AUTO_INCREMENT"
    assert t.INT("n").append("CHECK (n > 0)").clause == "n INT CHECK (n > 0)"


def test_descriptor_is_frozen():
    col = t.INT("id")
    with pytest.raises(pydantic.ValidationError):
        col.clause = "x"


def test_string_default_is_quoted_and_escaped():
    assert t.TEXT("name").default("it's").definition == "name TEXT DEFAULT 'it\\'s'"


def test_numeric_and_datetime_defaults_are_verbatim():
    assert t.INT("n").default(0).definition == "n INT DEFAULT 0"
    assert t.BOOL("on").default(True).definition == "on BOOL DEFAULT TRUE"
    assert (
        t.DATETIME("created").default("CURRENT_TIMESTAMP").definition
        == "created DATETIME DEFAULT CURRENT_TIMESTAMP"
    )
    assert t.TYPE("x", "JSON").default(None).definition == "x JSON DEFAULT NULL"


def test_value_kinds():
    assert t.VARCHAR("a").kind == "string"
    assert t.DECIMAL("a").kind == "numeric"
    assert t.TIMESTAMP("a").kind == "datetime"
    assert t.TYPE("a", "UUID").kind == "custom"


def test_enum_and_set_members():
    assert t.ENUM("size", "small", "big one").definition == "size ENUM(small, bigone)"
    assert t.SET("tags").definition == "tags SET"
    members = [f"m{i}" for i in range(70)]
    assert t.SET("tags", *members).definition.count(",") == 63


def test_numeric_clamps():
    assert t.BIT("b", 100).definition == "b BIT(64)"
    assert t.FLOAT("f", 60).definition == "f FLOAT(53)"
    assert t.DECIMAL("d", 80, 40).definition == "d DECIMAL(65, 30)"
    assert t.DECIMAL("d", 10).definition == "d DECIMAL(10)"
    assert t.DOUBLE("d", 8, 2).definition == "d DOUBLE(8, 2)"
    assert t.DOUBLE("d").definition == "d DOUBLE"


def test_fractional_seconds_are_escaped():
    assert t.TIME("at", "6").definition == "at TIME('6')"
    assert t.DATETIME("at").definition == "at DATETIME"
