"""Tests for dialect resolution and literal quoting."""

import sqlite3

import pytest

from sqlstats.parameters import DialectQuoter, ParameterType, fallback_quote, normalize_dialect, resolve_dialect


@pytest.mark.parametrize(
    "dialect,expected",
    [
        ("postgresql", "postgres"),
        ("psycopg", "postgres"),
        ("asyncpg", "postgres"),
        ("sqlite3", "sqlite"),
        ("pymysql", "mysql"),
        ("DuckDB", "duckdb"),
        ("oracledb", "oracle"),
        (None, None),
        ("not-a-real-dialect", None),
    ],
)
def test_normalize_dialect(dialect: "str | None", expected: "str | None") -> None:
    assert normalize_dialect(dialect) == expected


def test_resolve_dialect_from_sqlite_connection() -> None:
    connection = sqlite3.connect(":memory:")
    try:
        assert resolve_dialect(connection) == "sqlite"
    finally:
        connection.close()


def test_resolve_dialect_unknown_driver() -> None:
    assert resolve_dialect(object()) is None


def test_fallback_quote_escapes_with_backslashes() -> None:
    assert fallback_quote("O'Brien") == r"'O\'Brien'"
    assert fallback_quote('say "hi"') == r"'say \"hi\"'"
    assert fallback_quote("C:\\temp") == r"'C:\\temp'"


def test_fallback_quote_decodes_bytes() -> None:
    assert fallback_quote(b"abc") == "'abc'"


def test_dialect_quoter_doubles_single_quotes() -> None:
    assert DialectQuoter("sqlite").quote("it's", ParameterType.STRING) == "'it''s'"


def test_dialect_quoter_null_handling() -> None:
    quoter = DialectQuoter()

    assert quoter.quote(None, ParameterType.STRING) == "NULL"
    assert quoter.quote("x", ParameterType.NULL) == "NULL"


def test_dialect_quoter_lob_values_are_quoted_as_text() -> None:
    assert DialectQuoter("sqlite").quote(b"blob", ParameterType.LOB) == "'blob'"


def test_dialect_quoter_stringifies_non_string_values() -> None:
    assert DialectQuoter("postgres").quote(1.5, ParameterType.STRING) == "'1.5'"


def test_dialect_quoter_repr_shows_dialect() -> None:
    assert repr(DialectQuoter("postgresql")) == "DialectQuoter(dialect='postgres')"
