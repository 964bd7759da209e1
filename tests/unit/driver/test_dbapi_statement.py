"""Tests for the DB-API prepared statement primitive."""

import logging
import sqlite3

import pytest

from sqlstats import DBAPIStatement, ErrorMode, ParameterStyleMismatchError, ParameterType, Variable
from sqlstats.driver import resolve_driver_error


def _statement(connection: sqlite3.Connection, sql: str, **kwargs: object) -> DBAPIStatement:
    return DBAPIStatement(connection.cursor(), sql, driver_error=sqlite3.Error, **kwargs)  # type: ignore[arg-type]


def test_positional_bindings_are_sent_in_key_order(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "INSERT INTO users (id, name) VALUES (?, ?)")
    statement.bind_value(2, "alice")
    statement.bind_value(1, 7, ParameterType.INTEGER)

    assert statement.execute() is True
    assert statement.row_count() == 1
    assert statement.error_info() == ("00000", None, None)
    assert sqlite_connection.execute("SELECT id, name FROM users").fetchall() == [(7, "alice")]


def test_named_bindings_strip_leading_colon(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "INSERT INTO users (id, name) VALUES (:id, :name)")
    statement.bind_value(":id", 1, ParameterType.INTEGER)
    statement.bind_value("name", "bob")
    statement.execute()

    assert sqlite_connection.execute("SELECT name FROM users WHERE id = 1").fetchone() == ("bob",)


def test_null_type_sends_none(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "INSERT INTO users (id, name) VALUES (1, :name)")
    statement.bind_value("name", "ignored", ParameterType.NULL)
    statement.execute()

    assert sqlite_connection.execute("SELECT name FROM users").fetchone() == (None,)


def test_bind_param_reads_variable_at_execute(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "INSERT INTO users (name) VALUES (:name)")
    name = Variable("first")
    statement.bind_param("name", name)
    statement.execute()
    name.value = "second"
    statement.execute()

    assert sqlite_connection.execute("SELECT name FROM users ORDER BY id").fetchall() == [("first",), ("second",)]


def test_explicit_parameters_win_over_bindings(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "INSERT INTO users (name) VALUES (?)")
    statement.bind_value(1, "bound")
    statement.execute(["explicit"])

    assert sqlite_connection.execute("SELECT name FROM users").fetchone() == ("explicit",)


def test_statement_without_bindings(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "SELECT 1")

    assert statement.error_info() == ("", None, None)
    assert statement.execute() is True
    assert statement.fetchall() == [(1,)]


def test_driver_error_raises_in_exception_mode(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "SELECT * FROM missing_table")

    with pytest.raises(sqlite3.OperationalError):
        statement.execute()

    assert statement.error_info().failed


def test_driver_error_is_data_in_silent_mode(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "SELECT * FROM missing_table", error_mode=ErrorMode.SILENT)

    assert statement.execute() is False
    assert statement.error_info().sqlstate == "HY000"
    assert "missing_table" in str(statement.error_info().message)


def test_driver_error_is_logged_in_warning_mode(
    sqlite_connection: sqlite3.Connection, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="sqlstats")
    statement = _statement(sqlite_connection, "SELECT * FROM missing_table", error_mode="warning")

    assert statement.execute() is False
    assert any("missing_table" in message for message in caplog.messages)


def test_mixed_binding_styles_are_rejected(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "SELECT ?, :name")
    statement.bind_value(1, "a")
    statement.bind_value("name", "b")

    with pytest.raises(ParameterStyleMismatchError):
        statement.execute()


def test_mixed_binding_styles_in_silent_mode(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "SELECT ?, :name", error_mode=ErrorMode.SILENT)
    statement.bind_value(1, "a")
    statement.bind_value("name", "b")

    assert statement.execute() is False
    assert "mismatch" in str(statement.error_info().message)


def test_resolve_driver_error_from_connection(sqlite_connection: sqlite3.Connection) -> None:
    assert resolve_driver_error(sqlite_connection) is sqlite3.Error


def test_resolve_driver_error_defaults_to_exception() -> None:
    assert resolve_driver_error(object()) is Exception


def test_close_closes_cursor(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "SELECT 1")
    statement.close()

    with pytest.raises(sqlite3.ProgrammingError):
        statement.cursor.execute("SELECT 1")


def test_named_rebind_across_colon_alias_sends_latest_value(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "INSERT INTO users (id, name) VALUES (:id, 'x')")
    statement.bind_value(":id", 1, ParameterType.INTEGER)
    statement.bind_value("id", 2, ParameterType.INTEGER)
    statement.bind_value(":id", 3, ParameterType.INTEGER)
    statement.execute()

    assert sqlite_connection.execute("SELECT id FROM users").fetchall() == [(3,)]


def test_non_ascii_digit_key_is_not_positional(sqlite_connection: sqlite3.Connection) -> None:
    statement = _statement(sqlite_connection, "SELECT ?", error_mode=ErrorMode.SILENT)
    statement.bind_value("²", 1)

    assert statement.execute() is False
    assert statement.error_info().failed
