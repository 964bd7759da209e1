"""Tests for logging helpers."""

import io
import json
import logging
from collections.abc import Generator

import pytest

from sqlstats import ErrorInfo, log_slow_query
from sqlstats.observability import create_record
from sqlstats.utils.logging import StructuredFormatter, execution_fields, get_logger


@pytest.fixture
def json_stream() -> Generator[io.StringIO, None, None]:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("sqlstats")
    level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield stream
    logger.removeHandler(handler)
    logger.setLevel(level)


def test_get_logger_namespaces_names() -> None:
    assert get_logger().name == "sqlstats"
    assert get_logger("driver").name == "sqlstats.driver"
    assert get_logger("sqlstats.parameters").name == "sqlstats.parameters"
    assert get_logger("sqlstatsx").name == "sqlstats.sqlstatsx"


def test_structured_formatter_plain_message() -> None:
    record = logging.LogRecord(
        name="sqlstats.driver",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg="Statement failed: %s",
        args=("boom",),
        exc_info=None,
    )

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["message"] == "Statement failed: boom"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "sqlstats.driver"
    assert "query" not in payload


def test_execution_fields_flatten_error_info() -> None:
    record = create_record(
        query="SELECT x",
        original_query="SELECT ?",
        elapsed=0.5,
        error_info=ErrorInfo("42S22", 1, "no such column: x"),
        affected_rows=-1,
    )

    assert execution_fields(record) == {
        "query": "SELECT x",
        "original_query": "SELECT ?",
        "elapsed": 0.5,
        "affected_rows": -1,
        "sqlstate": "42S22",
        "driver_code": 1,
        "error_message": "no such column: x",
    }


def test_slow_query_log_line_carries_execution_fields(json_stream: io.StringIO) -> None:
    record = create_record(
        query="SELECT 'slow'",
        original_query="SELECT ?",
        elapsed=2.0,
        error_info=ErrorInfo.success(),
        affected_rows=1,
    )

    log_slow_query(record)

    payload = json.loads(json_stream.getvalue().splitlines()[-1])
    assert payload["level"] == "WARNING"
    assert payload["query"] == "SELECT 'slow'"
    assert payload["original_query"] == "SELECT ?"
    assert payload["elapsed"] == 2.0
    assert payload["sqlstate"] == "00000"
