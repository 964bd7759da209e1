from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from sqlstats import InstrumentedConnection, TelemetryConfig, TelemetryContext, instrument

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def telemetry() -> TelemetryContext:
    return TelemetryContext(TelemetryConfig())


@pytest.fixture
def sqlite_connection() -> Generator[sqlite3.Connection, None, None]:
    connection = sqlite3.connect(":memory:")
    connection.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, active BOOLEAN)")
    connection.commit()
    yield connection
    connection.close()


@pytest.fixture
def instrumented(sqlite_connection: sqlite3.Connection, telemetry: TelemetryContext) -> InstrumentedConnection:
    return instrument(sqlite_connection, telemetry)
