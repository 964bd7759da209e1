"""Connection wrapper that instruments every statement it prepares."""

from typing import TYPE_CHECKING, Any, Optional

from sqlstats.driver._dbapi import DBAPIStatement, ErrorMode, resolve_driver_error
from sqlstats.driver.statement import InstrumentedStatement
from sqlstats.observability._context import TelemetryContext
from sqlstats.parameters.quoting import DialectQuoter, resolve_dialect
from sqlstats.utils.logging import get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from sqlstats.protocols import QuoterProtocol
    from sqlstats.typing import StatementParameters

__all__ = ("InstrumentedConnection", "instrument")

logger = get_logger("driver.connection")


class InstrumentedConnection:
    """A DB-API connection whose prepared statements record telemetry.

    The connection itself is not managed here. ``commit``, ``rollback`` and
    ``close`` are forwarded as-is.
    """

    __slots__ = ("_connection", "_driver_error", "_quoter", "error_mode", "telemetry")

    def __init__(
        self,
        connection: Any,
        telemetry: Optional[TelemetryContext] = None,
        *,
        dialect: Any = None,
        error_mode: ErrorMode = ErrorMode.EXCEPTION,
        quoter: "Optional[QuoterProtocol]" = None,
    ) -> None:
        self._connection = connection
        self.telemetry = telemetry if telemetry is not None else TelemetryContext()
        self.error_mode = ErrorMode(error_mode)
        self._driver_error = resolve_driver_error(connection)
        if quoter is None:
            quoter = DialectQuoter(dialect if dialect is not None else resolve_dialect(connection))
        self._quoter = quoter

    @property
    def connection(self) -> Any:
        return self._connection

    @property
    def quoter(self) -> "QuoterProtocol":
        return self._quoter

    def prepare(self, sql: str) -> InstrumentedStatement:
        """Create an instrumented statement for ``sql`` on a fresh cursor."""
        statement = DBAPIStatement(
            self._connection.cursor(), sql, error_mode=self.error_mode, driver_error=self._driver_error
        )
        return InstrumentedStatement(statement, self.telemetry, self._quoter)

    def execute(self, sql: str, parameters: "Optional[StatementParameters]" = None) -> InstrumentedStatement:
        """Prepare and execute ``sql`` in one call, returning the statement for fetching."""
        statement = self.prepare(sql)
        statement.execute(parameters)
        return statement

    def commit(self) -> None:
        self._connection.commit()

    def rollback(self) -> None:
        self._connection.rollback()

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "InstrumentedConnection":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: Optional[BaseException],
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._connection!r} quoter={self._quoter!r}>"


def instrument(
    connection: Any,
    telemetry: Optional[TelemetryContext] = None,
    *,
    dialect: Any = None,
    error_mode: ErrorMode = ErrorMode.EXCEPTION,
    quoter: "Optional[QuoterProtocol]" = None,
) -> InstrumentedConnection:
    """Install statement instrumentation on a live DB-API connection.

    Every statement created through the returned connection records its
    executions in ``telemetry``. Share one context between connections to get a
    single process-wide log.

    Args:
        connection: Open DB-API 2.0 connection.
        telemetry: Context receiving execution records. A new one is created when omitted.
        dialect: SQL dialect for literal quoting. Detected from the driver when omitted.
        error_mode: How driver errors reach callers of ``execute``.
        quoter: Custom quoting primitive, overrides ``dialect``.

    Returns:
        The instrumented connection.
    """
    instrumented = InstrumentedConnection(
        connection, telemetry, dialect=dialect, error_mode=error_mode, quoter=quoter
    )
    logger.debug("Instrumented connection %r", instrumented)
    return instrumented
