"""Instrumented statement: tracks bindings, times executions, records telemetry."""

from collections.abc import Iterator
from enum import Enum
from time import perf_counter
from typing import TYPE_CHECKING, Any, Optional

from sqlstats.exceptions import StatementClosedError
from sqlstats.observability._record import ExecutionRecord, create_record
from sqlstats.parameters.interpolator import QueryInterpolator
from sqlstats.parameters.tracker import ParameterTracker
from sqlstats.parameters.types import BoundParameter, ParameterType, Variable

if TYPE_CHECKING:
    from traceback import StackSummary
    from types import TracebackType

    from sqlstats.observability._context import TelemetryContext
    from sqlstats.protocols import PreparedStatementProtocol, QuoterProtocol
    from sqlstats.typing import StatementParameters

__all__ = ("InstrumentedStatement", "StatementState")


class StatementState(str, Enum):
    UNBOUND = "unbound"
    BOUND = "bound"


class InstrumentedStatement:
    """Wraps a prepared statement and records every execution.

    Binds are shadowed by a :class:`ParameterTracker` and forwarded unchanged.
    ``execute`` is timed around the wrapped call only; afterwards the literal
    query is rebuilt and one :class:`ExecutionRecord` is appended to the
    telemetry context, whether the driver succeeded or not. Driver errors are
    re-raised exactly as the wrapped statement raised them.
    """

    __slots__ = (
        "_closed",
        "_create_stack",
        "_interpolated_query",
        "_interpolator",
        "_last_record",
        "_statement",
        "_telemetry",
        "_tracker",
    )

    def __init__(
        self,
        statement: "PreparedStatementProtocol",
        telemetry: "TelemetryContext",
        quoter: "Optional[QuoterProtocol]" = None,
    ) -> None:
        self._statement = statement
        self._telemetry = telemetry
        self._interpolator = QueryInterpolator(quoter)
        self._tracker = ParameterTracker()
        self._interpolated_query = ""
        self._last_record: Optional[ExecutionRecord] = None
        self._closed = False
        self._create_stack: Optional[StackSummary] = telemetry.capture_stack()

    @property
    def sql(self) -> str:
        return self._statement.sql

    @property
    def statement(self) -> "PreparedStatementProtocol":
        return self._statement

    @property
    def telemetry(self) -> "TelemetryContext":
        return self._telemetry

    @property
    def state(self) -> StatementState:
        return StatementState.BOUND if self._tracker.is_bound else StatementState.UNBOUND

    @property
    def bindings(self) -> "dict[str, BoundParameter]":
        """Current bindings with references resolved."""
        return self._tracker.snapshot()

    @property
    def interpolated_query(self) -> str:
        """Literal SQL of the latest execution, empty before the first one."""
        return self._interpolated_query

    def get_interpolated_query(self) -> str:
        return self._interpolated_query

    @property
    def last_record(self) -> Optional[ExecutionRecord]:
        return self._last_record

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise StatementClosedError

    def bind_value(self, placeholder: "str | int", value: Any, param_type: ParameterType = ParameterType.STRING) -> Any:
        self._ensure_open()
        self._tracker.bind_value(placeholder, value, param_type)
        return self._statement.bind_value(placeholder, value, param_type)

    def bind_param(
        self, placeholder: "str | int", variable: Variable, param_type: ParameterType = ParameterType.STRING
    ) -> Any:
        self._ensure_open()
        self._tracker.bind_param(placeholder, variable, param_type)
        return self._statement.bind_param(placeholder, variable, param_type)

    def execute(self, parameters: "Optional[StatementParameters]" = None) -> Any:
        """Execute the wrapped statement and record the outcome.

        Args:
            parameters: Forwarded unchanged to the wrapped statement. They also
                count as bindings when rebuilding the literal query.

        Returns:
            Whatever the wrapped statement's ``execute`` returned.
        """
        self._ensure_open()
        bindings = self._tracker.snapshot(parameters)
        start = perf_counter()
        try:
            result = self._statement.execute(parameters)
        except Exception:
            self._record(perf_counter() - start, bindings)
            raise
        self._record(perf_counter() - start, bindings)
        return result

    def _record(self, elapsed: float, bindings: "dict[str, BoundParameter]") -> ExecutionRecord:
        self._interpolated_query = self._interpolator.interpolate(self.sql, bindings)
        record = create_record(
            query=self._interpolated_query,
            original_query=self.sql,
            elapsed=elapsed,
            error_info=self._statement.error_info(),
            affected_rows=self._statement.row_count(),
            stack=self._telemetry.capture_stack(),
            create_stack=self._create_stack,
        )
        self._last_record = record
        return self._telemetry.record(record)

    def error_info(self) -> Any:
        return self._statement.error_info()

    def row_count(self) -> int:
        return self._statement.row_count()

    # Result access is passed straight through
    def fetchone(self) -> Any:
        return self._statement.fetchone()  # type: ignore[attr-defined]

    def fetchmany(self, size: Optional[int] = None) -> "list[Any]":
        return self._statement.fetchmany(size)  # type: ignore[attr-defined]

    def fetchall(self) -> "list[Any]":
        return self._statement.fetchall()  # type: ignore[attr-defined]

    def __iter__(self) -> "Iterator[Any]":
        return iter(self._statement)  # type: ignore[call-overload]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._tracker.clear()
        close = getattr(self._statement, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "InstrumentedStatement":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: Optional[BaseException],
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.sql!r} state={self.state.value}>"
