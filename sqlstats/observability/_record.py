"""Execution records and the helpers that build, format and log them."""

import os
import traceback
from dataclasses import dataclass
from pathlib import Path
from time import time
from typing import Any, Final, NamedTuple, Optional

from sqlstats.utils.logging import EXECUTION_ATTR, get_logger

__all__ = (
    "ErrorInfo",
    "ExecutionRecord",
    "capture_stack",
    "create_record",
    "format_execution_record",
    "log_slow_query",
)

logger = get_logger("observability")

_PACKAGE_ROOT: Final = os.path.join(str(Path(__file__).parent.parent), "")

SQLSTATE_SUCCESS: Final = "00000"
SQLSTATE_GENERAL_ERROR: Final = "HY000"


class ErrorInfo(NamedTuple):
    """Driver error information in ``(sqlstate, driver_code, message)`` form."""

    sqlstate: str
    driver_code: Any
    message: Optional[str]

    @classmethod
    def not_executed(cls) -> "ErrorInfo":
        return cls("", None, None)

    @classmethod
    def success(cls) -> "ErrorInfo":
        return cls(SQLSTATE_SUCCESS, None, None)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        """Pull what a DB-API exception exposes into an ``ErrorInfo``.

        psycopg exposes ``sqlstate``, psycopg2 ``pgcode``, sqlite3 ``sqlite_errorcode``
        and the MySQL drivers put the error number first in ``args``.
        """
        sqlstate = getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None) or SQLSTATE_GENERAL_ERROR
        driver_code = getattr(exc, "sqlite_errorcode", None)
        message: Optional[str] = str(exc) or type(exc).__name__
        if driver_code is None and len(exc.args) >= 2 and isinstance(exc.args[0], int):  # noqa: PLR2004
            driver_code = exc.args[0]
            message = str(exc.args[1])
        return cls(str(sqlstate), driver_code, message)

    @property
    def failed(self) -> bool:
        return bool(self.sqlstate) and self.sqlstate != SQLSTATE_SUCCESS


@dataclass(frozen=True, slots=True)
class ExecutionRecord:
    """Telemetry for a single statement execution."""

    created_at: float
    query: str
    original_query: str
    elapsed: float
    error_info: ErrorInfo
    affected_rows: int
    stack: "Optional[traceback.StackSummary]" = None
    create_stack: "Optional[traceback.StackSummary]" = None

    @property
    def failed(self) -> bool:
        return self.error_info.failed

    def is_slow(self, threshold: float) -> bool:
        return self.elapsed >= threshold

    def as_dict(self) -> "dict[str, Any]":
        """Return the record as a dictionary with stacks rendered as strings."""

        return {
            "created_at": self.created_at,
            "query": self.query,
            "original_query": self.original_query,
            "elapsed": self.elapsed,
            "error_info": list(self.error_info),
            "affected_rows": self.affected_rows,
            "stack": _render_stack(self.stack),
            "create_stack": _render_stack(self.create_stack),
        }


def _render_stack(stack: "Optional[traceback.StackSummary]") -> "list[str]":
    if not stack:
        return []
    return [f"{frame.filename}:{frame.lineno} in {frame.name}" for frame in stack]


def capture_stack(limit: Optional[int] = None) -> traceback.StackSummary:
    """Capture the caller's stack with sqlstats' own frames removed.

    Args:
        limit: Keep only this many of the most recent frames.

    Returns:
        Frames oldest first, as ``traceback.extract_stack`` orders them.
    """
    frames = [frame for frame in traceback.extract_stack() if not frame.filename.startswith(_PACKAGE_ROOT)]
    if limit is not None:
        frames = frames[-limit:]
    return traceback.StackSummary.from_list(frames)


def create_record(
    *,
    query: str,
    original_query: str,
    elapsed: float,
    error_info: ErrorInfo,
    affected_rows: int,
    stack: "Optional[traceback.StackSummary]" = None,
    create_stack: "Optional[traceback.StackSummary]" = None,
    created_at: Optional[float] = None,
) -> ExecutionRecord:
    """Factory helper used by instrumented statements to build records."""

    return ExecutionRecord(
        created_at=created_at if created_at is not None else time(),
        query=query,
        original_query=original_query,
        elapsed=max(elapsed, 0.0),
        error_info=error_info,
        affected_rows=affected_rows,
        stack=stack,
        create_stack=create_stack,
    )


def format_execution_record(record: ExecutionRecord) -> str:
    """Create a concise human-readable representation of an execution record."""

    status = "ok" if not record.failed else f"error={record.error_info.sqlstate}"
    return (
        f"({status}, rows={record.affected_rows}, duration={record.elapsed:.6f}s)\n"
        f"SQL: {record.query}"
    )


def log_slow_query(record: ExecutionRecord) -> None:
    """Slow query callback that logs the record as a warning."""

    logger.warning(
        "Slow query %s",
        format_execution_record(record),
        extra={EXECUTION_ATTR: record},
    )
