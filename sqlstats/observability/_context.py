"""Shared execution log, slow query threshold and callback registry."""

import threading
import traceback
from typing import TYPE_CHECKING, Optional

from sqlstats.exceptions import ImproperConfigurationError
from sqlstats.observability._config import TelemetryConfig, validate_threshold
from sqlstats.observability._record import ExecutionRecord, capture_stack, format_execution_record
from sqlstats.utils.logging import EXECUTION_ATTR, get_logger

if TYPE_CHECKING:
    from sqlstats.typing import SlowQueryCallback

__all__ = ("TelemetryContext",)

logger = get_logger("observability.context")


class TelemetryContext:
    """Execution telemetry shared by every statement it is handed to.

    Create one when the application starts and pass it to
    :func:`~sqlstats.instrument`. The log is append-only and grows for the life
    of the context; integrators that run for long periods should export and
    :meth:`drain` it on their own schedule.

    Appends, threshold changes and callback registration are serialized by a
    single lock. Callbacks run outside the lock on the executing thread.
    """

    __slots__ = ("_callbacks", "_lock", "_records", "_threshold", "config")

    def __init__(self, config: Optional[TelemetryConfig] = None) -> None:
        self.config = config.copy() if config is not None else TelemetryConfig()
        self._lock = threading.Lock()
        self._records: list[ExecutionRecord] = []
        self._threshold = self.config.slow_query_threshold
        self._callbacks: "list[SlowQueryCallback]" = []
        for callback in self.config.slow_query_callbacks:
            self.register_slow_query_callback(callback)

    def get_execution_log(self) -> "tuple[ExecutionRecord, ...]":
        """Every record appended so far, oldest first."""
        with self._lock:
            return tuple(self._records)

    def get_slow_query_threshold(self) -> float:
        with self._lock:
            return self._threshold

    def set_slow_query_threshold(self, seconds: float) -> None:
        """Set the elapsed time, in seconds, at or above which callbacks fire.

        Raises:
            ImproperConfigurationError: If ``seconds`` is negative or not a number.
        """
        value = validate_threshold(seconds)
        with self._lock:
            self._threshold = value

    def register_slow_query_callback(self, callback: "SlowQueryCallback") -> None:
        """Add a callback. Callbacks fire in registration order and cannot be removed."""
        if not callable(callback):
            msg = f"Slow query callback must be callable, got {type(callback).__name__}"
            raise ImproperConfigurationError(msg)
        with self._lock:
            self._callbacks.append(callback)

    def capture_stack(self) -> "Optional[traceback.StackSummary]":
        if not self.config.capture_stacks:
            return None
        return capture_stack(self.config.stack_limit)

    def record(self, record: ExecutionRecord) -> ExecutionRecord:
        """Append ``record`` and run the slow query callbacks if it qualifies.

        Exceptions raised by callbacks propagate to the caller.
        """
        with self._lock:
            self._records.append(record)
            threshold = self._threshold
            callbacks = tuple(self._callbacks)

        if self.config.log_executions:
            logger.debug("Executed %s", format_execution_record(record), extra={EXECUTION_ATTR: record})

        if record.elapsed >= threshold:
            for callback in callbacks:
                callback(record)
        return record

    def drain(self) -> "tuple[ExecutionRecord, ...]":
        """Remove and return every record appended so far."""
        with self._lock:
            records = tuple(self._records)
            self._records.clear()
        return records

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(records={len(self)}, threshold={self.get_slow_query_threshold()!r})"
