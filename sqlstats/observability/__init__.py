"""Public observability exports."""

from sqlstats.observability._config import TelemetryConfig
from sqlstats.observability._context import TelemetryContext
from sqlstats.observability._record import (
    ErrorInfo,
    ExecutionRecord,
    capture_stack,
    create_record,
    format_execution_record,
    log_slow_query,
)

__all__ = (
    "ErrorInfo",
    "ExecutionRecord",
    "TelemetryConfig",
    "TelemetryContext",
    "capture_stack",
    "create_record",
    "format_execution_record",
    "log_slow_query",
)
