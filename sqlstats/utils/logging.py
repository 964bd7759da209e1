"""Loggers and JSON log formatting for sqlstats.

Every logger handed out by :func:`get_logger` lives under the ``sqlstats``
namespace. Log calls that concern one execution pass the record as
``extra={"execution": record}``; :class:`StructuredFormatter` flattens it into
the JSON line so slow queries and failures can be filtered by field.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

import msgspec

if TYPE_CHECKING:
    from logging import LogRecord

    from sqlstats.observability._record import ExecutionRecord

__all__ = ("EXECUTION_ATTR", "ROOT_LOGGER_NAME", "StructuredFormatter", "execution_fields", "get_logger")

ROOT_LOGGER_NAME: Final = "sqlstats"
EXECUTION_ATTR: Final = "execution"

_json_encoder = msgspec.json.Encoder(enc_hook=str)


def execution_fields(execution: ExecutionRecord) -> dict[str, Any]:
    """Flat log fields for one execution record.

    Stacks are left out; they belong in the execution log, not in every line.
    """
    sqlstate, driver_code, message = execution.error_info
    return {
        "query": execution.query,
        "original_query": execution.original_query,
        "elapsed": execution.elapsed,
        "affected_rows": execution.affected_rows,
        "sqlstate": sqlstate,
        "driver_code": driver_code,
        "error_message": message,
    }


class StructuredFormatter(logging.Formatter):
    """JSON line formatter that expands attached execution records."""

    def format(self, record: LogRecord) -> str:
        """Format a log record as one JSON object.

        Args:
            record: The log record to format

        Returns:
            JSON formatted log entry
        """
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        execution = getattr(record, EXECUTION_ATTR, None)
        if execution is not None:
            log_entry.update(execution_fields(execution))

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return _json_encoder.encode(log_entry).decode("utf-8")


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``sqlstats`` namespace.

    Args:
        name: Logger name. If not provided, returns the root sqlstats logger.

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
