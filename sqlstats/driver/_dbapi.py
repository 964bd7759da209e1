"""Prepared statement primitive on top of a DB-API 2.0 cursor.

DB-API has no bind step, so bindings are collected here and handed to
``cursor.execute`` as a sequence (``?`` markers) or a mapping (``:name``
markers) when the statement runs.
"""

import sys
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from sqlstats.exceptions import ParameterStyleMismatchError
from sqlstats.observability._record import ErrorInfo
from sqlstats.parameters.types import NAMED_MARKER, ParameterType, Variable, is_positional_key, normalize_placeholder
from sqlstats.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlstats.typing import StatementParameters

__all__ = ("DBAPIStatement", "ErrorMode", "resolve_driver_error")

logger = get_logger("driver.dbapi")


class ErrorMode(str, Enum):
    """How driver errors raised by ``execute`` reach the caller."""

    SILENT = "silent"
    WARNING = "warning"
    EXCEPTION = "exception"

    def __str__(self) -> str:
        return self.value


def resolve_driver_error(connection: Any) -> "type[Exception]":
    """Base exception class of the connection's driver.

    PEP 249 drivers expose it as ``Connection.Error`` or as ``Error`` on the
    driver module. Falls back to :class:`Exception`.
    """
    error_class = getattr(connection, "Error", None)
    if error_class is None:
        module = sys.modules.get(type(connection).__module__.split(".", 1)[0])
        error_class = getattr(module, "Error", None)
    if isinstance(error_class, type) and issubclass(error_class, Exception):
        return error_class
    return Exception


class DBAPIStatement:
    """One SQL statement bound to one cursor."""

    __slots__ = ("_bindings", "_cursor", "_driver_error", "_error_info", "error_mode", "sql")

    def __init__(
        self,
        cursor: Any,
        sql: str,
        *,
        error_mode: ErrorMode = ErrorMode.EXCEPTION,
        driver_error: "type[Exception]" = Exception,
    ) -> None:
        self._cursor = cursor
        self.sql = sql
        self.error_mode = ErrorMode(error_mode)
        self._driver_error = driver_error
        self._bindings: dict[str, tuple[Any, Optional[Variable], ParameterType]] = {}
        self._error_info = ErrorInfo.not_executed()

    @property
    def cursor(self) -> Any:
        return self._cursor

    def bind_value(
        self, placeholder: "str | int", value: Any, param_type: ParameterType = ParameterType.STRING
    ) -> bool:
        self._store(placeholder, (value, None, ParameterType(param_type)))
        return True

    def bind_param(
        self, placeholder: "str | int", variable: Variable, param_type: ParameterType = ParameterType.STRING
    ) -> bool:
        self._store(placeholder, (None, variable, ParameterType(param_type)))
        return True

    def _store(self, placeholder: "str | int", binding: "tuple[Any, Optional[Variable], ParameterType]") -> None:
        # ":id" and "id" name the same marker; the latest bind must be the one sent
        key = normalize_placeholder(placeholder)
        if not is_positional_key(key) and not key.startswith(NAMED_MARKER):
            key = NAMED_MARKER + key
        self._bindings.pop(key, None)
        self._bindings[key] = binding

    def _collect(self, parameters: "Optional[StatementParameters]") -> "Optional[StatementParameters]":
        if parameters is not None:
            return parameters
        if not self._bindings:
            return None

        values: dict[str, Any] = {}
        for key, (value, variable, param_type) in self._bindings.items():
            if variable is not None:
                value = variable.value
            values[key] = None if param_type is ParameterType.NULL else value

        positional = {key: value for key, value in values.items() if is_positional_key(key)}
        if positional and len(positional) != len(values):
            raise ParameterStyleMismatchError(sql=self.sql)
        if positional:
            return [value for _, value in sorted(positional.items(), key=lambda item: int(item[0]))]
        return {key.removeprefix(NAMED_MARKER): value for key, value in values.items()}

    def execute(self, parameters: "Optional[StatementParameters]" = None) -> bool:
        """Run the statement with explicit ``parameters`` or the collected bindings.

        Returns:
            True on success. False on a driver error in silent or warning mode.
        """
        self._error_info = ErrorInfo.not_executed()
        try:
            collected = self._collect(parameters)
            if collected is None:
                self._cursor.execute(self.sql)
            else:
                self._cursor.execute(self.sql, collected)
        except (self._driver_error, ParameterStyleMismatchError) as exc:
            self._error_info = ErrorInfo.from_exception(exc)
            if self.error_mode is ErrorMode.EXCEPTION:
                raise
            if self.error_mode is ErrorMode.WARNING:
                logger.warning("Statement failed: %s\nSQL: %s", exc, self.sql)
            return False
        self._error_info = ErrorInfo.success()
        return True

    def error_info(self) -> ErrorInfo:
        return self._error_info

    def row_count(self) -> int:
        """Rows affected by the last execution, -1 when the driver cannot tell."""
        rowcount = getattr(self._cursor, "rowcount", -1)
        return rowcount if isinstance(rowcount, int) else -1

    @property
    def description(self) -> Any:
        return self._cursor.description

    def fetchone(self) -> Any:
        return self._cursor.fetchone()

    def fetchmany(self, size: Optional[int] = None) -> "list[Any]":
        if size is None:
            return self._cursor.fetchmany()
        return self._cursor.fetchmany(size)

    def fetchall(self) -> "list[Any]":
        return self._cursor.fetchall()

    def __iter__(self) -> "Iterator[Any]":
        return iter(self._cursor)

    def close(self) -> None:
        self._bindings.clear()
        self._cursor.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.sql!r}>"
