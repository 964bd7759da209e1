from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "ParameterError",
    "ParameterStyleMismatchError",
    "SQLStatsError",
    "StatementClosedError",
)


class SQLStatsError(Exception):
    """Base exception class from which all sqlstats exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLStatsError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SQLStatsError):
    """Improper Configuration error.

    Raised for invalid telemetry settings such as a negative slow query threshold
    or a slow query callback that is not callable.
    """


class StatementClosedError(SQLStatsError):
    """Raised when a closed statement is bound or executed."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Statement has been closed."
        super().__init__(message)


# -- SQL Parameter Errors --
class ParameterError(SQLStatsError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ParameterStyleMismatchError(ParameterError):
    """Error when positional and named bindings are mixed on one statement.

    DB-API drivers accept either a sequence or a mapping of parameters, never both,
    so the adapter refuses to guess how to merge them.
    """

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Parameter style mismatch: positional and named bindings cannot be mixed on one statement."
        super().__init__(message, sql)
