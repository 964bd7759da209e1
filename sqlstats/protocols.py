"""Runtime-checkable protocols for the collaborators sqlstats wraps.

The instrumented statement only needs a prepared-statement primitive and a
quoting primitive. Anything that satisfies these protocols can be wrapped.
"""

from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlstats.observability._record import ErrorInfo
    from sqlstats.parameters.types import ParameterType, Variable
    from sqlstats.typing import StatementParameters

__all__ = ("PreparedStatementProtocol", "QuoterProtocol")


@runtime_checkable
class QuoterProtocol(Protocol):
    """Protocol for driver quoting primitives."""

    def quote(self, value: Any, param_type: "ParameterType") -> str:
        """Return ``value`` as a literal of the declared type."""
        ...


@runtime_checkable
class PreparedStatementProtocol(Protocol):
    """Protocol for prepared statements the recorder can wrap."""

    sql: str

    def bind_value(self, placeholder: "str | int", value: Any, param_type: "ParameterType") -> Any:
        """Bind a value to a placeholder."""
        ...

    def bind_param(self, placeholder: "str | int", variable: "Variable", param_type: "ParameterType") -> Any:
        """Bind a variable whose value is read at execute time."""
        ...

    def execute(self, parameters: "Optional[StatementParameters]" = None) -> Any:
        """Execute the statement."""
        ...

    def error_info(self) -> "ErrorInfo":
        """Error information for the last execution."""
        ...

    def row_count(self) -> int:
        """Rows affected by the last execution."""
        ...
