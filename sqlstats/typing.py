from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Callable, Union

from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from sqlstats.observability._record import ExecutionRecord

__all__ = ("SlowQueryCallback", "StatementParameters")


StatementParameters: TypeAlias = Union[Sequence[Any], Mapping[str, Any]]
"""Parameters passed directly to ``execute``: a sequence for ``?`` markers or a mapping for ``:name`` markers."""

SlowQueryCallback: TypeAlias = Callable[["ExecutionRecord"], Any]
"""Handler invoked with the record of an execution that met the slow query threshold."""
