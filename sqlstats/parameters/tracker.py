"""Shadow copy of the bindings made on a statement."""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from mypy_extensions import mypyc_attr

from sqlstats.parameters.types import (
    BoundParameter,
    ParameterType,
    Variable,
    infer_parameter_type,
    normalize_placeholder,
)

if TYPE_CHECKING:
    from sqlstats.typing import StatementParameters

__all__ = ("ParameterTracker",)


@mypyc_attr(allow_interpreted_subclasses=True)
class ParameterTracker:
    """Records every bind made on one statement, keyed by placeholder.

    Rebinding a placeholder overwrites the previous entry. Entries survive
    between executions; nothing here touches the actual driver binding.
    """

    __slots__ = ("_bindings",)

    def __init__(self) -> None:
        self._bindings: dict[str, BoundParameter] = {}

    def bind_value(
        self, placeholder: "str | int", value: Any, param_type: ParameterType = ParameterType.STRING
    ) -> BoundParameter:
        key = normalize_placeholder(placeholder)
        bound = BoundParameter(key, value, ParameterType(param_type))
        self._bindings.pop(key, None)
        self._bindings[key] = bound
        return bound

    def bind_param(
        self, placeholder: "str | int", variable: Variable, param_type: ParameterType = ParameterType.STRING
    ) -> BoundParameter:
        key = normalize_placeholder(placeholder)
        bound = BoundParameter(key, None, ParameterType(param_type), reference=variable)
        self._bindings.pop(key, None)
        self._bindings[key] = bound
        return bound

    def clear(self) -> None:
        self._bindings.clear()

    def snapshot(self, parameters: "StatementParameters | None" = None) -> dict[str, BoundParameter]:
        """Bindings as they stand right now, references resolved.

        Args:
            parameters: Optional parameters passed straight to ``execute``. They
                overlay the stored bindings for this snapshot only.

        Returns:
            Mapping of placeholder key to a value binding.
        """
        resolved = {key: bound.resolve() for key, bound in self._bindings.items()}
        if parameters is None:
            return resolved
        if isinstance(parameters, Mapping):
            items: "Sequence[tuple[Any, Any]]" = list(parameters.items())
        else:
            items = list(enumerate(parameters))
        for placeholder, value in items:
            key = normalize_placeholder(placeholder)
            resolved.pop(key, None)
            resolved[key] = BoundParameter(key, value, infer_parameter_type(value))
        return resolved

    @property
    def is_bound(self) -> bool:
        return bool(self._bindings)

    def __contains__(self, placeholder: object) -> bool:
        return normalize_placeholder(placeholder) in self._bindings  # type: ignore[arg-type]

    def __getitem__(self, placeholder: "str | int") -> BoundParameter:
        return self._bindings[normalize_placeholder(placeholder)]

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._bindings.values())!r})"
