"""Core parameter types shared by the tracker and the interpolator."""

from enum import Enum
from typing import Any, Final

__all__ = (
    "NAMED_MARKER",
    "BoundParameter",
    "ParameterType",
    "Variable",
    "infer_parameter_type",
    "is_positional_key",
    "normalize_placeholder",
)

NAMED_MARKER: Final = ":"


class ParameterType(str, Enum):
    """Declared type of a bound parameter."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"
    LOB = "lob"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


class Variable:
    """Mutable slot for by-reference bindings.

    The value is read when the statement executes, not when it is bound.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class BoundParameter:
    """One binding: placeholder key, value or reference, and declared type.

    Treated as a value object; the tracker replaces entries instead of mutating them.
    """

    __slots__ = ("param_type", "placeholder", "reference", "value")

    def __init__(
        self, placeholder: str, value: Any, param_type: ParameterType, reference: "Variable | None" = None
    ) -> None:
        self.placeholder = placeholder
        self.value = value
        self.param_type = param_type
        self.reference = reference

    @property
    def by_reference(self) -> bool:
        return self.reference is not None

    @property
    def is_positional(self) -> bool:
        return is_positional_key(self.placeholder)

    @property
    def name(self) -> str:
        """Placeholder name without the leading marker."""
        return self.placeholder.removeprefix(NAMED_MARKER)

    def current_value(self) -> Any:
        """Value to use right now, reading through the reference if there is one."""
        if self.reference is not None:
            return self.reference.value
        return self.value

    def resolve(self) -> "BoundParameter":
        """Return a value binding frozen at the reference's current value."""
        if self.reference is None:
            return self
        return BoundParameter(self.placeholder, self.reference.value, self.param_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (
            self.placeholder == other.placeholder
            and self.current_value() == other.current_value()
            and self.param_type == other.param_type
        )

    def __hash__(self) -> int:
        return hash((self.placeholder, self.param_type))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(placeholder={self.placeholder!r}, value={self.current_value()!r}, "
            f"param_type={self.param_type!r}, by_reference={self.by_reference!r})"
        )


def is_positional_key(key: str) -> bool:
    """True for keys of ``?`` markers: ASCII digits only, so ``int(key)`` always succeeds."""
    return key.isascii() and key.isdigit()


def normalize_placeholder(placeholder: "str | int") -> str:
    """Turn a bind key into the string key used for tracking."""
    return str(placeholder)


def infer_parameter_type(value: Any) -> ParameterType:
    """Guess the declared type of a value passed directly to ``execute``."""
    if value is None:
        return ParameterType.NULL
    if isinstance(value, bool):
        return ParameterType.BOOLEAN
    if isinstance(value, int):
        return ParameterType.INTEGER
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ParameterType.LOB
    return ParameterType.STRING
