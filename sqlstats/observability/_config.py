"""Configuration objects for execution telemetry."""

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Optional

from sqlstats.exceptions import ImproperConfigurationError

if TYPE_CHECKING:
    from sqlstats.typing import SlowQueryCallback

__all__ = ("TelemetryConfig", "validate_threshold")

ENV_SLOW_QUERY_THRESHOLD: Final = "SQLSTATS_SLOW_QUERY_THRESHOLD"
ENV_CAPTURE_STACKS: Final = "SQLSTATS_CAPTURE_STACKS"
ENV_LOG_EXECUTIONS: Final = "SQLSTATS_LOG_EXECUTIONS"

_TRUTHY: Final = frozenset({"1", "true", "yes", "on"})
_FALSY: Final = frozenset({"0", "false", "no", "off", ""})


@dataclass(slots=True)
class TelemetryConfig:
    """Settings for a :class:`~sqlstats.observability.TelemetryContext`."""

    slow_query_threshold: float = math.inf
    capture_stacks: bool = True
    stack_limit: Optional[int] = None
    log_executions: bool = False
    slow_query_callbacks: "tuple[SlowQueryCallback, ...]" = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.slow_query_threshold = validate_threshold(self.slow_query_threshold)
        self.slow_query_callbacks = tuple(self.slow_query_callbacks)
        if self.stack_limit is not None and self.stack_limit < 1:
            msg = f"stack_limit must be a positive integer, got {self.stack_limit!r}"
            raise ImproperConfigurationError(msg)

    def copy(self) -> "TelemetryConfig":
        """Return a copy to avoid sharing mutable state."""

        return TelemetryConfig(
            slow_query_threshold=self.slow_query_threshold,
            capture_stacks=self.capture_stacks,
            stack_limit=self.stack_limit,
            log_executions=self.log_executions,
            slow_query_callbacks=tuple(self.slow_query_callbacks),
        )

    @classmethod
    def from_env(cls, environ: "Optional[Mapping[str, str]]" = None, **overrides: object) -> "TelemetryConfig":
        """Build a config from ``SQLSTATS_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            **overrides: Field values that win over the environment.

        Raises:
            ImproperConfigurationError: If a variable cannot be parsed.

        Returns:
            A new config.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if ENV_SLOW_QUERY_THRESHOLD in env:
            raw = env[ENV_SLOW_QUERY_THRESHOLD].strip()
            try:
                values["slow_query_threshold"] = float(raw)
            except ValueError as exc:
                msg = f"{ENV_SLOW_QUERY_THRESHOLD} must be a number of seconds, got {raw!r}"
                raise ImproperConfigurationError(msg) from exc
        if ENV_CAPTURE_STACKS in env:
            values["capture_stacks"] = _parse_bool(ENV_CAPTURE_STACKS, env[ENV_CAPTURE_STACKS])
        if ENV_LOG_EXECUTIONS in env:
            values["log_executions"] = _parse_bool(ENV_LOG_EXECUTIONS, env[ENV_LOG_EXECUTIONS])
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


def validate_threshold(seconds: float) -> float:
    """Check a slow query threshold and return it as a float."""
    try:
        value = float(seconds)
    except (TypeError, ValueError) as exc:
        msg = f"Slow query threshold must be a number of seconds, got {seconds!r}"
        raise ImproperConfigurationError(msg) from exc
    if math.isnan(value) or value < 0:
        msg = f"Slow query threshold must be zero or positive, got {seconds!r}"
        raise ImproperConfigurationError(msg)
    return value


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    msg = f"{name} must be a boolean flag, got {raw!r}"
    raise ImproperConfigurationError(msg)
