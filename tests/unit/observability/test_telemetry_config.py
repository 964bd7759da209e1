"""Tests for telemetry configuration."""

import math

import pytest

from sqlstats import ImproperConfigurationError, TelemetryConfig, log_slow_query


def test_defaults() -> None:
    config = TelemetryConfig()

    assert math.isinf(config.slow_query_threshold)
    assert config.capture_stacks is True
    assert config.stack_limit is None
    assert config.log_executions is False
    assert config.slow_query_callbacks == ()


def test_copy_is_independent() -> None:
    config = TelemetryConfig(slow_query_threshold=0.2, slow_query_callbacks=[log_slow_query])  # type: ignore[arg-type]
    clone = config.copy()

    assert clone == config
    assert clone is not config
    assert clone.slow_query_callbacks == (log_slow_query,)


def test_from_env_reads_variables() -> None:
    config = TelemetryConfig.from_env({
        "SQLSTATS_SLOW_QUERY_THRESHOLD": "0.25",
        "SQLSTATS_CAPTURE_STACKS": "no",
        "SQLSTATS_LOG_EXECUTIONS": "TRUE",
    })

    assert config.slow_query_threshold == 0.25
    assert config.capture_stacks is False
    assert config.log_executions is True


def test_from_env_overrides_win() -> None:
    config = TelemetryConfig.from_env({"SQLSTATS_SLOW_QUERY_THRESHOLD": "3"}, slow_query_threshold=1.0)

    assert config.slow_query_threshold == 1.0


def test_from_env_empty_environment_uses_defaults() -> None:
    assert TelemetryConfig.from_env({}) == TelemetryConfig()


@pytest.mark.parametrize(
    "environ",
    [
        {"SQLSTATS_SLOW_QUERY_THRESHOLD": "fast"},
        {"SQLSTATS_SLOW_QUERY_THRESHOLD": "-1"},
        {"SQLSTATS_CAPTURE_STACKS": "maybe"},
    ],
)
def test_from_env_rejects_bad_values(environ: dict[str, str]) -> None:
    with pytest.raises(ImproperConfigurationError):
        TelemetryConfig.from_env(environ)


def test_stack_limit_must_be_positive() -> None:
    with pytest.raises(ImproperConfigurationError):
        TelemetryConfig(stack_limit=0)
