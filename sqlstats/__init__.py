"""sqlstats: literal query reconstruction and execution telemetry for DB-API drivers."""

from sqlstats import driver, exceptions, observability, parameters, typing, utils
from sqlstats.__metadata__ import __version__
from sqlstats.driver import (
    DBAPIStatement,
    ErrorMode,
    InstrumentedConnection,
    InstrumentedStatement,
    StatementState,
    instrument,
)
from sqlstats.exceptions import (
    ImproperConfigurationError,
    ParameterError,
    ParameterStyleMismatchError,
    SQLStatsError,
    StatementClosedError,
)
from sqlstats.observability import (
    ErrorInfo,
    ExecutionRecord,
    TelemetryConfig,
    TelemetryContext,
    format_execution_record,
    log_slow_query,
)
from sqlstats.parameters import (
    BoundParameter,
    DialectQuoter,
    ParameterTracker,
    ParameterType,
    QueryInterpolator,
    Variable,
    interpolate_query,
)

__all__ = (
    "BoundParameter",
    "DBAPIStatement",
    "DialectQuoter",
    "ErrorInfo",
    "ErrorMode",
    "ExecutionRecord",
    "ImproperConfigurationError",
    "InstrumentedConnection",
    "InstrumentedStatement",
    "ParameterError",
    "ParameterStyleMismatchError",
    "ParameterTracker",
    "ParameterType",
    "QueryInterpolator",
    "SQLStatsError",
    "StatementClosedError",
    "StatementState",
    "TelemetryConfig",
    "TelemetryContext",
    "Variable",
    "__version__",
    "driver",
    "exceptions",
    "format_execution_record",
    "instrument",
    "interpolate_query",
    "log_slow_query",
    "observability",
    "parameters",
    "typing",
    "utils",
)
