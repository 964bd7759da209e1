"""Parameter tracking and literal interpolation for instrumented statements."""

from sqlstats.parameters.interpolator import QueryInterpolator, interpolate_query, render_literal
from sqlstats.parameters.quoting import DialectQuoter, fallback_quote, normalize_dialect, resolve_dialect
from sqlstats.parameters.tracker import ParameterTracker
from sqlstats.parameters.types import (
    BoundParameter,
    ParameterType,
    Variable,
    infer_parameter_type,
    is_positional_key,
    normalize_placeholder,
)

__all__ = (
    "BoundParameter",
    "DialectQuoter",
    "ParameterTracker",
    "ParameterType",
    "QueryInterpolator",
    "Variable",
    "fallback_quote",
    "infer_parameter_type",
    "is_positional_key",
    "interpolate_query",
    "normalize_dialect",
    "normalize_placeholder",
    "render_literal",
    "resolve_dialect",
)
