"""Literal quoting for interpolated queries.

Quoting is rendered with sqlglot so that each driver's dialect gets its own
escaping rules. Connections without a resolvable dialect use the generic
sqlglot dialect; callers without any connection fall back to
:func:`fallback_quote`, which is best-effort diagnostics only.
"""

from typing import Any, Final, Optional

from sqlglot import exp
from sqlglot.dialects.dialect import Dialect

from sqlstats.parameters.types import ParameterType
from sqlstats.utils.logging import get_logger

__all__ = ("DialectQuoter", "fallback_quote", "normalize_dialect", "resolve_dialect")

logger = get_logger("parameters.quoting")

# Map driver modules and common aliases to SQLGlot names
_DIALECT_ALIASES: Final[dict[str, str]] = {
    "postgresql": "postgres",
    "psycopg": "postgres",
    "psycopg2": "postgres",
    "asyncpg": "postgres",
    "psqlpy": "postgres",
    "pg8000": "postgres",
    "sqlite3": "sqlite",
    "aiosqlite": "sqlite",
    "pysqlite2": "sqlite",
    "pymysql": "mysql",
    "mysqldb": "mysql",
    "mysql": "mysql",
    "asyncmy": "mysql",
    "mariadb": "mysql",
    "oracledb": "oracle",
    "cx_oracle": "oracle",
    "duckdb": "duckdb",
    "pyodbc": "tsql",
    "pymssql": "tsql",
    "snowflake": "snowflake",
}

_FALLBACK_ESCAPES: Final = str.maketrans({"\\": "\\\\", "'": "\\'", '"': '\\"', "\x00": "\\0"})


def normalize_dialect(dialect: Any) -> Optional[str]:
    """Normalize a dialect name, class or driver module name for SQLGlot.

    Args:
        dialect: Dialect name, sqlglot Dialect class or instance, or None.

    Returns:
        A dialect name SQLGlot knows, or None for the generic dialect.
    """
    if dialect is None:
        return None

    if isinstance(dialect, str):
        dialect_str = dialect.lower()
    elif hasattr(dialect, "__name__"):  # It's a class
        dialect_str = str(dialect.__name__).lower()
    elif hasattr(dialect, "name"):
        dialect_str = str(dialect.name).lower()
    else:
        dialect_str = str(dialect).lower()

    dialect_str = _DIALECT_ALIASES.get(dialect_str, dialect_str)
    try:
        Dialect.get_or_raise(dialect_str)
    except ValueError:
        logger.debug("Unknown dialect %r, using generic quoting", dialect_str)
        return None
    return dialect_str


def resolve_dialect(connection: Any) -> Optional[str]:
    """Work out the SQL dialect of a DB-API connection from its driver module."""
    module_name = type(connection).__module__ or ""
    root = module_name.split(".", 1)[0].lower()
    if root not in _DIALECT_ALIASES:
        return None
    return normalize_dialect(root)


def fallback_quote(value: Any) -> str:
    """Single-quote a value with backslash escaping.

    Not dialect aware and not safe for execution. Used only when no quoter is
    available.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8", errors="replace")
    return "'" + str(value).translate(_FALLBACK_ESCAPES) + "'"


class DialectQuoter:
    """Renders bound values as SQL literals for one dialect."""

    __slots__ = ("dialect",)

    def __init__(self, dialect: Any = None) -> None:
        self.dialect = normalize_dialect(dialect)

    def quote(self, value: Any, param_type: ParameterType = ParameterType.STRING) -> str:
        """Quote ``value`` as a literal of the declared type."""
        if value is None or param_type is ParameterType.NULL:
            return "NULL"
        if param_type is ParameterType.BOOLEAN:
            return exp.Boolean(this=bool(value)).sql(dialect=self.dialect)
        if isinstance(value, (bytes, bytearray, memoryview)):
            value = bytes(value).decode("utf-8", errors="replace")
        return exp.Literal.string(str(value)).sql(dialect=self.dialect)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect!r})"
