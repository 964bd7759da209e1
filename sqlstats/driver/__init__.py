from sqlstats.driver._dbapi import DBAPIStatement, ErrorMode, resolve_driver_error
from sqlstats.driver.connection import InstrumentedConnection, instrument
from sqlstats.driver.statement import InstrumentedStatement, StatementState

__all__ = (
    "DBAPIStatement",
    "ErrorMode",
    "InstrumentedConnection",
    "InstrumentedStatement",
    "StatementState",
    "instrument",
    "resolve_driver_error",
)
