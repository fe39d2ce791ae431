"""Ambient building blocks: errors, result envelope, logging, settings, protocols."""

from db2bridge.core.errors import (
    AdapterError,
    ConfigError,
    DatabaseError,
    DriverError,
    DuplicateIdentityError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    InvalidOptionsError,
    MissingIdentityError,
    UnknownIdentityError,
    UnknownLogicalTypeError,
    UnknownSchemaError,
    ValidationError,
)
from db2bridge.core.protocols import Connection, Driver, Pool
from db2bridge.core.result import Err, Ok, Result, try_result

__all__ = [
    # Errors
    "AdapterError",
    "ConfigError",
    "DatabaseError",
    "DriverError",
    "DuplicateIdentityError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidConfigError",
    "InvalidOptionsError",
    "MissingIdentityError",
    "UnknownIdentityError",
    "UnknownLogicalTypeError",
    "UnknownSchemaError",
    "ValidationError",
    # Protocols
    "Connection",
    "Driver",
    "Pool",
    # Result
    "Ok",
    "Err",
    "Result",
    "try_result",
]
