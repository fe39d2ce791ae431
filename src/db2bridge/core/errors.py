"""
Structured error types for the DB2 bridge.

Every failure the adapter can report is an ``AdapterError`` subclass. Errors
carry a category for routing, an ``ErrorContext`` naming the connection
identity, schema and SQL involved, and the chained driver exception when
there is one.

Manifesto:
    - **Typed Error Hierarchy:** Registry, validation and driver failures are
      distinct types so callers can branch on them without string matching
    - **Rich Context:** Errors carry identity/schema/sql for logging
    - **Error Chaining:** Driver exceptions are preserved as ``cause``
    - **No Retry Semantics:** This layer never retries; a failed open or
      query surfaces immediately

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       AdapterError                               │
        │               (category, context, cause)                         │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError           ValidationError       DatabaseError       │
        │  (CONFIG)              (VALIDATION)          (DATABASE)          │
        │       │                     │                     │              │
        │  MissingIdentity       InvalidOptions        DriverError         │
        │  DuplicateIdentity     UnknownSchema         (state, message)    │
        │  UnknownIdentity                                                 │
        │  InvalidConfig         UnknownLogicalTypeError (INTERNAL)        │
        │  DriverUnavailable                                               │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = DuplicateIdentityError("primary")
    >>> error.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> error.identity
    'primary'

    >>> err = DriverError("object already exists", state="01532")
    >>> err.is_warning()
    True

Guardrails:
    ❌ DON'T: Raise bare Exception from adapter code
    ✅ DO: Use the AdapterError subclass that names the failure

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as cause= so the traceback keeps the SQLSTATE origin

Tags:
    error-handling, exception-hierarchy, error-context, db2, sqlstate

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# SQLSTATE class "01" is DB2's warning class.
WARNING_STATE_PREFIX = "01"

# SQLSTATE for "undefined object" (DROP of a missing table and friends).
NOT_FOUND_STATE = "42704"

_SQLSTATE_RE = re.compile(r"SQLSTATE[=:\s]+([0-9A-Z]{5})", re.IGNORECASE)


class ErrorCategory(str, Enum):
    """
    Error categories used for classification and structured logging.

    Attributes:
        CONFIG: Registry/identity/configuration problems
        VALIDATION: Bad operation options or schema references
        DATABASE: Anything reported by the DB2 driver
        INTERNAL: Programming errors (closed sets violated)
        UNKNOWN: Uncategorized errors
    """

    CONFIG = "CONFIG"
    VALIDATION = "VALIDATION"
    DATABASE = "DATABASE"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        identity: Configuration identity the operation ran against
        schema_name: Registered schema (collection) name
        table: Physical table name
        sql: SQL text being executed, if any
        metadata: Additional key-value pairs
    """

    identity: str | None = None
    schema_name: str | None = None
    table: str | None = None
    sql: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["identity", "schema_name", "table", "sql"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class AdapterError(Exception):
    """
    Base exception for every error raised by the bridge.

    Subclasses set ``default_category``. Instances carry a message, a
    category, an ``ErrorContext`` and an optional chained ``cause``.

    Examples:
        >>> error = AdapterError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = AdapterError("bad").with_context(identity="primary", sql="SELECT 1")
        >>> error.context.identity
        'primary'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> AdapterError:
        """
        Add context to this error (fluent API).

        Usage:
            raise InvalidOptionsError("bad limit").with_context(
                identity="primary", schema_name="users"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }

        if self.context:
            context_dict = self.context.to_dict()
            if context_dict:
                result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION / REGISTRY ERRORS
# =============================================================================


class ConfigError(AdapterError):
    """
    Configuration or connection-registry error.

    Never recoverable by re-running the operation; the configuration must be
    fixed.
    """

    default_category = ErrorCategory.CONFIG


class MissingIdentityError(ConfigError):
    """Connection registered without an identity."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "Connection is missing an identity")


class DuplicateIdentityError(ConfigError):
    """Connection identity already registered."""

    def __init__(self, identity: str, message: str | None = None):
        self.identity = identity
        super().__init__(message or f"Connection identity already registered: {identity}")


class UnknownIdentityError(ConfigError):
    """No connection registered under this identity."""

    def __init__(self, identity: str, message: str | None = None):
        self.identity = identity
        super().__init__(message or f"Unknown connection identity: {identity}")


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


class DriverUnavailableError(ConfigError):
    """The ibm-db driver package is not installed."""


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(AdapterError):
    """Caller-supplied input was rejected before any SQL was built."""

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class InvalidOptionsError(ValidationError):
    """Operation options are malformed (e.g. skip without limit)."""
    pass


class UnknownSchemaError(ValidationError):
    """Schema name is not registered under the connection."""

    def __init__(self, schema_name: str, identity: str | None = None):
        self.schema_name = schema_name
        where = f" on connection {identity!r}" if identity else ""
        super().__init__(f"Unknown schema: {schema_name}{where}", field="schema_name", value=schema_name)


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(AdapterError):
    """Error reported while talking to DB2."""

    default_category = ErrorCategory.DATABASE


class DriverError(DatabaseError):
    """
    Opaque driver failure carrying the engine's SQLSTATE.

    The message is the driver's own text; ``state`` is the five-character
    SQLSTATE, either passed explicitly or parsed out of the message.
    """

    def __init__(self, message: str, *, state: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.state = state or parse_sqlstate(message) or ""

    def is_warning(self, prefix: str = WARNING_STATE_PREFIX) -> bool:
        """True when the state falls in the warning class."""
        return bool(self.state) and self.state.startswith(prefix)

    @property
    def is_not_found(self) -> bool:
        return self.state == NOT_FOUND_STATE

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.state:
            result["state"] = self.state
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, state={self.state!r})"


# =============================================================================
# INTERNAL ERRORS
# =============================================================================


class UnknownLogicalTypeError(AdapterError):
    """A logical type outside the closed set reached the type map."""

    default_category = ErrorCategory.INTERNAL

    def __init__(self, logical_type: Any):
        self.logical_type = logical_type
        super().__init__(f"No native DB2 type for logical type: {logical_type!r}")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def parse_sqlstate(message: str) -> str | None:
    """Extract ``SQLSTATE=xxxxx`` from a DB2 CLI error message."""
    match = _SQLSTATE_RE.search(message or "")
    return match.group(1).upper() if match else None


__all__ = [
    "WARNING_STATE_PREFIX",
    "NOT_FOUND_STATE",
    "ErrorCategory",
    "ErrorContext",
    "AdapterError",
    "ConfigError",
    "MissingIdentityError",
    "DuplicateIdentityError",
    "UnknownIdentityError",
    "InvalidConfigError",
    "DriverUnavailableError",
    "ValidationError",
    "InvalidOptionsError",
    "UnknownSchemaError",
    "DatabaseError",
    "DriverError",
    "UnknownLogicalTypeError",
    "parse_sqlstate",
]
