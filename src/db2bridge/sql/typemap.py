"""Mapping between DB2 native column types and portable logical types.

Many native types collapse onto one logical type (SMALLINT, INTEGER and
BIGINT are all ``integer``), so the round trip ``to_native(to_portable(x))``
is not the identity. Both directions are total over their fixed tables.
"""

from __future__ import annotations

from enum import Enum

from db2bridge.core.errors import UnknownLogicalTypeError


class LogicalType(str, Enum):
    """The closed set of portable attribute types."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BINARY = "binary"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"


NATIVE_TO_LOGICAL: dict[str, LogicalType] = {
    "TIMESTAMP": LogicalType.DATETIME,
    "TIME": LogicalType.TIME,
    "DATE": LogicalType.DATE,
    "BINARY": LogicalType.BINARY,
    "VARBINARY": LogicalType.BINARY,
    "BLOB": LogicalType.BINARY,
    "GRAPHIC": LogicalType.BINARY,
    "VARGRAPHIC": LogicalType.BINARY,
    "CHARACTER": LogicalType.STRING,
    "CHAR": LogicalType.STRING,
    "VARCHAR": LogicalType.STRING,
    "SMALLINT": LogicalType.INTEGER,
    "INTEGER": LogicalType.INTEGER,
    "INT": LogicalType.INTEGER,
    "BIGINT": LogicalType.INTEGER,
    "DECIMAL": LogicalType.FLOAT,
    "NUMERIC": LogicalType.FLOAT,
    "DECFLOAT": LogicalType.FLOAT,
    "REAL": LogicalType.FLOAT,
    "DOUBLE": LogicalType.FLOAT,
    "CLOB": LogicalType.TEXT,
    "DBCLOB": LogicalType.TEXT,
    "XML": LogicalType.TEXT,
}

LOGICAL_TO_NATIVE: dict[LogicalType, str] = {
    LogicalType.STRING: "VARCHAR",
    LogicalType.INTEGER: "INTEGER",
    LogicalType.FLOAT: "DOUBLE",
    LogicalType.TEXT: "CLOB",
    LogicalType.BINARY: "VARBINARY",
    LogicalType.DATETIME: "TIMESTAMP",
    LogicalType.TIME: "TIME",
    LogicalType.DATE: "DATE",
}

# Length used in CREATE TABLE when the attribute does not give one.
# CLOB length depends on the charset, so it gets the engine maximum.
DEFAULT_LENGTHS: dict[str, int] = {
    "GRAPHIC": 1,
    "CHAR": 1,
    "CHARACTER": 1,
    "BINARY": 1,
    "VARCHAR": 32704,
    "VARBINARY": 32704,
    "CLOB": 2147483647,
    "BLOB": 1024,
    "DBCLOB": 512,
}


def to_portable(native_type: str) -> LogicalType | None:
    """Logical type for a catalog TYPENAME, or None when unmapped.

    >>> to_portable("VARCHAR  ")
    <LogicalType.STRING: 'string'>
    >>> to_portable("ROWID") is None
    True
    """
    if not native_type:
        return None
    return NATIVE_TO_LOGICAL.get(native_type.strip().upper())


def to_native(logical_type: LogicalType | str) -> str:
    """Native DB2 type name for a logical type.

    Raises:
        UnknownLogicalTypeError: the value is outside the closed set.
    """
    try:
        return LOGICAL_TO_NATIVE[LogicalType(logical_type)]
    except (ValueError, KeyError):
        raise UnknownLogicalTypeError(logical_type) from None


def default_length(native_type: str) -> int | None:
    """Built-in column length for ``native_type``, None if it takes none."""
    return DEFAULT_LENGTHS.get(native_type.upper())


__all__ = [
    "LogicalType",
    "NATIVE_TO_LOGICAL",
    "LOGICAL_TO_NATIVE",
    "DEFAULT_LENGTHS",
    "to_portable",
    "to_native",
    "default_length",
]
