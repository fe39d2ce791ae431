"""
Protocol definitions for the driver collaborator.

The bridge never talks to ``ibm_db`` directly outside
``db2bridge.adapters.db2``. Everything else depends on the three shapes
below, so tests can substitute an in-memory driver and a deployment can
swap in another DB-API client without touching the SQL layer.

Architecture:
    ::

        Driver
        ├── open(connection_string)        → Connection
        └── create_pool(connection_string) → Pool

        Pool
        ├── acquire()                      → Connection
        └── dispose()

        Connection
        ├── query(sql, params=None)        → list[dict]
        └── close()

    Every method may raise ``DriverError``; no other exception type may
    escape a driver implementation.

Tags:
    protocol, driver, connection, pool, db2

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """A live DB2 connection handle."""

    def query(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        """Execute ``sql`` with qmark ``params`` and return rows as dicts.

        Statements that produce no result set return an empty list.
        """
        ...

    def close(self) -> None:
        """Close the handle (or hand it back to its pool)."""
        ...


@runtime_checkable
class Pool(Protocol):
    """A connection pool bound to one connection string."""

    def acquire(self) -> Connection:
        ...

    def dispose(self) -> None:
        ...


@runtime_checkable
class Driver(Protocol):
    """Factory for connections and pools."""

    def open(self, connection_string: str) -> Connection:
        ...

    def create_pool(self, connection_string: str) -> Pool:
        ...


__all__ = [
    "Connection",
    "Pool",
    "Driver",
]
