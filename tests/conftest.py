"""
Shared pytest fixtures for db2bridge tests.

This module provides:
- ``FakeDriver``: records every SQL statement and answers from a script
- A registered ``users`` schema (auto-increment id, required name)
- A ready ``Db2Adapter`` wired to the fake driver

Usage:
    def test_find(adapter, driver):
        driver.respond([{"ID": 1, "NAME": "Alice"}])
        assert adapter.find("primary", "users").unwrap() == [...]
        assert driver.statements[-1][0].startswith("SELECT")
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from typing import Any

import pytest
import structlog

from db2bridge.adapter import Db2Adapter
from db2bridge.adapters.registry import ConnectionRegistry
from db2bridge.core.errors import DriverError
from db2bridge.core.settings import AdapterSettings
from db2bridge.sql.schema import PortableSchema

USERS_DEFINITION: dict[str, dict[str, Any]] = {
    "id": {"type": "integer", "primaryKey": True, "autoIncrement": True},
    "name": {"type": "string", "required": True},
}


# =============================================================================
# Fake driver
# =============================================================================


class FakeConnection:
    """Connection that records statements and pops scripted answers."""

    def __init__(self, driver: FakeDriver):
        self.driver = driver
        self.closed = False

    def query(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        self.driver.statements.append((sql, params))
        if not self.driver.answers:
            return []
        answer = self.driver.answers.popleft()
        if isinstance(answer, Exception):
            raise answer
        return answer

    def close(self) -> None:
        self.closed = True
        self.driver.closed_connections += 1
        if self.driver.close_error is not None:
            raise self.driver.close_error


class FakePool:
    def __init__(self, driver: FakeDriver, connection_string: str):
        self.driver = driver
        self.connection_string = connection_string
        self.acquired = 0
        self.disposed = False

    def acquire(self) -> FakeConnection:
        self.acquired += 1
        return FakeConnection(self.driver)

    def dispose(self) -> None:
        self.disposed = True


class FakeDriver:
    """Driver double: ``respond()`` queues rows, ``fail()`` queues a DriverError."""

    def __init__(self) -> None:
        self.statements: list[tuple[str, Sequence[Any] | None]] = []
        self.answers: deque[list[dict[str, Any]] | Exception] = deque()
        self.opened: list[str] = []
        self.pools: list[FakePool] = []
        self.closed_connections = 0
        self.open_error: Exception | None = None
        self.close_error: Exception | None = None

    def respond(self, rows: list[dict[str, Any]]) -> None:
        self.answers.append(rows)

    def fail(self, message: str, state: str | None = None) -> None:
        self.answers.append(DriverError(message, state=state))

    def open(self, connection_string: str) -> FakeConnection:
        if self.open_error is not None:
            raise self.open_error
        self.opened.append(connection_string)
        return FakeConnection(self)

    def create_pool(self, connection_string: str) -> FakePool:
        pool = FakePool(self, connection_string)
        self.pools.append(pool)
        return pool

    @property
    def last_sql(self) -> str:
        return self.statements[-1][0]

    @property
    def last_params(self) -> Sequence[Any] | None:
        return self.statements[-1][1]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def registry(driver: FakeDriver) -> ConnectionRegistry:
    return ConnectionRegistry(driver)


@pytest.fixture
def users_schema() -> PortableSchema:
    return PortableSchema.from_definition("users", USERS_DEFINITION)


@pytest.fixture
def connection_config() -> dict[str, Any]:
    return {
        "identity": "primary",
        "database": "SAMPLE",
        "user": "db2inst1",
        "password": "secret",
    }


@pytest.fixture
def adapter(driver: FakeDriver, connection_config: dict[str, Any]) -> Db2Adapter:
    """Adapter with the ``users`` schema registered under ``primary``."""
    adapter = Db2Adapter(AdapterSettings(_env_file=None), driver=driver)
    adapter.register_connection(connection_config, {"users": USERS_DEFINITION}).unwrap()
    return adapter


@pytest.fixture(autouse=True)
def _reset_log_context():
    """Clear structlog contextvars between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
