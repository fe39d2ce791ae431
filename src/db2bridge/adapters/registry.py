"""Connection registry: one entry per configuration identity.

Manifesto:
    Models can be configured against different databases within the same
    process, at the same time. The registry keeps one ``ConnectionEntry``
    per identity (config, registered schemas, optional pool, live handle)
    and is an explicitly constructed instance, so independent adapters and
    tests never share state.

Features:
    - ``register()`` rejects missing and duplicate identities
    - ``resolve()`` raises ``UnknownIdentityError`` for unregistered keys
    - ``teardown()`` closes one entry or all of them
    - Pools are created at registration, connections lazily

Guardrails:
    The registry does not serialize access. Callers must not register or
    tear down the same identity concurrently, and non-pooled operations on
    one identity share a single live handle.

Tags:
    registry, connections, pool, lifecycle

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from db2bridge.core.errors import (
    DriverError,
    DuplicateIdentityError,
    MissingIdentityError,
    UnknownIdentityError,
    UnknownSchemaError,
)
from db2bridge.core.logging import get_logger
from db2bridge.core.protocols import Connection, Driver, Pool
from db2bridge.sql.schema import PortableSchema

from .types import ConnectionConfig

logger = get_logger(__name__)


@dataclass
class ConnectionEntry:
    """Registry record for one identity."""

    config: ConnectionConfig
    schemas: dict[str, PortableSchema] = field(default_factory=dict)
    pool: Pool | None = None
    conn: Connection | None = None

    @property
    def identity(self) -> str:
        return self.config.identity

    @property
    def connection_string(self) -> str:
        return self.config.to_connection_string()

    def schema(self, name: str) -> PortableSchema:
        try:
            return self.schemas[name]
        except KeyError:
            raise UnknownSchemaError(name, self.identity) from None

    def close(self) -> None:
        """Close the live handle and dispose the pool. Safe if never opened.

        Both are released even when the first one fails; the first
        ``DriverError`` is raised afterwards.
        """
        conn, self.conn = self.conn, None
        pool, self.pool = self.pool, None
        first: DriverError | None = None
        if conn is not None:
            try:
                conn.close()
            except DriverError as e:
                first = e
        if pool is not None:
            try:
                pool.dispose()
            except DriverError as e:
                first = first or e
        if first is not None:
            raise first


def _coerce_schemas(
    schemas: Mapping[str, PortableSchema | Mapping[str, Any]] | None,
) -> dict[str, PortableSchema]:
    result: dict[str, PortableSchema] = {}
    for name, schema in (schemas or {}).items():
        if isinstance(schema, PortableSchema):
            result[name] = schema
        else:
            # {"tableName": ..., "definition": {...}} or a bare definition
            table = schema.get("tableName", name) if "definition" in schema else name
            definition = schema.get("definition", schema)
            result[name] = PortableSchema.from_definition(table, definition)
    return result


class ConnectionRegistry:
    """Maps configuration identities to connection entries."""

    def __init__(self, driver: Driver):
        self.driver = driver
        self._entries: dict[str, ConnectionEntry] = {}

    def register(
        self,
        config: ConnectionConfig | Mapping[str, Any],
        schemas: Mapping[str, PortableSchema | Mapping[str, Any]] | None = None,
    ) -> str:
        """Register a configuration and the schemas that use it.

        Returns:
            The identity, which is the entry key.

        Raises:
            MissingIdentityError: config has no identity.
            DuplicateIdentityError: identity already registered.
        """
        if not isinstance(config, ConnectionConfig):
            config = ConnectionConfig.from_dict(config)
        if not config.identity:
            raise MissingIdentityError()
        if config.identity in self._entries:
            raise DuplicateIdentityError(config.identity)

        entry = ConnectionEntry(config=config, schemas=_coerce_schemas(schemas))
        if config.pool:
            entry.pool = self.driver.create_pool(entry.connection_string)
        self._entries[config.identity] = entry

        logger.info(
            "connection_registered",
            **config.to_safe_dict(),
            schemas=sorted(entry.schemas),
        )
        return config.identity

    def resolve(self, identity: str) -> ConnectionEntry:
        try:
            return self._entries[identity]
        except KeyError:
            raise UnknownIdentityError(identity) from None

    def add_schema(self, identity: str, name: str, schema: PortableSchema) -> None:
        self.resolve(identity).schemas[name] = schema

    def teardown(self, identity: str | None = None) -> None:
        """Close and remove one entry, or every entry when no identity is given.

        Every target is removed even when closing one fails; the first
        ``DriverError`` is raised once the loop is done.
        """
        if identity is None:
            targets = list(self._entries)
        elif identity in self._entries:
            targets = [identity]
        else:
            logger.debug("teardown_unknown_identity", identity=identity)
            return

        first: DriverError | None = None
        for key in targets:
            entry = self._entries.pop(key)
            try:
                entry.close()
            except DriverError as e:
                logger.warning(
                    "connection_close_failed", identity=key, state=e.state, message=e.message
                )
                first = first or e.with_context(identity=key)
                continue
            logger.info("connection_torn_down", identity=key)

        if first is not None:
            raise first

    @staticmethod
    def build_connection_string(config: ConnectionConfig) -> str:
        return config.to_connection_string()

    def identities(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ConnectionEntry]:
        return iter(list(self._entries.values()))


__all__ = [
    "ConnectionEntry",
    "ConnectionRegistry",
]
