"""
DB2 adapter: the operation surface exposed to the host framework.

Every operation takes the configuration identity and the schema
(collection) name first, and answers with exactly one ``Result``. Options
are validated and SQL is built before any connection is touched, so
option errors never open a connection.

Architecture:
    ::

        Db2Adapter
        ├── registry    ConnectionRegistry   identity → entry
        ├── schemas     SchemaTranslator     define / describe
        ├── queries     QueryBuilder         find / create / update / ...
        └── dispatcher  ExecutionDispatcher  acquire, execute, classify

Examples:
    >>> adapter = create_adapter()
    >>> adapter.register_connection(
    ...     {"identity": "primary", "database": "SAMPLE", "user": "db2inst1",
    ...      "password": "secret"},
    ...     {"users": {"id": {"type": "integer", "primaryKey": True,
    ...                       "autoIncrement": True},
    ...                "name": {"type": "string", "required": True}}},
    ... )
    Ok('primary')
    >>> adapter.find("primary", "users", {"where": {"name": "Alice"}, "limit": 2})
    Ok([{'ID': 1, 'NAME': 'Alice'}])

Guardrails:
    ❌ DON'T: Share one non-pooled identity between threads
    ✅ DO: Set ``pool: True`` on the connection for concurrent use

Tags:
    adapter, db2, crud, waterline, operations

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from db2bridge.adapters.db2 import IbmDbDriver
from db2bridge.adapters.dispatcher import ExecutionDispatcher, SqlLogger
from db2bridge.adapters.registry import ConnectionRegistry
from db2bridge.adapters.types import CONNECTION_DEFAULTS, ConnectionConfig
from db2bridge.core.errors import AdapterError, DriverError
from db2bridge.core.logging import configure_logging, get_logger
from db2bridge.core.protocols import Driver
from db2bridge.core.result import Err, Result, try_result
from db2bridge.core.settings import AdapterSettings
from db2bridge.sql.clauses import BuiltQuery
from db2bridge.sql.dialect import Db2Dialect
from db2bridge.sql.query import OperationOptions, QueryBuilder
from db2bridge.sql.schema import PortableAttribute, PortableSchema, SchemaTranslator

logger = get_logger(__name__)

Rows = list[dict[str, Any]]
OptionsLike = OperationOptions | Mapping[str, Any] | None


class Db2Adapter:
    """Translates portable CRUD operations into DB2 statements."""

    identity = "sails-db2"
    syncable = True
    defaults = CONNECTION_DEFAULTS

    def __init__(
        self,
        settings: AdapterSettings | None = None,
        *,
        driver: Driver | None = None,
        registry: ConnectionRegistry | None = None,
        sql_logger: SqlLogger | None = None,
    ):
        self.settings = settings or AdapterSettings()
        self.dialect = Db2Dialect(quote_table_names=self.settings.quote_table_names)
        self.registry = registry or ConnectionRegistry(driver or IbmDbDriver())
        self.dispatcher = ExecutionDispatcher(
            self.registry,
            warning_state_prefix=self.settings.warning_state_prefix,
            sql_logger=sql_logger,
        )
        self.schemas = SchemaTranslator(self.dialect, self.settings.default_primary_key_type)
        self.queries = QueryBuilder(self.dialect)

    # -- internals ---------------------------------------------------------

    def _run(
        self,
        identity: str,
        schema_name: str,
        build: Callable[[PortableSchema], BuiltQuery],
    ) -> Result[Rows]:
        """Build against the registered schema, then dispatch."""
        try:
            schema = self.registry.resolve(identity).schema(schema_name)
            query = build(schema)
        except AdapterError as e:
            return Err(e.with_context(identity=identity, schema_name=schema_name))
        return self.dispatcher.execute(identity, query, schema_name=schema_name)

    def _table_name(self, identity: str, schema_name: str) -> str:
        schema = self.registry.resolve(identity).schemas.get(schema_name)
        return schema.table_name if schema is not None else schema_name

    # -- lifecycle ---------------------------------------------------------

    def register_connection(
        self,
        config: ConnectionConfig | Mapping[str, Any],
        schemas: Mapping[str, PortableSchema | Mapping[str, Any]] | None = None,
    ) -> Result[str]:
        return try_result(lambda: self.registry.register(config, schemas))

    def teardown(self, identity: str | None = None) -> Result[None]:
        return try_result(lambda: self.registry.teardown(identity))

    # -- schema ------------------------------------------------------------

    def define(
        self,
        identity: str,
        schema_name: str,
        definition: PortableSchema | Mapping[str, PortableAttribute | Mapping[str, Any]],
    ) -> Result[Rows]:
        """CREATE TABLE for ``definition``; registers the schema on success."""
        try:
            self.registry.resolve(identity)
            if isinstance(definition, PortableSchema):
                schema = definition
            else:
                schema = PortableSchema.from_definition(schema_name, definition)
            query = self.schemas.build_create_table(schema.table_name, schema)
        except AdapterError as e:
            return Err(e.with_context(identity=identity, schema_name=schema_name))

        result = self.dispatcher.execute(identity, query, schema_name=schema_name)
        if result.is_ok():
            self.registry.add_schema(identity, schema_name, schema)
        return result

    def describe(self, identity: str, schema_name: str) -> Result[PortableSchema | None]:
        """Portable schema from the catalog; ``Ok(None)`` if the table is absent."""
        try:
            table = self._table_name(identity, schema_name)
        except AdapterError as e:
            return Err(e.with_context(identity=identity, schema_name=schema_name))
        query = self.schemas.build_describe(table)
        return self.dispatcher.execute(identity, query, schema_name=schema_name).map(
            lambda rows: self.schemas.parse_catalog_rows(table, rows)
        )

    def drop(
        self, identity: str, schema_name: str, relations: Sequence[str] = ()
    ) -> Result[Rows]:
        """Drop dependent relations in order, then the table itself.

        A relation that does not exist is skipped; any other failure stops
        the sequence and is returned.
        """
        try:
            table = self._table_name(identity, schema_name)
        except AdapterError as e:
            return Err(e.with_context(identity=identity, schema_name=schema_name))

        for relation in relations:
            result = self.dispatcher.execute(
                identity, self.queries.drop(relation), schema_name=schema_name
            )
            if isinstance(result, Err):
                error = result.error
                if isinstance(error, DriverError) and error.is_not_found:
                    logger.debug("relation_absent", relation=relation)
                    continue
                return result

        return self.dispatcher.execute(identity, self.queries.drop(table), schema_name=schema_name)

    # -- raw ---------------------------------------------------------------

    def query(
        self,
        identity: str,
        schema_name: str,
        sql: str,
        params: Sequence[Any] | None = None,
    ) -> Result[Rows]:
        """Pass ``sql`` through unchanged; values belong in ``params``."""
        return self.dispatcher.execute(identity, sql, params, schema_name=schema_name)

    # -- reads -------------------------------------------------------------

    def find(self, identity: str, schema_name: str, options: OptionsLike = None) -> Result[Rows]:
        return self._run(identity, schema_name, lambda s: self.queries.find(s, options))

    def find_one(
        self, identity: str, schema_name: str, options: OptionsLike = None
    ) -> Result[dict[str, Any] | None]:
        return self._run(identity, schema_name, lambda s: self.queries.find_one(s, options)).map(
            lambda rows: rows[0] if rows else None
        )

    def count(self, identity: str, schema_name: str, options: OptionsLike = None) -> Result[int]:
        def first_value(rows: Rows) -> int:
            if not rows:
                return 0
            return int(next(iter(rows[0].values())))

        return self._run(identity, schema_name, lambda s: self.queries.count(s, options)).map(
            first_value
        )

    # -- writes ------------------------------------------------------------

    def create(
        self, identity: str, schema_name: str, values: Mapping[str, Any]
    ) -> Result[dict[str, Any] | None]:
        """INSERT one row and return it as stored."""
        return self._run(identity, schema_name, lambda s: self.queries.create(s, values)).map(
            lambda rows: rows[0] if rows else None
        )

    def update(
        self,
        identity: str,
        schema_name: str,
        options: OptionsLike,
        values: Mapping[str, Any],
    ) -> Result[Rows]:
        """UPDATE matching rows and return them as stored."""
        return self._run(identity, schema_name, lambda s: self.queries.update(s, options, values))

    def destroy(self, identity: str, schema_name: str, options: OptionsLike = None) -> Result[Rows]:
        return self._run(identity, schema_name, lambda s: self.queries.destroy(s, options))

    def truncate(self, identity: str, schema_name: str) -> Result[Rows]:
        """TRUNCATE ... IMMEDIATE. Irreversible; takes no options."""
        return self._run(identity, schema_name, self.queries.truncate)


def create_adapter(
    settings: AdapterSettings | None = None,
    *,
    driver: Driver | None = None,
    sql_logger: SqlLogger | None = None,
    configure_logs: bool = False,
    **overrides: Any,
) -> Db2Adapter:
    """
    Build a ``Db2Adapter`` from settings (or ``DB2BRIDGE_*`` env vars).

    Usage:
        adapter = create_adapter(quote_table_names=True, sql_logger=print)
    """
    settings = settings or AdapterSettings(**overrides)
    if configure_logs:
        configure_logging(level=settings.log_level, json_format=settings.json_logs)
    return Db2Adapter(settings, driver=driver, sql_logger=sql_logger)


__all__ = [
    "Db2Adapter",
    "create_adapter",
]
