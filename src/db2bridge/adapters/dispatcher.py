"""Execution dispatcher: connection acquisition, execution, error classification.

For each call the dispatcher

1. resolves the registry entry for the identity,
2. acquires a connection: from the pool when one is configured, else the
   entry's live handle, opening it on first use,
3. reports the SQL to the logger and the optional ``sql_logger`` hook,
4. executes, passing parameters only when some were built,
5. classifies ``DriverError``: warning-class states become ``Ok([])``,
   everything else is returned as ``Err`` unchanged.

Pooled connections are held only for the duration of one call and go
back to the pool when it ends, so concurrent calls never share one. A
``sql_logger`` hook that raises is logged and ignored. Nothing is
retried.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from db2bridge.core.errors import WARNING_STATE_PREFIX, AdapterError, DriverError
from db2bridge.core.logging import LogContext, get_logger
from db2bridge.core.protocols import Connection
from db2bridge.core.result import Err, Ok, Result
from db2bridge.sql.clauses import BuiltQuery

from .registry import ConnectionEntry, ConnectionRegistry

logger = get_logger(__name__)

SqlLogger = Callable[[str], Any]


class ExecutionDispatcher:
    """Runs built queries against the connection registered for an identity."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        *,
        warning_state_prefix: str = WARNING_STATE_PREFIX,
        sql_logger: SqlLogger | None = None,
    ):
        self.registry = registry
        self.warning_state_prefix = warning_state_prefix
        self.sql_logger = sql_logger

    @contextmanager
    def _connection(self, entry: ConnectionEntry) -> Iterator[Connection]:
        """Pooled: a connection of this call only, returned on exit.

        Non-pooled: the entry's shared handle, opened on first use and kept.
        """
        if entry.pool is not None:
            conn = entry.pool.acquire()
            try:
                yield conn
            finally:
                conn.close()
            return
        if entry.conn is None:
            entry.conn = self.registry.driver.open(entry.connection_string)
            logger.debug("connection_opened", pooled=False)
        yield entry.conn

    def _log_sql(self, query: BuiltQuery) -> None:
        logger.debug("query_executed", sql=query.sql, param_count=len(query.params))
        if self.sql_logger is None:
            return
        try:
            self.sql_logger(query.sql)
        except Exception:
            logger.warning("sql_logger_failed", exc_info=True)

    def classify(self, error: DriverError) -> Result[list[dict[str, Any]]]:
        """Warning-class states are benign empty results; the rest are fatal."""
        if error.is_warning(self.warning_state_prefix):
            logger.info("warning_state_downgraded", state=error.state, message=error.message)
            return Ok([])
        return Err(error)

    def execute(
        self,
        identity: str,
        query: BuiltQuery | str,
        params: Sequence[Any] | None = None,
        *,
        schema_name: str | None = None,
    ) -> Result[list[dict[str, Any]]]:
        """Execute ``query`` for ``identity`` and return its rows."""
        if isinstance(query, str):
            query = BuiltQuery(query, tuple(params or ()))

        with LogContext(identity=identity, schema=schema_name):
            try:
                entry = self.registry.resolve(identity)
            except AdapterError as e:
                return Err(e)

            try:
                with self._connection(entry) as conn:
                    self._log_sql(query)
                    if query.has_params:
                        rows = conn.query(query.sql, list(query.params))
                    else:
                        rows = conn.query(query.sql)
            except DriverError as e:
                e.with_context(identity=identity, schema_name=schema_name, sql=query.sql)
                logger.debug("driver_error", state=e.state, message=e.message)
                return self.classify(e)
            except AdapterError as e:
                return Err(e.with_context(identity=identity, schema_name=schema_name))

            return Ok(rows)


__all__ = [
    "ExecutionDispatcher",
    "SqlLogger",
]
