"""IBM DB2 driver collaborator.

Uses ``ibm_db_dbi``, the DB-API 2.0 interface from the ``ibm-db``
package. DB2 uses **qmark** (``?``) placeholder style natively.

Install the driver::

    pip install ibm-db
    # or:  pip install db2bridge[db2]

The driver is import-guarded: if ``ibm_db`` is not installed a clear
:class:`~db2bridge.core.errors.DriverUnavailableError` is raised at
``open()`` time rather than at import time.

Pooling uses SQLAlchemy's ``QueuePool`` around raw ``ibm_db_dbi``
connections; closing a pooled ``Db2Connection`` hands it back to the pool.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import QueuePool

from db2bridge.core.errors import DriverError, DriverUnavailableError
from db2bridge.core.logging import get_logger

logger = get_logger(__name__)


def _load_dbapi() -> Any:
    try:
        import ibm_db_dbi
    except ImportError:
        raise DriverUnavailableError(
            "ibm-db is required for DB2. Install with: pip install ibm-db"
        ) from None
    return ibm_db_dbi


class Db2Connection:
    """Wraps a DB-API connection (raw or pool proxy) as a bridge Connection."""

    def __init__(self, dbapi_conn: Any, error_types: tuple[type[BaseException], ...] = (Exception,)):
        self._conn = dbapi_conn
        self._error_types = error_types

    def query(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        cursor = self._conn.cursor()
        try:
            if params:
                cursor.execute(sql, tuple(params))
            else:
                cursor.execute(sql)
            if cursor.description is None:
                return []
            columns = [desc[0] for desc in cursor.description]
            return [dict(zip(columns, row, strict=False)) for row in cursor.fetchall()]
        except self._error_types as e:
            raise DriverError(str(e), cause=e) from e
        finally:
            cursor.close()

    def close(self) -> None:
        try:
            self._conn.close()
        except self._error_types as e:
            raise DriverError(str(e), cause=e) from e


class Db2Pool:
    """Connection pool bound to one connection string."""

    def __init__(
        self,
        connection_string: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        timeout: float = 30.0,
    ):
        self.connection_string = connection_string
        dbapi = _load_dbapi()
        self._error_types = (dbapi.Error,)
        self._pool = QueuePool(
            lambda: dbapi.connect(connection_string, "", ""),
            pool_size=pool_size,
            max_overflow=max_overflow,
            timeout=timeout,
        )

    def acquire(self) -> Db2Connection:
        try:
            proxy = self._pool.connect()
        except sa_exc.TimeoutError as e:
            raise DriverError(f"Connection pool exhausted: {e}", state="HYT00", cause=e) from e
        except self._error_types as e:
            raise DriverError(str(e), cause=e) from e
        return Db2Connection(proxy, self._error_types)

    def dispose(self) -> None:
        try:
            self._pool.dispose()
        except self._error_types as e:
            raise DriverError(str(e), cause=e) from e


class IbmDbDriver:
    """Production driver: ``ibm_db_dbi`` connections, SQLAlchemy pools."""

    def __init__(self, pool_size: int = 5, max_overflow: int = 10, pool_timeout: float = 30.0):
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout

    def open(self, connection_string: str) -> Db2Connection:
        dbapi = _load_dbapi()
        try:
            conn = dbapi.connect(connection_string, "", "")
        except dbapi.Error as e:
            raise DriverError(f"Failed to connect to DB2: {e}", cause=e) from e
        logger.debug("connection_opened")
        return Db2Connection(conn, (dbapi.Error,))

    def create_pool(self, connection_string: str) -> Db2Pool:
        return Db2Pool(
            connection_string,
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
            timeout=self.pool_timeout,
        )


__all__ = [
    "Db2Connection",
    "Db2Pool",
    "IbmDbDriver",
]
