"""Connection management and execution against DB2.

Architecture::

    ConnectionRegistry (registry.py)   identity -> ConnectionEntry
        |-- ConnectionConfig (types.py)   validated connection settings
        |-- Driver (core/protocols.py)    open / create_pool
                |-- IbmDbDriver (db2.py)  ibm_db_dbi + SQLAlchemy QueuePool
    ExecutionDispatcher (dispatcher.py)   acquire, execute, classify errors

The driver is **import-guarded**: ``ibm-db`` is only required when a
connection is opened. Install the extra::

    pip install db2bridge[db2]

Modules
-------
types           ConnectionConfig, MigrateMode, CONNECTION_DEFAULTS
db2             IbmDbDriver, Db2Pool, Db2Connection
registry        ConnectionRegistry, ConnectionEntry
dispatcher      ExecutionDispatcher

Tags:
    db2, connections, pool, registry, dispatcher
"""

from .db2 import Db2Connection, Db2Pool, IbmDbDriver
from .dispatcher import ExecutionDispatcher
from .registry import ConnectionEntry, ConnectionRegistry
from .types import CONNECTION_DEFAULTS, ConnectionConfig, MigrateMode

__all__ = [
    # Types
    "ConnectionConfig",
    "MigrateMode",
    "CONNECTION_DEFAULTS",
    # Driver
    "IbmDbDriver",
    "Db2Pool",
    "Db2Connection",
    # Registry / execution
    "ConnectionRegistry",
    "ConnectionEntry",
    "ExecutionDispatcher",
]
