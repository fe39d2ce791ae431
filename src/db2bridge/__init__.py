"""db2bridge: portable CRUD/query operations translated to IBM DB2 SQL.

Quick start::

    from db2bridge import create_adapter

    adapter = create_adapter()
    adapter.register_connection({"identity": "primary", "database": "SAMPLE"},
                                {"users": {"name": {"type": "string"}}})
    rows = adapter.find("primary", "users", {"where": {"name": "Alice"}}).unwrap()
"""

from db2bridge.adapter import Db2Adapter, create_adapter
from db2bridge.adapters import ConnectionConfig, ConnectionRegistry, ExecutionDispatcher
from db2bridge.core.result import Err, Ok, Result
from db2bridge.core.settings import AdapterSettings
from db2bridge.sql import (
    BuiltQuery,
    LogicalType,
    OperationOptions,
    PortableAttribute,
    PortableSchema,
    QueryBuilder,
    SchemaTranslator,
)

__version__ = "0.1.0"

__all__ = [
    "AdapterSettings",
    "BuiltQuery",
    "ConnectionConfig",
    "ConnectionRegistry",
    "Db2Adapter",
    "Err",
    "ExecutionDispatcher",
    "LogicalType",
    "Ok",
    "OperationOptions",
    "PortableAttribute",
    "PortableSchema",
    "QueryBuilder",
    "Result",
    "SchemaTranslator",
    "create_adapter",
]
