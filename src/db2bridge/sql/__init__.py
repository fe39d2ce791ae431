"""SQL translation: type mapping, identifier formatting, DDL and DML builders.

Modules
-------
typemap     Native DB2 type names <-> portable logical types
dialect     Identifier quoting, literal escaping, FETCH FIRST suffix
clauses     Clause AST rendered into a BuiltQuery (sql + params)
schema      PortableAttribute / PortableSchema and the SchemaTranslator
query       OperationOptions and the QueryBuilder

Nothing in this package touches a connection; every function is pure.

Guardrails:
    ❌ ``f"... WHERE name = '{value}'"``
    ✅ ``Where((Eq("name", value),))`` which binds ``value`` as a parameter
"""

from db2bridge.sql.clauses import BuiltQuery
from db2bridge.sql.dialect import Db2Dialect
from db2bridge.sql.query import OperationOptions, QueryBuilder
from db2bridge.sql.schema import PortableAttribute, PortableSchema, SchemaTranslator
from db2bridge.sql.typemap import LogicalType, to_native, to_portable

__all__ = [
    "BuiltQuery",
    "Db2Dialect",
    "LogicalType",
    "OperationOptions",
    "PortableAttribute",
    "PortableSchema",
    "QueryBuilder",
    "SchemaTranslator",
    "to_native",
    "to_portable",
]
