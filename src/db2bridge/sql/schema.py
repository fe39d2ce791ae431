"""
Portable schema model and the DB2 schema translator.

Forward direction (define): a ``PortableSchema`` becomes a ``CREATE TABLE``
statement. Reverse direction (describe): rows from ``SYSCAT.COLUMNS`` become
a ``PortableSchema``.

Manifesto:
    - **Deterministic DDL:** Same attributes, same SQL, in supplied order
    - **Engine decides:** Malformed definitions produce malformed SQL that
      DB2 rejects; nothing is silently repaired here
    - **Not found is not an error:** A table with no catalog rows describes
      as ``None``

Architecture:
    ::

        define                                 describe
        ──────                                 ────────
        PortableSchema                         build_describe(table)
              │                                      │
        build_create_table()                   SYSCAT.COLUMNS rows
              │                                      │
        CREATE TABLE t (...)                   parse_catalog_rows()
                                                     │
                                               PortableSchema | None

Guardrails:
    ❌ DON'T: Expect multi-column primary/unique keys to round-trip
    ✅ DO: Model one identity/primary-key column per table

Tags:
    schema, ddl, catalog, describe, define, db2

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any

from db2bridge.core.errors import UnknownLogicalTypeError
from db2bridge.core.logging import get_logger
from db2bridge.sql.clauses import BuiltQuery
from db2bridge.sql.dialect import Db2Dialect
from db2bridge.sql.typemap import LogicalType, default_length, to_native, to_portable

logger = get_logger(__name__)

CATALOG_COLUMNS_VIEW = "SYSCAT.COLUMNS"


@dataclass(frozen=True)
class PortableAttribute:
    """One column, described independently of DB2.

    ``auto_increment`` implies ``primary_key``; constructing an
    auto-increment attribute promotes it to primary key.
    """

    type: LogicalType | None = LogicalType.STRING
    length: int | None = None
    max_length: int | None = None
    required: bool = False
    primary_key: bool = False
    auto_increment: bool = False
    unique: bool = False

    def __post_init__(self) -> None:
        if self.type is not None and not isinstance(self.type, LogicalType):
            try:
                object.__setattr__(self, "type", LogicalType(self.type))
            except ValueError:
                raise UnknownLogicalTypeError(self.type) from None
        if self.auto_increment and not self.primary_key:
            object.__setattr__(self, "primary_key", True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PortableAttribute:
        """Build from host-framework keys (``primaryKey``, ``maxLength`` ...)."""
        return cls(
            type=data.get("type", LogicalType.STRING),
            length=data.get("length"),
            max_length=data.get("maxLength", data.get("max_length")),
            required=bool(data.get("required", False)),
            primary_key=bool(data.get("primaryKey", data.get("primary_key", False))),
            auto_increment=bool(data.get("autoIncrement", data.get("auto_increment", False))),
            unique=bool(data.get("unique", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type.value if self.type else None}
        if self.length is not None:
            result["length"] = self.length
        if self.max_length is not None:
            result["maxLength"] = self.max_length
        result["required"] = self.required
        if self.primary_key:
            result["primaryKey"] = True
        if self.auto_increment:
            result["autoIncrement"] = True
        if self.unique:
            result["unique"] = True
        return result


@dataclass(frozen=True)
class PortableSchema:
    """A table name plus its attributes, keyed by column name."""

    table_name: str
    attributes: dict[str, PortableAttribute] = field(default_factory=dict)

    @classmethod
    def from_definition(
        cls, table_name: str, definition: Mapping[str, PortableAttribute | Mapping[str, Any]]
    ) -> PortableSchema:
        attributes = {
            name: attr if isinstance(attr, PortableAttribute) else PortableAttribute.from_dict(attr)
            for name, attr in definition.items()
        }
        return cls(table_name=table_name, attributes=attributes)

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.attributes)

    @property
    def is_usable(self) -> bool:
        """True when every column resolved to a logical type."""
        return all(attr.type is not None for attr in self.attributes.values())

    def has_column(self, name: str) -> bool:
        return name in self.attributes

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: attr.to_dict() for name, attr in self.attributes.items()}

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def __len__(self) -> int:
        return len(self.attributes)


def _is_numeric(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    try:
        Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return False
    return True


def _is_required(nulls: Any, default: Any) -> bool:
    """NOT NULL and no usable default.

    A numeric default of zero still counts as required.
    """
    if str(nulls or "").strip().upper() != "N":
        return False
    if not _is_numeric(default):
        return True
    return Decimal(str(default).strip()) == 0


class SchemaTranslator:
    """Builds DDL from portable schemas and parses catalog metadata back."""

    def __init__(self, dialect: Db2Dialect | None = None, primary_key_type: str = "INTEGER"):
        self.dialect = dialect or Db2Dialect()
        self.primary_key_type = primary_key_type

    # -- define ------------------------------------------------------------

    def column_definition(self, name: str, attribute: PortableAttribute) -> str:
        if attribute.auto_increment:
            return f"{name} {self.primary_key_type} GENERATED ALWAYS AS IDENTITY PRIMARY KEY"
        if attribute.primary_key:
            return f"{name} {self.primary_key_type} NOT NULL PRIMARY KEY"

        native = to_native(attribute.type)
        length = attribute.length or default_length(native)
        column = f"{name} {native}({length})" if length else f"{name} {native}"
        return column + (" NOT NULL" if attribute.required else " WITH DEFAULT")

    def build_create_table(
        self,
        table_name: str,
        attributes: PortableSchema | Mapping[str, PortableAttribute | Mapping[str, Any]],
    ) -> BuiltQuery:
        if not isinstance(attributes, PortableSchema):
            attributes = PortableSchema.from_definition(table_name, attributes)
        columns = [
            self.column_definition(name, attr) for name, attr in attributes.attributes.items()
        ]
        sql = f"CREATE TABLE {self.dialect.format_table_name(table_name)} ({', '.join(columns)})"
        return BuiltQuery(sql)

    # -- describe ----------------------------------------------------------

    def build_describe(self, table_name: str) -> BuiltQuery:
        literal = self.dialect.escape_literal(self.dialect.catalog_table_name(table_name))
        return BuiltQuery(
            "SELECT COLNAME, TYPENAME, LENGTH, NULLS, DEFAULT, IDENTITY"
            f" FROM {CATALOG_COLUMNS_VIEW}"
            f" WHERE TABSCHEMA = (CURRENT SCHEMA) AND TABNAME = {literal}"
            " ORDER BY COLNO"
        )

    def parse_catalog_rows(
        self, table_name: str, rows: Iterable[Mapping[str, Any]]
    ) -> PortableSchema | None:
        rows = list(rows)
        if not rows:
            return None

        attributes: dict[str, PortableAttribute] = {}
        for row in rows:
            type_name = str(row.get("TYPENAME") or "").strip()
            logical = to_portable(type_name)
            if logical is None:
                logger.warning(
                    "unmapped_native_type",
                    table=table_name,
                    column=row.get("COLNAME"),
                    type_name=type_name,
                )
            attribute = PortableAttribute(
                type=logical,
                max_length=row.get("LENGTH"),
                required=_is_required(row.get("NULLS"), row.get("DEFAULT")),
            )
            if str(row.get("IDENTITY") or "").strip().upper() == "Y":
                attribute = replace(attribute, primary_key=True, auto_increment=True, unique=True)
            attributes[str(row["COLNAME"]).strip()] = attribute

        return PortableSchema(table_name=table_name, attributes=attributes)


__all__ = [
    "CATALOG_COLUMNS_VIEW",
    "PortableAttribute",
    "PortableSchema",
    "SchemaTranslator",
]
