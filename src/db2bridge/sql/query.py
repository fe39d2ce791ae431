"""
Operation options and the query builder.

``OperationOptions`` is the fixed-shape value every read/write operation
accepts. It is validated once, when it is built; the builder can then
assume a well-formed value.

``QueryBuilder`` turns (schema, options, values) into a ``BuiltQuery``.
It holds no per-call state: every call rebuilds from the options given,
because nothing guarantees the caller's options are stable between calls.

Filtering is equality-only (``col = ?`` joined with AND). Columns that are
not in the registered schema are dropped from WHERE, ORDER BY, SELECT,
INSERT and SET rather than rejected.

Examples:
    >>> schema = PortableSchema.from_definition("users", {
    ...     "id": {"type": "integer", "primaryKey": True, "autoIncrement": True},
    ...     "name": {"type": "string", "required": True},
    ... })
    >>> q = QueryBuilder().find(schema, {"where": {"name": "Alice"},
    ...                                  "sort": {"id": "DESC"}, "limit": 2})
    >>> q.sql
    'SELECT id, name FROM users WHERE name = ? ORDER BY id DESC LIMIT 2'

Tags:
    query-builder, sql, parameterized, db2

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from db2bridge.core.errors import InvalidOptionsError
from db2bridge.sql.clauses import (
    BuiltQuery,
    DeleteFrom,
    Eq,
    FetchFirst,
    FinalTable,
    From,
    InsertInto,
    Limit,
    Offset,
    OrderBy,
    Raw,
    Select,
    UpdateSet,
    Where,
    render,
)
from db2bridge.sql.dialect import Db2Dialect
from db2bridge.sql.schema import PortableSchema

COUNT_COLUMN = "CNT"

_OPTION_KEYS = frozenset({"where", "sort", "limit", "skip", "distinct", "select"})

_DIRECTIONS: dict[Any, str] = {
    "ASC": "ASC",
    "DESC": "DESC",
    1: "ASC",
    -1: "DESC",
}


def _normalize_direction(column: str, direction: Any) -> str:
    key = direction.strip().upper() if isinstance(direction, str) else direction
    if isinstance(key, str) and key.lstrip("-").isdigit():
        key = int(key)
    if isinstance(key, bool) or not isinstance(key, (str, int)) or key not in _DIRECTIONS:
        raise InvalidOptionsError(
            f"Unsupported sort direction for {column}: {direction!r}",
            field="sort",
            value=direction,
        )
    return _DIRECTIONS[key]


def _check_row_count(name: str, value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidOptionsError(
            f"{name} must be a non-negative integer", field=name, value=value
        )
    return value


@dataclass(frozen=True)
class OperationOptions:
    """Validated options for find/count/update/destroy.

    Attributes:
        where: column → expected value (equality only)
        sort: column → ``ASC``/``DESC`` (also accepts 1/-1)
        limit: maximum rows
        skip: rows to skip; requires ``limit``
        distinct: SELECT DISTINCT
        select: explicit projection
    """

    where: dict[str, Any] = field(default_factory=dict)
    sort: dict[str, str] = field(default_factory=dict)
    limit: int | None = None
    skip: int | None = None
    distinct: bool = False
    select: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.where, Mapping):
            raise InvalidOptionsError("where must be a mapping", field="where", value=self.where)
        for column, value in self.where.items():
            if isinstance(value, (Mapping, list, tuple, set, frozenset)):
                raise InvalidOptionsError(
                    f"Only equality predicates are supported (column {column})",
                    field="where",
                    value=value,
                )
        object.__setattr__(self, "where", dict(self.where))

        if not isinstance(self.sort, Mapping):
            raise InvalidOptionsError("sort must be a mapping", field="sort", value=self.sort)
        object.__setattr__(
            self,
            "sort",
            {col: _normalize_direction(col, direction) for col, direction in self.sort.items()},
        )

        object.__setattr__(self, "limit", _check_row_count("limit", self.limit))
        object.__setattr__(self, "skip", _check_row_count("skip", self.skip))
        if self.skip and not self.limit:
            raise InvalidOptionsError("Cannot specify skip without limit", field="skip", value=self.skip)

        if self.select is not None:
            select = (self.select,) if isinstance(self.select, str) else tuple(self.select)
            if not all(isinstance(col, str) for col in select):
                raise InvalidOptionsError("select must list column names", field="select", value=self.select)
            object.__setattr__(self, "select", select)

        object.__setattr__(self, "distinct", bool(self.distinct))

    @classmethod
    def coerce(cls, options: OperationOptions | Mapping[str, Any] | None) -> OperationOptions:
        """Accept an OperationOptions, a plain mapping, or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise InvalidOptionsError("options must be a mapping", value=options)
        unknown = set(options) - _OPTION_KEYS
        if unknown:
            raise InvalidOptionsError(
                f"Unknown option(s): {', '.join(sorted(unknown))}", value=sorted(unknown)
            )
        return cls(
            where=options.get("where") or {},
            sort=options.get("sort") or {},
            limit=options.get("limit"),
            skip=options.get("skip"),
            distinct=options.get("distinct", False),
            select=options.get("select"),
        )

    def with_limit(self, limit: int) -> OperationOptions:
        return replace(self, limit=limit)


class QueryBuilder:
    """Builds parameterized DB2 statements for the CRUD operations."""

    def __init__(self, dialect: Db2Dialect | None = None):
        self.dialect = dialect or Db2Dialect()

    # -- helpers -----------------------------------------------------------

    def _table(self, schema: PortableSchema) -> str:
        return self.dialect.format_table_name(schema.table_name)

    @staticmethod
    def _known(schema: PortableSchema, pairs: Iterable[tuple[str, Any]]) -> tuple[tuple[str, Any], ...]:
        return tuple((col, value) for col, value in pairs if col in schema)

    def _where(self, schema: PortableSchema, options: OperationOptions) -> Where:
        return Where(tuple(Eq(col, value) for col, value in self._known(schema, options.where.items())))

    def _projection(self, schema: PortableSchema, select: Sequence[str] | None) -> tuple[str, ...]:
        if select is None:
            return schema.columns
        columns = tuple(col for col in select if col in schema)
        if not columns:
            raise InvalidOptionsError(
                "select names no column of the schema", field="select", value=list(select)
            )
        return columns

    def _render(self, *clauses: Any) -> BuiltQuery:
        return render(*clauses, dialect=self.dialect)

    # -- reads -------------------------------------------------------------

    def find(
        self, schema: PortableSchema, options: OperationOptions | Mapping[str, Any] | None = None
    ) -> BuiltQuery:
        options = OperationOptions.coerce(options)
        return self._render(
            Select(self._projection(schema, options.select), distinct=options.distinct),
            From(self._table(schema)),
            self._where(schema, options),
            OrderBy(self._known(schema, options.sort.items())),
            Limit(options.limit),
            Offset(options.skip),
        )

    def find_one(
        self, schema: PortableSchema, options: OperationOptions | Mapping[str, Any] | None = None
    ) -> BuiltQuery:
        return self.find(schema, OperationOptions.coerce(options).with_limit(1))

    def count(
        self, schema: PortableSchema, options: OperationOptions | Mapping[str, Any] | None = None
    ) -> BuiltQuery:
        options = OperationOptions.coerce(options)
        if options.select is not None:
            raise InvalidOptionsError("count does not accept select", field="select", value=options.select)
        return self._render(
            Raw(f"SELECT COUNT(*) AS {COUNT_COLUMN}"),
            From(self._table(schema)),
            self._where(schema, options),
        )

    # -- writes ------------------------------------------------------------

    def create(self, schema: PortableSchema, values: Mapping[str, Any]) -> BuiltQuery:
        pairs = self._known(schema, values.items())
        if not pairs:
            raise InvalidOptionsError("create names no column of the schema", field="values")
        return self._render(
            FinalTable(schema.columns, (InsertInto(self._table(schema), pairs),)),
        )

    def update(
        self,
        schema: PortableSchema,
        options: OperationOptions | Mapping[str, Any] | None,
        values: Mapping[str, Any],
    ) -> BuiltQuery:
        options = OperationOptions.coerce(options)
        assignments = tuple(
            (col, value)
            for col, value in self._known(schema, values.items())
            if not schema.attributes[col].auto_increment
        )
        if not assignments:
            raise InvalidOptionsError("update has no assignable columns", field="values")
        return self._render(
            FinalTable(
                schema.columns,
                (
                    UpdateSet(self._table(schema), assignments),
                    self._where(schema, options),
                    FetchFirst(options.limit),
                ),
            ),
        )

    def destroy(
        self, schema: PortableSchema, options: OperationOptions | Mapping[str, Any] | None = None
    ) -> BuiltQuery:
        options = OperationOptions.coerce(options)
        return self._render(
            DeleteFrom(self._table(schema)),
            self._where(schema, options),
            FetchFirst(options.limit),
        )

    # -- table-level -------------------------------------------------------

    def truncate(self, schema: PortableSchema) -> BuiltQuery:
        return BuiltQuery(f"TRUNCATE TABLE {self._table(schema)} IMMEDIATE")

    def drop(self, table_name: str) -> BuiltQuery:
        return BuiltQuery(f"DROP TABLE {self.dialect.format_table_name(table_name)}")


__all__ = [
    "COUNT_COLUMN",
    "OperationOptions",
    "QueryBuilder",
]
