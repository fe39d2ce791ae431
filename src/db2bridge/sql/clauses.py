"""Small clause AST with a single render step.

Each clause renders itself against a ``RenderContext``. Values are emitted
through ``RenderContext.bind``, which appends the parameter and returns the
placeholder in the same call, so the placeholder order in the SQL text and
the parameter order can never drift apart.

Examples:
    >>> q = render(
    ...     Select(("id", "name")),
    ...     From("users"),
    ...     Where((Eq("name", "Alice"),)),
    ...     OrderBy((("id", "DESC"),)),
    ...     Limit(2),
    ... )
    >>> q.sql
    'SELECT id, name FROM users WHERE name = ? ORDER BY id DESC LIMIT 2'
    >>> q.params
    ('Alice',)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from db2bridge.sql.dialect import Db2Dialect


@dataclass(frozen=True, slots=True)
class BuiltQuery:
    """SQL text plus its positional parameters. Rebuilt on every call."""

    sql: str
    params: tuple[Any, ...] = ()

    @property
    def has_params(self) -> bool:
        return bool(self.params)


@dataclass
class RenderContext:
    dialect: Db2Dialect = field(default_factory=Db2Dialect)
    params: list[Any] = field(default_factory=list)

    def bind(self, value: Any) -> str:
        self.params.append(value)
        return self.dialect.placeholder()


class Clause(Protocol):
    def render(self, ctx: RenderContext) -> str:
        ...


@dataclass(frozen=True, slots=True)
class Raw:
    text: str

    def render(self, ctx: RenderContext) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Select:
    columns: tuple[str, ...]
    distinct: bool = False

    def render(self, ctx: RenderContext) -> str:
        prefix = "SELECT DISTINCT " if self.distinct else "SELECT "
        return prefix + ", ".join(self.columns)


@dataclass(frozen=True, slots=True)
class From:
    table: str

    def render(self, ctx: RenderContext) -> str:
        return f"FROM {self.table}"


@dataclass(frozen=True, slots=True)
class Eq:
    column: str
    value: Any

    def render(self, ctx: RenderContext) -> str:
        return f"{self.column} = {ctx.bind(self.value)}"


@dataclass(frozen=True, slots=True)
class Where:
    conditions: tuple[Eq, ...] = ()

    def render(self, ctx: RenderContext) -> str:
        if not self.conditions:
            return ""
        return "WHERE " + " AND ".join(c.render(ctx) for c in self.conditions)


@dataclass(frozen=True, slots=True)
class OrderBy:
    items: tuple[tuple[str, str], ...] = ()

    def render(self, ctx: RenderContext) -> str:
        if not self.items:
            return ""
        return "ORDER BY " + ", ".join(f"{col} {direction}" for col, direction in self.items)


@dataclass(frozen=True, slots=True)
class Limit:
    rows: int | None = None

    def render(self, ctx: RenderContext) -> str:
        return f"LIMIT {int(self.rows)}" if self.rows else ""


@dataclass(frozen=True, slots=True)
class Offset:
    rows: int | None = None

    def render(self, ctx: RenderContext) -> str:
        return f"OFFSET {int(self.rows)}" if self.rows else ""


@dataclass(frozen=True, slots=True)
class FetchFirst:
    rows: int | None = None

    def render(self, ctx: RenderContext) -> str:
        return ctx.dialect.fetch_first(self.rows).strip()


@dataclass(frozen=True, slots=True)
class InsertInto:
    table: str
    values: tuple[tuple[str, Any], ...]

    def render(self, ctx: RenderContext) -> str:
        columns = ", ".join(col for col, _ in self.values)
        marks = ", ".join(ctx.bind(value) for _, value in self.values)
        return f"INSERT INTO {self.table} ({columns}) VALUES ({marks})"


@dataclass(frozen=True, slots=True)
class UpdateSet:
    table: str
    assignments: tuple[tuple[str, Any], ...]

    def render(self, ctx: RenderContext) -> str:
        sets = ", ".join(f"{col} = {ctx.bind(value)}" for col, value in self.assignments)
        return f"UPDATE {self.table} SET {sets}"


@dataclass(frozen=True, slots=True)
class DeleteFrom:
    table: str

    def render(self, ctx: RenderContext) -> str:
        return f"DELETE FROM {self.table}"


@dataclass(frozen=True, slots=True)
class FinalTable:
    """``SELECT cols FROM FINAL TABLE (<data-change statement>)``.

    DB2 returns the rows as they stand after the INSERT/UPDATE, which saves
    a second read-back query.
    """

    columns: tuple[str, ...]
    statement: tuple[Any, ...]

    def render(self, ctx: RenderContext) -> str:
        inner = _join(self.statement, ctx)
        return f"SELECT {', '.join(self.columns)} FROM FINAL TABLE ({inner})"


def _join(clauses: tuple[Any, ...], ctx: RenderContext) -> str:
    parts = (clause.render(ctx) for clause in clauses)
    return " ".join(part for part in parts if part)


def render(*clauses: Clause, dialect: Db2Dialect | None = None) -> BuiltQuery:
    """Render clauses in order into one statement."""
    ctx = RenderContext(dialect=dialect or Db2Dialect())
    sql = _join(clauses, ctx)
    return BuiltQuery(sql=sql, params=tuple(ctx.params))


__all__ = [
    "BuiltQuery",
    "RenderContext",
    "Clause",
    "Raw",
    "Select",
    "From",
    "Eq",
    "Where",
    "OrderBy",
    "Limit",
    "Offset",
    "FetchFirst",
    "InsertInto",
    "UpdateSet",
    "DeleteFrom",
    "FinalTable",
    "render",
]
