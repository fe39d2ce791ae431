"""DB2 identifier formatting and dialect fragments.

Values never pass through this module: they are always bound as ``?``
parameters. ``escape_literal`` exists only for identifier-position
literals the catalog query cannot parameterize.

Examples:
    >>> d = Db2Dialect()
    >>> d.escape_literal("O'Brien")
    "'O''Brien'"
    >>> Db2Dialect(quote_table_names=True).format_table_name('my"table')
    '"my""table"'
    >>> d.fetch_first(5)
    ' FETCH FIRST 5 ROWS ONLY'

Tags:
    dialect, sql, db2, quoting, identifiers

Doc-Types:
    - API Reference
"""

from __future__ import annotations


class Db2Dialect:
    """IBM DB2 dialect: ``?`` (qmark) placeholders, optional table quoting.

    Quoting table names makes them case-sensitive. Column names are never
    quoted; the query builder only emits column names that appear in the
    registered schema.
    """

    def __init__(self, quote_table_names: bool = False):
        self.quote_table_names = quote_table_names

    @property
    def name(self) -> str:
        return "db2"

    def placeholder(self) -> str:
        return "?"

    def escape_literal(self, value: str) -> str:
        """Single-quoted SQL literal with embedded quotes doubled."""
        return "'" + value.replace("'", "''") + "'"

    def format_table_name(self, table_name: str) -> str:
        if not self.quote_table_names:
            return table_name
        return '"' + table_name.replace('"', '""') + '"'

    def catalog_table_name(self, table_name: str) -> str:
        """Table name as SYSCAT stores it.

        DB2 folds unquoted identifiers to upper case at CREATE time.
        """
        if self.quote_table_names:
            return table_name
        return table_name.upper()

    def fetch_first(self, rows: int | None) -> str:
        """Row-limiting suffix for UPDATE/DELETE, empty when not limited."""
        if isinstance(rows, int) and not isinstance(rows, bool) and rows > 0:
            return f" FETCH FIRST {rows} ROWS ONLY"
        return ""

    def __repr__(self) -> str:
        return f"Db2Dialect(quote_table_names={self.quote_table_names})"


__all__ = [
    "Db2Dialect",
]
