"""Tests for the DB2 dialect and identifier formatting."""

from __future__ import annotations

import pytest

from db2bridge.sql.dialect import Db2Dialect


class TestDb2Dialect:
    def test_name_and_placeholder(self) -> None:
        d = Db2Dialect()
        assert d.name == "db2"
        assert d.placeholder() == "?"

    def test_escape_literal_doubles_every_quote(self) -> None:
        assert Db2Dialect().escape_literal("it's o'clock") == "'it''s o''clock'"

    def test_escape_literal_plain(self) -> None:
        assert Db2Dialect().escape_literal("USERS") == "'USERS'"


class TestTableNames:
    def test_unquoted_passthrough(self) -> None:
        assert Db2Dialect().format_table_name("users") == "users"

    def test_quoted(self) -> None:
        assert Db2Dialect(quote_table_names=True).format_table_name("Users") == '"Users"'

    def test_quoted_doubles_embedded_quotes(self) -> None:
        d = Db2Dialect(quote_table_names=True)
        assert d.format_table_name('we"ird') == '"we""ird"'

    def test_catalog_name_folds_case_when_unquoted(self) -> None:
        assert Db2Dialect().catalog_table_name("users") == "USERS"

    def test_catalog_name_kept_when_quoted(self) -> None:
        assert Db2Dialect(quote_table_names=True).catalog_table_name("Users") == "Users"


class TestFetchFirst:
    def test_positive(self) -> None:
        assert Db2Dialect().fetch_first(5) == " FETCH FIRST 5 ROWS ONLY"

    @pytest.mark.parametrize("rows", [None, 0, -1, True, "5"])
    def test_not_limited(self, rows) -> None:
        assert Db2Dialect().fetch_first(rows) == ""
