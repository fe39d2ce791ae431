"""Tests for portable schemas and the DB2 schema translator."""

from __future__ import annotations

import pytest

from db2bridge.core.errors import UnknownLogicalTypeError
from db2bridge.sql.dialect import Db2Dialect
from db2bridge.sql.schema import PortableAttribute, PortableSchema, SchemaTranslator
from db2bridge.sql.typemap import LogicalType


class TestPortableAttribute:
    def test_auto_increment_implies_primary_key(self) -> None:
        attr = PortableAttribute(type="integer", auto_increment=True)
        assert attr.primary_key is True

    def test_type_coerced(self) -> None:
        assert PortableAttribute(type="text").type is LogicalType.TEXT

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(UnknownLogicalTypeError):
            PortableAttribute(type="money")

    def test_from_dict_camel_case(self) -> None:
        attr = PortableAttribute.from_dict(
            {"type": "string", "maxLength": 40, "primaryKey": True, "unique": True}
        )
        assert attr.max_length == 40
        assert attr.primary_key and attr.unique

    def test_to_dict(self) -> None:
        attr = PortableAttribute(type="integer", auto_increment=True)
        assert attr.to_dict() == {
            "type": "integer",
            "required": False,
            "primaryKey": True,
            "autoIncrement": True,
        }


class TestPortableSchema:
    def test_columns_keep_order(self, users_schema: PortableSchema) -> None:
        assert users_schema.columns == ("id", "name")
        assert "name" in users_schema
        assert not users_schema.has_column("email")
        assert len(users_schema) == 2

    def test_is_usable(self) -> None:
        schema = PortableSchema("t", {"a": PortableAttribute(type=None)})
        assert not schema.is_usable


class TestColumnDefinition:
    @pytest.fixture
    def translator(self) -> SchemaTranslator:
        return SchemaTranslator()

    def test_auto_increment(self, translator: SchemaTranslator) -> None:
        attr = PortableAttribute(type="integer", auto_increment=True)
        assert translator.column_definition("id", attr) == (
            "id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY"
        )

    def test_primary_key(self, translator: SchemaTranslator) -> None:
        attr = PortableAttribute(type="string", primary_key=True)
        assert translator.column_definition("code", attr) == "code INTEGER NOT NULL PRIMARY KEY"

    def test_primary_key_type_configurable(self) -> None:
        attr = PortableAttribute(type="integer", auto_increment=True)
        sql = SchemaTranslator(primary_key_type="BIGINT").column_definition("id", attr)
        assert sql.startswith("id BIGINT GENERATED")

    def test_required_string_gets_default_length(self, translator: SchemaTranslator) -> None:
        attr = PortableAttribute(type="string", required=True)
        assert translator.column_definition("name", attr) == "name VARCHAR(32704) NOT NULL"

    def test_optional_with_explicit_length(self, translator: SchemaTranslator) -> None:
        attr = PortableAttribute(type="string", length=80)
        assert translator.column_definition("bio", attr) == "bio VARCHAR(80) WITH DEFAULT"

    def test_lengthless_native(self, translator: SchemaTranslator) -> None:
        attr = PortableAttribute(type="datetime")
        assert translator.column_definition("created", attr) == "created TIMESTAMP WITH DEFAULT"


class TestCreateTable:
    def test_create(self, users_schema: PortableSchema) -> None:
        q = SchemaTranslator().build_create_table("users", users_schema)
        assert q.sql == (
            "CREATE TABLE users (id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY, "
            "name VARCHAR(32704) NOT NULL)"
        )
        assert q.params == ()

    def test_from_plain_mapping_and_quoting(self) -> None:
        translator = SchemaTranslator(Db2Dialect(quote_table_names=True))
        q = translator.build_create_table("Notes", {"body": {"type": "text"}})
        assert q.sql == 'CREATE TABLE "Notes" (body CLOB(2147483647) WITH DEFAULT)'

    def test_deterministic(self, users_schema: PortableSchema) -> None:
        translator = SchemaTranslator()
        assert translator.build_create_table("users", users_schema) == translator.build_create_table(
            "users", users_schema
        )


class TestDescribe:
    def test_catalog_query_folds_and_escapes(self) -> None:
        q = SchemaTranslator().build_describe("o'users")
        assert "FROM SYSCAT.COLUMNS" in q.sql
        assert "TABNAME = 'O''USERS'" in q.sql
        assert q.sql.endswith("ORDER BY COLNO")

    def test_catalog_query_quoted_keeps_case(self) -> None:
        q = SchemaTranslator(Db2Dialect(quote_table_names=True)).build_describe("Users")
        assert "TABNAME = 'Users'" in q.sql

    def test_no_rows_is_none(self) -> None:
        assert SchemaTranslator().parse_catalog_rows("users", []) is None

    def test_parse_rows(self) -> None:
        rows = [
            {"COLNAME": "ID", "TYPENAME": "INTEGER", "LENGTH": 4, "NULLS": "N",
             "DEFAULT": None, "IDENTITY": "Y"},
            {"COLNAME": "NAME", "TYPENAME": "VARCHAR  ", "LENGTH": 32704, "NULLS": "N",
             "DEFAULT": None, "IDENTITY": "N"},
            {"COLNAME": "SCORE", "TYPENAME": "DOUBLE", "LENGTH": 8, "NULLS": "N",
             "DEFAULT": "5", "IDENTITY": "N"},
            {"COLNAME": "ZERO", "TYPENAME": "INTEGER", "LENGTH": 4, "NULLS": "N",
             "DEFAULT": "0", "IDENTITY": "N"},
            {"COLNAME": "BIO", "TYPENAME": "CLOB", "LENGTH": 1024, "NULLS": "Y",
             "DEFAULT": None, "IDENTITY": "N"},
        ]
        schema = SchemaTranslator().parse_catalog_rows("users", rows)

        assert schema is not None
        assert schema.columns == ("ID", "NAME", "SCORE", "ZERO", "BIO")
        ident = schema.attributes["ID"]
        assert ident.primary_key and ident.auto_increment and ident.unique
        assert schema.attributes["NAME"].type is LogicalType.STRING
        assert schema.attributes["NAME"].required is True
        assert schema.attributes["NAME"].max_length == 32704
        assert schema.attributes["SCORE"].required is False
        assert schema.attributes["ZERO"].required is True
        assert schema.attributes["BIO"].required is False

    def test_unmapped_type_marks_schema_unusable(self) -> None:
        rows = [{"COLNAME": "RID", "TYPENAME": "ROWID", "LENGTH": 40, "NULLS": "Y",
                 "DEFAULT": None, "IDENTITY": "N"}]
        schema = SchemaTranslator().parse_catalog_rows("t", rows)
        assert schema is not None
        assert schema.attributes["RID"].type is None
        assert not schema.is_usable
