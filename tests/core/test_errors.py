"""Tests for db2bridge.core.errors."""

from __future__ import annotations

import pytest

from db2bridge.core.errors import (
    AdapterError,
    ConfigError,
    DatabaseError,
    DriverError,
    DuplicateIdentityError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    InvalidOptionsError,
    MissingIdentityError,
    UnknownIdentityError,
    UnknownLogicalTypeError,
    UnknownSchemaError,
    ValidationError,
    parse_sqlstate,
)


class TestErrorContext:
    def test_to_dict_skips_none(self) -> None:
        ctx = ErrorContext(identity="primary", sql="SELECT 1")
        assert ctx.to_dict() == {"identity": "primary", "sql": "SELECT 1"}

    def test_metadata_merged(self) -> None:
        ctx = ErrorContext(schema_name="users", metadata={"attempt": 1})
        assert ctx.to_dict() == {"schema_name": "users", "attempt": 1}


class TestAdapterError:
    def test_default_category(self) -> None:
        assert AdapterError("boom").category == ErrorCategory.INTERNAL

    def test_with_context_sets_known_fields_and_metadata(self) -> None:
        error = AdapterError("boom").with_context(identity="primary", rows=3)
        assert error.context.identity == "primary"
        assert error.context.metadata == {"rows": 3}

    def test_cause_is_chained(self) -> None:
        cause = RuntimeError("driver")
        error = AdapterError("boom", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "driver"

    def test_to_dict(self) -> None:
        error = UnknownIdentityError("nope").with_context(schema_name="users")
        data = error.to_dict()
        assert data["error_type"] == "UnknownIdentityError"
        assert data["category"] == "CONFIG"
        assert data["context"] == {"schema_name": "users"}


class TestHierarchy:
    @pytest.mark.parametrize(
        "error,base",
        [
            (MissingIdentityError(), ConfigError),
            (DuplicateIdentityError("a"), ConfigError),
            (UnknownIdentityError("a"), ConfigError),
            (InvalidConfigError("port", -1), ConfigError),
            (InvalidOptionsError("bad"), ValidationError),
            (UnknownSchemaError("users"), ValidationError),
            (DriverError("x"), DatabaseError),
        ],
    )
    def test_subclasses(self, error: AdapterError, base: type) -> None:
        assert isinstance(error, base)
        assert isinstance(error, AdapterError)

    def test_identity_errors_carry_identity(self) -> None:
        assert DuplicateIdentityError("primary").identity == "primary"
        assert "primary" in str(UnknownIdentityError("primary"))

    def test_unknown_schema_message_names_connection(self) -> None:
        error = UnknownSchemaError("users", "primary")
        assert error.schema_name == "users"
        assert "'primary'" in error.message

    def test_unknown_logical_type(self) -> None:
        error = UnknownLogicalTypeError("money")
        assert error.logical_type == "money"
        assert error.category == ErrorCategory.INTERNAL

    def test_validation_to_dict_has_field(self) -> None:
        data = InvalidOptionsError("bad", field="limit", value=-1).to_dict()
        assert data["field"] == "limit"
        assert data["value"] == "-1"


class TestDriverError:
    def test_state_parsed_from_message(self) -> None:
        error = DriverError("[IBM][CLI Driver] SQL0204N  ... SQLSTATE=42704")
        assert error.state == "42704"
        assert error.is_not_found

    def test_explicit_state_wins(self) -> None:
        assert DriverError("SQLSTATE=42704", state="01532").state == "01532"

    def test_missing_state_is_empty(self) -> None:
        error = DriverError("connection reset")
        assert error.state == ""
        assert not error.is_warning()

    def test_warning_uses_two_char_prefix(self) -> None:
        assert DriverError("x", state="01532").is_warning()
        assert not DriverError("x", state="02000").is_warning()
        assert not DriverError("x", state="42710").is_warning()

    def test_custom_prefix(self) -> None:
        assert DriverError("x", state="02000").is_warning("02")

    def test_to_dict_includes_state(self) -> None:
        assert DriverError("x", state="42601").to_dict()["state"] == "42601"


class TestParseSqlstate:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("SQL0601N ... SQLSTATE=42710", "42710"),
            ("sqlstate: 01532", "01532"),
            ("no state here", None),
            ("", None),
        ],
    )
    def test_parse(self, message: str, expected: str | None) -> None:
        assert parse_sqlstate(message) == expected
