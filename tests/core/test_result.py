"""Tests for db2bridge.core.result."""

import pytest

from db2bridge.core.errors import DriverError, InvalidOptionsError
from db2bridge.core.result import Err, Ok, Result, try_result


class TestOk:
    def test_create_ok(self):
        result = Ok([{"ID": 1}])
        assert result.value == [{"ID": 1}]
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_map(self):
        assert Ok([1, 2, 3]).map(len).unwrap() == 3

    def test_flat_map(self):
        def first(rows: list) -> Result[int]:
            return Ok(rows[0]) if rows else Err(ValueError("empty"))

        assert Ok([7]).flat_map(first).unwrap() == 7
        assert Ok([]).flat_map(first).is_err()

    def test_map_err_no_op(self):
        assert Ok(1).map_err(lambda e: ValueError("x")).unwrap() == 1

    def test_to_dict(self):
        assert Ok(5).to_dict() == {"ok": True, "value": 5}

    def test_repr(self):
        assert repr(Ok("primary")) == "Ok('primary')"


class TestErr:
    def test_unwrap_raises(self):
        error = DriverError("boom", state="42601")
        with pytest.raises(DriverError):
            Err(error).unwrap()

    def test_unwrap_or(self):
        assert Err(ValueError("x")).unwrap_or([]) == []

    def test_map_passes_through(self):
        err = Err(ValueError("x"))
        assert err.map(len) is err

    def test_inspect_err(self):
        seen = []
        Err(ValueError("x")).inspect_err(seen.append)
        assert len(seen) == 1

    def test_to_dict_adapter_error(self):
        data = Err(DriverError("boom", state="42601")).to_dict()
        assert data["ok"] is False
        assert data["error"]["state"] == "42601"

    def test_to_dict_plain_exception(self):
        data = Err(ValueError("x")).to_dict()
        assert data["error"] == {"error_type": "ValueError", "message": "x"}

    def test_pattern_matching(self):
        match Err(InvalidOptionsError("bad")):
            case Ok(_):
                pytest.fail("expected Err")
            case Err(error):
                assert isinstance(error, InvalidOptionsError)


class TestTryResult:
    def test_wraps_value(self):
        assert try_result(lambda: 42) == Ok(42)

    def test_adapter_error_becomes_err(self):
        def fail():
            raise InvalidOptionsError("bad")

        result = try_result(fail)
        assert result.is_err()
        assert isinstance(result.error, InvalidOptionsError)

    def test_other_exceptions_propagate(self):
        def fail():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            try_result(fail)
