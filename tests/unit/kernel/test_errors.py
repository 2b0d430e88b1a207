"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from arango_plugin.kernel.errors import (
    BaseError,
    BusinessError,
    ConnectionError,
    ExecutionError,
    InfrastructureError,
    NotFoundError,
    UniquenessViolationError,
    ValidationError,
)


class TestBaseError:
    def test_defaults(self) -> None:
        err = BaseError("boom")
        assert err.message == "boom"
        assert err.code == "base_error"
        assert err.detail == {}
        assert err.cause is None

    def test_custom_code_and_detail(self) -> None:
        err = BaseError("boom", code="custom", detail={"k": 1})
        assert err.to_dict() == {"code": "custom", "message": "boom", "detail": {"k": 1}}

    def test_cause_is_chained(self) -> None:
        cause = RuntimeError("driver")
        err = BaseError("boom", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == "RuntimeError('driver')"

    def test_str_is_json(self) -> None:
        assert json.loads(str(BaseError("boom"))) == {"code": "base_error", "message": "boom", "detail": {}}

    def test_repr(self) -> None:
        assert repr(NotFoundError("user")) == "NotFoundError(code='not_found', message='user not found')"


# ---------------------------------------------------------------------------
# Business errors
# ---------------------------------------------------------------------------


class TestBusinessErrors:
    @pytest.mark.parametrize(
        "cls", [ValidationError, UniquenessViolationError, NotFoundError, ExecutionError]
    )
    def test_hierarchy(self, cls: type[BaseError]) -> None:
        assert issubclass(cls, BusinessError)
        assert issubclass(cls, BaseError)

    def test_validation_errors_list(self) -> None:
        err = ValidationError("get_one: _id: too short", errors=[{"loc": ["_id"], "msg": "too short", "type": "x"}])
        assert err.code == "validation_error"
        assert err.to_dict()["errors"] == [{"loc": ["_id"], "msg": "too short", "type": "x"}]
        assert ValidationError("x").errors == []

    def test_uniqueness_violation(self) -> None:
        err = UniquenessViolationError("user.get_one", 2)
        assert err.message == "user.get_one expected a single result, got 2"
        assert err.count == 2
        assert err.operation == "user.get_one"

    def test_not_found_with_identifier(self) -> None:
        err = NotFoundError("user", "user/1")
        assert err.message == "user 'user/1' not found"
        assert err.identifier == "user/1"

    def test_execution_error(self) -> None:
        err = ExecutionError("user.save", "Execute AQL ERROR: unique constraint violated")
        assert err.message == "user.save failed: Execute AQL ERROR: unique constraint violated"
        assert err.code == "execution_error"


class TestInfrastructureErrors:
    def test_connection_error(self) -> None:
        err = ConnectionError("arangodb")
        assert isinstance(err, InfrastructureError)
        assert not isinstance(err, BusinessError)
        assert err.message == "Could not connect to 'arangodb'"
        assert err.code == "connection_error"
