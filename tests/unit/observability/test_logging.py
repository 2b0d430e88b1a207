"""Unit tests for observability logging."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog
from structlog.testing import capture_logs

from arango_plugin.observability.logging import (
    DEFAULT_SENSITIVE_FIELDS,
    JsonLoggerFactory,
    RedactionProcessor,
    SensitiveFieldsFilter,
    get_logger,
)


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


# ---------------------------------------------------------------------------
# SensitiveFieldsFilter
# ---------------------------------------------------------------------------


class TestSensitiveFieldsFilter:
    def test_redacts_known_sensitive_key(self) -> None:
        result = SensitiveFieldsFilter().redact({"password": "s3cr3t", "name": "alice"})
        assert result == {"password": SensitiveFieldsFilter.REDACTED, "name": "alice"}

    def test_key_match_is_case_insensitive(self) -> None:
        result = SensitiveFieldsFilter().redact({"Authorization": "Bearer x"})
        assert result["Authorization"] == "[REDACTED]"

    def test_all_default_fields(self) -> None:
        result = SensitiveFieldsFilter().redact({f: "v" for f in DEFAULT_SENSITIVE_FIELDS})
        assert set(result.values()) == {"[REDACTED]"}

    def test_custom_fields(self) -> None:
        f = SensitiveFieldsFilter(frozenset({"ssn"}))
        assert f.redact({"ssn": "1", "password": "2"}) == {"ssn": "[REDACTED]", "password": "2"}

    def test_redact_value_walks_documents(self) -> None:
        value = [{"name": "bob", "password": "x"}, ({"token": "t"},), "plain"]
        assert SensitiveFieldsFilter().redact_value(value) == [
            {"name": "bob", "password": "[REDACTED]"},
            [{"token": "[REDACTED]"}],
            "plain",
        ]

    def test_redact_deep_nested(self) -> None:
        data = {"newObj": {"profile": {"secret": "s", "age": 3}}}
        assert SensitiveFieldsFilter().redact_deep(data) == {
            "newObj": {"profile": {"secret": "[REDACTED]", "age": 3}}
        }

    def test_input_is_not_mutated(self) -> None:
        data = {"password": "x"}
        SensitiveFieldsFilter().redact_deep(data)
        assert data == {"password": "x"}


# ---------------------------------------------------------------------------
# RedactionProcessor / get_logger
# ---------------------------------------------------------------------------


class TestRedactionProcessor:
    def test_redacts_event_dict(self) -> None:
        processor = RedactionProcessor()
        out = processor(None, "info", {"event": "dao.save", "params": {"password": "x"}})
        assert out == {"event": "dao.save", "params": {"password": "[REDACTED]"}}


class TestGetLogger:
    def test_bound_values_are_emitted(self) -> None:
        with capture_logs() as logs:
            get_logger("arango_plugin.test", collection="user").info("dao.query", rows=2)
        assert logs == [{"event": "dao.query", "collection": "user", "rows": 2, "log_level": "info"}]


# ---------------------------------------------------------------------------
# JsonLoggerFactory
# ---------------------------------------------------------------------------


class TestJsonLoggerFactory:
    def test_json_lines_with_redaction(
        self, restore_logging: None, capsys: pytest.CaptureFixture[str]
    ) -> None:
        JsonLoggerFactory.configure(sensitive_fields=DEFAULT_SENSITIVE_FIELDS)

        structlog.get_logger("arango_plugin.demo").info("arango.connect", password="pw", database="app")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "arango.connect"
        assert record["password"] == "[REDACTED]"
        assert record["database"] == "app"
        assert record["level"] == "info"
        assert record["logger"] == "arango_plugin.demo"
        assert "timestamp" in record

    def test_level_is_applied(self, restore_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.WARNING)
        structlog.get_logger("arango_plugin.demo").info("aql.query")
        assert capsys.readouterr().err == ""
