"""Unit tests for the python-arango adapter (no server needed)."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import MagicMock

import pytest

from arango_plugin.adapters.arango import PROBE_QUERY, ArangoConnector, ArangoHealthCheck, connect
from arango_plugin.config import ArangoSettings
from arango_plugin.kernel.errors import ConnectionError
from arango_plugin.testing.fakes import RecordingConnector


def _settings() -> ArangoSettings:
    return ArangoSettings(url="http://arango:8529", username="root", password="pw", database="app")


def _client(rows: list[Any] | None = None, error: Exception | None = None) -> MagicMock:
    db = MagicMock()
    if error is not None:
        db.aql.execute.side_effect = error
    else:
        db.aql.execute.return_value = iter(rows or [])
    client = MagicMock()
    client.db.return_value = db
    return client


# ---------------------------------------------------------------------------
# ArangoConnector
# ---------------------------------------------------------------------------


class TestArangoConnector:
    def test_from_settings_opens_database(self) -> None:
        client = _client()
        connector = ArangoConnector.from_settings(_settings(), client)
        client.db.assert_called_once_with("app", username="root", password="pw")
        assert connector.database is client.db.return_value

    def test_from_settings_builds_client_from_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import arango

        created: dict[str, Any] = {}

        def fake_client(**kwargs: Any) -> MagicMock:
            created.update(kwargs)
            return _client()

        monkeypatch.setattr(arango, "ArangoClient", fake_client)
        ArangoConnector.from_settings(_settings())
        assert created == {"hosts": "http://arango:8529"}

    def test_open_failure_is_connection_error(self) -> None:
        client = MagicMock()
        client.db.side_effect = RuntimeError("unauthorized")
        with pytest.raises(ConnectionError) as exc_info:
            ArangoConnector.from_settings(_settings(), client)
        assert exc_info.value.resource == "arangodb"

    def test_execute_drains_cursor(self) -> None:
        client = _client(rows=[{"_id": "user/1"}, {"_id": "user/2"}])
        connector = ArangoConnector.from_settings(_settings(), client)

        rows = asyncio.run(connector.execute("FOR t IN user RETURN t", {"value0": 1}))

        assert rows == [{"_id": "user/1"}, {"_id": "user/2"}]
        client.db.return_value.aql.execute.assert_called_once_with(
            "FOR t IN user RETURN t", bind_vars={"value0": 1}
        )

    def test_execute_propagates_driver_errors(self) -> None:
        connector = ArangoConnector.from_settings(_settings(), _client(error=RuntimeError("AQL: syntax error")))
        with pytest.raises(RuntimeError):
            asyncio.run(connector.execute("RETURN", {}))


# ---------------------------------------------------------------------------
# ArangoHealthCheck / connect
# ---------------------------------------------------------------------------


class TestArangoHealthCheck:
    def test_healthy(self) -> None:
        connector = RecordingConnector([["2026-01-01T12:00:00.000Z"]])
        status = asyncio.run(ArangoHealthCheck(connector).check())
        assert status.healthy is True
        assert status.detail == "2026-01-01T12:00:00.000Z"
        assert connector.last.query == PROBE_QUERY == "RETURN DATE_ISO8601(DATE_NOW())"

    def test_unhealthy(self) -> None:
        status = asyncio.run(ArangoHealthCheck(RecordingConnector([OSError("refused")])).check())
        assert status.healthy is False
        assert status.detail == "refused"

    def test_timed_check_records_latency(self) -> None:
        status = asyncio.run(ArangoHealthCheck(RecordingConnector([["now"]])).timed_check())
        assert status.latency_ms >= 0.0

    def test_name(self) -> None:
        assert ArangoHealthCheck(RecordingConnector()).name == "arangodb"

    def test_connect_probes_server(self) -> None:
        client = _client(rows=["2026-01-01T12:00:00.000Z"])
        connector = asyncio.run(connect(_settings(), client))
        assert isinstance(connector, ArangoConnector)

    def test_connect_unreachable(self) -> None:
        client = _client(error=OSError("connection refused"))
        with pytest.raises(ConnectionError) as exc_info:
            asyncio.run(connect(_settings(), client))
        assert "connection refused" in exc_info.value.message
