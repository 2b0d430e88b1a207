"""ArangoDB adapter – startup probe and connection bootstrap."""
from __future__ import annotations

from typing import Final

from arango_plugin.adapters.arango.connector import ArangoConnector
from arango_plugin.config.arango import ArangoSettings
from arango_plugin.dao.executor import ArangoConnectorPort
from arango_plugin.observability.health import HealthCheck, HealthStatus
from arango_plugin.observability.logging import get_logger

logger = get_logger(__name__)

PROBE_QUERY: Final = "RETURN DATE_ISO8601(DATE_NOW())"


class ArangoHealthCheck(HealthCheck):
    """Asks the server for its current time; the answer is the status detail."""

    def __init__(self, connector: ArangoConnectorPort) -> None:
        self._connector = connector

    @property
    def name(self) -> str:
        return "arangodb"

    async def check(self) -> HealthStatus:
        try:
            rows = await self._connector.execute(PROBE_QUERY, {})
        except Exception as exc:
            logger.warning("arango.unhealthy", error=str(exc))
            return HealthStatus(healthy=False, detail=str(exc))
        return HealthStatus(healthy=True, detail=str(rows[0]) if rows else None)


async def connect(settings: ArangoSettings, client: object = None) -> ArangoConnector:
    """Open the database and probe it; raises ``ConnectionError`` when unreachable."""
    connector = ArangoConnector.from_settings(settings, client)
    status = await ArangoHealthCheck(connector).timed_check()
    status.raise_for_status("arangodb")
    logger.info("arango.ready", server_time=status.detail, latency_ms=round(status.latency_ms, 1))
    return connector


__all__ = ["PROBE_QUERY", "ArangoHealthCheck", "connect"]
