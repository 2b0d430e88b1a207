"""ArangoDB adapter – ArangoConnector backed by python-arango."""
from __future__ import annotations

import asyncio
from typing import Any

from arango_plugin.config.arango import ArangoSettings
from arango_plugin.kernel.errors import ConnectionError
from arango_plugin.observability.logging import get_logger

logger = get_logger(__name__)


def _require_arango() -> Any:
    try:
        import arango  # type: ignore[import-untyped]
        return arango
    except ImportError as exc:
        raise ImportError(
            "Install 'arango-plugin[arango]' (python-arango) to use this adapter"
        ) from exc


class ArangoConnector:
    """Runs AQL on one python-arango ``StandardDatabase``.

    The database handle is created once at startup and only read afterwards.
    python-arango is synchronous, so every call is offloaded to a worker
    thread to keep the event loop free.

    Usage::

        connector = ArangoConnector.from_settings(settings)
        executor = QueryExecutor(connector)
    """

    def __init__(self, database: Any) -> None:
        self._db = database

    @classmethod
    def from_settings(cls, settings: ArangoSettings, client: Any = None) -> "ArangoConnector":
        arango = _require_arango()
        logger.info(
            "arango.connect",
            url=settings.url,
            username=settings.username,
            database=settings.database,
        )
        try:
            client = client or arango.ArangoClient(hosts=settings.url)
            database = client.db(
                settings.database,
                username=settings.username,
                password=settings.password,
            )
        except Exception as exc:
            raise ConnectionError("arangodb", f"Cannot open database {settings.database!r}: {exc}", cause=exc) from exc
        return cls(database)

    @property
    def database(self) -> Any:
        return self._db

    def _execute_sync(self, query: str, bind_vars: dict[str, Any]) -> list[Any]:
        cursor = self._db.aql.execute(query, bind_vars=bind_vars)
        return list(cursor)

    async def execute(self, query: str, bind_vars: dict[str, Any]) -> list[Any]:
        return await asyncio.to_thread(self._execute_sync, query, bind_vars)


__all__ = ["ArangoConnector"]
