"""ArangoDB adapter – python-arango connector and health check."""
from arango_plugin.adapters.arango.connector import ArangoConnector
from arango_plugin.adapters.arango.health import PROBE_QUERY, ArangoHealthCheck, connect

__all__ = ["PROBE_QUERY", "ArangoConnector", "ArangoHealthCheck", "connect"]
