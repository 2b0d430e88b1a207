"""Observability – Health Checks."""
from arango_plugin.observability.health.check import HealthCheck, HealthStatus

__all__ = ["HealthCheck", "HealthStatus"]
