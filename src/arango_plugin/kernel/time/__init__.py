"""Kernel time – Clock port + implementations."""
from arango_plugin.kernel.time.clock import (
    AUDIT_TIMESTAMP_FORMAT,
    Clock,
    FrozenClock,
    SystemClock,
    audit_timestamp,
)

__all__ = ["AUDIT_TIMESTAMP_FORMAT", "Clock", "FrozenClock", "SystemClock", "audit_timestamp"]
