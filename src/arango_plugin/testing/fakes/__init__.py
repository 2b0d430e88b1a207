"""Testing fakes – in-memory doubles for the connector and clock ports."""
from arango_plugin.kernel.time import FrozenClock
from arango_plugin.testing.fakes.clock import FakeClock
from arango_plugin.testing.fakes.connector import ExecutedQuery, RecordingConnector

__all__ = ["ExecutedQuery", "FakeClock", "FrozenClock", "RecordingConnector"]
