"""Testing support – fakes and pytest fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["arango_plugin.testing.fixtures"]
"""
from arango_plugin.testing.fakes import ExecutedQuery, FakeClock, RecordingConnector

__all__ = ["ExecutedQuery", "FakeClock", "RecordingConnector"]
