"""Testing fixtures – pytest fixtures for the fakes.

Load them from a ``conftest.py``::

    pytest_plugins = ["arango_plugin.testing.fixtures"]
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from arango_plugin.dao import CollectionDescriptor, Dao, QueryExecutor
from arango_plugin.kernel.time import FrozenClock
from arango_plugin.testing.fakes import FakeClock, RecordingConnector


@pytest.fixture
def fake_clock() -> FrozenClock:
    """A clock pinned to 2026-01-01 12:00."""
    return FakeClock()


@pytest.fixture
def recording_connector() -> RecordingConnector:
    return RecordingConnector()


@pytest.fixture
def make_dao(recording_connector: RecordingConnector, fake_clock: FrozenClock) -> Callable[..., Dao]:
    """Factory fixture: ``make_dao("user", allow_array_contains=True)``."""

    def factory(name: str = "user", **descriptor: Any) -> Dao:
        return Dao(
            CollectionDescriptor(name=name, **descriptor),
            QueryExecutor(recording_connector),
            clock=fake_clock,
        )

    return factory


__all__ = ["fake_clock", "make_dao", "recording_connector"]
