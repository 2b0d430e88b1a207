"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Final, Protocol

#: Format of the ``_create_date`` / ``_update_date`` audit attributes.
AUDIT_TIMESTAMP_FORMAT: Final = "%Y-%m-%d %H:%M:%S"


class Clock(Protocol):
    """Port: abstract clock for deterministic testing."""

    def now(self) -> datetime: ...


class SystemClock:
    """Production clock; local time unless a ``tz`` is given."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FrozenClock:
    """Test clock pinned to a fixed point in time."""

    def __init__(self, fixed: datetime) -> None:
        self._fixed = fixed

    def now(self) -> datetime:
        return self._fixed

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        self._fixed += timedelta(**kwargs)


def audit_timestamp(clock: Clock) -> str:
    """Render ``clock.now()`` the way audit attributes are stored."""
    return clock.now().strftime(AUDIT_TIMESTAMP_FORMAT)


__all__ = ["AUDIT_TIMESTAMP_FORMAT", "Clock", "FrozenClock", "SystemClock", "audit_timestamp"]
