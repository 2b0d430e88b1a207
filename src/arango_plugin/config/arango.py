"""ArangoDB connection settings (``ARANGO_*`` environment variables)."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from arango_plugin.config.settings.base import Settings
from arango_plugin.config.validation import InvalidSettingValueError, MissingRequiredSettingError


@dataclasses.dataclass
class ArangoSettings(Settings):
    """Connection and lookup-table settings.

    ==========================  ================================
    env var                     meaning
    ==========================  ================================
    ``ARANGO_URL``              server URL, e.g. ``http://localhost:8529``
    ``ARANGO_USERNAME``         basic-auth user
    ``ARANGO_PASSWORD``         basic-auth password
    ``ARANGO_DATABASE``         database name
    ``ARANGO_STATIC_DATA``      collection holding ``*_scode`` labels
    ``ARANGO_AREA_DATA``        collection holding ``*_acode`` labels
    ==========================  ================================
    """

    _prefix: ClassVar[str] = "ARANGO"

    url: str = "http://localhost:8529"
    username: str = ""
    password: str = ""
    database: str = ""
    static_data: str = "static_data"
    area_data: str = "area_data"

    def _validate(self) -> None:
        for name in ("url", "username", "database"):
            if not getattr(self, name):
                raise MissingRequiredSettingError(f"{self._prefix}_{name.upper()}")
        if not self.url.startswith(("http://", "https://")):
            raise InvalidSettingValueError(f"{self._prefix}_URL", self.url, "must be an http(s) URL")


__all__ = ["ArangoSettings"]
