"""DaoRegistry – explicit mapping from logical Dao names to collections."""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from arango_plugin.config.arango import ArangoSettings
from arango_plugin.dao.descriptor import CollectionDescriptor, collection_name_for
from arango_plugin.dao.engine import Dao
from arango_plugin.dao.executor import QueryExecutor
from arango_plugin.kernel.errors import NotFoundError
from arango_plugin.kernel.time import Clock
from arango_plugin.observability.logging import get_logger

logger = get_logger(__name__)


class DaoRegistry:
    """Holds one descriptor per logical name and builds :class:`Dao` objects.

    Usage::

        registry = DaoRegistry(executor, settings=settings)
        registry.register("UserDao")
        registry.register("UserToRoleDao", allow_array_contains=True)
        registry.register("OrgGraphDao", graph_name="org_graph")
        users = registry.dao("UserDao")
    """

    def __init__(
        self,
        executor: QueryExecutor,
        descriptors: Mapping[str, CollectionDescriptor] | None = None,
        *,
        settings: ArangoSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._executor = executor
        self._settings = settings
        self._clock = clock
        self._descriptors: dict[str, CollectionDescriptor] = dict(descriptors or {})

    def register(
        self,
        logical_name: str,
        descriptor: CollectionDescriptor | None = None,
        **overrides: Any,
    ) -> CollectionDescriptor:
        """Register *logical_name*; without a descriptor one is derived from the name."""
        if descriptor is None:
            if self._settings is not None:
                overrides.setdefault("static_data_collection", self._settings.static_data)
                overrides.setdefault("area_data_collection", self._settings.area_data)
            overrides.setdefault("name", collection_name_for(logical_name))
            descriptor = CollectionDescriptor(**overrides)
        self._descriptors[logical_name] = descriptor
        logger.debug("dao.registered", logical_name=logical_name, collection=descriptor.name)
        return descriptor

    def descriptor(self, logical_name: str) -> CollectionDescriptor:
        try:
            return self._descriptors[logical_name]
        except KeyError:
            raise NotFoundError("dao", logical_name) from None

    def dao(self, logical_name: str) -> Dao:
        return Dao(self.descriptor(logical_name), self._executor, clock=self._clock)

    def __contains__(self, logical_name: object) -> bool:
        return logical_name in self._descriptors

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)


__all__ = ["DaoRegistry"]
