"""Collection descriptors – everything a :class:`Dao` needs to know about its collection."""
from __future__ import annotations

import dataclasses
from typing import Final

from arango_plugin.aql.fragment import literal
from arango_plugin.aql.projection import excluded_attributes
from arango_plugin.kernel.text import lower_camelize, underline_case

DAO_SUFFIX: Final = "Dao"
GRAPH_SUFFIX: Final = "_graph"
EDGE_SEPARATOR: Final = "_to_"


def collection_name_for(logical_name: str) -> str:
    """``UserToRoleDao`` -> ``user_to_role``."""
    name = logical_name[: -len(DAO_SUFFIX)] if logical_name.endswith(DAO_SUFFIX) else logical_name
    return underline_case(name)


def vertex_collections_for(name: str) -> tuple[str, ...]:
    """``user_to_role`` -> ``("user", "role")``; ``org_graph`` -> ``("org",)``."""
    base = name[: -len(GRAPH_SUFFIX)] if name.endswith(GRAPH_SUFFIX) else name
    return tuple(part for part in base.split(EDGE_SEPARATOR) if part)


@dataclasses.dataclass(frozen=True)
class CollectionDescriptor:
    """Static description of one collection (document, edge or graph).

    Every name ends up inlined into query text, so all of them are checked
    with :func:`~arango_plugin.aql.fragment.literal` on construction.
    """

    name: str
    with_collections: tuple[str, ...] = ()
    graph_name: str | None = None
    excluded_attributes: tuple[str, ...] = ()
    allow_array_contains: bool = False
    static_data_collection: str = "static_data"
    area_data_collection: str = "area_data"

    def __post_init__(self) -> None:
        if not self.with_collections:
            object.__setattr__(self, "with_collections", vertex_collections_for(self.name))
        else:
            object.__setattr__(self, "with_collections", tuple(self.with_collections))
        object.__setattr__(self, "excluded_attributes", tuple(self.excluded_attributes))
        for name in (
            self.name,
            self.graph,
            self.static_data_collection,
            self.area_data_collection,
            *self.with_collections,
            *self.excluded_attributes,
        ):
            literal(name)

    @classmethod
    def from_logical_name(cls, logical_name: str, **overrides: object) -> "CollectionDescriptor":
        return cls(name=collection_name_for(logical_name), **overrides)  # type: ignore[arg-type]

    @property
    def graph(self) -> str:
        return self.graph_name or self.name

    @property
    def camel_name(self) -> str:
        return lower_camelize(self.name)

    @property
    def hidden_attributes(self) -> list[str]:
        """Forced-excluded attributes plus this collection's extras."""
        return excluded_attributes(self.excluded_attributes)


__all__ = [
    "CollectionDescriptor",
    "collection_name_for",
    "vertex_collections_for",
]
