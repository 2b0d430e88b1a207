"""Application – BaseService delegating to a :class:`Dao`."""
from __future__ import annotations

from typing import Any, Final

from arango_plugin.dao.engine import Dao

#: Dao operations a service exposes unless a subclass overrides them.
DAO_OPERATIONS: Final = frozenset({
    "get_one", "get", "get_one_by_filter", "get_by_filter", "gets", "gets_by_filter", "get_page",
    "save", "save_many", "update", "update_many", "update_each",
    "soft_delete", "hard_delete", "soft_delete_many",
    "save_edge", "save_edges", "update_edge", "update_edges", "update_edges_each",
    "delete_edges_by_endpoint",
    "get_neighbors", "get_outbound_neighbors", "get_inbound_neighbors",
    "get_neighbors_page", "get_outbound_neighbors_page", "get_inbound_neighbors_page",
    "get_graph_vertices", "get_outbound_graph_vertices", "get_inbound_graph_vertices",
})


class BaseService:
    """Business layer over one collection.

    Every name in :data:`DAO_OPERATIONS` is forwarded to the wrapped Dao.
    Subclasses add business rules by defining methods of their own, which
    take precedence over the forwarded ones::

        class UserService(BaseService):
            async def save(self, document):
                document = {**document, "email": document["email"].lower()}
                return await self.dao.save(document)
    """

    def __init__(self, dao: Dao) -> None:
        self.dao = dao

    def __getattr__(self, name: str) -> Any:
        if name in DAO_OPERATIONS:
            return getattr(self.dao, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.dao!r})"


__all__ = ["DAO_OPERATIONS", "BaseService"]
