"""Generic collection engine.

One :class:`Dao` serves any document, edge or graph collection; what differs
between collections lives in its :class:`CollectionDescriptor`.  Every
operation follows the same steps::

    validate params -> build fragments -> compose query -> execute
                    -> check result shape -> normalise -> return

Reads hide ``_rev``, ``_key``, ``_status`` and ``password`` (plus the
descriptor's extras) and only ever see active records (``_status == true``).
Writes strip the write-protected attributes from the payload and stamp the
audit attributes.
"""
from __future__ import annotations

from typing import Any, Final, Mapping, Sequence

from arango_plugin.aql.filters import build_filter
from arango_plugin.aql.fragment import Aql, aql, bind, literal, literal_list
from arango_plugin.aql.likes import LikeClauses, build_like
from arango_plugin.aql.pagination import PageRequest, PageResult
from arango_plugin.aql.projection import (
    EDGE_ALIAS,
    VERTEX_ALIAS,
    ResponseOptions,
    build_code_conversion,
    build_projection,
)
from arango_plugin.aql.sorts import SortField, build_sort, merge_sorts, resolve_sort
from arango_plugin.dao.descriptor import CollectionDescriptor
from arango_plugin.dao.executor import QueryExecutor, first_or_none, validate_count
from arango_plugin.dao.params import (
    DIRECTION_ADAPTER,
    ID_ADAPTER,
    IDS_ADAPTER,
    NEW_DOCUMENT_ADAPTER,
    NEW_DOCUMENTS_ADAPTER,
    SAVE_EDGES_ADAPTER,
    UPDATE_EACH_ADAPTER,
    UPDATE_EDGES_EACH_ADAPTER,
    EndpointFilterParams,
    GetOneByFilterParams,
    GetOneParams,
    GetPageParams,
    GetsByFilterParams,
    GetsParams,
    GraphParams,
    LikeParams,
    NeighborsPageParams,
    NeighborsParams,
    SaveEdgeParams,
    UpdateEdgeParams,
    UpdateEdgesParams,
    UpdateManyParams,
    UpdateParams,
    validate,
)
from arango_plugin.kernel.time import Clock, SystemClock, audit_timestamp
from arango_plugin.observability.logging import get_logger

#: Stripped from every inserted or updating payload.
WRITE_PROTECTED_ATTRIBUTES: Final = ("_id", "_rev", "_key", "_status", "_create_date")

#: A pydantic params model or a plain mapping (camelCase or snake_case keys).
Params = Any


class Dao:
    """Data access for the collection described by *descriptor*."""

    def __init__(
        self,
        descriptor: CollectionDescriptor,
        executor: QueryExecutor,
        *,
        clock: Clock | None = None,
    ) -> None:
        self.descriptor = descriptor
        self._executor = executor
        self._clock: Clock = clock or SystemClock()
        self._log = get_logger(__name__, collection=descriptor.name)

    def __repr__(self) -> str:
        return f"Dao({self.descriptor.name!r})"

    # ------------------------------------------------------------------
    # Fragment helpers
    # ------------------------------------------------------------------

    @property
    def _collection(self) -> Any:
        return literal(self.descriptor.name)

    def _operation(self, name: str) -> str:
        return f"{self.descriptor.name}.{name}"

    def _now(self) -> Any:
        return bind(audit_timestamp(self._clock))

    def _filter(self, filter: Mapping[str, Any] | None, alias: str = "t") -> Aql | None:
        return build_filter(filter, alias, allow_array_contains=self.descriptor.allow_array_contains)

    @staticmethod
    def _like(like: LikeParams | None, alias: str = "t") -> LikeClauses:
        return build_like(like.to_mapping() if like else None, alias)

    def _projection(self, options: ResponseOptions, alias: str | None = None) -> Aql:
        return build_projection(options, alias, excluded=self.descriptor.hidden_attributes)

    def _conversion(self, options: ResponseOptions, source: str = "list") -> Aql:
        return build_code_conversion(
            options,
            source,
            static_collection=self.descriptor.static_data_collection,
            area_collection=self.descriptor.area_data_collection,
        )

    def _traversal_sort(
        self,
        v_sorts: Sequence[SortField] | None,
        e_sorts: Sequence[SortField] | None,
    ) -> Aql | None:
        return build_sort(
            merge_sorts(
                resolve_sort(v_sorts, VERTEX_ALIAS),
                resolve_sort(e_sorts, EDGE_ALIAS),
                edge_first=bool(e_sorts),
            )
        )

    async def _run(self, query: Aql, name: str) -> list[Any]:
        return await self._executor.run(query, operation=self._operation(name))

    async def query(self, fragment: Aql, operation: str = "query") -> list[Any]:
        """Run a hand-built :class:`Aql` fragment and return all rows."""
        return await self._run(fragment, operation)

    # ------------------------------------------------------------------
    # Document reads
    # ------------------------------------------------------------------

    async def get_one(self, params: Params) -> dict[str, Any] | None:
        p = validate(GetOneParams, params, operation=self._operation("get_one"))
        options = p.response_options
        query = aql(
            """LET list = (
  FOR t IN $collection
    FILTER t._id == $id AND t._status == true
    RETURN $projection
)
$conversion""",
            collection=self._collection,
            id=bind(p.id),
            projection=self._projection(options),
            conversion=self._conversion(options),
        )
        rows = await self._run(query, "get_one")
        validate_count(rows, "at_most_one", operation=self._operation("get_one"))
        return first_or_none(rows)

    async def get(self, _id: str, options: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        return await self.get_one({"_id": _id, "options": options})

    async def get_one_by_filter(self, params: Params) -> dict[str, Any] | None:
        """Newest active record matching the filter, or ``None``."""
        p = validate(GetOneByFilterParams, params, operation=self._operation("get_one_by_filter"))
        options = p.response_options
        query = aql(
            """LET list = (
  FOR t IN $collection
    FILTER t._status == true$filter
    SORT t._create_date DESC
    LIMIT 1
    RETURN $projection
)
$conversion""",
            collection=self._collection,
            filter=self._filter(p.filter),
            projection=self._projection(options),
            conversion=self._conversion(options),
        )
        return first_or_none(await self._run(query, "get_one_by_filter"))

    async def get_by_filter(
        self, filter: Mapping[str, Any], options: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        return await self.get_one_by_filter({"filter": filter, "options": options})

    async def gets(self, params: Params) -> list[dict[str, Any]]:
        p = validate(GetsParams, params, operation=self._operation("gets"))
        return await self.gets_by_filter(
            {"filter": {"_id": p.ids}, "sorts": p.sorts, "options": p.options}
        )

    async def gets_by_filter(self, params: Params) -> list[dict[str, Any]]:
        p = validate(GetsByFilterParams, params, operation=self._operation("gets_by_filter"))
        options = p.response_options
        likes = self._like(p.like)
        query = aql(
            """LET list = (
  FOR t IN $collection
    FILTER t._status == true$filter$and_like$or_like
   $sort
    RETURN $projection
)
$conversion""",
            collection=self._collection,
            filter=self._filter(p.filter),
            and_like=likes.and_clause,
            or_like=likes.or_clause,
            sort=build_sort(resolve_sort(p.sort_fields)),
            projection=self._projection(options),
            conversion=self._conversion(options),
        )
        return await self._run(query, "gets_by_filter")

    async def get_page(self, params: Params) -> PageResult[dict[str, Any]]:
        p = validate(GetPageParams, params, operation=self._operation("get_page"))
        options = p.response_options
        request = p.page_request
        likes = self._like(p.like)
        candidates = aql(
            """FOR t IN $collection
    FILTER t._status == true$filter$and_like$or_like
   $sort
    RETURN $projection""",
            collection=self._collection,
            filter=self._filter(p.filter),
            and_like=likes.and_clause,
            or_like=likes.or_clause,
            sort=build_sort(resolve_sort(p.sort_fields)),
            projection=self._projection(options),
        )
        return await self._page(candidates, request, options, "get_page")

    async def _page(
        self,
        candidates: Aql,
        request: PageRequest,
        options: ResponseOptions,
        name: str,
        prefix: Aql | None = None,
    ) -> PageResult[dict[str, Any]]:
        query = aql(
            """${prefix}LET ts = (
  $candidates
)
LET list = (
  FOR tl IN ts
    LIMIT $offset, $limit
    RETURN tl
)
RETURN {
  total_count: LENGTH(ts),
  items: ($conversion)
}""",
            prefix=prefix,
            candidates=candidates,
            offset=bind(request.offset),
            limit=bind(request.limit),
            conversion=self._conversion(options),
        )
        rows = await self._run(query, name)
        validate_count(rows, "exactly_one", operation=self._operation(name))
        row = rows[0]
        return PageResult.from_total(row["total_count"], row["items"], request)

    # ------------------------------------------------------------------
    # Document writes
    # ------------------------------------------------------------------

    async def _insert_one(self, document: dict[str, Any], name: str) -> dict[str, Any]:
        query = aql(
            """INSERT MERGE(UNSET($doc, $protected), { _create_date: $now, _status: true })
INTO $collection
RETURN { _id: NEW._id }""",
            doc=bind(document),
            protected=bind(list(WRITE_PROTECTED_ATTRIBUTES)),
            now=self._now(),
            collection=self._collection,
        )
        rows = await self._run(query, name)
        validate_count(rows, "exactly_one", operation=self._operation(name))
        self._log.info("dao.saved", operation=name, _id=rows[0]["_id"])
        return rows[0]

    async def _insert_many(self, documents: list[dict[str, Any]], name: str) -> dict[str, Any]:
        query = aql(
            """LET ids = (
  FOR d IN $docs
    INSERT MERGE(UNSET(d, $protected), { _create_date: $now, _status: true })
    INTO $collection
    RETURN NEW._id
)
RETURN { _ids: ids }""",
            docs=bind(documents),
            protected=bind(list(WRITE_PROTECTED_ATTRIBUTES)),
            now=self._now(),
            collection=self._collection,
        )
        rows = await self._run(query, name)
        validate_count(rows, "exactly_one", operation=self._operation(name))
        self._log.info("dao.saved_many", operation=name, count=len(rows[0]["_ids"]))
        return rows[0]

    async def save(self, document: Params) -> dict[str, Any]:
        doc = validate(NEW_DOCUMENT_ADAPTER, document, operation=self._operation("save"))
        return await self._insert_one(doc, "save")

    async def save_many(self, documents: Sequence[Params]) -> dict[str, Any]:
        docs = validate(NEW_DOCUMENTS_ADAPTER, documents, operation=self._operation("save_many"))
        return await self._insert_many(docs, "save_many")

    async def _update_one(
        self, _id: str, patch: dict[str, Any], name: str, *, keep_null: bool = True
    ) -> dict[str, Any]:
        query = aql(
            """FOR t IN $collection
  FILTER t._id == $id AND t._status == true
  UPDATE t WITH MERGE(UNSET($patch, $protected), { _update_date: $now })
  IN $collection OPTIONS { keepNull: $keep_null }
  RETURN { _id: NEW._id }""",
            collection=self._collection,
            id=bind(_id),
            patch=bind(patch),
            protected=bind(list(WRITE_PROTECTED_ATTRIBUTES)),
            now=self._now(),
            keep_null=literal("true" if keep_null else "false"),
        )
        rows = await self._run(query, name)
        validate_count(
            rows, "exactly_one", operation=self._operation(name), resource=self.descriptor.name, identifier=_id
        )
        return rows[0]

    async def _update_ids(self, ids: list[str], patch: dict[str, Any], name: str) -> dict[str, Any]:
        query = aql(
            """LET ids = (
  FOR id IN $ids
    FOR t IN $collection
      FILTER t._id == id AND t._status == true
      UPDATE t WITH MERGE(UNSET($patch, $protected), { _update_date: $now })
      IN $collection OPTIONS { keepNull: false }
      RETURN NEW._id
)
RETURN { _ids: ids }""",
            ids=bind(ids),
            collection=self._collection,
            patch=bind(patch),
            protected=bind(list(WRITE_PROTECTED_ATTRIBUTES)),
            now=self._now(),
        )
        return await self._expect_ids(query, name, ids)

    async def _update_items(self, items: list[dict[str, Any]], name: str) -> dict[str, Any]:
        query = aql(
            """LET ids = (
  FOR it IN $items
    FOR t IN $collection
      FILTER t._id == it._id AND t._status == true
      UPDATE t WITH MERGE(UNSET(it.newObj, $protected), { _update_date: $now })
      IN $collection OPTIONS { keepNull: false }
      RETURN NEW._id
)
RETURN { _ids: ids }""",
            items=bind(items),
            collection=self._collection,
            protected=bind(list(WRITE_PROTECTED_ATTRIBUTES)),
            now=self._now(),
        )
        return await self._expect_ids(query, name, [i["_id"] for i in items])

    async def _expect_ids(self, query: Aql, name: str, requested: list[str]) -> dict[str, Any]:
        """Run a batch write; at least one record must have been touched."""
        rows = await self._run(query, name)
        validate_count(rows, "exactly_one", operation=self._operation(name))
        result = rows[0]
        validate_count(
            result["_ids"],
            "at_least_one",
            operation=self._operation(name),
            resource=self.descriptor.name,
            identifier=", ".join(requested),
        )
        if len(result["_ids"]) < len(requested):
            self._log.warning(
                "dao.partial_write", operation=name, requested=len(requested), written=len(result["_ids"])
            )
        return result

    async def update(self, params: Params) -> dict[str, Any]:
        p = validate(UpdateParams, params, operation=self._operation("update"))
        return await self._update_one(p.id, p.new_obj, "update", keep_null=p.keep_null)

    async def update_many(self, params: Params) -> dict[str, Any]:
        p = validate(UpdateManyParams, params, operation=self._operation("update_many"))
        return await self._update_ids(p.ids, p.new_obj, "update_many")

    async def update_each(self, items: Sequence[Params]) -> dict[str, Any]:
        parsed = validate(UPDATE_EACH_ADAPTER, items, operation=self._operation("update_each"))
        return await self._update_items([{"_id": i.id, "newObj": i.new_obj} for i in parsed], "update_each")

    async def soft_delete(self, _id: str) -> dict[str, Any]:
        """Mark the record inactive; deleting an inactive record succeeds again."""
        doc_id = validate(ID_ADAPTER, _id, operation=self._operation("soft_delete"))
        query = aql(
            """LET key = PARSE_IDENTIFIER($id).key
UPDATE key WITH { _status: false, _update_date: $now } IN $collection
RETURN { _id: NEW._id }""",
            id=bind(doc_id),
            now=self._now(),
            collection=self._collection,
        )
        rows = await self._run(query, "soft_delete")
        validate_count(
            rows, "exactly_one", operation=self._operation("soft_delete"),
            resource=self.descriptor.name, identifier=doc_id,
        )
        self._log.info("dao.soft_deleted", _id=doc_id)
        return rows[0]

    async def hard_delete(self, _id: str) -> dict[str, Any]:
        doc_id = validate(ID_ADAPTER, _id, operation=self._operation("hard_delete"))
        query = aql(
            """LET key = PARSE_IDENTIFIER($id).key
REMOVE key IN $collection
RETURN { _id: OLD._id }""",
            id=bind(doc_id),
            collection=self._collection,
        )
        rows = await self._run(query, "hard_delete")
        validate_count(
            rows, "exactly_one", operation=self._operation("hard_delete"),
            resource=self.descriptor.name, identifier=doc_id,
        )
        self._log.info("dao.hard_deleted", _id=doc_id)
        return rows[0]

    async def soft_delete_many(self, _ids: Sequence[str]) -> dict[str, Any]:
        ids = validate(IDS_ADAPTER, _ids, operation=self._operation("soft_delete_many"))
        query = aql(
            """LET ids = (
  FOR id IN $ids
    LET key = PARSE_IDENTIFIER(id).key
    UPDATE key WITH { _status: false, _update_date: $now } IN $collection
    RETURN NEW._id
)
RETURN { _ids: ids }""",
            ids=bind(ids),
            now=self._now(),
            collection=self._collection,
        )
        return await self._expect_ids(query, "soft_delete_many", ids)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    async def save_edge(self, params: Params) -> dict[str, Any]:
        p = validate(SaveEdgeParams, params, operation=self._operation("save_edge"))
        return await self._insert_one(p.to_document(), "save_edge")

    async def save_edges(self, edges: Sequence[Params]) -> dict[str, Any]:
        parsed = validate(SAVE_EDGES_ADAPTER, edges, operation=self._operation("save_edges"))
        return await self._insert_many([p.to_document() for p in parsed], "save_edges")

    async def update_edge(self, params: Params) -> dict[str, Any]:
        p = validate(UpdateEdgeParams, params, operation=self._operation("update_edge"))
        return await self._update_one(p.id, p.new_obj.to_patch(), "update_edge")

    async def update_edges(self, params: Params) -> dict[str, Any]:
        p = validate(UpdateEdgesParams, params, operation=self._operation("update_edges"))
        return await self._update_ids(p.ids, p.new_obj.to_patch(), "update_edges")

    async def update_edges_each(self, items: Sequence[Params]) -> dict[str, Any]:
        parsed = validate(UPDATE_EDGES_EACH_ADAPTER, items, operation=self._operation("update_edges_each"))
        return await self._update_items(
            [{"_id": i.id, "newObj": i.new_obj.to_patch()} for i in parsed], "update_edges_each"
        )

    async def delete_edges_by_endpoint(self, params: Params) -> dict[str, Any]:
        """Soft-delete every active edge leaving ``_from`` and/or entering ``_to``."""
        p = validate(EndpointFilterParams, params, operation=self._operation("delete_edges_by_endpoint"))
        query = aql(
            """LET ids = (
  FOR t IN $collection
    FILTER t._status == true$filter
    UPDATE t WITH { _status: false, _update_date: $now } IN $collection
    RETURN NEW._id
)
RETURN { _ids: ids }""",
            collection=self._collection,
            filter=build_filter(p.to_filter()),
            now=self._now(),
        )
        rows = await self._run(query, "delete_edges_by_endpoint")
        validate_count(rows, "exactly_one", operation=self._operation("delete_edges_by_endpoint"))
        return rows[0]

    def _neighbor_candidates(
        self,
        direction: str,
        p: NeighborsParams,
        v_like: Aql | None = None,
        e_like: Aql | None = None,
    ) -> Aql:
        options = p.response_options
        return aql(
            """FOR v, e IN $direction $start $collection
    FILTER v._status == true AND e._status == true$v_filter$e_filter$v_like$e_like
   $sort
    RETURN $projection""",
            direction=literal(direction),
            start=bind(p.id),
            collection=self._collection,
            v_filter=self._filter(p.v_filter, VERTEX_ALIAS),
            e_filter=self._filter(p.e_filter, EDGE_ALIAS),
            v_like=v_like,
            e_like=e_like,
            sort=self._traversal_sort(p.vertex_sort_fields, p.edge_sort_fields),
            projection=self._projection(options, VERTEX_ALIAS),
        )

    def _with_clause(self) -> Aql:
        return aql("WITH $names\n", names=literal_list(self.descriptor.with_collections))

    async def get_neighbors(self, direction: str, params: Params) -> list[dict[str, Any]]:
        """Active vertices one hop from ``_id`` over this edge collection."""
        name = "get_neighbors"
        direction = validate(DIRECTION_ADAPTER, direction, operation=self._operation(name))
        p = validate(NeighborsParams, params, operation=self._operation(name))
        query = aql(
            """${prelude}LET list = (
  $candidates
)
$conversion""",
            prelude=self._with_clause(),
            candidates=self._neighbor_candidates(direction, p),
            conversion=self._conversion(p.response_options),
        )
        return await self._run(query, name)

    async def get_outbound_neighbors(self, params: Params) -> list[dict[str, Any]]:
        return await self.get_neighbors("OUTBOUND", params)

    async def get_inbound_neighbors(self, params: Params) -> list[dict[str, Any]]:
        return await self.get_neighbors("INBOUND", params)

    async def get_neighbors_page(self, direction: str, params: Params) -> PageResult[dict[str, Any]]:
        name = "get_neighbors_page"
        direction = validate(DIRECTION_ADAPTER, direction, operation=self._operation(name))
        p = validate(NeighborsPageParams, params, operation=self._operation(name))
        v_like = self._like(p.v_like, VERTEX_ALIAS)
        e_like = self._like(p.e_like, EDGE_ALIAS)
        candidates = self._neighbor_candidates(
            direction,
            p,
            v_like=(v_like.and_clause or Aql()) + (v_like.or_clause or Aql()),
            e_like=(e_like.and_clause or Aql()) + (e_like.or_clause or Aql()),
        )
        return await self._page(candidates, p.page_request, p.response_options, name, prefix=self._with_clause())

    async def get_outbound_neighbors_page(self, params: Params) -> PageResult[dict[str, Any]]:
        return await self.get_neighbors_page("OUTBOUND", params)

    async def get_inbound_neighbors_page(self, params: Params) -> PageResult[dict[str, Any]]:
        return await self.get_neighbors_page("INBOUND", params)

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------

    async def get_graph_vertices(self, direction: str, params: Params) -> list[dict[str, Any]]:
        """Vertices reachable from ``startId`` along fully active paths."""
        name = "get_graph_vertices"
        direction = validate(DIRECTION_ADAPTER, direction, operation=self._operation(name))
        p = validate(GraphParams, params, operation=self._operation(name))
        options = p.response_options
        query = aql(
            """${prelude}LET list = (
  FOR v, e, p IN $depth $direction $start GRAPH $graph
    FILTER p.vertices[*]._status ALL == true AND p.edges[*]._status ALL == true$v_filter$e_filter
   $sort
    RETURN $projection
)
$conversion""",
            prelude=self._with_clause(),
            depth=literal(p.depth_token),
            direction=literal(direction),
            start=bind(p.start_id),
            graph=bind(self.descriptor.graph),
            v_filter=self._filter(p.v_filter, VERTEX_ALIAS),
            e_filter=self._filter(p.e_filter, EDGE_ALIAS),
            sort=self._traversal_sort(p.vertex_sort_fields, p.edge_sort_fields),
            projection=self._projection(options, VERTEX_ALIAS),
            conversion=self._conversion(options),
        )
        return await self._run(query, name)

    async def get_outbound_graph_vertices(self, params: Params) -> list[dict[str, Any]]:
        return await self.get_graph_vertices("OUTBOUND", params)

    async def get_inbound_graph_vertices(self, params: Params) -> list[dict[str, Any]]:
        return await self.get_graph_vertices("INBOUND", params)


__all__ = ["WRITE_PROTECTED_ATTRIBUTES", "Dao"]
