"""AQL query-fragment engine – fragments, clause builders, pagination."""
from arango_plugin.aql.filters import ARRAY_CONTAINS, Condition, build_filter
from arango_plugin.aql.fragment import (
    Aql,
    Bind,
    CompiledAql,
    Literal,
    aql,
    bind,
    join,
    literal,
    literal_list,
)
from arango_plugin.aql.likes import LikeClauses, LikeItem, build_like
from arango_plugin.aql.pagination import PageRequest, PageResult, page_offset, page_window
from arango_plugin.aql.projection import (
    FORCED_EXCLUDED_ATTRIBUTES,
    ResponseOptions,
    build_code_conversion,
    build_projection,
)
from arango_plugin.aql.sorts import SortField, build_sort, merge_sorts, resolve_sort

__all__ = [
    "ARRAY_CONTAINS",
    "FORCED_EXCLUDED_ATTRIBUTES",
    "Aql",
    "Bind",
    "CompiledAql",
    "Condition",
    "LikeClauses",
    "LikeItem",
    "Literal",
    "PageRequest",
    "PageResult",
    "ResponseOptions",
    "SortField",
    "aql",
    "bind",
    "build_code_conversion",
    "build_filter",
    "build_like",
    "build_projection",
    "build_sort",
    "join",
    "literal",
    "literal_list",
    "merge_sorts",
    "page_offset",
    "page_window",
    "resolve_sort",
]
