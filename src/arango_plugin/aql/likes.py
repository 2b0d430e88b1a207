"""Fuzzy-match (``LIKE``) clause builder.

``and`` items each get their own ``FILTER`` line.  ``or`` items share a single
``FILTER`` so they widen each other instead of narrowing the result.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any

from arango_plugin.aql.fragment import Aql, aql, bind, join, literal
from arango_plugin.aql.filters import DEFAULT_ALIAS


@dataclasses.dataclass(frozen=True)
class LikeItem:
    field: str
    search: str
    case_insensitive: bool = False


@dataclasses.dataclass(frozen=True)
class LikeClauses:
    and_clause: Aql | None = None
    or_clause: Aql | None = None


def _as_like_item(item: LikeItem | Mapping[str, Any]) -> LikeItem:
    if isinstance(item, LikeItem):
        return item
    return LikeItem(
        field=item["field"],
        search=item["search"],
        case_insensitive=bool(item.get("case_insensitive", item.get("caseFlag", False))),
    )


def _like_call(alias: Aql, item: LikeItem) -> Aql:
    case_flag = literal("true") if item.case_insensitive else None
    if case_flag is None:
        return aql("LIKE($a.$f, $s)", a=alias, f=literal(item.field), s=bind(item.search))
    return aql("LIKE($a.$f, $s, $c)", a=alias, f=literal(item.field), s=bind(item.search), c=case_flag)


def build_like(
    like: Mapping[str, Sequence[LikeItem | Mapping[str, Any]] | None] | None,
    alias: str = DEFAULT_ALIAS,
) -> LikeClauses:
    if not like:
        return LikeClauses()
    alias_lit = literal(alias)
    or_items = [_as_like_item(i) for i in like.get("or") or ()]
    and_items = [_as_like_item(i) for i in like.get("and") or ()]

    or_clause = None
    if or_items:
        or_clause = aql("\n FILTER $calls", calls=join((_like_call(alias_lit, i) for i in or_items), " OR "))

    and_clause = None
    if and_items:
        and_clause = join(aql("\n FILTER $call", call=_like_call(alias_lit, i)) for i in and_items)

    return LikeClauses(and_clause=and_clause, or_clause=or_clause)


__all__ = ["LikeClauses", "LikeItem", "build_like"]
