"""Sort clause builder."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any, Final, Literal as TypingLiteral

from arango_plugin.aql.fragment import Aql, aql, join, literal
from arango_plugin.aql.filters import DEFAULT_ALIAS
from arango_plugin.kernel.errors import ValidationError

#: Attribute used when no sort is given, so pagination is deterministic.
DEFAULT_SORT_FIELD: Final = "_id"

Direction = TypingLiteral["", "asc", "desc", "ASC", "DESC"]


@dataclasses.dataclass(frozen=True)
class SortField:
    """Single sort criterion; an empty direction leaves the AQL default (ASC)."""

    field: str
    direction: Direction = ""


def _as_sort_field(item: SortField | Mapping[str, Any]) -> SortField:
    if isinstance(item, SortField):
        return item
    return SortField(field=item["field"], direction=item.get("direction") or "")


def resolve_sort(
    sorts: Sequence[SortField | Mapping[str, Any]] | None,
    alias: str = DEFAULT_ALIAS,
) -> list[Aql]:
    """Return one ``alias.field [DIRECTION]`` fragment per sort item.

    An empty or missing sort list resolves to ``alias._id``.
    """
    alias_lit = literal(alias)
    if not sorts:
        return [aql("$a.$f", a=alias_lit, f=literal(DEFAULT_SORT_FIELD))]
    fields: list[Aql] = []
    for item in sorts:
        sort = _as_sort_field(item)
        field = aql("$a.$f", a=alias_lit, f=literal(sort.field))
        if sort.direction:
            direction = sort.direction.upper()
            if direction not in ("ASC", "DESC"):
                raise ValidationError(
                    f"Unsupported sort direction: {sort.direction!r}",
                    errors=[{"loc": ["sorts", sort.field, "direction"], "msg": "expected ASC or DESC", "type": "direction"}],
                )
            field = field + aql(" $d", d=literal(direction))
        fields.append(field)
    return fields


def merge_sorts(vertex_fields: list[Aql], edge_fields: list[Aql], *, edge_first: bool) -> list[Aql]:
    """Order traversal sort fields; explicit edge sorts take precedence."""
    return edge_fields + vertex_fields if edge_first else vertex_fields + edge_fields


def build_sort(fields: Sequence[Aql]) -> Aql | None:
    """`` SORT f1, f2, ...`` or ``None`` when there is nothing to sort by."""
    if not fields:
        return None
    return aql(" SORT $fields", fields=join(fields, ", "))


__all__ = ["DEFAULT_SORT_FIELD", "Direction", "SortField", "build_sort", "merge_sorts", "resolve_sort"]
