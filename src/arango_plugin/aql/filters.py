"""Filter clause builder.

A filter mapping becomes a chain of ``AND`` predicates appended to an existing
``FILTER`` line:

* list value – ``alias.field IN @v``
* ``{opr, value}`` – ``alias.field <opr> @v``
* ``{opr: "POSITION", value}`` – the document attribute is an array that must
  contain the value(s): ``FILTER (@v0 IN alias.field OR @v1 IN alias.field)``
* anything else – ``alias.field == @v``

Equality / membership predicates are emitted first, comparators next and
array-contains filters last, so the leading predicates line up with the
best-prefix match of a persistent index.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Final, Literal as TypingLiteral

from arango_plugin.aql.fragment import COMPARISON_OPERATORS, Aql, aql, bind, join, literal
from arango_plugin.kernel.errors import ValidationError

#: Operator meaning "the document's array attribute contains the value".
ARRAY_CONTAINS: Final = "POSITION"

DEFAULT_ALIAS: Final = "t"

Operator = TypingLiteral["==", "!=", "<", "<=", ">", ">=", "IN", "NOT IN", "LIKE", "=~", "!~", "POSITION"]


@dataclasses.dataclass(frozen=True)
class Condition:
    """Structured filter value: compare ``field`` with ``value`` using ``opr``."""

    opr: Operator
    value: Any


def as_condition(data: Any) -> Condition | None:
    """Return *data* as a :class:`Condition`, or ``None`` if it is a plain value."""
    if isinstance(data, Condition):
        return data
    if isinstance(data, Mapping) and "opr" in data:
        return Condition(opr=data["opr"], value=data.get("value"))
    return None


def _array_contains(alias: Aql, field: Aql, value: Any) -> Aql | None:
    values = value if isinstance(value, (list, tuple)) else [value]
    if not values:
        return None
    checks = join(
        (aql("$v IN $alias.$field", v=bind(v), alias=alias, field=field) for v in values),
        " OR ",
    )
    return aql("\n FILTER ($checks)", checks=checks)


def build_filter(
    filter: Mapping[str, Any] | None,
    alias: str = DEFAULT_ALIAS,
    *,
    allow_array_contains: bool = False,
) -> Aql | None:
    """Build the AND-chained predicates for *filter* on *alias*.

    Returns ``None`` for an empty or missing filter.
    """
    if not filter:
        return None
    alias_lit = literal(alias)
    equality: list[Aql] = []
    comparisons: list[Aql] = []
    contains: list[Aql | None] = []
    for key, data in filter.items():
        field = literal(key)
        condition = as_condition(data)
        if condition is None:
            if isinstance(data, (list, tuple)):
                equality.append(aql(" AND $a.$f IN $v", a=alias_lit, f=field, v=bind(list(data))))
            else:
                equality.append(aql(" AND $a.$f == $v", a=alias_lit, f=field, v=bind(data)))
        elif condition.opr == ARRAY_CONTAINS:
            if not allow_array_contains:
                raise ValidationError(
                    f"Filter operator {ARRAY_CONTAINS!r} is not enabled for this collection",
                    errors=[{"loc": ["filter", key, "opr"], "msg": "operator not enabled", "type": "operator"}],
                )
            contains.append(_array_contains(alias_lit, field, condition.value))
        elif condition.opr in COMPARISON_OPERATORS:
            comparisons.append(
                aql(" AND $a.$f $op $v", a=alias_lit, f=field, op=literal(condition.opr), v=bind(condition.value))
            )
        else:
            raise ValidationError(
                f"Unsupported filter operator: {condition.opr!r}",
                errors=[{"loc": ["filter", key, "opr"], "msg": "unsupported operator", "type": "operator"}],
            )
    return join(equality + comparisons + contains)


__all__ = ["ARRAY_CONTAINS", "DEFAULT_ALIAS", "Condition", "Operator", "as_condition", "build_filter"]
