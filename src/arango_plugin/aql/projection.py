"""Response shape builder.

Decides per call which attributes a query returns:

================  =========================  ==========================================
options           plain alias ``t``          traversal alias ``v`` (edge ``e``)
================  =========================  ==========================================
none              ``UNSET(t, @excluded)``    ``UNSET(v, @excluded)``
keep_attributes   ``KEEP(t, @kept)``         ``KEEP(v, @kept)``
has_edge          –                          ``{ vertex: F(v, @a), edge: F(e, @a) }``
has_from_to       –                          ``MERGE(F(v, @a), {_from: e._from, _to: e._to})``
================  =========================  ==========================================

Attributes in the forced-excluded set are removed from ``keep_attributes``
before the query is built, so they can never be returned.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any, Final

from arango_plugin.aql.fragment import Aql, aql, bind, literal

#: Never returned by a read, whatever the caller asks for.
FORCED_EXCLUDED_ATTRIBUTES: Final = ("_rev", "_key", "_status", "password")

EDGE_ALIAS: Final = "e"
VERTEX_ALIAS: Final = "v"


@dataclasses.dataclass(frozen=True)
class ResponseOptions:
    keep_attributes: str | None = None
    has_edge: bool = False
    has_from_to: bool = False
    depth_limit: bool = False
    convert_static_codes: bool = False
    convert_area_codes: bool = False

    @classmethod
    def of(cls, value: "ResponseOptions | Mapping[str, Any] | None") -> "ResponseOptions":
        if value is None:
            return cls()
        if isinstance(value, ResponseOptions):
            return value
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in value.items() if k in names and v is not None})

    @property
    def kept(self) -> list[str]:
        if not self.keep_attributes or not self.keep_attributes.strip():
            return []
        return [a.strip() for a in self.keep_attributes.split(",") if a.strip()]


def excluded_attributes(extra: Iterable[str] = ()) -> list[str]:
    """The forced-excluded set plus collection-specific *extra* attributes."""
    result = list(FORCED_EXCLUDED_ATTRIBUTES)
    result.extend(a for a in extra if a not in result)
    return result


def build_projection(
    options: ResponseOptions | Mapping[str, Any] | None,
    alias: str | None = None,
    *,
    excluded: Iterable[str] = FORCED_EXCLUDED_ATTRIBUTES,
) -> Aql:
    """Return the ``RETURN`` expression for *alias*.

    An empty alias or ``t`` means a plain document query; any other alias is a
    traversal vertex paired with edge ``e``.
    """
    opts = ResponseOptions.of(options)
    traversal = bool(alias) and alias != "t"
    alias_lit = literal(alias or "t")
    excluded = list(excluded)

    func = literal("UNSET")
    attributes = excluded
    kept = opts.kept
    if kept:
        func = literal("KEEP")
        attributes = [a for a in kept if a not in excluded]
    attrs = bind(attributes)

    if traversal:
        if opts.has_edge:
            return aql(
                "{ vertex: $f($v, $attrs), edge: $f($e, $attrs) }",
                f=func, v=alias_lit, e=literal(EDGE_ALIAS), attrs=attrs,
            )
        if opts.has_from_to:
            return aql(
                "MERGE($f($v, $attrs), {_from: $e._from, _to: $e._to})",
                f=func, v=alias_lit, e=literal(EDGE_ALIAS), attrs=attrs,
            )
    return aql("$f($v, $attrs)", f=func, v=alias_lit, attrs=attrs)


_STATIC_CODES = """
      LET static_types = (
        FOR k IN ATTRIBUTES(rt)
          FILTER LIKE(k, '%_scode')
          RETURN k
      )
      LET static_ret = MERGE(
        FOR sd IN $collection
          FILTER sd.type IN static_types AND sd.code == rt[sd.type]
          RETURN {[CONCAT(sd.type, '_name')]: sd.name}
      )"""

_AREA_CODES = """
      LET area_types = (
        FOR k IN ATTRIBUTES(rt)
          FILTER LIKE(k, '%_acode')
          RETURN k
      )
      LET area_ret = MERGE(
        FOR at IN area_types
          LET area_codes = (
            FOR code IN [CONCAT(LEFT(rt[at], 2), '0000'), CONCAT(LEFT(rt[at], 4), '00'), rt[at]]
              SORT code
              RETURN DISTINCT code
          )
          LET area_code_name = CONCAT(
            FOR ad IN $collection
              FILTER ad.code IN area_codes
              SORT ad.code
              RETURN ad.name
          )
          RETURN {[at]: area_codes, [CONCAT(at, '_name')]: area_code_name}
      )"""


def build_code_conversion(
    options: ResponseOptions | Mapping[str, Any] | None,
    source: str = "list",
    *,
    static_collection: str = "static_data",
    area_collection: str = "area_data",
) -> Aql:
    """Post-process the named result list *source*.

    ``convert_static_codes`` adds ``<attr>_name`` for every ``*_scode``
    attribute from *static_collection* (matched on ``type`` + ``code``).
    ``convert_area_codes`` turns every ``*_acode`` attribute into the
    province / city / district code list and adds the joined names from
    *area_collection*.  Without either flag the list passes through.
    """
    opts = ResponseOptions.of(options)
    src = literal(source)
    if not (opts.convert_static_codes or opts.convert_area_codes):
        return aql("FOR rt IN $src RETURN rt", src=src)

    static = aql("\n      LET static_ret = {}")
    if opts.convert_static_codes:
        static = aql(_STATIC_CODES, collection=literal(static_collection))
    area = aql("\n      LET area_ret = {}")
    if opts.convert_area_codes:
        area = aql(_AREA_CODES, collection=literal(area_collection))

    return aql(
        "FOR rt IN $src$static$area\n      RETURN MERGE(rt, static_ret, area_ret)",
        src=src, static=static, area=area,
    )


__all__ = [
    "EDGE_ALIAS",
    "FORCED_EXCLUDED_ATTRIBUTES",
    "VERTEX_ALIAS",
    "ResponseOptions",
    "build_code_conversion",
    "build_projection",
    "excluded_attributes",
]
