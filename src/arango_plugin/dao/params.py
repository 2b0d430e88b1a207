"""Parameter schemas for every Dao operation.

Each operation validates its input here before any fragment is built, so a
bad request fails fast with :class:`~arango_plugin.kernel.errors.ValidationError`
and no query is issued.  Keys are accepted in snake_case or camelCase
(``page_number`` / ``pageNumber``); ArangoDB system attributes keep their
underscore names (``_id``, ``_ids``, ``_from``, ``_to``).
"""
from __future__ import annotations

import math
from collections.abc import Iterator
from typing import Annotated, Any, Literal as TypingLiteral, TypeVar, Union

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    StringConstraints,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from arango_plugin.aql.filters import Condition
from arango_plugin.aql.likes import LikeItem
from arango_plugin.aql.pagination import PageRequest
from arango_plugin.aql.projection import ResponseOptions
from arango_plugin.aql.sorts import Direction, SortField
from arango_plugin.kernel.errors import ValidationError
from arango_plugin.observability.logging import SensitiveFieldsFilter, get_logger

logger = get_logger(__name__)

_redactor = SensitiveFieldsFilter()

M = TypeVar("M")

FIELD_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$"

FieldName = Annotated[str, StringConstraints(pattern=FIELD_PATTERN)]
DocumentId = Annotated[str, StringConstraints(min_length=1)]
DocumentIds = Annotated[list[DocumentId], Field(min_length=1)]
TraversalDirection = TypingLiteral["OUTBOUND", "INBOUND", "ANY"]

Scalar = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]
FilterValue = Union[Condition, list[Any], Scalar]


# ---------------------------------------------------------------------------
# Value checks shared by filters and documents
# ---------------------------------------------------------------------------


def _leaves(value: Any) -> Iterator[Any]:
    if isinstance(value, Condition):
        yield from _leaves(value.value)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _leaves(item)
    elif isinstance(value, dict):
        for item in value.values():
            yield from _leaves(item)
    else:
        yield value


def _is_non_finite(value: Any) -> bool:
    return isinstance(value, float) and (math.isnan(value) or math.isinf(value))


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _check_mapping(mapping: dict[str, Any], *, min_keys: int, allow_blank: bool) -> dict[str, Any]:
    if len(mapping) < min_keys:
        raise ValueError(f"must contain at least {min_keys} key(s)")
    for key, value in mapping.items():
        if not allow_blank and _is_blank(value):
            raise ValueError(f"{key!r} must not be empty")
        if any(_is_non_finite(leaf) for leaf in _leaves(value)):
            raise ValueError(f"{key!r} must not contain NaN or Infinity")
    return mapping


def _required(mapping: dict[str, Any]) -> dict[str, Any]:
    return _check_mapping(mapping, min_keys=1, allow_blank=False)


def _updatable(mapping: dict[str, Any]) -> dict[str, Any]:
    return _check_mapping(mapping, min_keys=1, allow_blank=True)


def _common(mapping: dict[str, Any]) -> dict[str, Any]:
    return _check_mapping(mapping, min_keys=0, allow_blank=True)


#: At least one key; no ``''`` / ``None`` / NaN / Infinity (single reads).
RequiredFilter = Annotated[dict[FieldName, FilterValue], AfterValidator(_required)]
#: Any number of keys; ``''`` / ``None`` allowed, no NaN / Infinity (lists, pages).
CommonFilter = Annotated[dict[FieldName, FilterValue], AfterValidator(_common)]
#: A new document: at least one attribute, none empty.
NewDocument = Annotated[dict[str, Any], AfterValidator(_required)]
#: Attributes to merge into a document: ``''`` / ``None`` allowed.
DocumentPatch = Annotated[dict[str, Any], AfterValidator(_updatable)]


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


class Params(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class SortParams(Params):
    field: FieldName
    direction: Direction = ""

    def to_sort(self) -> SortField:
        return SortField(field=self.field, direction=self.direction)


class LikeItemParams(Params):
    field: FieldName
    search: Annotated[str, StringConstraints(min_length=1)]
    case_insensitive: bool = Field(
        False, validation_alias=AliasChoices("case_insensitive", "caseInsensitive", "caseFlag")
    )

    def to_item(self) -> LikeItem:
        return LikeItem(field=self.field, search=self.search, case_insensitive=self.case_insensitive)


class LikeParams(Params):
    or_: Annotated[list[LikeItemParams], Field(min_length=1)] | None = Field(None, alias="or")
    and_: Annotated[list[LikeItemParams], Field(min_length=1)] | None = Field(None, alias="and")

    @model_validator(mode="after")
    def _at_least_one_group(self) -> "LikeParams":
        if not self.or_ and not self.and_:
            raise ValueError("like needs an 'or' or an 'and' group")
        return self

    def to_mapping(self) -> dict[str, list[LikeItem]]:
        return {
            "or": [i.to_item() for i in self.or_ or ()],
            "and": [i.to_item() for i in self.and_ or ()],
        }


class OptionsParams(Params):
    keep_attributes: str | None = Field(
        None, validation_alias=AliasChoices("keep_attributes", "keepAttributes", "keepAttrs")
    )
    has_edge: bool = False
    has_from_to: bool = False
    depth_limit: bool = False
    convert_static_codes: bool = Field(
        False, validation_alias=AliasChoices("convert_static_codes", "convertStaticCodes", "convertStaticFlag")
    )
    convert_area_codes: bool = Field(
        False, validation_alias=AliasChoices("convert_area_codes", "convertAreaCodes", "convertAreaFlag")
    )

    def to_options(self) -> ResponseOptions:
        return ResponseOptions(**self.model_dump())


class _WithOptions(Params):
    options: OptionsParams | None = None

    @property
    def response_options(self) -> ResponseOptions:
        return self.options.to_options() if self.options else ResponseOptions()


def _sort_fields(sorts: list[SortParams] | None) -> list[SortField] | None:
    return [s.to_sort() for s in sorts] if sorts is not None else None


# ---------------------------------------------------------------------------
# Document operations
# ---------------------------------------------------------------------------


class GetOneParams(_WithOptions):
    id: DocumentId = Field(alias="_id")


class GetOneByFilterParams(_WithOptions):
    filter: RequiredFilter


class GetsParams(_WithOptions):
    ids: DocumentIds = Field(alias="_ids")
    sorts: list[SortParams] | None = None


class GetsByFilterParams(_WithOptions):
    filter: RequiredFilter | None = None
    like: LikeParams | None = None
    sorts: list[SortParams] | None = None

    @model_validator(mode="after")
    def _filter_or_like(self) -> "GetsByFilterParams":
        if self.filter is not None and self.like is not None:
            raise ValueError("'filter' and 'like' are mutually exclusive")
        return self

    @property
    def sort_fields(self) -> list[SortField] | None:
        return _sort_fields(self.sorts)


class GetPageParams(_WithOptions):
    page_number: StrictInt
    page_size: Annotated[StrictInt, Field(ge=1)]
    filter: CommonFilter | None = None
    like: LikeParams | None = None
    sorts: list[SortParams] | None = None

    @property
    def page_request(self) -> PageRequest:
        return PageRequest(page_number=self.page_number, page_size=self.page_size)

    @property
    def sort_fields(self) -> list[SortField] | None:
        return _sort_fields(self.sorts)


class UpdateParams(Params):
    id: DocumentId = Field(alias="_id")
    new_obj: DocumentPatch
    keep_null: bool = True


class UpdateManyParams(Params):
    ids: DocumentIds = Field(alias="_ids")
    new_obj: DocumentPatch


class UpdateEachItem(Params):
    id: DocumentId = Field(alias="_id")
    new_obj: DocumentPatch


# ---------------------------------------------------------------------------
# Edge operations
# ---------------------------------------------------------------------------


class SaveEdgeParams(Params):
    from_: DocumentId = Field(alias="_from")
    to: DocumentId = Field(alias="_to")
    attrs: NewDocument | None = None

    def to_document(self) -> dict[str, Any]:
        return {"_from": self.from_, "_to": self.to, **(self.attrs or {})}


class EdgeEndpoints(Params):
    from_: DocumentId | None = Field(None, alias="_from")
    to: DocumentId | None = Field(None, alias="_to")

    @model_validator(mode="after")
    def _at_least_one(self) -> "EdgeEndpoints":
        if self.from_ is None and self.to is None:
            raise ValueError("at least one of '_from' / '_to' is required")
        return self

    def to_patch(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)


class UpdateEdgeParams(Params):
    id: DocumentId = Field(alias="_id")
    new_obj: EdgeEndpoints


class UpdateEdgesParams(Params):
    ids: DocumentIds = Field(alias="_ids")
    new_obj: EdgeEndpoints


class UpdateEdgesEachItem(Params):
    id: DocumentId = Field(alias="_id")
    new_obj: EdgeEndpoints


class EndpointFilterParams(Params):
    from_: DocumentId | DocumentIds | None = Field(None, alias="_from")
    to: DocumentId | DocumentIds | None = Field(None, alias="_to")

    @model_validator(mode="after")
    def _at_least_one(self) -> "EndpointFilterParams":
        if self.from_ is None and self.to is None:
            raise ValueError("at least one of '_from' / '_to' is required")
        return self

    def to_filter(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class _TraversalParams(_WithOptions):
    v_filter: CommonFilter | None = None
    e_filter: CommonFilter | None = None
    v_sorts: list[SortParams] | None = None
    e_sorts: list[SortParams] | None = None

    @property
    def vertex_sort_fields(self) -> list[SortField] | None:
        return _sort_fields(self.v_sorts)

    @property
    def edge_sort_fields(self) -> list[SortField] | None:
        return _sort_fields(self.e_sorts)


class NeighborsParams(_TraversalParams):
    id: DocumentId = Field(alias="_id")


class NeighborsPageParams(NeighborsParams):
    page_number: StrictInt
    page_size: Annotated[StrictInt, Field(ge=1)]
    v_like: LikeParams | None = None
    e_like: LikeParams | None = None

    @property
    def page_request(self) -> PageRequest:
        return PageRequest(page_number=self.page_number, page_size=self.page_size)


# ---------------------------------------------------------------------------
# Graph operations
# ---------------------------------------------------------------------------


class GraphParams(_TraversalParams):
    start_id: DocumentId
    depth: Annotated[StrictInt, Field(ge=0)]

    @property
    def depth_token(self) -> str:
        """``0``; a fixed ``N`` for depth 1 or ``depth_limit``; else ``1..N``."""
        if self.depth <= 0:
            return "0"
        if self.depth == 1 or (self.options is not None and self.options.depth_limit):
            return str(self.depth)
        return f"1..{self.depth}"


# ---------------------------------------------------------------------------
# Bare values
# ---------------------------------------------------------------------------

ID_ADAPTER: TypeAdapter[str] = TypeAdapter(DocumentId)
IDS_ADAPTER: TypeAdapter[list[str]] = TypeAdapter(DocumentIds)
DIRECTION_ADAPTER: TypeAdapter[str] = TypeAdapter(TraversalDirection)
NEW_DOCUMENT_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(NewDocument)
NEW_DOCUMENTS_ADAPTER: TypeAdapter[list[dict[str, Any]]] = TypeAdapter(
    Annotated[list[NewDocument], Field(min_length=1)]
)
SAVE_EDGES_ADAPTER: TypeAdapter[list[SaveEdgeParams]] = TypeAdapter(
    Annotated[list[SaveEdgeParams], Field(min_length=1)]
)
UPDATE_EACH_ADAPTER: TypeAdapter[list[UpdateEachItem]] = TypeAdapter(
    Annotated[list[UpdateEachItem], Field(min_length=1)]
)
UPDATE_EDGES_EACH_ADAPTER: TypeAdapter[list[UpdateEdgesEachItem]] = TypeAdapter(
    Annotated[list[UpdateEdgesEachItem], Field(min_length=1)]
)


def _format_loc(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "params"


def _loggable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return _redactor.redact_value(data.model_dump(by_alias=True))
    if isinstance(data, (dict, list, tuple)):
        return _redactor.redact_value(data)
    return repr(data)


def validate(schema: type[M] | TypeAdapter[M], data: Any, *, operation: str) -> M:
    """Validate *data* against *schema* or raise :class:`ValidationError`."""
    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(data)
        return schema.model_validate(data)  # type: ignore[attr-defined]
    except PydanticValidationError as exc:
        errors = [
            {"loc": [str(p) for p in e["loc"]], "msg": e["msg"], "type": e["type"]}
            for e in exc.errors(include_url=False, include_context=False, include_input=False)
        ]
        logger.error(
            "dao.params_invalid",
            operation=operation,
            params=_loggable(data),
            errors=errors,
        )
        first = errors[0] if errors else {"loc": [], "msg": str(exc)}
        raise ValidationError(
            f"{operation}: {_format_loc(tuple(first['loc']))}: {first['msg']}",
            errors=errors,
            cause=exc,
        ) from exc


__all__ = [
    "CommonFilter",
    "DocumentPatch",
    "EdgeEndpoints",
    "EndpointFilterParams",
    "GetOneByFilterParams",
    "GetOneParams",
    "GetPageParams",
    "GetsByFilterParams",
    "GetsParams",
    "GraphParams",
    "LikeParams",
    "NeighborsPageParams",
    "NeighborsParams",
    "NewDocument",
    "OptionsParams",
    "Params",
    "RequiredFilter",
    "SaveEdgeParams",
    "SortParams",
    "UpdateEachItem",
    "UpdateEdgeParams",
    "UpdateEdgesEachItem",
    "UpdateEdgesParams",
    "UpdateManyParams",
    "UpdateParams",
    "validate",
]
