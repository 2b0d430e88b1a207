"""Pagination – 1-based page parameters, offset window and page envelope."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


def page_offset(page_number: int | None, page_size: int | None) -> int:
    """``(page_number - 1) * page_size``, or 0 when the page is not valid."""
    if page_number and page_size and page_number > 0:
        return (page_number - 1) * page_size
    return 0


@dataclasses.dataclass(frozen=True)
class PageWindow:
    offset: int
    limit: int
    end: int
    has_more: bool


def page_window(total: int, offset: int, limit: int) -> PageWindow:
    """Derive ``end`` / ``has_more`` for a slice of a *total*-sized result."""
    upper = offset + limit
    return PageWindow(offset=offset, limit=limit, end=min(upper, total), has_more=upper < total)


@dataclasses.dataclass(frozen=True)
class PageRequest:
    """Offset-based pagination parameters."""

    page_number: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def offset(self) -> int:
        return page_offset(self.page_number, self.page_size)

    @property
    def limit(self) -> int:
        return self.page_size


@dataclasses.dataclass
class PageResult(Generic[T]):
    """One page of results with totals taken from the same query."""

    total_count: int
    has_more: bool
    end: int
    items: list[T]

    @classmethod
    def from_total(cls, total_count: int, items: list[T], request: PageRequest) -> "PageResult[T]":
        window = page_window(total_count, request.offset, request.limit)
        return cls(total_count=total_count, has_more=window.has_more, end=window.end, items=items)

    def map(self, fn: Callable[[T], Any]) -> "PageResult[Any]":
        """Return a new :class:`PageResult` with each item transformed by *fn*."""
        return PageResult(
            total_count=self.total_count,
            has_more=self.has_more,
            end=self.end,
            items=[fn(item) for item in self.items],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_count": self.total_count,
            "has_more": self.has_more,
            "end": self.end,
            "items": self.items,
        }


__all__ = ["PageRequest", "PageResult", "PageWindow", "page_offset", "page_window"]
