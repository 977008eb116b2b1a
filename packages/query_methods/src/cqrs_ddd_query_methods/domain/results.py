"""
Bounded result containers a query method can declare as its return type.

- ``Slice[T]`` — a chunk of results that knows whether more follow.
- ``Page[T]`` — a slice that also knows the total number of results.
- ``Window[T]`` — a chunk produced by scrolling, carrying a
  ``ScrollPosition`` for every element so iteration can resume.
- ``SearchResults[T]`` — ranked ``SearchHit[T]`` entries.

These are plain generic containers; the persistence layer builds them,
query method resolution only inspects their types.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from .paging import Pageable, PageRequest

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from .scrolling import ScrollPosition
    from .sorting import Sort

T = TypeVar("T")
U = TypeVar("U")


class Slice(Generic[T]):
    """A chunk of results plus the request that produced it."""

    __slots__ = ("_content", "_has_next", "_pageable")

    def __init__(
        self,
        content: Iterable[T],
        pageable: Pageable | None = None,
        has_next: bool = False,
    ) -> None:
        self._content: list[T] = list(content)
        self._pageable = pageable if pageable is not None else Pageable.unpaged()
        self._has_next = has_next

    # -- content ------------------------------------------------------------

    @property
    def content(self) -> list[T]:
        return list(self._content)

    @property
    def has_content(self) -> bool:
        return bool(self._content)

    @property
    def number_of_elements(self) -> int:
        return len(self._content)

    def __iter__(self) -> Iterator[T]:
        return iter(self._content)

    def __len__(self) -> int:
        return len(self._content)

    # -- paging metadata ----------------------------------------------------

    @property
    def pageable(self) -> Pageable:
        return self._pageable

    @property
    def sort(self) -> Sort:
        return self._pageable.sort

    @property
    def number(self) -> int:
        if isinstance(self._pageable, PageRequest):
            return self._pageable.page
        return 0

    @property
    def size(self) -> int:
        if isinstance(self._pageable, PageRequest):
            return self._pageable.size
        return len(self._content)

    @property
    def has_next(self) -> bool:
        return self._has_next

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next

    def next_pageable(self) -> Pageable:
        """Request for the following chunk (unpaged if this is the last)."""
        if self.has_next and isinstance(self._pageable, PageRequest):
            return self._pageable.next()
        return Pageable.unpaged(self.sort)

    def previous_pageable(self) -> Pageable:
        if self.has_previous and isinstance(self._pageable, PageRequest):
            return self._pageable.previous_or_first()
        return Pageable.unpaged(self.sort)

    def map(self, converter: Callable[[T], U]) -> Slice[U]:
        return Slice(
            [converter(item) for item in self._content],
            self._pageable,
            self._has_next,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(number={self.number}, "
            f"elements={self.number_of_elements}, has_next={self.has_next})"
        )


class Page(Slice[T]):
    """A slice that also knows the total number of matching results."""

    __slots__ = ("_total",)

    def __init__(
        self,
        content: Iterable[T],
        pageable: Pageable | None = None,
        total: int | None = None,
    ) -> None:
        items = list(content)
        request = pageable if pageable is not None else Pageable.unpaged()
        offset = request.offset if isinstance(request, PageRequest) else 0
        if total is None or total < offset + len(items):
            total = offset + len(items)
        self._total = total
        has_next = request.is_paged and offset + len(items) < total
        super().__init__(items, request, has_next)

    @classmethod
    def empty(cls, pageable: Pageable | None = None) -> Page[T]:
        return cls([], pageable, 0)

    @property
    def total_elements(self) -> int:
        return self._total

    @property
    def total_pages(self) -> int:
        if not self._pageable.is_paged:
            return 1
        return math.ceil(self._total / self.size) if self.size else 1

    def map(self, converter: Callable[[T], U]) -> Page[U]:
        return Page(
            [converter(item) for item in self._content],
            self._pageable,
            self._total,
        )

    def __repr__(self) -> str:
        return (
            f"Page(number={self.number}, total_pages={self.total_pages}, "
            f"total_elements={self.total_elements})"
        )


class Window(Generic[T]):
    """Result of a scroll query.

    ``position_function(index)`` returns the ``ScrollPosition`` that
    resumes iteration right after the element at *index*.
    """

    __slots__ = ("_content", "_has_next", "_position_function")

    def __init__(
        self,
        content: Iterable[T],
        position_function: Callable[[int], ScrollPosition],
        has_next: bool = False,
    ) -> None:
        self._content: list[T] = list(content)
        self._position_function = position_function
        self._has_next = has_next

    @property
    def content(self) -> list[T]:
        return list(self._content)

    @property
    def size(self) -> int:
        return len(self._content)

    @property
    def is_empty(self) -> bool:
        return not self._content

    @property
    def has_next(self) -> bool:
        return self._has_next

    @property
    def is_last(self) -> bool:
        return not self._has_next

    def position_at(self, index: int) -> ScrollPosition:
        if index < 0 or index >= len(self._content):
            raise IndexError(f"No element at index {index} in window of {self.size}")
        return self._position_function(index)

    def next_position(self) -> ScrollPosition:
        """Position after the last element of this window."""
        return self.position_at(len(self._content) - 1)

    def map(self, converter: Callable[[T], U]) -> Window[U]:
        return Window(
            [converter(item) for item in self._content],
            self._position_function,
            self._has_next,
        )

    def __iter__(self) -> Iterator[T]:
        return iter(self._content)

    def __len__(self) -> int:
        return len(self._content)


@dataclass(frozen=True)
class SearchHit(Generic[T]):
    """A single ranked search hit."""

    content: T
    score: float = 0.0


class SearchResults(Generic[T]):
    """Ranked search hits, iterable as ``SearchHit[T]``."""

    __slots__ = ("_hits",)

    def __init__(self, hits: Iterable[SearchHit[T]]) -> None:
        self._hits: list[SearchHit[T]] = list(hits)

    @property
    def hits(self) -> list[SearchHit[T]]:
        return list(self._hits)

    def contents(self) -> list[T]:
        return [hit.content for hit in self._hits]

    def map(self, converter: Callable[[T], U]) -> SearchResults[U]:
        return SearchResults(
            SearchHit(converter(hit.content), hit.score) for hit in self._hits
        )

    def __iter__(self) -> Iterator[SearchHit[T]]:
        return iter(self._hits)

    def __len__(self) -> int:
        return len(self._hits)
