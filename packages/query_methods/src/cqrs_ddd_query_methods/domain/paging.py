"""Pagination and result-count parameters."""

from __future__ import annotations

from pydantic import Field

from .scrolling import OffsetScrollPosition, ScrollPosition
from .sorting import Sort
from .value_object import ValueObject


class Limit(ValueObject):
    """Cap on the number of results, independent of pagination."""

    max_results: int | None = Field(default=None, ge=0)

    @classmethod
    def of(cls, max_results: int) -> Limit:
        return cls(max_results=max_results)

    @classmethod
    def unlimited(cls) -> Limit:
        return cls()

    @property
    def is_limited(self) -> bool:
        return self.max_results is not None

    @property
    def is_unlimited(self) -> bool:
        return self.max_results is None


class Pageable(ValueObject):
    """Pagination request: page number, page size and an embedded sort.

    The base class is the *unpaged* request. :class:`PageRequest` is the
    paged variant. Query methods declare parameters as ``Pageable`` and
    callers pass either.
    """

    sort: Sort = Field(default_factory=Sort.unsorted)

    @classmethod
    def unpaged(cls, sort: Sort | None = None) -> Pageable:
        return Pageable(sort=sort or Sort.unsorted())

    @classmethod
    def of_size(cls, size: int) -> PageRequest:
        return PageRequest(page=0, size=size)

    @property
    def is_paged(self) -> bool:
        return False

    @property
    def is_unpaged(self) -> bool:
        return not self.is_paged

    def to_limit(self) -> Limit:
        return Limit.unlimited()

    def to_scroll_position(self) -> ScrollPosition:
        return OffsetScrollPosition()


class PageRequest(Pageable):
    """Zero-based page request.

    Usage::

        PageRequest.of(0, 20)
        PageRequest.of(2, 50, Sort.by("-created_at"))
    """

    page: int = Field(ge=0)
    size: int = Field(ge=1)

    @classmethod
    def of(cls, page: int, size: int, sort: Sort | None = None) -> PageRequest:
        return cls(page=page, size=size, sort=sort or Sort.unsorted())

    @property
    def is_paged(self) -> bool:
        return True

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    def next(self) -> PageRequest:
        return self.with_page(self.page + 1)

    def previous_or_first(self) -> PageRequest:
        return self.with_page(self.page - 1) if self.has_previous else self.first()

    def first(self) -> PageRequest:
        return self.with_page(0)

    def with_page(self, page: int) -> PageRequest:
        return PageRequest(page=page, size=self.size, sort=self.sort)

    def with_sort(self, sort: Sort) -> PageRequest:
        return PageRequest(page=self.page, size=self.size, sort=sort)

    def to_limit(self) -> Limit:
        return Limit.of(self.size)

    def to_scroll_position(self) -> ScrollPosition:
        return OffsetScrollPosition(offset=self.offset)
