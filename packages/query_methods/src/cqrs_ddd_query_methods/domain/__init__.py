"""Value types for reserved parameters and result containers."""

from __future__ import annotations

from .paging import Limit, Pageable, PageRequest
from .results import Page, SearchHit, SearchResults, Slice, Window
from .scrolling import KeysetScrollPosition, OffsetScrollPosition, ScrollPosition
from .sorting import Direction, Order, Sort
from .value_object import ValueObject

__all__: list[str] = [
    "Direction",
    "KeysetScrollPosition",
    "Limit",
    "OffsetScrollPosition",
    "Order",
    "Page",
    "PageRequest",
    "Pageable",
    "ScrollPosition",
    "SearchHit",
    "SearchResults",
    "Slice",
    "Sort",
    "ValueObject",
    "Window",
]
