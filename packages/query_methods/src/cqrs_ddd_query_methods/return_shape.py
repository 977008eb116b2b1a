"""
Return shape resolution.

A query method's declared return type is reduced to one of a fixed set
of shapes (:class:`ReturnShapeKind`) that the execution layer
dispatches on. Resolution peels **exactly one** wrapper layer, so
``Awaitable[list[Order]]`` is a collection and ``Awaitable[Page[Order]]``
a page. Doubly-wrapped types such as ``Awaitable[Optional[list[Order]]]``
stop at the inner optional and resolve as a single result.

Classification precedence (first match wins)::

    PAGE > SLICE > WINDOW > SEARCH > STREAM > COLLECTION / SINGLE

``Page`` is tested before ``Slice`` because every page is also a slice.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .domain import Page, SearchHit, SearchResults, Slice, Window
from .type_information import TypeInformation
from .wrappers import WrapperRegistry, get_wrapper_registry

logger = logging.getLogger(__name__)


class ReturnShapeKind(str, Enum):
    SINGLE = "single"
    COLLECTION = "collection"
    STREAM = "stream"
    PAGE = "page"
    SLICE = "slice"
    WINDOW = "window"
    SEARCH = "search"


PAGINATABLE_KINDS: frozenset[ReturnShapeKind] = frozenset(
    {
        ReturnShapeKind.PAGE,
        ReturnShapeKind.SLICE,
        ReturnShapeKind.WINDOW,
        ReturnShapeKind.COLLECTION,
        ReturnShapeKind.SEARCH,
    }
)
"""Shapes that can carry paging metadata from a ``Pageable`` parameter."""


@dataclass(frozen=True)
class ReturnShape:
    """Resolved shape of a query method's return type.

    Attributes:
        kind: The shape variant.
        declared_type: Return type as declared.
        unwrapped_type: Declared type with at most one wrapper peeled.
        element_type: Element type with every wrapper and container peeled.
    """

    kind: ReturnShapeKind
    declared_type: TypeInformation
    unwrapped_type: TypeInformation
    element_type: TypeInformation

    @property
    def accepts_pagination(self) -> bool:
        return self.kind in PAGINATABLE_KINDS

    def __str__(self) -> str:
        return f"{self.kind.value}<{self.element_type.name}>"


class ReturnShapeResolver:
    """Classifies return types using a :class:`WrapperRegistry`.

    Usage::

        resolver = ReturnShapeResolver()
        shape = resolver.resolve(TypeInformation.of(Page[Order]), Order)
        assert shape.kind is ReturnShapeKind.PAGE
    """

    def __init__(self, wrappers: WrapperRegistry | None = None) -> None:
        self._wrappers = wrappers if wrappers is not None else get_wrapper_registry()

    @property
    def wrappers(self) -> WrapperRegistry:
        return self._wrappers

    # -- unwrapping ----------------------------------------------------------

    def unwrap(self, declared: TypeInformation) -> TypeInformation:
        """Peel one wrapper layer (if *declared* is a wrapper)."""
        return self._wrappers.unwrap(declared)

    def resolve_element_type(self, declared: TypeInformation) -> TypeInformation:
        """Peel wrappers, containers and search hits down to the element."""
        current = declared
        while True:
            if self._wrappers.is_wrapper(current):
                current = self._wrappers.unwrap(current)
            elif current.is_subtype_of(SearchHit) and current.arguments:
                current = current.arguments[0]
            elif current.is_collection_like and current.component_type is not None:
                current = current.component_type
            else:
                return current

    # -- classification ------------------------------------------------------

    def classify(
        self, declared: TypeInformation, domain_type: type[Any] | None
    ) -> ReturnShapeKind:
        unwrapped = self.unwrap(declared)
        if unwrapped.is_subtype_of(Page):
            return ReturnShapeKind.PAGE
        if unwrapped.is_subtype_of(Slice):
            return ReturnShapeKind.SLICE
        if unwrapped.is_subtype_of(Window):
            return ReturnShapeKind.WINDOW
        if self._is_search(declared, unwrapped):
            return ReturnShapeKind.SEARCH
        if unwrapped.is_subtype_of(Iterator):
            return ReturnShapeKind.STREAM
        if self._is_collection(declared, unwrapped, domain_type):
            return ReturnShapeKind.COLLECTION
        return ReturnShapeKind.SINGLE

    def resolve(
        self, declared: TypeInformation, domain_type: type[Any] | None
    ) -> ReturnShape:
        shape = ReturnShape(
            kind=self.classify(declared, domain_type),
            declared_type=declared,
            unwrapped_type=self.unwrap(declared),
            element_type=self.resolve_element_type(declared),
        )
        logger.debug("Resolved return type %s as %s", declared.name, shape)
        return shape

    def is_collection_like(
        self, declared: TypeInformation, domain_type: type[Any] | None
    ) -> bool:
        """Whether *declared* delivers many elements rather than one."""
        return self._is_collection(declared, self.unwrap(declared), domain_type)

    def _is_search(
        self, declared: TypeInformation, unwrapped: TypeInformation
    ) -> bool:
        if unwrapped.is_subtype_of(SearchResults):
            return True
        if self._wrappers.is_multi_valued(declared):
            return unwrapped.actual_type.is_subtype_of(SearchHit)
        if unwrapped.is_collection_like:
            component = unwrapped.component_type
            return component is not None and component.actual_type.is_subtype_of(
                SearchHit
            )
        return False

    def _is_collection(
        self,
        declared: TypeInformation,
        unwrapped: TypeInformation,
        domain_type: type[Any] | None,
    ) -> bool:
        # An async iterator of entities is a bulk result even though its
        # element type is the entity itself.
        if self._wrappers.is_multi_valued(declared):
            return True
        if domain_type is not None and unwrapped.actual_type.is_subtype_of(domain_type):
            return False
        if self._wrappers.is_wrapper(unwrapped):
            return self._wrappers.is_multi_valued(unwrapped)
        return unwrapped.is_collection_like

    # -- domain type ---------------------------------------------------------

    @staticmethod
    def effective_domain_type(
        repository_domain_type: type[Any] | None,
        returned_domain_type: type[Any],
    ) -> type[Any]:
        """Reconcile the repository's entity with the method's element type.

        The method's own element type wins when it is a subtype of (or the
        same as) the repository's entity, or when the repository declares
        none; otherwise the repository's entity does.
        """
        if repository_domain_type is None:
            return returned_domain_type
        try:
            narrower = issubclass(returned_domain_type, repository_domain_type)
        except TypeError:
            narrower = False
        return returned_domain_type if narrower else repository_domain_type


__all__ = [
    "PAGINATABLE_KINDS",
    "ReturnShape",
    "ReturnShapeKind",
    "ReturnShapeResolver",
]
