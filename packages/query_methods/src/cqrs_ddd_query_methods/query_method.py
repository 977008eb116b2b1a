"""
QueryMethod — the classified, validated description of one repository
query method.

Built once per declared method during repository bootstrap and shared,
read-only, by every invocation afterwards. Construction either returns a
fully valid descriptor or raises a
:class:`~cqrs_ddd_query_methods.exceptions.QueryMethodError`; there is no
partially valid state.

Usage::

    metadata = DefaultRepositoryMetadata(OrderRepository)
    method = describe(metadata.get_method_signature("find_all"), metadata)

    method.is_page_result             # True
    method.derived_query_identifier   # "Order.find_all"
"""

from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING, Any

from .exceptions import QueryMethodError
from .parameters import Parameters
from .return_shape import ReturnShapeKind, ReturnShapeResolver
from .validation import SignatureValidator

if TYPE_CHECKING:
    from collections.abc import Callable

    from .metadata import RepositoryMetadata
    from .named_queries import NamedQueries
    from .return_shape import ReturnShape
    from .signature import MethodSignature
    from .type_information import TypeInformation
    from .wrappers import WrapperRegistry

logger = logging.getLogger(__name__)

_NEVER_COLLECTIONS = frozenset(
    {
        ReturnShapeKind.PAGE,
        ReturnShapeKind.SLICE,
        ReturnShapeKind.WINDOW,
        ReturnShapeKind.STREAM,
    }
)


class QueryMethod:
    """Descriptor of a query method: parameters, return shape, domain type.

    Eager state (parameters, return shape) is computed and validated in
    ``__init__``. Derived values (``domain_class``, ``is_collection_like``,
    ``returned_object_type``, ``derived_query_identifier``) are computed on
    first access and cached; the computations are deterministic and free
    of side effects, so concurrent first reads may both compute but always
    publish the same value.

    Subclasses describing write operations override :attr:`is_modifying`.
    """

    def __init__(
        self,
        method: MethodSignature,
        metadata: RepositoryMetadata,
        *,
        wrappers: WrapperRegistry | None = None,
        validator: SignatureValidator | None = None,
        parameters_factory: Callable[[MethodSignature], Parameters] | None = None,
    ) -> None:
        self._method = method
        self._metadata = metadata
        self._resolver = ReturnShapeResolver(wrappers)
        self._own_wrappers = wrappers is not None

        create_parameters = parameters_factory or Parameters.from_signature
        self._parameters = create_parameters(method)

        try:
            self._return_shape = self._resolver.resolve(
                metadata.get_return_type(method), metadata.domain_type
            )
        except QueryMethodError as exc:
            if exc.method is not None:
                raise
            raise exc.with_method(method.qualified_name) from exc

        (validator or SignatureValidator()).validate(
            method, self._parameters, self._return_shape
        )
        logger.debug(
            "Described query method %s: shape=%s, parameters=%d",
            method.qualified_name,
            self._return_shape,
            len(self._parameters),
        )

    # -- identity ------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._method.name

    @property
    def method(self) -> MethodSignature:
        return self._method

    @property
    def metadata(self) -> RepositoryMetadata:
        return self._metadata

    @property
    def parameters(self) -> Parameters:
        return self._parameters

    # -- return shape --------------------------------------------------------

    @property
    def return_shape(self) -> ReturnShape:
        return self._return_shape

    @property
    def unwrapped_return_type(self) -> TypeInformation:
        """Declared return type with at most one wrapper layer peeled."""
        return self._return_shape.unwrapped_type

    @property
    def is_page_result(self) -> bool:
        return self._return_shape.kind is ReturnShapeKind.PAGE

    @property
    def is_slice_result(self) -> bool:
        return self._return_shape.kind is ReturnShapeKind.SLICE

    @property
    def is_window_result(self) -> bool:
        return self._return_shape.kind is ReturnShapeKind.WINDOW

    @property
    def is_search_result(self) -> bool:
        return self._return_shape.kind is ReturnShapeKind.SEARCH

    @property
    def is_stream_result(self) -> bool:
        return self._return_shape.kind is ReturnShapeKind.STREAM

    @cached_property
    def is_collection_like(self) -> bool:
        """Whether the method returns many results as a plain bulk result.

        Pages, slices, windows and streams are never collection-like.
        """
        kind = self._return_shape.kind
        if kind is ReturnShapeKind.COLLECTION:
            return True
        if kind in _NEVER_COLLECTIONS:
            return False
        return self._resolver.is_collection_like(
            self._return_shape.declared_type, self._metadata.domain_type
        )

    @property
    def is_modifying(self) -> bool:
        return False

    # -- domain type ---------------------------------------------------------

    @cached_property
    def returned_object_type(self) -> type[Any]:
        """Element class the method returns.

        With an injected wrapper registry the element type comes from this
        descriptor's own shape; the metadata may peel with another registry.
        """
        if self._own_wrappers:
            return self._return_shape.element_type.type
        return self._metadata.get_returned_domain_class(self._method)

    @cached_property
    def domain_class(self) -> type[Any]:
        """Effective domain type the method targets."""
        return ReturnShapeResolver.effective_domain_type(
            self._metadata.domain_type, self.returned_object_type
        )

    @property
    def represents_entity_result(self) -> bool:
        """``True`` if the method returns entities rather than projections."""
        try:
            return issubclass(self.returned_object_type, self.domain_class)
        except TypeError:
            return False

    @cached_property
    def derived_query_identifier(self) -> str:
        """Lookup key for externally declared named queries."""
        return f"{self.domain_class.__name__}.{self.name}"

    def lookup_named_query(self, named_queries: NamedQueries) -> str | None:
        """Return the named query declared for this method, if any."""
        identifier = self.derived_query_identifier
        if not named_queries.has_query(identifier):
            return None
        return named_queries.get_query(identifier)

    def __repr__(self) -> str:
        return f"QueryMethod({self._method}, shape={self._return_shape.kind.value})"

    def __str__(self) -> str:
        return str(self._method)


def describe(
    method: MethodSignature,
    metadata: RepositoryMetadata,
    *,
    wrappers: WrapperRegistry | None = None,
    validator: SignatureValidator | None = None,
    parameters_factory: Callable[[MethodSignature], Parameters] | None = None,
) -> QueryMethod:
    """Classify and validate *method*.

    Raises:
        QueryMethodError: A subclass naming the violated rule and the
            offending method.
    """
    return QueryMethod(
        method,
        metadata,
        wrappers=wrappers,
        validator=validator,
        parameters_factory=parameters_factory,
    )


__all__ = ["QueryMethod", "describe"]
