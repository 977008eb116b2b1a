"""
Repository metadata — what a query method needs to know about the
repository interface that declares it.

:class:`RepositoryMetadata` is the port; :class:`DefaultRepositoryMetadata`
derives everything from a :class:`~cqrs_ddd_query_methods.repository.Repository`
subclass, including type variables bound through intermediate generic
interfaces::

    class CrudRepository(Repository[E, K], Protocol[E, K]):
        def find_all(self, pageable: Pageable) -> Page[E]: ...

    class OrderRepository(CrudRepository[Order, UUID], Protocol): ...

    metadata = DefaultRepositoryMetadata(OrderRepository)
    metadata.domain_type                            # Order
    metadata.get_method_signature("find_all")       # ... -> Page[Order]
"""

from __future__ import annotations

import inspect
import logging
import typing
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from .repository import ID, Repository, T
from .return_shape import ReturnShapeResolver
from .signature import MethodSignature
from .type_information import TypeInformation

logger = logging.getLogger(__name__)

_SKIPPED_BASES: frozenset[Any] = frozenset({Repository, Protocol, Generic, object})


@runtime_checkable
class RepositoryMetadata(Protocol):
    """Port supplying repository-level facts to query method resolution."""

    @property
    def domain_type(self) -> type[Any] | None: ...

    @property
    def id_type(self) -> type[Any] | None: ...

    @property
    def repository_interface(self) -> type[Any] | None: ...

    def get_return_type(self, method: MethodSignature) -> TypeInformation:
        """Declared return type of *method* with generics resolved."""
        ...

    def get_returned_domain_class(self, method: MethodSignature) -> type[Any]:
        """Element class *method* returns, wrappers and containers peeled."""
        ...


def resolve_type_bindings(interface: type[Any]) -> dict[Any, Any]:
    """Map every type variable bound along *interface*'s generic bases."""
    bindings: dict[Any, Any] = {}
    for klass in interface.__mro__:
        for base in klass.__dict__.get("__orig_bases__", ()):
            origin = typing.get_origin(base)
            parameters = getattr(origin, "__parameters__", ())
            for parameter, argument in zip(parameters, typing.get_args(base)):
                if parameter not in bindings:
                    bindings[parameter] = substitute_type_variables(argument, bindings)
    return bindings


def substitute_type_variables(annotation: Any, bindings: dict[Any, Any]) -> Any:
    """Replace bound type variables inside *annotation*."""
    if isinstance(annotation, TypeVar):
        return bindings.get(annotation, annotation)
    parameters = getattr(annotation, "__parameters__", ())
    if not parameters or typing.get_origin(annotation) is None:
        return annotation
    try:
        return annotation[tuple(bindings.get(p, p) for p in parameters)]
    except TypeError:
        logger.debug("Cannot substitute type variables in %r", annotation)
        return annotation


class DefaultRepositoryMetadata:
    """:class:`RepositoryMetadata` derived from a repository interface.

    Args:
        repository_interface: The interface declaring the query methods.
            ``None`` describes free-standing methods.
        domain_type: Overrides the domain type taken from the
            ``Repository[T, ID]`` base.
        id_type: Overrides the id type taken from the base.
        resolver: Resolver used to peel return types down to the element.
    """

    def __init__(
        self,
        repository_interface: type[Any] | None = None,
        *,
        domain_type: type[Any] | None = None,
        id_type: type[Any] | None = None,
        resolver: ReturnShapeResolver | None = None,
    ) -> None:
        self._interface = repository_interface
        self._bindings = (
            resolve_type_bindings(repository_interface)
            if repository_interface is not None
            else {}
        )
        self._domain_type = domain_type or self._bound_class(T)
        self._id_type = id_type or self._bound_class(ID)
        self._resolver = resolver if resolver is not None else ReturnShapeResolver()

    @classmethod
    def for_domain(
        cls, domain_type: type[Any], id_type: type[Any] | None = None
    ) -> DefaultRepositoryMetadata:
        return cls(None, domain_type=domain_type, id_type=id_type)

    def _bound_class(self, variable: TypeVar) -> type[Any] | None:
        bound = self._bindings.get(variable)
        return bound if isinstance(bound, type) else None

    # -- RepositoryMetadata ----------------------------------------------------

    @property
    def domain_type(self) -> type[Any] | None:
        return self._domain_type

    @property
    def id_type(self) -> type[Any] | None:
        return self._id_type

    @property
    def repository_interface(self) -> type[Any] | None:
        return self._interface

    @property
    def resolver(self) -> ReturnShapeResolver:
        return self._resolver

    def get_return_type(self, method: MethodSignature) -> TypeInformation:
        return TypeInformation.of(
            substitute_type_variables(method.return_annotation, self._bindings)
        )

    def get_returned_domain_class(self, method: MethodSignature) -> type[Any]:
        return self._resolver.resolve_element_type(self.get_return_type(method)).type

    # -- interface introspection ---------------------------------------------

    def resolve_signature(self, method: MethodSignature) -> MethodSignature:
        """Return *method* with interface-bound type variables substituted."""
        if not self._bindings:
            return method
        return method.map_annotations(
            lambda annotation: substitute_type_variables(annotation, self._bindings)
        )

    def query_method_names(self) -> list[str]:
        """Public methods declared on the interface, derived classes first."""
        if self._interface is None:
            return []
        names: list[str] = []
        for klass in self._interface.__mro__:
            if klass in _SKIPPED_BASES or klass.__module__ == "typing":
                continue
            for name, value in vars(klass).items():
                if name.startswith("_") or name in names:
                    continue
                if isinstance(value, (staticmethod, classmethod)):
                    value = value.__func__
                if inspect.isfunction(value):
                    names.append(name)
        return names

    def get_method_signature(self, name: str) -> MethodSignature:
        if self._interface is None:
            msg = "Metadata without a repository interface declares no methods"
            raise LookupError(msg)
        function = getattr(self._interface, name)
        signature = MethodSignature.of(function, owner=self._interface)
        return self.resolve_signature(signature)

    def __repr__(self) -> str:
        interface = self._interface.__name__ if self._interface else None
        domain = self._domain_type.__name__ if self._domain_type else None
        return f"DefaultRepositoryMetadata(interface={interface}, domain={domain})"


__all__ = [
    "DefaultRepositoryMetadata",
    "RepositoryMetadata",
    "resolve_type_bindings",
    "substitute_type_variables",
]
