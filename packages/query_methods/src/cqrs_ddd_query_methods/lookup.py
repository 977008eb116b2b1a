"""
RepositoryQueryMethods — describes every query method of a repository
interface at bootstrap.

Descriptors are created once, in declaration order, and the first
invalid method aborts bootstrap with its ``QueryMethodError``::

    methods = RepositoryQueryMethods.of(OrderRepository)
    methods.get("find_all").is_page_result
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .metadata import DefaultRepositoryMetadata
from .query_method import QueryMethod
from .return_shape import ReturnShapeResolver

if TYPE_CHECKING:
    from .signature import MethodSignature
    from .validation import SignatureValidator
    from .wrappers import WrapperRegistry

logger = logging.getLogger(__name__)

QueryMethodFactory = Callable[
    ["MethodSignature", DefaultRepositoryMetadata], QueryMethod
]


class RepositoryQueryMethods:
    """Read-only collection of the query methods of one interface."""

    def __init__(
        self,
        metadata: DefaultRepositoryMetadata,
        methods: Mapping[str, QueryMethod],
    ) -> None:
        self._metadata = metadata
        self._methods: Mapping[str, QueryMethod] = MappingProxyType(dict(methods))

    @classmethod
    def of(
        cls,
        repository_interface: type[Any],
        *,
        wrappers: WrapperRegistry | None = None,
        validator: SignatureValidator | None = None,
        factory: QueryMethodFactory | None = None,
    ) -> RepositoryQueryMethods:
        """Describe all query methods of *repository_interface*.

        Args:
            factory: Builds the descriptor for one method; use it to return a
                ``QueryMethod`` subclass (e.g. one marking modifying methods).

        Raises:
            QueryMethodError: For the first invalid method.
        """
        metadata = DefaultRepositoryMetadata(
            repository_interface, resolver=ReturnShapeResolver(wrappers)
        )

        def default_factory(
            signature: MethodSignature, meta: DefaultRepositoryMetadata
        ) -> QueryMethod:
            return QueryMethod(signature, meta, wrappers=wrappers, validator=validator)

        build = factory or default_factory
        methods: dict[str, QueryMethod] = {}
        for name in metadata.query_method_names():
            methods[name] = build(metadata.get_method_signature(name), metadata)

        logger.debug(
            "Described %d query methods on %s",
            len(methods),
            repository_interface.__qualname__,
        )
        return cls(metadata, methods)

    @property
    def metadata(self) -> DefaultRepositoryMetadata:
        return self._metadata

    @property
    def names(self) -> list[str]:
        return list(self._methods)

    def get(self, name: str) -> QueryMethod:
        try:
            return self._methods[name]
        except KeyError:
            msg = f"No query method '{name}' on {self._metadata!r}"
            raise KeyError(msg) from None

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __iter__(self) -> Iterator[QueryMethod]:
        return iter(self._methods.values())

    def __len__(self) -> int:
        return len(self._methods)


__all__ = ["QueryMethodFactory", "RepositoryQueryMethods"]
