"""
Wrapper registry — which generic return-type wrappers exist and what
they wrap.

A *wrapper* is a generic type whose only job is to deliver another
type: an awaitable, a future, an optional, an async iterator. Query
method resolution peels exactly one wrapper layer before classifying
the return type, so ``Awaitable[list[Order]]`` is classified like
``list[Order]``.

New wrappers are added by registering a :class:`WrapperDescriptor`; the
resolver never needs to change::

    registry = build_default_registry()
    registry.register(
        WrapperDescriptor(Deferred, WrapperKind.ASYNC, single_valued=True)
    )
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from collections.abc import (
    AsyncGenerator,
    AsyncIterable,
    AsyncIterator,
    Awaitable,
    Coroutine,
)
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import MalformedSignatureError
from .type_information import OPTIONAL, TypeInformation

logger = logging.getLogger(__name__)


class WrapperKind(str, Enum):
    ASYNC = "async"
    OPTIONAL = "optional"
    REACTIVE = "reactive"


@dataclass(frozen=True)
class WrapperDescriptor:
    """Registry entry for one wrapper type.

    Attributes:
        wrapper_type: The origin the entry is keyed by (a class, or
            :data:`~cqrs_ddd_query_methods.type_information.OPTIONAL`).
        kind: Family of the wrapper.
        single_valued: ``True`` if the wrapper delivers at most one value.
        argument_index: Which generic argument holds the wrapped type.
            ``Coroutine[Y, S, R]`` delivers ``R``, so its entry uses ``2``.
    """

    wrapper_type: Any
    kind: WrapperKind
    single_valued: bool
    argument_index: int = 0

    @property
    def name(self) -> str:
        return getattr(self.wrapper_type, "__name__", repr(self.wrapper_type))


class WrapperRegistry:
    """
    Registry of :class:`WrapperDescriptor` entries keyed by type identity.

    Lookups match the origin exactly first, then walk the class MRO so a
    subclass of a registered wrapper (e.g. ``asyncio.Task`` for
    ``asyncio.Future``) resolves to the nearest registered ancestor.

    Create instances per application context for isolation; see
    :func:`get_wrapper_registry`.
    """

    def __init__(self) -> None:
        self._wrappers: dict[Any, WrapperDescriptor] = {}

    # -- registration --------------------------------------------------------

    def register(self, descriptor: WrapperDescriptor) -> None:
        """Register a wrapper descriptor, replacing any previous entry."""
        existing = self._wrappers.get(descriptor.wrapper_type)
        if existing is not None and existing != descriptor:
            logger.warning(
                "Replacing wrapper registration for %s (%s -> %s)",
                descriptor.name,
                existing.kind.value,
                descriptor.kind.value,
            )
        self._wrappers[descriptor.wrapper_type] = descriptor
        logger.debug(
            "Registered %s wrapper %s (single_valued=%s)",
            descriptor.kind.value,
            descriptor.name,
            descriptor.single_valued,
        )

    def register_all(self, *descriptors: WrapperDescriptor) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def unregister(self, wrapper_type: Any) -> None:
        """Remove a wrapper from the registry."""
        self._wrappers.pop(wrapper_type, None)

    # -- look-up -------------------------------------------------------------

    def get(self, type_: TypeInformation | Any) -> WrapperDescriptor | None:
        """Return the descriptor for *type_* or ``None``."""
        origin = TypeInformation.of(type_).origin
        descriptor = self._wrappers.get(origin)
        if descriptor is not None or not isinstance(origin, type):
            return descriptor
        for ancestor in origin.__mro__[1:]:
            descriptor = self._wrappers.get(ancestor)
            if descriptor is not None:
                return descriptor
        return None

    def is_wrapper(self, type_: TypeInformation | Any) -> bool:
        return self.get(type_) is not None

    def is_single_valued(self, type_: TypeInformation | Any) -> bool:
        """Only meaningful when :meth:`is_wrapper` is ``True``."""
        descriptor = self.get(type_)
        return descriptor is not None and descriptor.single_valued

    def is_multi_valued(self, type_: TypeInformation | Any) -> bool:
        descriptor = self.get(type_)
        return descriptor is not None and not descriptor.single_valued

    def unwrap(self, type_: TypeInformation | Any) -> TypeInformation:
        """Peel exactly one wrapper layer.

        Non-wrapper types are returned unchanged.

        Raises:
            MalformedSignatureError: If *type_* is a wrapper used without
                type arguments (e.g. a bare ``Awaitable``).
        """
        info = TypeInformation.of(type_)
        descriptor = self.get(info)
        if descriptor is None:
            return info
        try:
            return info.arguments[descriptor.argument_index]
        except IndexError:
            msg = (
                f"Couldn't find the wrapped type of {info.name}; "
                f"{descriptor.name} must be parameterised"
            )
            raise MalformedSignatureError(msg, rule="resolvable_wrapped_type") from None

    @property
    def registered_wrappers(self) -> list[WrapperDescriptor]:
        return list(self._wrappers.values())

    def clear(self) -> None:
        """Remove all registrations (testing utility)."""
        self._wrappers.clear()


def build_default_registry() -> WrapperRegistry:
    """Create a registry pre-loaded with the standard library wrappers."""
    registry = WrapperRegistry()
    registry.register_all(
        WrapperDescriptor(Awaitable, WrapperKind.ASYNC, single_valued=True),
        WrapperDescriptor(
            Coroutine, WrapperKind.ASYNC, single_valued=True, argument_index=2
        ),
        WrapperDescriptor(asyncio.Future, WrapperKind.ASYNC, single_valued=True),
        WrapperDescriptor(
            concurrent.futures.Future, WrapperKind.ASYNC, single_valued=True
        ),
        WrapperDescriptor(OPTIONAL, WrapperKind.OPTIONAL, single_valued=True),
        WrapperDescriptor(AsyncIterator, WrapperKind.REACTIVE, single_valued=False),
        WrapperDescriptor(AsyncIterable, WrapperKind.REACTIVE, single_valued=False),
        WrapperDescriptor(AsyncGenerator, WrapperKind.REACTIVE, single_valued=False),
    )
    return registry


_wrapper_registry_var: ContextVar[WrapperRegistry | None] = ContextVar(
    "wrapper_registry", default=None
)


def get_wrapper_registry() -> WrapperRegistry:
    """Get the wrapper registry for the current context.

    Creates a default registry on first access within each context, so
    tests and separately bootstrapped applications don't share entries.
    """
    registry = _wrapper_registry_var.get()
    if registry is None:
        registry = build_default_registry()
        _wrapper_registry_var.set(registry)
    return registry


def set_wrapper_registry(registry: WrapperRegistry) -> None:
    """Set a custom wrapper registry in the current context."""
    _wrapper_registry_var.set(registry)


__all__ = [
    "WrapperDescriptor",
    "WrapperKind",
    "WrapperRegistry",
    "build_default_registry",
    "get_wrapper_registry",
    "set_wrapper_registry",
]
