"""Repository — marker base for declarative repository interfaces."""

from __future__ import annotations

from typing import Protocol, TypeVar

T = TypeVar("T")
ID = TypeVar("ID")


class Repository(Protocol[T, ID]):
    """
    Marker for repository interfaces whose methods are query methods.

    The generic arguments declare the domain (entity) type and its id
    type. Every public method declared on a subclass is described as a
    query method at bootstrap::

        class OrderRepository(Repository[Order, UUID], Protocol):
            async def find_by_status(
                self, status: OrderStatus, pageable: Pageable
            ) -> Page[Order]: ...

            def stream_all(self) -> Iterator[Order]: ...
    """


__all__ = ["ID", "Repository", "T"]
