"""
Sort orders passed to query methods.

Fields follow the ``order_by`` token convention: a leading ``-`` means
descending, so ``Sort.by("-created_at", "name").to_order_by()`` is
``["-created_at", "name"]``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from .value_object import ValueObject


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def is_ascending(self) -> bool:
        return self is Direction.ASC

    def reverse(self) -> Direction:
        return Direction.DESC if self is Direction.ASC else Direction.ASC


class Order(ValueObject):
    """Ordering of a single field."""

    field: str = Field(min_length=1)
    direction: Direction = Direction.ASC

    @classmethod
    def parse(cls, token: str) -> Order:
        """Parse ``"name"`` or ``"-name"`` into an ``Order``."""
        if token.startswith("-"):
            return cls(field=token[1:], direction=Direction.DESC)
        return cls(field=token, direction=Direction.ASC)

    @property
    def is_ascending(self) -> bool:
        return self.direction.is_ascending

    def reversed(self) -> Order:
        return Order(field=self.field, direction=self.direction.reverse())

    def to_token(self) -> str:
        return self.field if self.is_ascending else f"-{self.field}"


class Sort(ValueObject):
    """Ordered collection of :class:`Order` clauses.

    Usage::

        Sort.by("-created_at", "name")
        Sort.by("name").and_(Sort.by("-id"))
        Sort.unsorted()
    """

    orders: tuple[Order, ...] = ()

    @classmethod
    def by(cls, *fields: str | Order) -> Sort:
        return cls(
            orders=tuple(
                f if isinstance(f, Order) else Order.parse(f) for f in fields
            )
        )

    @classmethod
    def unsorted(cls) -> Sort:
        return cls()

    @property
    def is_sorted(self) -> bool:
        return bool(self.orders)

    @property
    def is_unsorted(self) -> bool:
        return not self.orders

    def get_order_for(self, field: str) -> Order | None:
        for order in self.orders:
            if order.field == field:
                return order
        return None

    def and_(self, other: Sort) -> Sort:
        """Return a sort with *other*'s orders appended."""
        return Sort(orders=self.orders + other.orders)

    def reversed(self) -> Sort:
        return Sort(orders=tuple(o.reversed() for o in self.orders))

    def to_order_by(self) -> list[str]:
        """Render as an ``order_by`` list (``-`` prefix for descending)."""
        return [o.to_token() for o in self.orders]
