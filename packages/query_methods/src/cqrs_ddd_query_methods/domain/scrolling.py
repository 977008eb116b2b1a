"""Scroll positions: opaque markers for resumable iteration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import Field

from .sorting import Direction
from .value_object import ValueObject


class ScrollPosition(ValueObject, ABC):
    """Base class for positions within a scrollable result.

    Two flavours exist: :class:`OffsetScrollPosition` (skip *n* rows) and
    :class:`KeysetScrollPosition` (continue after the given key values).
    """

    @property
    @abstractmethod
    def is_initial(self) -> bool:
        """``True`` if the position points at the start of the result."""

    @classmethod
    def at_offset(cls, offset: int = 0) -> OffsetScrollPosition:
        return OffsetScrollPosition(offset=offset)

    @classmethod
    def keyset(
        cls,
        keys: dict[str, Any] | None = None,
        direction: Direction = Direction.ASC,
    ) -> KeysetScrollPosition:
        return KeysetScrollPosition(
            keys=tuple((keys or {}).items()), direction=direction
        )


class OffsetScrollPosition(ScrollPosition):
    offset: int = Field(default=0, ge=0)

    @property
    def is_initial(self) -> bool:
        return self.offset == 0

    def advance_by(self, delta: int) -> OffsetScrollPosition:
        return OffsetScrollPosition(offset=max(0, self.offset + delta))


class KeysetScrollPosition(ScrollPosition):
    """Position described by the key values of the last row seen."""

    keys: tuple[tuple[str, Any], ...] = ()
    direction: Direction = Direction.ASC

    @property
    def is_initial(self) -> bool:
        return not self.keys

    @property
    def scrolls_forward(self) -> bool:
        return self.direction.is_ascending

    def as_dict(self) -> dict[str, Any]:
        return dict(self.keys)

    def backward(self) -> KeysetScrollPosition:
        return KeysetScrollPosition(keys=self.keys, direction=Direction.DESC)

    def forward(self) -> KeysetScrollPosition:
        return KeysetScrollPosition(keys=self.keys, direction=Direction.ASC)
