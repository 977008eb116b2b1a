"""Frozen pydantic base shared by ``Sort``, ``Limit``, ``Pageable`` and scroll positions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Base of every value a caller passes in a reserved-role parameter.

    Two values of the same class are interchangeable when their fields
    match, so ``PageRequest.of(0, 20) == PageRequest.of(0, 20)``. The
    hash covers the class name and the JSON dump; ``Sort`` holds a tuple
    of ``Order`` models and still hashes.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.model_dump_json()))
