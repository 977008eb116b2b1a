"""
Classified parameter list of a query method.

Every parameter is either *ordinary* (bound into the query) or plays one
of the reserved roles that shape the result instead:

- ``PAGINATION`` — ``Pageable``: page number/size plus an embedded sort
- ``SORT`` — ``Sort``: ordering
- ``LIMIT`` — ``Limit``: result-count cap
- ``SCROLL_POSITION`` — ``ScrollPosition``: resume point of a scroll

Roles are detected by subclass, so ``PageRequest`` plays ``PAGINATION``
and ``Pageable | None`` does too. A ``type[...]`` parameter selects a
projection at call time; it is special (never bound) but not a role.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .domain import Limit, Pageable, ScrollPosition, Sort
from .type_information import TypeInformation

if TYPE_CHECKING:
    from .signature import MethodSignature


class ParameterRole(str, Enum):
    PAGINATION = "pagination"
    SORT = "sort"
    LIMIT = "limit"
    SCROLL_POSITION = "scroll_position"

    @property
    def declared_type(self) -> type[Any]:
        return ROLE_TYPES[self]


ROLE_TYPES: dict[ParameterRole, type[Any]] = {
    ParameterRole.PAGINATION: Pageable,
    ParameterRole.SORT: Sort,
    ParameterRole.LIMIT: Limit,
    ParameterRole.SCROLL_POSITION: ScrollPosition,
}


def classify_role(type_: TypeInformation) -> ParameterRole | None:
    """Return the reserved role a parameter of *type_* plays, if any."""
    actual = type_.actual_type
    for role, declared in ROLE_TYPES.items():
        if actual.type is not object and actual.is_subtype_of(declared):
            return role
    return None


@dataclass(frozen=True)
class Parameter:
    """A single classified parameter."""

    index: int
    name: str
    type: TypeInformation
    role: ParameterRole | None = None
    has_default: bool = False

    @property
    def is_dynamic_projection(self) -> bool:
        return self.type.actual_type.origin is type

    @property
    def is_special(self) -> bool:
        return self.role is not None or self.is_dynamic_projection

    @property
    def is_bindable(self) -> bool:
        return not self.is_special

    def __str__(self) -> str:
        role = self.role.value if self.role else "ordinary"
        return f"#{self.index} {self.name}: {self.type.name} [{role}]"


class Parameters:
    """Immutable, ordered parameter list with role-presence queries.

    Built once per method; a method declaring the same role twice is
    representable here so the validator can reject it with context.
    """

    __slots__ = ("_dynamic_projection_index", "_parameters", "_role_indexes")

    def __init__(self, parameters: Iterable[Parameter] = ()) -> None:
        self._parameters: tuple[Parameter, ...] = tuple(parameters)
        role_indexes: dict[ParameterRole, list[int]] = {}
        projection_index = -1
        for parameter in self._parameters:
            if parameter.role is not None:
                role_indexes.setdefault(parameter.role, []).append(parameter.index)
            elif parameter.is_dynamic_projection and projection_index < 0:
                projection_index = parameter.index
        self._role_indexes = {
            role: tuple(indexes) for role, indexes in role_indexes.items()
        }
        self._dynamic_projection_index = projection_index

    @classmethod
    def from_signature(cls, method: MethodSignature) -> Parameters:
        parameters = []
        for index, spec in enumerate(method.parameters):
            type_ = TypeInformation.of(spec.annotation)
            parameters.append(
                Parameter(
                    index=index,
                    name=spec.name,
                    type=type_,
                    role=classify_role(type_),
                    has_default=spec.has_default,
                )
            )
        return cls(parameters)

    # -- role queries --------------------------------------------------------

    def has_role(self, role: ParameterRole) -> bool:
        return role in self._role_indexes

    def count(self, role: ParameterRole) -> int:
        return len(self._role_indexes.get(role, ()))

    def index_of(self, role: ParameterRole) -> int:
        """Index of the first parameter playing *role*, ``-1`` if absent."""
        indexes = self._role_indexes.get(role)
        return indexes[0] if indexes else -1

    def get(self, role: ParameterRole) -> Parameter | None:
        index = self.index_of(role)
        return self._parameters[index] if index >= 0 else None

    @property
    def role_counts(self) -> dict[ParameterRole, int]:
        return {role: len(indexes) for role, indexes in self._role_indexes.items()}

    @property
    def has_pageable_parameter(self) -> bool:
        return self.has_role(ParameterRole.PAGINATION)

    @property
    def has_sort_parameter(self) -> bool:
        return self.has_role(ParameterRole.SORT)

    @property
    def has_limit_parameter(self) -> bool:
        return self.has_role(ParameterRole.LIMIT)

    @property
    def has_scroll_position_parameter(self) -> bool:
        return self.has_role(ParameterRole.SCROLL_POSITION)

    @property
    def pageable_index(self) -> int:
        return self.index_of(ParameterRole.PAGINATION)

    @property
    def sort_index(self) -> int:
        return self.index_of(ParameterRole.SORT)

    @property
    def limit_index(self) -> int:
        return self.index_of(ParameterRole.LIMIT)

    @property
    def scroll_position_index(self) -> int:
        return self.index_of(ParameterRole.SCROLL_POSITION)

    # -- special / bindable --------------------------------------------------

    @property
    def has_dynamic_projection(self) -> bool:
        return self._dynamic_projection_index >= 0

    @property
    def dynamic_projection_index(self) -> int:
        return self._dynamic_projection_index

    @property
    def has_special_parameter(self) -> bool:
        return bool(self._role_indexes) or self.has_dynamic_projection

    @property
    def potentially_sorts_dynamically(self) -> bool:
        """``True`` if a caller can change the ordering per invocation."""
        return self.has_sort_parameter or self.has_pageable_parameter

    @property
    def bindable_parameters(self) -> tuple[Parameter, ...]:
        return tuple(p for p in self._parameters if p.is_bindable)

    # -- sequence protocol ---------------------------------------------------

    def __len__(self) -> int:
        return len(self._parameters)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._parameters)

    def __getitem__(self, index: int) -> Parameter:
        return self._parameters[index]

    def __repr__(self) -> str:
        return f"Parameters({', '.join(str(p) for p in self._parameters)})"


__all__ = ["ROLE_TYPES", "Parameter", "ParameterRole", "Parameters", "classify_role"]
