"""
ParameterAccessor — reads reserved-role values out of one invocation.

The descriptor says *which* parameter plays which role; the accessor
answers *what* the caller passed, folding the fallbacks in one place:

- ``sort``: explicit ``Sort`` argument, else the pageable's sort,
  else unsorted.
- ``limit``: explicit ``Limit`` argument, else the page size of a paged
  pageable, else unlimited.
- ``scroll_position``: explicit argument, else the offset of a paged
  pageable, else ``None``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from .domain import Limit, Pageable, ScrollPosition, Sort
from .parameters import ParameterRole, Parameters


class ParameterAccessor:
    """Role-aware view over the argument values of one call."""

    __slots__ = ("_parameters", "_values")

    def __init__(self, parameters: Parameters, values: Sequence[Any]) -> None:
        if len(values) != len(parameters):
            msg = (
                f"Invalid number of arguments: expected {len(parameters)}, "
                f"got {len(values)}"
            )
            raise ValueError(msg)
        self._parameters = parameters
        self._values: tuple[Any, ...] = tuple(values)

    @classmethod
    def from_arguments(
        cls,
        parameters: Parameters,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> ParameterAccessor:
        """Bind positional and keyword arguments to *parameters*.

        Omitted parameters that declare a default are read as ``None``.
        """
        kwargs = dict(kwargs or {})
        if len(args) > len(parameters):
            msg = f"Too many positional arguments: {len(args)} > {len(parameters)}"
            raise ValueError(msg)
        values: list[Any] = list(args)
        for parameter in list(parameters)[len(args) :]:
            if parameter.name in kwargs:
                values.append(kwargs.pop(parameter.name))
            elif parameter.has_default:
                values.append(None)
            else:
                msg = f"Missing argument '{parameter.name}'"
                raise ValueError(msg)
        if kwargs:
            msg = f"Unexpected arguments: {', '.join(sorted(kwargs))}"
            raise ValueError(msg)
        return cls(parameters, values)

    def _value_for(self, role: ParameterRole) -> Any:
        index = self._parameters.index_of(role)
        return self._values[index] if index >= 0 else None

    # -- reserved roles ------------------------------------------------------

    @property
    def pageable(self) -> Pageable:
        pageable = self._value_for(ParameterRole.PAGINATION)
        return pageable if pageable is not None else Pageable.unpaged()

    @property
    def sort(self) -> Sort:
        sort = self._value_for(ParameterRole.SORT)
        if sort is not None:
            return sort
        return self.pageable.sort

    @property
    def limit(self) -> Limit:
        limit = self._value_for(ParameterRole.LIMIT)
        if limit is not None:
            return limit
        return self.pageable.to_limit()

    @property
    def scroll_position(self) -> ScrollPosition | None:
        position = self._value_for(ParameterRole.SCROLL_POSITION)
        if position is not None:
            return position
        pageable = self.pageable
        return pageable.to_scroll_position() if pageable.is_paged else None

    @property
    def dynamic_projection(self) -> type[Any] | None:
        index = self._parameters.dynamic_projection_index
        return self._values[index] if index >= 0 else None

    # -- bindable values -----------------------------------------------------

    @property
    def bindable_values(self) -> tuple[Any, ...]:
        return tuple(self._values[p.index] for p in self._parameters.bindable_parameters)

    def get_bindable_value(self, index: int) -> Any:
        """Value of the *index*-th bindable (ordinary) parameter."""
        parameter = self._parameters.bindable_parameters[index]
        return self._values[parameter.index]

    @property
    def has_bindable_null_value(self) -> bool:
        return any(value is None for value in self.bindable_values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.bindable_values)


__all__ = ["ParameterAccessor"]
