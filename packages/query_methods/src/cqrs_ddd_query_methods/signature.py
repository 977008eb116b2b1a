"""
MethodSignature — the raw signature of a declared repository method.

Turns a Python function into an immutable record of its parameters and
return annotation with every forward reference resolved. ``async def``
methods get their return annotation wrapped in ``Awaitable[...]`` so the
wrapper registry treats them exactly like methods that return an
awaitable explicitly.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Any

from .exceptions import MalformedSignatureError
from .type_information import type_name

_RECEIVER_NAMES = frozenset({"self", "cls"})
_VARIADIC_KINDS = frozenset(
    {inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD}
)


@dataclass(frozen=True)
class ParameterSpec:
    """One declared parameter, annotation already resolved."""

    name: str
    annotation: Any = Any
    has_default: bool = False


@dataclass(frozen=True)
class MethodSignature:
    """Immutable signature of a repository method (receiver excluded)."""

    name: str
    parameters: tuple[ParameterSpec, ...] = ()
    return_annotation: Any = Any
    declaring_class: type[Any] | None = None
    is_coroutine: bool = False

    @classmethod
    def of(
        cls,
        function: Callable[..., Any],
        owner: type[Any] | None = None,
    ) -> MethodSignature:
        """Build a signature from *function* declared on *owner*.

        Raises:
            MalformedSignatureError: If annotations can't be resolved or the
                function declares ``*args`` / ``**kwargs``.
        """
        function = getattr(function, "__func__", function)
        name = function.__name__
        qualified = f"{owner.__qualname__}.{name}" if owner else function.__qualname__

        try:
            hints = typing.get_type_hints(function)
        except (NameError, TypeError) as exc:
            msg = f"Cannot resolve annotations: {exc}"
            raise MalformedSignatureError(
                msg, method=qualified, rule="resolvable_annotations"
            ) from exc

        declared = list(inspect.signature(function).parameters.values())
        if declared and declared[0].name in _RECEIVER_NAMES:
            declared = declared[1:]

        specs: list[ParameterSpec] = []
        for parameter in declared:
            if parameter.kind in _VARIADIC_KINDS:
                msg = f"Query methods must not declare variadic parameter '{parameter.name}'"
                raise MalformedSignatureError(
                    msg, method=qualified, rule="no_variadic_parameters"
                )
            specs.append(
                ParameterSpec(
                    name=parameter.name,
                    annotation=hints.get(parameter.name, Any),
                    has_default=parameter.default is not inspect.Parameter.empty,
                )
            )

        is_coroutine = inspect.iscoroutinefunction(function)
        return_annotation = hints.get("return", Any)
        if is_coroutine:
            return_annotation = Awaitable[return_annotation]

        return cls(
            name=name,
            parameters=tuple(specs),
            return_annotation=return_annotation,
            declaring_class=owner,
            is_coroutine=is_coroutine,
        )

    @property
    def qualified_name(self) -> str:
        if self.declaring_class is None:
            return self.name
        return f"{self.declaring_class.__qualname__}.{self.name}"

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return tuple(p.annotation for p in self.parameters)

    def map_annotations(self, mapper: Callable[[Any], Any]) -> MethodSignature:
        """Return a copy with *mapper* applied to every annotation."""
        return replace(
            self,
            parameters=tuple(
                replace(p, annotation=mapper(p.annotation)) for p in self.parameters
            ),
            return_annotation=mapper(self.return_annotation),
        )

    def __str__(self) -> str:
        params = ", ".join(
            f"{p.name}: {type_name(p.annotation)}" for p in self.parameters
        )
        return f"{self.qualified_name}({params}) -> {type_name(self.return_annotation)}"


__all__ = ["MethodSignature", "ParameterSpec"]
