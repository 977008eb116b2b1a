"""
TypeInformation — a normalised view over Python type annotations.

Annotations arrive in many spellings (``list[Order]``,
``typing.List[Order]``, ``Optional[Order]``, ``Order | None``,
``Annotated[Order, ...]``). ``TypeInformation.of()`` folds them into a
single shape: an *origin* plus a tuple of argument ``TypeInformation``.

Optional annotations get the origin :data:`OPTIONAL` so the wrapper
registry can treat them like any other single-valued wrapper.
"""

from __future__ import annotations

import inspect
import types
import typing
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

OPTIONAL: Any = typing.Optional
"""Origin assigned to ``Optional[X]`` / ``X | None`` annotations."""

_NONE_TYPE = type(None)
_TEXT_TYPES = (str, bytes, bytearray)


def type_name(annotation: Any) -> str:
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "").replace("collections.abc.", "")


@dataclass(frozen=True)
class TypeInformation:
    """Immutable, hashable description of an annotation.

    Equality and hashing only consider ``origin`` and ``arguments``, so
    ``typing.List[Order]`` and ``list[Order]`` compare equal.
    """

    origin: Any
    arguments: tuple[TypeInformation, ...] = ()
    annotation: Any = field(default=None, compare=False)

    # -- construction -------------------------------------------------------

    @classmethod
    def of(cls, annotation: Any) -> TypeInformation:
        """Normalise *annotation*.

        Raises:
            TypeError: For unresolved string forward references.
        """
        if isinstance(annotation, TypeInformation):
            return annotation
        if isinstance(annotation, (str, typing.ForwardRef)):
            msg = f"Unresolved forward reference {annotation!r}"
            raise TypeError(msg)
        if annotation is Any or annotation is inspect.Parameter.empty:
            return cls(object, (), annotation)
        if annotation is None or annotation is _NONE_TYPE:
            return cls(_NONE_TYPE, (), _NONE_TYPE)
        if isinstance(annotation, typing.TypeVar):
            bound = annotation.__bound__
            return cls.of(bound) if bound is not None else cls(object, (), annotation)

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is typing.Annotated:
            return cls.of(args[0])
        if origin is typing.Union or origin is types.UnionType:
            members = [a for a in args if a is not _NONE_TYPE]
            if len(members) == 1 and len(members) != len(args):
                return cls(OPTIONAL, (cls.of(members[0]),), annotation)
            return cls(typing.Union, tuple(cls.of(a) for a in args), annotation)
        if origin is typing.Literal:
            return cls(type(args[0]) if args else object, (), annotation)
        if origin is None:
            return cls(annotation, (), annotation)

        # Callable[[A, B], R] carries its parameter list as a list; Ellipsis
        # marks variadic tuples. Neither is a type argument.
        arguments = tuple(
            cls.of(a) for a in args if not isinstance(a, list) and a is not Ellipsis
        )
        return cls(origin, arguments, annotation)

    # -- basic views --------------------------------------------------------

    @property
    def type(self) -> type[Any]:
        """The runtime class behind the annotation (``object`` if none)."""
        return self.origin if isinstance(self.origin, type) else object

    @property
    def name(self) -> str:
        return type_name(self.annotation if self.annotation is not None else self.origin)

    @property
    def simple_name(self) -> str:
        return self.type.__name__

    @property
    def is_optional(self) -> bool:
        return self.origin is OPTIONAL

    @property
    def actual_type(self) -> TypeInformation:
        """This type with every ``Optional`` layer peeled."""
        current = self
        while current.is_optional:
            current = current.arguments[0]
        return current

    @property
    def is_collection_like(self) -> bool:
        """Iterable containers other than text and mappings.

        Unparameterised types must be real collections: models that merely
        define ``__iter__`` (pydantic models do) are not containers.
        """
        candidate = self.type
        if candidate is object or issubclass(candidate, _TEXT_TYPES):
            return False
        if not self.is_subtype_of(Iterable) or self.is_subtype_of(Mapping):
            return False
        return bool(self.arguments) or self.is_subtype_of(Collection)

    @property
    def component_type(self) -> TypeInformation | None:
        """Element type for containers; value type for mappings."""
        if not self.arguments:
            return None
        if self.is_subtype_of(Mapping) and len(self.arguments) > 1:
            return self.arguments[1]
        return self.arguments[0]

    def get_required_component_type(self) -> TypeInformation:
        component = self.component_type
        if component is None:
            msg = f"Type {self.name} has no component type"
            raise TypeError(msg)
        return component

    # -- assignability ------------------------------------------------------

    def is_subtype_of(self, target: type[Any]) -> bool:
        try:
            return issubclass(self.type, target)
        except TypeError:
            # Non-runtime-checkable protocols and other exotic targets.
            return False

    def is_assignable_from(self, other: TypeInformation) -> bool:
        """``True`` if a value of *other* can be used where ``self`` is expected."""
        if self.type is object:
            return True
        return other.is_subtype_of(self.type)

    def __repr__(self) -> str:
        return f"TypeInformation({self.name})"


__all__ = ["OPTIONAL", "TypeInformation", "type_name"]
