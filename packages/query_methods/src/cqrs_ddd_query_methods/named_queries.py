"""Externally declared queries, keyed by ``"{Domain}.{method}"``."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class NamedQueries(Protocol):
    """Port for looking up query text declared outside the repository."""

    def has_query(self, name: str) -> bool: ...

    def get_query(self, name: str) -> str:
        """Return the query for *name*; raises ``KeyError`` if unknown."""
        ...


class MappingNamedQueries:
    """:class:`NamedQueries` backed by a plain mapping.

    Usage::

        queries = MappingNamedQueries({"Order.find_late": "status = 'LATE'"})
        queries.get_query("Order.find_late")
    """

    def __init__(self, queries: Mapping[str, str] | None = None) -> None:
        self._queries: dict[str, str] = dict(queries or {})

    def has_query(self, name: str) -> bool:
        return name in self._queries

    def get_query(self, name: str) -> str:
        try:
            return self._queries[name]
        except KeyError:
            msg = f"No named query '{name}' declared"
            raise KeyError(msg) from None

    def register(self, name: str, query: str) -> None:
        if name in self._queries:
            logger.debug("Overriding named query %s", name)
        self._queries[name] = query

    @property
    def names(self) -> list[str]:
        return sorted(self._queries)


__all__ = ["MappingNamedQueries", "NamedQueries"]
