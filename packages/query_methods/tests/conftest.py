"""Shared fixtures for query method tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_query_methods.wrappers import (
    WrapperRegistry,
    build_default_registry,
    set_wrapper_registry,
)


@pytest.fixture(autouse=True)
def wrapper_registry() -> WrapperRegistry:
    """Fresh default wrapper registry installed for each test."""
    registry = build_default_registry()
    set_wrapper_registry(registry)
    return registry
