"""Tests for method signatures and repository metadata."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Optional, Protocol, TypeVar
from uuid import UUID

import pytest
from pydantic import BaseModel

from cqrs_ddd_query_methods.domain import Page, Pageable, Sort
from cqrs_ddd_query_methods.exceptions import MalformedSignatureError
from cqrs_ddd_query_methods.metadata import (
    DefaultRepositoryMetadata,
    RepositoryMetadata,
    resolve_type_bindings,
)
from cqrs_ddd_query_methods.repository import ID, Repository, T
from cqrs_ddd_query_methods.signature import MethodSignature
from cqrs_ddd_query_methods.type_information import TypeInformation

E = TypeVar("E")
K = TypeVar("K")


class Customer(BaseModel):
    name: str


class CrudRepository(Repository[E, K], Protocol[E, K]):
    def find_all(self, pageable: Pageable) -> Page[E]: ...

    def find_by_id(self, id: K) -> Optional[E]: ...  # noqa: UP007


class CustomerRepository(CrudRepository[Customer, UUID], Protocol):
    async def find_by_name(self, name: str, sort: Sort) -> list[Customer]: ...

    def _helper(self) -> None: ...


def with_varargs(*statuses: str) -> list[Customer]: ...


def with_kwargs(**filters: str) -> list[Customer]: ...


def with_unknown_annotation(value: UnknownType) -> Customer: ...  # noqa: F821


# -- MethodSignature -------------------------------------------------------------


def test_signature_drops_the_receiver():
    signature = MethodSignature.of(CustomerRepository.find_by_name, CustomerRepository)

    assert [p.name for p in signature.parameters] == ["name", "sort"]
    assert signature.parameter_types == (str, Sort)
    assert signature.qualified_name == "CustomerRepository.find_by_name"


def test_async_methods_return_awaitables():
    signature = MethodSignature.of(CustomerRepository.find_by_name, CustomerRepository)

    assert signature.is_coroutine
    assert signature.return_annotation == Awaitable[list[Customer]]


@pytest.mark.parametrize("function", [with_varargs, with_kwargs])
def test_variadic_parameters_are_malformed(function):
    with pytest.raises(MalformedSignatureError) as exc:
        MethodSignature.of(function)
    assert exc.value.rule == "no_variadic_parameters"
    assert exc.value.method == function.__name__


def test_unresolvable_annotations_are_malformed():
    with pytest.raises(MalformedSignatureError, match="Cannot resolve annotations") as exc:
        MethodSignature.of(with_unknown_annotation)
    assert exc.value.rule == "resolvable_annotations"


# -- type variable bindings --------------------------------------------------------


def test_bindings_flow_through_intermediate_interfaces():
    bindings = resolve_type_bindings(CustomerRepository)

    assert bindings[E] is Customer
    assert bindings[K] is UUID
    assert bindings[T] is Customer
    assert bindings[ID] is UUID


def test_metadata_from_interface():
    metadata = DefaultRepositoryMetadata(CustomerRepository)

    assert isinstance(metadata, RepositoryMetadata)
    assert metadata.domain_type is Customer
    assert metadata.id_type is UUID
    assert metadata.repository_interface is CustomerRepository
    assert repr(metadata) == (
        "DefaultRepositoryMetadata(interface=CustomerRepository, domain=Customer)"
    )


def test_inherited_methods_are_resolved_against_bindings():
    metadata = DefaultRepositoryMetadata(CustomerRepository)

    find_all = metadata.get_method_signature("find_all")
    assert find_all.return_annotation == Page[Customer]
    assert metadata.get_return_type(find_all) == TypeInformation.of(Page[Customer])
    assert metadata.get_returned_domain_class(find_all) is Customer

    find_by_id = metadata.get_method_signature("find_by_id")
    assert find_by_id.parameter_types == (UUID,)
    assert TypeInformation.of(find_by_id.return_annotation).actual_type.type is Customer


def test_query_method_names_skip_private_and_marker_members():
    metadata = DefaultRepositoryMetadata(CustomerRepository)

    assert metadata.query_method_names() == ["find_by_name", "find_all", "find_by_id"]


def test_metadata_without_interface():
    metadata = DefaultRepositoryMetadata.for_domain(Customer, UUID)

    assert metadata.domain_type is Customer
    assert metadata.query_method_names() == []
    with pytest.raises(LookupError):
        metadata.get_method_signature("find_all")
