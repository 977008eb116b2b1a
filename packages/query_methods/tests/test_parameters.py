"""Tests for parameter classification."""

from __future__ import annotations

from typing import Optional

import pytest

from cqrs_ddd_query_methods.domain import (
    KeysetScrollPosition,
    Limit,
    Pageable,
    PageRequest,
    ScrollPosition,
    Sort,
)
from cqrs_ddd_query_methods.parameters import (
    Parameter,
    ParameterRole,
    Parameters,
    classify_role,
)
from cqrs_ddd_query_methods.signature import MethodSignature
from cqrs_ddd_query_methods.type_information import TypeInformation


class Order:
    pass


def find_by_status(
    status: str, pageable: Pageable, projection: type[Order]
) -> list[Order]: ...


def find_recent(since: int, sort: Sort, limit: Limit | None = None) -> list[Order]: ...


def find_plain(status: str, customer: str) -> list[Order]: ...


# -- role classification -----------------------------------------------------


@pytest.mark.parametrize(
    ("annotation", "role"),
    [
        (Pageable, ParameterRole.PAGINATION),
        (PageRequest, ParameterRole.PAGINATION),
        (Optional[Pageable], ParameterRole.PAGINATION),  # noqa: UP007
        (Sort, ParameterRole.SORT),
        (Limit, ParameterRole.LIMIT),
        (ScrollPosition, ParameterRole.SCROLL_POSITION),
        (KeysetScrollPosition, ParameterRole.SCROLL_POSITION),
        (str, None),
        (Order, None),
    ],
)
def test_classify_role(annotation, role):
    assert classify_role(TypeInformation.of(annotation)) is role


def test_role_knows_its_declared_type():
    assert ParameterRole.PAGINATION.declared_type is Pageable
    assert ParameterRole.SCROLL_POSITION.declared_type is ScrollPosition


# -- Parameters ----------------------------------------------------------------


def test_from_signature_classifies_every_parameter():
    parameters = Parameters.from_signature(MethodSignature.of(find_by_status))

    assert len(parameters) == 3
    assert [p.name for p in parameters] == ["status", "pageable", "projection"]
    assert parameters[1].role is ParameterRole.PAGINATION
    assert parameters[0].role is None
    assert parameters.has_pageable_parameter
    assert not parameters.has_sort_parameter
    assert parameters.pageable_index == 1
    assert parameters.sort_index == -1


def test_dynamic_projection_is_special_but_not_a_role():
    parameters = Parameters.from_signature(MethodSignature.of(find_by_status))

    projection = parameters[2]
    assert projection.is_dynamic_projection
    assert projection.role is None
    assert not projection.is_bindable
    assert parameters.has_dynamic_projection
    assert parameters.dynamic_projection_index == 2
    assert [p.name for p in parameters.bindable_parameters] == ["status"]


def test_sort_and_optional_limit():
    parameters = Parameters.from_signature(MethodSignature.of(find_recent))

    assert parameters.has_sort_parameter
    assert parameters.has_limit_parameter
    assert parameters.limit_index == 2
    assert parameters[2].has_default
    assert parameters.potentially_sorts_dynamically
    assert parameters.has_special_parameter


def test_plain_parameters_have_no_special_roles():
    parameters = Parameters.from_signature(MethodSignature.of(find_plain))

    assert not parameters.has_special_parameter
    assert not parameters.potentially_sorts_dynamically
    assert parameters.role_counts == {}
    assert parameters.get(ParameterRole.PAGINATION) is None
    assert len(parameters.bindable_parameters) == 2


def test_duplicate_roles_are_counted_not_rejected():
    sort = TypeInformation.of(Sort)
    parameters = Parameters(
        [
            Parameter(0, "first", sort, ParameterRole.SORT),
            Parameter(1, "second", sort, ParameterRole.SORT),
        ]
    )

    assert parameters.count(ParameterRole.SORT) == 2
    assert parameters.role_counts == {ParameterRole.SORT: 2}
    assert parameters.sort_index == 0


def test_parameter_str():
    parameter = Parameter(0, "pageable", TypeInformation.of(Pageable), ParameterRole.PAGINATION)
    assert str(parameter) == "#0 pageable: Pageable [pagination]"
