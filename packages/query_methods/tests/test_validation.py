"""Tests for the signature rule table."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest

from cqrs_ddd_query_methods.domain import (
    KeysetScrollPosition,
    Limit,
    OffsetScrollPosition,
    Page,
    Pageable,
    PageRequest,
    ScrollPosition,
    Slice,
    Sort,
    Window,
)
from cqrs_ddd_query_methods.exceptions import (
    ConflictingParametersError,
    IllegalParameterForShapeError,
    MalformedSignatureError,
    MissingRequiredParameterError,
    UnsupportedReturnShapeError,
)
from cqrs_ddd_query_methods.parameters import Parameters
from cqrs_ddd_query_methods.return_shape import ReturnShapeKind, ReturnShapeResolver
from cqrs_ddd_query_methods.signature import MethodSignature
from cqrs_ddd_query_methods.type_information import TypeInformation
from cqrs_ddd_query_methods.validation import (
    DEFAULT_RULES,
    SignatureRule,
    SignatureValidator,
)


@dataclass
class Order:
    number: int = 0


class Orders:
    """Methods exercised against the rule table."""

    def find_page(self, pageable: Pageable) -> Page[Order]: ...

    def find_slice(self, status: str, pageable: Pageable) -> Slice[Order]: ...

    def find_sorted(self, sort: Sort, limit: Limit) -> list[Order]: ...

    def find_twice_sorted(self, first: Sort, second: Sort) -> list[Order]: ...

    def find_page_and_sort(self, pageable: Pageable, sort: Sort) -> Page[Order]: ...

    def find_page_and_limit(self, pageable: Pageable, limit: Limit) -> list[Order]: ...

    def scroll(self, position: ScrollPosition) -> Window[Order]: ...

    def scroll_paged(self, pageable: Pageable) -> Window[Order]: ...

    def scroll_into_list(self, position: ScrollPosition) -> list[Order]: ...

    def find_unpaged_page(self, status: str) -> Page[Order]: ...

    def find_unpositioned_window(self, status: str) -> Window[Order]: ...

    def find_one_paged(self, pageable: Pageable) -> Order: ...

    def stream_paged(self, pageable: Pageable) -> Iterator[Order]: ...

    def find_two_pageables(self, pageable: Pageable, request: PageRequest) -> Page[Order]: ...

    def scroll_two_positions(
        self, offset: OffsetScrollPosition, keyset: KeysetScrollPosition
    ) -> Window[Order]: ...

    def find_list_paged_and_sorted(self, pageable: Pageable, sort: Sort) -> list[Order]: ...

    def find_slice_paged_and_sorted(self, pageable: Pageable, sort: Sort) -> Slice[Order]: ...

    def stream_paged_and_sorted(self, pageable: Pageable, sort: Sort) -> Iterator[Order]: ...


def context_for(name: str):
    method = MethodSignature.of(getattr(Orders, name), Orders)
    parameters = Parameters.from_signature(method)
    shape = ReturnShapeResolver().resolve(
        TypeInformation.of(method.return_annotation), Order
    )
    return method, parameters, shape


# -- default rule table ----------------------------------------------------------


def test_rule_table_order():
    assert [rule.name for rule in DEFAULT_RULES] == [
        "unique_reserved_roles",
        "pageable_excludes_sort",
        "pageable_excludes_limit",
        "scroll_position_requires_window",
        "page_requires_pageable",
        "window_requires_scroll_position_or_pageable",
        "pageable_requires_paginatable_shape",
    ]


@pytest.mark.parametrize(
    "name",
    [
        "find_page",
        "find_slice",
        "find_sorted",
        "scroll",
        "scroll_paged",
        "stream_paged",
    ],
)
def test_valid_signatures(name):
    validator = SignatureValidator()
    validator.validate(*context_for(name))
    assert validator.violations(*context_for(name)) == []


@pytest.mark.parametrize(
    ("name", "error", "rule"),
    [
        ("find_twice_sorted", MalformedSignatureError, "unique_reserved_roles"),
        ("find_page_and_sort", ConflictingParametersError, "pageable_excludes_sort"),
        ("find_page_and_limit", ConflictingParametersError, "pageable_excludes_limit"),
        (
            "scroll_into_list",
            IllegalParameterForShapeError,
            "scroll_position_requires_window",
        ),
        ("find_unpaged_page", MissingRequiredParameterError, "page_requires_pageable"),
        (
            "find_unpositioned_window",
            MissingRequiredParameterError,
            "window_requires_scroll_position_or_pageable",
        ),
        (
            "find_one_paged",
            UnsupportedReturnShapeError,
            "pageable_requires_paginatable_shape",
        ),
    ],
)
def test_invalid_signatures(name, error, rule):
    with pytest.raises(error) as exc:
        SignatureValidator().validate(*context_for(name))
    assert exc.value.rule == rule
    assert exc.value.method == f"Orders.{name}"
    assert f"Offending method: Orders.{name}" in str(exc.value)


def test_duplicate_role_message_names_the_type():
    with pytest.raises(MalformedSignatureError, match="only one argument of type Sort"):
        SignatureValidator().validate(*context_for("find_twice_sorted"))


@pytest.mark.parametrize(
    ("name", "role_type"),
    [
        ("find_two_pageables", "Pageable"),
        ("scroll_two_positions", "ScrollPosition"),
    ],
)
def test_duplicate_role_fails_across_subtypes(name, role_type):
    with pytest.raises(MalformedSignatureError, match=f"of type {role_type}") as exc:
        SignatureValidator().validate(*context_for(name))
    assert exc.value.rule == "unique_reserved_roles"


@pytest.mark.parametrize(
    "name",
    [
        "find_page_and_sort",
        "find_list_paged_and_sorted",
        "find_slice_paged_and_sorted",
        "stream_paged_and_sorted",
    ],
)
def test_pageable_and_sort_conflict_for_every_shape(name):
    with pytest.raises(ConflictingParametersError) as exc:
        SignatureValidator().validate(*context_for(name))
    assert exc.value.rule == "pageable_excludes_sort"


def test_violations_reports_every_broken_rule():
    violations = SignatureValidator().violations(*context_for("find_page_and_limit"))
    assert violations == ["pageable_excludes_limit"]

    method, parameters, _ = context_for("find_page_and_sort")
    _, _, single = context_for("find_one_paged")
    assert SignatureValidator().violations(method, parameters, single) == [
        "pageable_excludes_sort",
        "pageable_requires_paginatable_shape",
    ]


def test_validate_logs_success(caplog):
    caplog.set_level("DEBUG")
    SignatureValidator().validate(*context_for("find_page"))
    assert "Signature of Orders.find_page satisfies 7 rules" in caplog.text


# -- custom rules ----------------------------------------------------------------


no_single_results = SignatureRule(
    name="no_single_results",
    error_type=UnsupportedReturnShapeError,
    violated=lambda c: c.kind is ReturnShapeKind.SINGLE,
    describe=lambda c: "Single results are not supported by this store",
)


def test_with_rules_appends_to_the_table():
    validator = SignatureValidator().with_rules(no_single_results)
    assert validator.rules[-1] is no_single_results
    assert len(validator.rules) == len(DEFAULT_RULES) + 1

    def find_one(status: str) -> Order: ...

    method = MethodSignature.of(find_one)
    shape = ReturnShapeResolver().resolve(TypeInformation.of(Order), Order)
    with pytest.raises(UnsupportedReturnShapeError, match="not supported") as exc:
        validator.validate(method, Parameters.from_signature(method), shape)
    assert exc.value.rule == "no_single_results"


def test_empty_rule_table_accepts_anything():
    SignatureValidator([]).validate(*context_for("find_page_and_sort"))
