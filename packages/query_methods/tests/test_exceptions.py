"""Tests for the query method exception hierarchy."""

from __future__ import annotations

import pytest

from cqrs_ddd_query_methods.exceptions import (
    ConflictingParametersError,
    IllegalParameterForShapeError,
    MalformedSignatureError,
    MissingRequiredParameterError,
    QueryMethodError,
    UnsupportedReturnShapeError,
)


@pytest.mark.parametrize(
    ("error_type", "code"),
    [
        (MalformedSignatureError, "MALFORMED_SIGNATURE"),
        (ConflictingParametersError, "CONFLICTING_PARAMETERS"),
        (MissingRequiredParameterError, "MISSING_REQUIRED_PARAMETER"),
        (IllegalParameterForShapeError, "ILLEGAL_PARAMETER_FOR_SHAPE"),
        (UnsupportedReturnShapeError, "UNSUPPORTED_RETURN_SHAPE"),
    ],
)
def test_hierarchy_and_codes(error_type, code):
    error = error_type("boom")

    assert isinstance(error, QueryMethodError)
    assert error.code == code
    assert str(error) == "boom"


def test_message_names_method_and_rule():
    error = ConflictingParametersError(
        "Pageable and Sort", method="OrderRepository.find_all", rule="pageable_excludes_sort"
    )

    assert str(error) == (
        "Pageable and Sort; Offending method: OrderRepository.find_all "
        "(rule: pageable_excludes_sort)"
    )
    assert error.to_dict() == {
        "error": "CONFLICTING_PARAMETERS",
        "message": "Pageable and Sort",
        "method": "OrderRepository.find_all",
        "rule": "pageable_excludes_sort",
    }


def test_with_method_keeps_type_and_rule():
    error = MalformedSignatureError("raw wrapper", rule="resolvable_wrapped_type")
    bound = error.with_method("OrderRepository.find_raw")

    assert type(bound) is MalformedSignatureError
    assert bound.rule == "resolvable_wrapped_type"
    assert bound.method == "OrderRepository.find_raw"
    assert error.method is None
