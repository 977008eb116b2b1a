"""
Query method exception hierarchy.

Every failure is raised while a query method is being described, never
later. All exceptions inherit from ``QueryMethodError`` and provide
``to_dict()`` for API-friendly error reports.
"""

from __future__ import annotations

from typing import Any


class QueryMethodError(Exception):
    """Base exception for all query method signature errors.

    Attributes:
        method: Qualified name of the offending method (``None`` when the
            error is raised outside of a method context, e.g. by a raw
            registry lookup).
        rule: Name of the violated rule.
    """

    code = "QUERY_METHOD_ERROR"

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        rule: str | None = None,
    ) -> None:
        self.message = message
        self.method = method
        self.rule = rule
        if method is not None:
            message = f"{message}; Offending method: {method}"
        if rule is not None:
            message = f"{message} (rule: {rule})"
        super().__init__(message)

    def with_method(self, method: str) -> QueryMethodError:
        """Return a copy of this error bound to *method*."""
        return type(self)(self.message, method=method, rule=self.rule)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "method": self.method,
            "rule": self.rule,
        }


class MalformedSignatureError(QueryMethodError):
    """The signature itself is unusable.

    Raised for duplicate reserved-role parameters, wrapper return types
    without a resolvable element type, variadic parameters and
    annotations that cannot be resolved.
    """

    code = "MALFORMED_SIGNATURE"


class ConflictingParametersError(QueryMethodError):
    """A pageable parameter is declared together with a sort or limit."""

    code = "CONFLICTING_PARAMETERS"


class MissingRequiredParameterError(QueryMethodError):
    """The return shape requires a parameter the method does not declare."""

    code = "MISSING_REQUIRED_PARAMETER"


class IllegalParameterForShapeError(QueryMethodError):
    """A parameter is declared that the return shape cannot honour."""

    code = "ILLEGAL_PARAMETER_FOR_SHAPE"


class UnsupportedReturnShapeError(QueryMethodError):
    """The return shape cannot carry the paging metadata requested."""

    code = "UNSUPPORTED_RETURN_SHAPE"


__all__ = [
    "ConflictingParametersError",
    "IllegalParameterForShapeError",
    "MalformedSignatureError",
    "MissingRequiredParameterError",
    "QueryMethodError",
    "UnsupportedReturnShapeError",
]
