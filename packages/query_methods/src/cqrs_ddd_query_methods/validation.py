"""
SignatureValidator — combination rules across return shape and
parameter roles.

The rules live in a table (:data:`DEFAULT_RULES`) evaluated in order;
the first violated rule raises. Each rule is a small, named, independently
testable object::

    validator = SignatureValidator()
    validator.validate(method, parameters, shape)   # raises on violation

    SignatureValidator(DEFAULT_RULES + (my_rule,))  # extend the table
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .exceptions import (
    ConflictingParametersError,
    IllegalParameterForShapeError,
    MalformedSignatureError,
    MissingRequiredParameterError,
    QueryMethodError,
    UnsupportedReturnShapeError,
)
from .parameters import ParameterRole
from .return_shape import PAGINATABLE_KINDS, ReturnShapeKind

if TYPE_CHECKING:
    from .parameters import Parameters
    from .return_shape import ReturnShape
    from .signature import MethodSignature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignatureContext:
    """Everything a rule may inspect."""

    method: MethodSignature
    parameters: Parameters
    shape: ReturnShape

    @property
    def kind(self) -> ReturnShapeKind:
        return self.shape.kind


@dataclass(frozen=True)
class SignatureRule:
    """A single named consistency rule.

    Attributes:
        name: Stable identifier, reported as ``QueryMethodError.rule``.
        error_type: Exception raised when the rule is violated.
        violated: Predicate returning ``True`` on violation.
        describe: Builds the error message for a violating context.
    """

    name: str
    error_type: type[QueryMethodError]
    violated: Callable[[SignatureContext], bool]
    describe: Callable[[SignatureContext], str]

    def check(self, context: SignatureContext) -> None:
        if self.violated(context):
            raise self.error_type(
                self.describe(context),
                method=context.method.qualified_name,
                rule=self.name,
            )


# -- rule predicates --------------------------------------------------------


def _duplicated_roles(context: SignatureContext) -> list[ParameterRole]:
    return [
        role for role, count in context.parameters.role_counts.items() if count > 1
    ]


def _has(context: SignatureContext, role: ParameterRole) -> bool:
    return context.parameters.has_role(role)


def _describe_duplicates(context: SignatureContext) -> str:
    types = ", ".join(role.declared_type.__name__ for role in _duplicated_roles(context))
    return f"Method must have only one argument of type {types}"


def _pageable_shape_unsupported(context: SignatureContext) -> bool:
    if not _has(context, ParameterRole.PAGINATION):
        return False
    if context.kind is ReturnShapeKind.STREAM:
        return False
    return context.kind not in PAGINATABLE_KINDS


DEFAULT_RULES: tuple[SignatureRule, ...] = (
    SignatureRule(
        name="unique_reserved_roles",
        error_type=MalformedSignatureError,
        violated=lambda c: bool(_duplicated_roles(c)),
        describe=_describe_duplicates,
    ),
    SignatureRule(
        name="pageable_excludes_sort",
        error_type=ConflictingParametersError,
        violated=lambda c: (
            _has(c, ParameterRole.PAGINATION) and _has(c, ParameterRole.SORT)
        ),
        describe=lambda c: (
            "Method must not have Pageable *and* Sort parameters; "
            "use the sort embedded in Pageable instead"
        ),
    ),
    SignatureRule(
        name="pageable_excludes_limit",
        error_type=ConflictingParametersError,
        violated=lambda c: (
            _has(c, ParameterRole.PAGINATION) and _has(c, ParameterRole.LIMIT)
        ),
        describe=lambda c: (
            "Method using a Pageable parameter must not define a Limit; "
            "the page size is the limit"
        ),
    ),
    SignatureRule(
        name="scroll_position_requires_window",
        error_type=IllegalParameterForShapeError,
        violated=lambda c: (
            _has(c, ParameterRole.SCROLL_POSITION)
            and c.kind is not ReturnShapeKind.WINDOW
        ),
        describe=lambda c: (
            f"Method declaring a ScrollPosition parameter must return a Window, "
            f"not {c.shape.declared_type.name}"
        ),
    ),
    SignatureRule(
        name="page_requires_pageable",
        error_type=MissingRequiredParameterError,
        violated=lambda c: (
            c.kind is ReturnShapeKind.PAGE and not _has(c, ParameterRole.PAGINATION)
        ),
        describe=lambda c: "Paging query needs to have a Pageable parameter",
    ),
    SignatureRule(
        name="window_requires_scroll_position_or_pageable",
        error_type=MissingRequiredParameterError,
        violated=lambda c: (
            c.kind is ReturnShapeKind.WINDOW
            and not _has(c, ParameterRole.SCROLL_POSITION)
            and not _has(c, ParameterRole.PAGINATION)
        ),
        describe=lambda c: (
            "Scroll query needs to have a ScrollPosition or Pageable parameter"
        ),
    ),
    SignatureRule(
        name="pageable_requires_paginatable_shape",
        error_type=UnsupportedReturnShapeError,
        violated=_pageable_shape_unsupported,
        describe=lambda c: (
            f"Method declaring a Pageable parameter has to return one of "
            f"{', '.join(sorted(k.value for k in PAGINATABLE_KINDS))} "
            f"or a stream, not {c.shape.declared_type.name}"
        ),
    ),
)


class SignatureValidator:
    """Evaluates a rule table against a method; fail-fast."""

    def __init__(self, rules: Iterable[SignatureRule] | None = None) -> None:
        self._rules: tuple[SignatureRule, ...] = (
            tuple(rules) if rules is not None else DEFAULT_RULES
        )

    @property
    def rules(self) -> tuple[SignatureRule, ...]:
        return self._rules

    def with_rules(self, *rules: SignatureRule) -> SignatureValidator:
        """Return a validator with *rules* appended to this table."""
        return SignatureValidator(self._rules + rules)

    def validate(
        self,
        method: MethodSignature,
        parameters: Parameters,
        shape: ReturnShape,
    ) -> None:
        """Raise the first violated rule's error."""
        context = SignatureContext(method, parameters, shape)
        for rule in self._rules:
            rule.check(context)
        logger.debug(
            "Signature of %s satisfies %d rules", method.qualified_name, len(self._rules)
        )

    def violations(
        self,
        method: MethodSignature,
        parameters: Parameters,
        shape: ReturnShape,
    ) -> list[str]:
        """Names of every violated rule (diagnostics; does not raise)."""
        context = SignatureContext(method, parameters, shape)
        return [rule.name for rule in self._rules if rule.violated(context)]


__all__ = [
    "DEFAULT_RULES",
    "SignatureContext",
    "SignatureRule",
    "SignatureValidator",
]
