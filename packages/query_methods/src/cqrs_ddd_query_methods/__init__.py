"""cqrs-ddd-query-methods — classifies and validates repository query methods.

Turns a method declared on a repository interface into a
:class:`QueryMethod`: its parameters classified by reserved role, its
return type reduced to a shape, and the combination validated.
"""

from __future__ import annotations

from .accessor import ParameterAccessor
from .domain import (
    Direction,
    KeysetScrollPosition,
    Limit,
    OffsetScrollPosition,
    Order,
    Page,
    Pageable,
    PageRequest,
    ScrollPosition,
    SearchHit,
    SearchResults,
    Slice,
    Sort,
    ValueObject,
    Window,
)
from .exceptions import (
    ConflictingParametersError,
    IllegalParameterForShapeError,
    MalformedSignatureError,
    MissingRequiredParameterError,
    QueryMethodError,
    UnsupportedReturnShapeError,
)
from .lookup import RepositoryQueryMethods
from .metadata import DefaultRepositoryMetadata, RepositoryMetadata
from .named_queries import MappingNamedQueries, NamedQueries
from .parameters import Parameter, ParameterRole, Parameters
from .query_method import QueryMethod, describe
from .repository import Repository
from .return_shape import (
    PAGINATABLE_KINDS,
    ReturnShape,
    ReturnShapeKind,
    ReturnShapeResolver,
)
from .signature import MethodSignature, ParameterSpec
from .type_information import TypeInformation
from .validation import DEFAULT_RULES, SignatureRule, SignatureValidator
from .wrappers import (
    WrapperDescriptor,
    WrapperKind,
    WrapperRegistry,
    build_default_registry,
    get_wrapper_registry,
    set_wrapper_registry,
)

__all__: list[str] = [
    # Descriptor
    "QueryMethod",
    "describe",
    "RepositoryQueryMethods",
    # Signature & metadata
    "MethodSignature",
    "ParameterSpec",
    "Repository",
    "RepositoryMetadata",
    "DefaultRepositoryMetadata",
    "TypeInformation",
    # Parameters
    "Parameter",
    "ParameterRole",
    "Parameters",
    "ParameterAccessor",
    # Return shape
    "PAGINATABLE_KINDS",
    "ReturnShape",
    "ReturnShapeKind",
    "ReturnShapeResolver",
    # Wrappers
    "WrapperDescriptor",
    "WrapperKind",
    "WrapperRegistry",
    "build_default_registry",
    "get_wrapper_registry",
    "set_wrapper_registry",
    # Validation
    "DEFAULT_RULES",
    "SignatureRule",
    "SignatureValidator",
    # Named queries
    "MappingNamedQueries",
    "NamedQueries",
    # Domain types
    "Direction",
    "KeysetScrollPosition",
    "Limit",
    "OffsetScrollPosition",
    "Order",
    "Page",
    "PageRequest",
    "Pageable",
    "ScrollPosition",
    "SearchHit",
    "SearchResults",
    "Slice",
    "Sort",
    "ValueObject",
    "Window",
    # Exceptions
    "QueryMethodError",
    "MalformedSignatureError",
    "ConflictingParametersError",
    "MissingRequiredParameterError",
    "IllegalParameterForShapeError",
    "UnsupportedReturnShapeError",
]
