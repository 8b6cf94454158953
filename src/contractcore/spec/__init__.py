"""Contract DSL for consumer/producer agreements.

This module provides:
- Dual-sided properties (consumer value vs. producer value)
- A regex pattern library with example generation
- Matching types and body matchers
- Headers, query parameters and cookies with stub/test side projections
- Contract builders with fail-fast validation

Usage:
    from contractcore.spec import Contract

    def configure(c):
        request = c.request().method("GET").url("/users/1")
        request.headers().accept(request.value(
            request.consumer(request.regex("application/.*")),
            request.producer("application/json"),
        ))
        c.response().status(200).body({"id": request.regex(request.positive_int())})

    contract = Contract.make(configure)
    contract.to_test_side()
"""

from __future__ import annotations

from contractcore.spec.builders import (
    ContractBuilder,
    InputBuilder,
    OutputMessageBuilder,
    RequestBuilder,
    ResponseBuilder,
)
from contractcore.spec.contract import (
    Contract,
    HttpMethod,
    Input,
    OutputMessage,
    Request,
    Response,
    assert_contract,
    iter_properties,
)
from contractcore.spec.cookies import Cookie, Cookies
from contractcore.spec.dsl import Common
from contractcore.spec.errors import (
    ContractError,
    ContractFileError,
    ContractValidationError,
    ExampleGenerationError,
    NumericCoercionError,
    PatternMismatchError,
)
from contractcore.spec.execution import ExecutionProperty, insert_value
from contractcore.spec.generator import ExampleGenerator, get_generator, seeded_generation, set_generator
from contractcore.spec.headers import Header, Headers, QueryParameter, QueryParameters
from contractcore.spec.matching import (
    BodyMatcher,
    BodyMatchers,
    MatchingType,
    MatchingTypeValue,
    is_regex_related,
)
from contractcore.spec.patterns import Pattern, RegexPatterns
from contractcore.spec.properties import (
    ClientDslProperty,
    DslProperty,
    NamedProperty,
    NumericKind,
    OptionalProperty,
    RegexProperty,
    ServerDslProperty,
    Side,
    verify_sides,
)

__all__ = [
    # Contract
    "Contract",
    "ContractBuilder",
    "HttpMethod",
    "Input",
    "InputBuilder",
    "OutputMessage",
    "OutputMessageBuilder",
    "Request",
    "RequestBuilder",
    "Response",
    "ResponseBuilder",
    "assert_contract",
    "iter_properties",
    # Properties
    "ClientDslProperty",
    "Common",
    "DslProperty",
    "ExecutionProperty",
    "NamedProperty",
    "NumericKind",
    "OptionalProperty",
    "RegexProperty",
    "ServerDslProperty",
    "Side",
    "insert_value",
    "verify_sides",
    # Collections
    "Cookie",
    "Cookies",
    "Header",
    "Headers",
    "QueryParameter",
    "QueryParameters",
    # Matching
    "BodyMatcher",
    "BodyMatchers",
    "MatchingType",
    "MatchingTypeValue",
    "is_regex_related",
    # Patterns and generation
    "ExampleGenerator",
    "Pattern",
    "RegexPatterns",
    "get_generator",
    "seeded_generation",
    "set_generator",
    # Errors
    "ContractError",
    "ContractFileError",
    "ContractValidationError",
    "ExampleGenerationError",
    "NumericCoercionError",
    "PatternMismatchError",
]
