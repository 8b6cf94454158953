"""YAML contract files.

A file holds one contract per YAML document:

    name: get_user
    request:
      method: GET
      url: /users/1
      headers:
        Accept: application/json
      matchers:
        url:
          regex: /users/[0-9]+
    response:
      status: 200
      body:
        id: 1
        created: "2024-01-02T10:00:00"
      matchers:
        body:
          - path: $.created
            type: by_timestamp

Literal values in a request are what the generated test sends; a matcher
pattern next to them is what the stub accepts. In a response it is the other
way round: the literal is what the stub returns, the pattern is what the test
checks.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from contractcore.spec.builders import ContractBuilder
from contractcore.spec.contract import Contract
from contractcore.spec.dsl import Common
from contractcore.spec.errors import ContractError, ContractFileError
from contractcore.spec.matching import BodyMatchers, MatchingTypeValue
from contractcore.spec.patterns import Pattern, by_name
from contractcore.spec.properties import Side

logger = logging.getLogger(__name__)

CONTRACT_KEYS = {
    "description": str,
    "name": str,
    "ignored": bool,
    "inProgress": bool,
    "priority": int,
    "label": str,
    "metadata": dict,
    "request": dict,
    "response": dict,
    "input": dict,
    "outputMessage": dict,
}

REQUEST_KEYS = {
    "method": str,
    "url": str,
    "urlPath": str,
    "queryParameters": dict,
    "headers": dict,
    "cookies": dict,
    "body": object,
    "matchers": dict,
}

RESPONSE_KEYS = {
    "status": int,
    "headers": dict,
    "cookies": dict,
    "body": object,
    "async": bool,
    "fixedDelayMilliseconds": int,
    "matchers": dict,
}

INPUT_KEYS = {
    "triggeredBy": str,
    "messageFrom": str,
    "messageBody": object,
    "messageHeaders": dict,
    "assertThat": str,
    "matchers": dict,
}

OUTPUT_MESSAGE_KEYS = {
    "sentTo": str,
    "body": object,
    "headers": dict,
    "assertThat": str,
    "matchers": dict,
}

MATCHER_KEYS = {"url", "headers", "cookies", "queryParameters", "body"}

BODY_MATCHER_TYPES = (
    "by_regex",
    "by_date",
    "by_time",
    "by_timestamp",
    "by_equality",
    "by_type",
    "by_command",
)


class ContractShapeValidator:
    """Checks the shape of a parsed YAML contract document."""

    def __init__(self) -> None:
        self.errors: list[str] = []

    def validate(self, data: Any) -> list[str]:
        """Validate one document.

        Returns:
            List of error messages (empty if valid)
        """
        self.errors = []
        if not isinstance(data, dict):
            self.errors.append(f"Expected object, got {type(data).__name__}")
            return self.errors

        self._check_keys(data, CONTRACT_KEYS, "")
        for key, keys in (
            ("request", REQUEST_KEYS),
            ("response", RESPONSE_KEYS),
            ("input", INPUT_KEYS),
            ("outputMessage", OUTPUT_MESSAGE_KEYS),
        ):
            part = data.get(key)
            if isinstance(part, dict):
                self._check_keys(part, keys, key)
                if isinstance(part.get("matchers"), dict):
                    self._validate_matchers(part["matchers"], f"{key}.matchers")
        return self.errors

    def _check_keys(self, data: dict[str, Any], allowed: dict[str, type], path: str) -> None:
        for key, value in data.items():
            key_path = f"{path}.{key}" if path else key
            expected = allowed.get(key)
            if expected is None:
                self.errors.append(f"Unknown field: {key_path}")
            elif expected is int and isinstance(value, bool):
                self.errors.append(f"Expected int, got bool at {key_path}")
            elif expected is not object and value is not None and not isinstance(value, expected):
                self.errors.append(f"Expected {expected.__name__}, got {type(value).__name__} at {key_path}")

    def _validate_matchers(self, data: dict[str, Any], path: str) -> None:
        for key, value in data.items():
            key_path = f"{path}.{key}"
            if key not in MATCHER_KEYS:
                self.errors.append(f"Unknown field: {key_path}")
            elif key == "url":
                self._validate_pattern_source(value, key_path)
            elif not isinstance(value, list):
                self.errors.append(f"Expected list, got {type(value).__name__} at {key_path}")
            elif key == "body":
                for i, item in enumerate(value):
                    self._validate_body_matcher(item, f"{key_path}[{i}]")
            else:
                for i, item in enumerate(value):
                    item_path = f"{key_path}[{i}]"
                    if not isinstance(item, dict) or "key" not in item:
                        self.errors.append(f"Missing required field: key at {item_path}")
                    else:
                        self._validate_pattern_source(item, item_path)

    def _validate_pattern_source(self, data: Any, path: str) -> None:
        if not isinstance(data, dict):
            self.errors.append(f"Expected object, got {type(data).__name__} at {path}")
            return
        if ("regex" in data) == ("predefined" in data):
            self.errors.append(f"Exactly one of regex or predefined is required at {path}")
        elif "regex" in data:
            try:
                re.compile(str(data["regex"]))
            except re.error as e:
                self.errors.append(f"Invalid regex pattern: {e} at {path}.regex")
        elif not _is_predefined(data["predefined"]):
            self.errors.append(f"Unknown predefined pattern: {data['predefined']} at {path}.predefined")

    def _validate_body_matcher(self, data: Any, path: str) -> None:
        if not isinstance(data, dict):
            self.errors.append(f"Expected object, got {type(data).__name__} at {path}")
            return
        if "path" not in data:
            self.errors.append(f"Missing required field: path at {path}")
        matcher_type = data.get("type")
        if matcher_type not in BODY_MATCHER_TYPES:
            self.errors.append(
                f"Invalid matcher type: {matcher_type}. Must be one of: {list(BODY_MATCHER_TYPES)} at {path}.type"
            )
        elif matcher_type == "by_regex":
            self._validate_pattern_source(_regex_source(data), path)
        elif matcher_type == "by_command" and not isinstance(data.get("value"), str):
            self.errors.append(f"by_command needs a string value at {path}.value")
        for bound in ("minOccurrence", "maxOccurrence"):
            if bound in data and (isinstance(data[bound], bool) or not isinstance(data[bound], int)):
                self.errors.append(f"{bound} must be an integer at {path}.{bound}")


def _is_predefined(name: Any) -> bool:
    try:
        by_name(str(name))
    except KeyError:
        return False
    return True


def _regex_source(data: dict[str, Any]) -> dict[str, Any]:
    """by_regex body matchers carry their regex under ``value``."""
    if "value" in data:
        return {"regex": data["value"]}
    if "predefined" in data:
        return {"predefined": data["predefined"]}
    return {}


def _pattern_of(data: dict[str, Any]) -> Pattern:
    if "regex" in data:
        return Pattern(str(data["regex"]))
    return by_name(str(data["predefined"]))


def _paired(dsl: Common, literal: Any, pattern: Pattern) -> Any:
    """Pair a literal with a pattern, the pattern going to the builder's pattern side."""
    if dsl.pattern_side is Side.CONSUMER:
        return dsl.value(dsl.consumer(pattern), dsl.producer(literal))
    return dsl.value(dsl.consumer(literal), dsl.producer(pattern))


def _entry_values(
    dsl: Common, values: dict[str, Any] | None, matchers: list[dict[str, Any]] | None
) -> dict[str, Any]:
    resolved: dict[str, Any] = dict(values or {})
    for matcher in matchers or []:
        name = matcher["key"]
        pattern = _pattern_of(matcher)
        resolved[name] = _paired(dsl, resolved[name], pattern) if name in resolved else pattern
    return resolved


def _body_matcher(data: dict[str, Any]) -> MatchingTypeValue:
    matcher_type = data["type"]
    if matcher_type == "by_regex":
        return BodyMatchers.by_regex(_pattern_of(_regex_source(data)))
    if matcher_type == "by_type":
        return BodyMatchers.by_type(data.get("minOccurrence"), data.get("maxOccurrence"))
    if matcher_type == "by_command":
        return BodyMatchers.by_command(data["value"])
    return getattr(BodyMatchers, matcher_type)()


def _add_body_matchers(matchers: BodyMatchers, items: list[dict[str, Any]] | None) -> None:
    for item in items or []:
        matchers.json_path(item["path"], _body_matcher(item))


def _configure_request(builder: ContractBuilder, data: dict[str, Any]) -> None:
    request = builder.request()
    matchers = data.get("matchers") or {}
    if "method" in data:
        request.method(data["method"])
    for key, setter in (("url", request.url), ("urlPath", request.url_path)):
        if key in data:
            url_matcher = matchers.get("url")
            value = _paired(request, data[key], _pattern_of(url_matcher)) if url_matcher else data[key]
            setter(value)
    request.query_parameters(_entry_values(request, data.get("queryParameters"), matchers.get("queryParameters")))
    request.headers(_entry_values(request, data.get("headers"), matchers.get("headers")))
    request.cookies(_entry_values(request, data.get("cookies"), matchers.get("cookies")))
    if data.get("body") is not None:
        request.body(data["body"])
    _add_body_matchers(request.body_matchers(), matchers.get("body"))


def _configure_response(builder: ContractBuilder, data: dict[str, Any]) -> None:
    response = builder.response()
    matchers = data.get("matchers") or {}
    if "status" in data:
        response.status(data["status"])
    response.headers(_entry_values(response, data.get("headers"), matchers.get("headers")))
    response.cookies(_entry_values(response, data.get("cookies"), matchers.get("cookies")))
    if data.get("body") is not None:
        response.body(data["body"])
    if data.get("async"):
        response.async_response()
    if data.get("fixedDelayMilliseconds") is not None:
        response.fixed_delay_milliseconds(data["fixedDelayMilliseconds"])
    _add_body_matchers(response.body_matchers(), matchers.get("body"))


def _configure_input(builder: ContractBuilder, data: dict[str, Any]) -> None:
    message = builder.input()
    matchers = data.get("matchers") or {}
    if data.get("triggeredBy"):
        message.triggered_by(data["triggeredBy"])
    if data.get("messageFrom"):
        message.message_from(data["messageFrom"])
    message.message_headers(_entry_values(message, data.get("messageHeaders"), matchers.get("headers")))
    if data.get("messageBody") is not None:
        message.message_body(data["messageBody"])
    if data.get("assertThat"):
        message.assert_that(data["assertThat"])
    _add_body_matchers(message.body_matchers(), matchers.get("body"))


def _configure_output(builder: ContractBuilder, data: dict[str, Any]) -> None:
    message = builder.output_message()
    matchers = data.get("matchers") or {}
    if data.get("sentTo"):
        message.sent_to(data["sentTo"])
    message.headers(_entry_values(message, data.get("headers"), matchers.get("headers")))
    if data.get("body") is not None:
        message.body(data["body"])
    if data.get("assertThat"):
        message.assert_that(data["assertThat"])
    _add_body_matchers(message.body_matchers(), matchers.get("body"))


def contract_from_dict(data: dict[str, Any]) -> Contract:
    """Build and validate a contract from one parsed YAML document.

    Raises:
        ContractFileError: If the document has an invalid shape
        ContractError: If the described contract is invalid
    """
    errors = ContractShapeValidator().validate(data)
    if errors:
        raise ContractFileError(f"Invalid contract document: {errors[0]}", errors=errors)

    builder = ContractBuilder()
    for key, setter in (
        ("description", builder.description),
        ("name", builder.name),
        ("priority", builder.priority),
        ("label", builder.label),
        ("metadata", builder.metadata),
    ):
        if data.get(key) is not None:
            setter(data[key])
    builder.ignored(bool(data.get("ignored", False)))
    builder.in_progress(bool(data.get("inProgress", False)))

    if "request" in data:
        _configure_request(builder, data["request"] or {})
    if "response" in data:
        _configure_response(builder, data["response"] or {})
    if "input" in data:
        _configure_input(builder, data["input"] or {})
    if "outputMessage" in data:
        _configure_output(builder, data["outputMessage"] or {})
    return builder.build()


def load_contracts_from_text(text: str, source: str | None = None) -> list[Contract]:
    """Parse every YAML document in ``text`` into a validated contract.

    Raises:
        ContractFileError: On invalid YAML, document shape or contract
    """
    try:
        documents = [doc for doc in yaml.safe_load_all(text) if doc is not None]
    except yaml.YAMLError as e:
        raise ContractFileError(f"Invalid YAML: {e}", path=source) from e

    contracts = []
    for index, document in enumerate(documents):
        try:
            contracts.append(contract_from_dict(document))
        except ContractFileError as e:
            raise ContractFileError(f"Document {index}: {e}", path=source, errors=e.errors) from e
        except ContractError as e:
            raise ContractFileError(f"Document {index}: {e}", path=source) from e
    logger.debug(f"Loaded {len(contracts)} contract(s) from {source or '<text>'}")
    return contracts


def load_contracts(path: Path | str) -> list[Contract]:
    """Read a YAML contract file.

    Args:
        path: File holding one or more YAML documents

    Raises:
        ContractFileError: If the file cannot be read or holds an invalid contract
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContractFileError(f"Cannot read file: {e}", path=str(path)) from e
    return load_contracts_from_text(text, source=str(path))
