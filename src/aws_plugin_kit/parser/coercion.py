"""Parameter coercion engine.

Converts raw values received from the host (mostly strings) into the
types declared for them. Each parser type tag maps to one pure function.
"""

import json
import math
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationError

from aws_plugin_kit.errors import (
    CoercionError,
    MalformedParametersError,
    MissingRequiredValueError,
    UnknownParserTypeError,
)
from aws_plugin_kit.parser.base import ParamDefinition, RawParameter


class ParserType(str, Enum):
    OBJECT = "object"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    TEXT = "text"
    OPTIONS = "options"
    VAULT = "vault"
    AUTOCOMPLETE = "autocomplete"
    ARRAY = "array"
    TAGS = "tags"


def parse_object(value: Any) -> dict:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            raise CoercionError(f"Couldn't parse provided value as object: {value}") from None
        if not isinstance(parsed, dict):
            raise CoercionError(f"Couldn't parse provided value as object: {value}")
        return parsed
    raise CoercionError(f"{value} is not a valid object")


def parse_number(value: Any) -> int | float:
    """Accept finite numbers and numeric strings; integer strings stay ints."""
    if isinstance(value, bool):
        raise CoercionError(f"Value {value} is not a valid number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        raise CoercionError(f"Value {value} is not a valid number")
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            raise CoercionError(f"Value {value} is not a valid number") from None
        if math.isfinite(parsed):
            return parsed
    raise CoercionError(f"Value {value} is not a valid number")


def parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "":
            return False
        if normalized in ("true", "false"):
            return normalized == "true"
    raise CoercionError(f"Value {value} is not of type boolean")


def parse_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise CoercionError(f"Value {value} is not a valid string")


def parse_autocomplete(value: Any) -> Any:
    """Return the selected id of an autocomplete field."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if isinstance(value, Mapping) and "id" in value:
        return value["id"]
    raise CoercionError(f'Value "{value}" is not a valid autocomplete result nor string.')


def parse_array(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        return [line.strip() for line in value.split("\n") if line.strip()]
    raise CoercionError("Unsupported array format")


def parse_tags(value: Any) -> list[dict]:
    """Normalize tags into AWS ``[{"Key": ..., "Value": ...}]`` form.

    Accepts a single tag dict, a plain ``{key: value}`` mapping, ``key=value``
    lines, or a list mixing any of those.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return [tag for item in value for tag in parse_tags(item)]
    if isinstance(value, Mapping):
        if set(value.keys()) == {"Key", "Value"}:
            return [dict(value)]
        return [{"Key": str(k), "Value": v} for k, v in value.items()]
    if isinstance(value, str):
        return [_parse_tag_line(line) for line in value.split("\n") if line.strip()]
    raise CoercionError("Unsupported tags format!")


def _parse_tag_line(line: str) -> dict:
    key, sep, val = line.partition("=")
    if not sep or not key.strip():
        raise CoercionError(f"Incorrectly formatted tag string: {line}")
    return {"Key": key.strip(), "Value": val.strip()}


_PARSERS: dict[ParserType, Callable[[Any], Any]] = {
    ParserType.OBJECT: parse_object,
    ParserType.NUMBER: parse_number,
    ParserType.BOOLEAN: parse_boolean,
    ParserType.STRING: parse_string,
    ParserType.TEXT: parse_string,
    ParserType.OPTIONS: parse_string,
    ParserType.VAULT: parse_string,
    ParserType.AUTOCOMPLETE: parse_autocomplete,
    ParserType.ARRAY: parse_array,
    ParserType.TAGS: parse_tags,
}


def resolve_parser(type_tag: str | ParserType) -> Callable[[Any], Any]:
    """Look up the coercion function for a parser type tag."""
    try:
        parser_type = ParserType(type_tag)
    except ValueError:
        raise UnknownParserTypeError(type_tag) from None
    return _PARSERS[parser_type]


def parse_raw_parameters(params: Any) -> dict[str, Any]:
    """Coerce a list of ``{name, value, type | valueType}`` entries into a mapping.

    Entries without a value contribute no key. Fails on the first
    structurally invalid entry.
    """
    if not isinstance(params, list):
        raise MalformedParametersError(
            "Failed to map parameters to object - params provided are not a list"
        )

    parsed: dict[str, Any] = {}
    for entry in params:
        if not isinstance(entry, Mapping):
            raise MalformedParametersError(
                "Failed to map parameters to object - every item of params list needs to be an object"
            )
        if entry.get("name") is None:
            raise MalformedParametersError(
                "Failed to map one of parameters to object - `name` field is required"
            )
        if not (entry.get("type") or entry.get("valueType")):
            raise MalformedParametersError(
                "Failed to map one of parameters to object - either `type` or `valueType` field is required"
            )
        try:
            raw = RawParameter.model_validate(entry)
        except ValidationError as e:
            raise MalformedParametersError(
                f"Failed to map one of parameters to object - {e.errors()[0]['msg']}"
            ) from e

        if raw.value is None:
            continue
        parsed[raw.name] = resolve_parser(raw.declared_type)(raw.value)
    return parsed


def parse_method_parameter(definition: ParamDefinition, value: Any) -> Any:
    """Coerce one method argument, applying the declared default.

    A value is absent only when it is ``None``.
    """
    value_to_parse = definition.default if value is None else value
    if value_to_parse is None:
        if definition.required:
            raise MissingRequiredValueError(definition.name)
        return None
    return resolve_parser(definition.effective_type)(value_to_parse)
