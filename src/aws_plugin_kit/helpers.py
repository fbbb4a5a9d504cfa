"""Helpers for turning host input into AWS call arguments.

Covers credential and region resolution, reading action arguments against
the plugin catalog, payload cleaning and EC2-style tag specifications.
"""

import json
from collections.abc import Mapping
from typing import Any

from aws_plugin_kit.errors import CoercionError, IncompleteCredentialsError, LookupKeyNotFoundError
from aws_plugin_kit.parser.base import (
    DEFAULT_CREDENTIAL_LABELS,
    Action,
    CredentialLabels,
    Credentials,
    PluginCatalog,
)
from aws_plugin_kit.parser.coercion import (
    parse_autocomplete,
    parse_method_parameter,
    parse_string,
    parse_tags,
)


def remove_credentials(params: Mapping, labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS) -> dict:
    """Return a copy of ``params`` without the credential label keys."""
    credential_keys = labels.as_tuple()
    return {k: v for k, v in params.items() if k not in credential_keys}


def _is_empty(value: Any) -> bool:
    if value is None or value == "":
        return True
    return isinstance(value, (Mapping, list, tuple)) and len(value) == 0


def remove_undefined_and_empty(obj: Any) -> Any:
    """Drop ``None``, ``""`` and empty containers from a mapping.

    ``0`` and ``False`` are kept. Non-mappings are returned unchanged.
    """
    if not isinstance(obj, Mapping):
        return obj
    return {k: v for k, v in obj.items() if not _is_empty(v)}


def read_region(params: Mapping, settings: Mapping, label: str = DEFAULT_CREDENTIAL_LABELS.region) -> Any:
    """Read the region, preferring action parameters over plugin settings."""
    if label not in params and label not in settings:
        raise IncompleteCredentialsError(
            f'No region has been found under "{label}" in neither params nor settings.'
        )
    region = parse_autocomplete(params.get(label))
    if region == "":
        region = parse_autocomplete(settings.get(label))
    return region


def _read_string(params: Mapping, settings: Mapping, label: str) -> str:
    value = parse_string(params.get(label))
    if value == "":
        value = parse_string(settings.get(label))
    return value


def read_credentials(
    params: Mapping,
    settings: Mapping,
    labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS,
) -> Credentials:
    """Resolve access key, secret key and region from params and settings."""
    missing = [label for label in labels.as_tuple() if label not in params and label not in settings]
    if missing:
        raise IncompleteCredentialsError(
            f"Credential labels {', '.join(missing)} have not been found in neither params nor settings"
        )

    access_key_id = _read_string(params, settings, labels.access_key)
    secret_access_key = _read_string(params, settings, labels.secret_key)
    region = read_region(params, settings, labels.region)

    resolved = zip(labels.as_tuple(), (access_key_id, secret_access_key, region))
    empty = [label for label, value in resolved if value == ""]
    if empty:
        raise IncompleteCredentialsError(f"Credentials under {', '.join(empty)} are empty")

    return Credentials(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        region=str(region),
    )


def read_action_arguments(
    action: Action | Mapping,
    catalog: PluginCatalog,
    credential_labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS,
) -> dict[str, Any]:
    """Coerce an action's parameters against its catalog definition.

    Empty values fall back to declared defaults, required parameters are
    enforced and credential labels are stripped from the result.
    """
    if not isinstance(action, Action):
        action = Action.model_validate(action)

    method = catalog.find_method(action.method.name)
    if method is None:
        raise LookupKeyNotFoundError(f'Could not find a method "{action.method.name}" in the plugin catalog')

    param_values = remove_undefined_and_empty(action.params)
    for definition in method.params:
        param_values[definition.name] = parse_method_parameter(
            definition, param_values.get(definition.name)
        )

    return remove_credentials(remove_undefined_and_empty(param_values), credential_labels)


def prepare_parameters_for_another_method_call(
    method_name: str,
    params: Mapping,
    catalog: PluginCatalog,
    additional_params: Mapping | None = None,
) -> dict[str, Any]:
    """Keep only the parameters ``method_name`` declares, coerced with its definitions."""
    method = catalog.find_method(method_name)
    if method is None:
        raise LookupKeyNotFoundError(f'No method "{method_name}" found in the plugin catalog')

    merged = {**params, **(additional_params or {})}
    prepared = {}
    for key, value in merged.items():
        definition = method.find_param(key)
        if definition is None:
            continue
        prepared[key] = parse_method_parameter(definition, value)
    return prepared


def _try_parse_json(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def build_tag_specification(resource_type: str, tags: Any) -> list[dict]:
    """Build an EC2 ``TagSpecifications`` list for one resource type."""
    if not resource_type:
        raise CoercionError("Resource type cannot be empty nor None")

    unparsed_tags = tags if isinstance(tags, list) else [tags]
    unparsed_tags = [t for t in unparsed_tags if t]
    if not unparsed_tags:
        return []

    return [{
        "ResourceType": resource_type,
        "Tags": [tag for value in unparsed_tags for tag in parse_tags(_try_parse_json(value))],
    }]
