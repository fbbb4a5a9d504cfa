"""Plugin bootstrap: wires AWS calls and autocomplete functions into host handlers.

A plugin method receives ``(client, params, region, context)`` and an
autocomplete function receives ``(query, params, client, region, context)``.
``bootstrap`` wraps both kinds into the handlers the host calls by name.
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from aws_plugin_kit.autocomplete import autocomplete_list_from_aws_call, filter_items_by_query
from aws_plugin_kit.client import boto_service
from aws_plugin_kit.consts import OPERATION_FINISHED_SUCCESSFULLY_MESSAGE
from aws_plugin_kit.errors import CatalogLoadError, UnknownMethodError
from aws_plugin_kit.helpers import (
    read_action_arguments,
    read_credentials,
    read_region,
    remove_undefined_and_empty,
)
from aws_plugin_kit.parser.base import (
    DEFAULT_CREDENTIAL_LABELS,
    Action,
    CredentialLabels,
    PluginCatalog,
    values_to_mapping,
)
from aws_plugin_kit.parser.coercion import parse_raw_parameters

logger = logging.getLogger(__name__)


def generate_aws_method(operation: str, payload_function: Callable | None = None):
    """Create a plugin method that forwards its params to one client operation.

    ``payload_function(params, region)`` can reshape the params first. Empty
    values are removed from the payload before the call.
    """

    async def aws_method(client, params=None, region=None, context=None):
        if not client.has_method(operation):
            raise UnknownMethodError(operation)
        payload = payload_function(params, region) if payload_function else params
        return await client.call(operation, remove_undefined_and_empty(payload or {}))

    aws_method.__name__ = operation
    return aws_method


def get_service_instance(
    service_factory: Callable,
    params: Mapping,
    settings: Mapping,
    credential_labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS,
):
    credentials = read_credentials(params, settings, credential_labels)
    return service_factory(credentials)


def _is_empty_result(result: Any) -> bool:
    if result is None:
        return True
    return isinstance(result, (Mapping, list, tuple, str)) and len(result) == 0


def generate_plugin_method(
    service_factory: Callable,
    plugin_method: Callable,
    catalog: PluginCatalog,
    credential_labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS,
):
    async def handler(action, settings):
        action = action if isinstance(action, Action) else Action.model_validate(action)
        settings = values_to_mapping(settings)

        client = get_service_instance(service_factory, action.params, settings, credential_labels)
        params = read_action_arguments(action, catalog, credential_labels)
        region = read_region(action.params, settings, credential_labels.region)

        logger.debug("Running method %s in %s", action.method.name, region)
        result = await plugin_method(client, params, region, {"action": action, "settings": settings})
        if _is_empty_result(result):
            return OPERATION_FINISHED_SUCCESSFULLY_MESSAGE
        return result

    return handler


def generate_autocomplete_function(
    service_factory: Callable,
    autocomplete_function: Callable,
    credential_labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS,
):
    async def handler(query, plugin_settings, action_params):
        params = parse_raw_parameters(action_params)
        settings = parse_raw_parameters(plugin_settings)

        client = get_service_instance(service_factory, params, settings, credential_labels)
        region = read_region(params, settings, credential_labels.region)

        context = {"plugin_settings": plugin_settings, "action_params": action_params}
        items = autocomplete_function(query, params, client, region, context)
        if inspect.isawaitable(items):
            items = await items
        return [item.model_dump() for item in filter_items_by_query(items, query)]

    return handler


def bootstrap(
    service_factory: Callable,
    plugin_methods: Mapping[str, Callable],
    autocomplete_functions: Mapping[str, Callable] | None = None,
    *,
    catalog: PluginCatalog,
    credential_labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS,
) -> dict[str, Callable]:
    """Return the host-facing mapping of handler name to async handler."""
    handlers = {
        name: generate_plugin_method(service_factory, method, catalog, credential_labels)
        for name, method in plugin_methods.items()
    }
    for name, function in (autocomplete_functions or {}).items():
        handlers[name] = generate_autocomplete_function(service_factory, function, credential_labels)
    return handlers


def catalog_plugin(
    catalog: PluginCatalog,
    service_factory: Callable | None = None,
    credential_labels: CredentialLabels = DEFAULT_CREDENTIAL_LABELS,
) -> dict[str, Callable]:
    """Bootstrap every method and autocomplete the catalog declares."""
    if service_factory is None:
        if not catalog.service:
            raise CatalogLoadError("Plugin configuration does not declare an AWS service")
        service_factory = boto_service(catalog.service)

    methods = {m.name: generate_aws_method(m.operation_name) for m in catalog.methods}
    autocompletes = {
        a.name: autocomplete_list_from_aws_call(a.operation, a.array_path, a.value_path)
        for a in catalog.autocompletes
    }
    return bootstrap(
        service_factory,
        methods,
        autocompletes,
        catalog=catalog,
        credential_labels=credential_labels,
    )
