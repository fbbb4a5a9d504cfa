"""Autocomplete query engine.

Builds dropdown candidates for the host UI and narrows them down with a
multi-word, case-insensitive substring match.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from aws_plugin_kit.consts import MAX_AUTOCOMPLETE_RESULTS
from aws_plugin_kit.errors import LookupKeyNotFoundError, PathNotFoundError, UnknownMethodError
from aws_plugin_kit.parser.base import AutocompleteItem
from aws_plugin_kit.parser.paths import MISSING, get_path
from aws_plugin_kit.regions.loader import load_regions

QUERY_SEPARATORS = re.compile(r"[. ]+")


def to_autocomplete_item(value: Any, label: Any = None) -> AutocompleteItem:
    """Build an item whose label defaults to the stringified value."""
    return AutocompleteItem(id=value, value=str(value if label is None else label))


def _as_item(item: AutocompleteItem | Mapping) -> AutocompleteItem:
    if isinstance(item, AutocompleteItem):
        return item
    return AutocompleteItem.model_validate(item)


def _query_words(query: str) -> list[str]:
    return [word.lower() for word in QUERY_SEPARATORS.split(query) if word]


def filter_items_by_query(
    items: Iterable[AutocompleteItem | Mapping],
    query: str | None = "",
) -> list[AutocompleteItem]:
    """Keep items whose label contains every query word, sorted and capped.

    Without a query every item is kept. Sorting is on the raw label.
    """
    candidates = [_as_item(item) for item in items]
    if query:
        words = _query_words(query)
        candidates = [
            item for item in candidates
            if all(word in item.value.lower() for word in words)
        ]
    return sorted(candidates, key=lambda item: item.value)[:MAX_AUTOCOMPLETE_RESULTS]


def list_regions(query: str | None = "") -> list[AutocompleteItem]:
    items = [
        to_autocomplete_item(region.region_id, f"{region.region_id} - {region.region_label}")
        for region in load_regions()
    ]
    return filter_items_by_query(items, query)


def get_region_label(region_id: str) -> str:
    for region in load_regions():
        if region.region_id == region_id:
            return region.region_label
    raise LookupKeyNotFoundError(f'Could not find a region label for region id: "{region_id}"')


def autocomplete_list_from_aws_call(operation: str, array_path: str = "", value_path: str = ""):
    """Create an autocomplete function backed by a listing call.

    The returned coroutine function calls ``operation`` on the client, takes
    the list found under ``array_path`` (or the whole response) and labels
    each element with the value under ``value_path`` (or the element itself).
    """

    async def list_items(query, params, client, region=None, context=None):
        if not client.has_method(operation):
            raise UnknownMethodError(operation, f'Method "{operation}" doesn\'t exist on service')
        response = await client.call(operation)

        elements = get_path(response, array_path) if array_path else response
        if elements is MISSING:
            raise PathNotFoundError(array_path, f'Path "{array_path}" doesn\'t exist on method call response')
        if not isinstance(elements, (list, tuple)):
            if array_path:
                raise PathNotFoundError(array_path, f'Path "{array_path}" doesn\'t point to an array')
            raise PathNotFoundError(array_path, f'Response of "{operation}" is not an array, an array path is required')

        items = []
        for element in elements:
            if not value_path:
                value = element
            else:
                value = MISSING if isinstance(element, list) else get_path(element, value_path)
                if value is MISSING:
                    raise PathNotFoundError(value_path, f'Path "{value_path}" doesn\'t exist on elements of array')
            if value is None or value == "":
                continue
            items.append(to_autocomplete_item(value))

        return filter_items_by_query(items, query)

    list_items.__name__ = f"list_{operation}"
    return list_items
