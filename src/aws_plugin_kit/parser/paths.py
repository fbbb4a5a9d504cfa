"""Dot-path access into nested API responses."""

from collections.abc import Mapping, Sequence
from typing import Any

MISSING = object()


def split_path(path: str) -> list[str]:
    return [part for part in path.split(".") if part] if path else []


def get_path(data: Any, path: str | Sequence[str]) -> Any:
    """Follow ``path`` through mappings (and list indices).

    Returns ``MISSING`` when any segment does not exist.
    """
    fields = split_path(path) if isinstance(path, str) else list(path)
    current = data
    for field in fields:
        if isinstance(current, Mapping):
            if field not in current:
                return MISSING
            current = current[field]
        elif isinstance(current, list) and field.isdigit():
            index = int(field)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def has_path(data: Any, path: str | Sequence[str]) -> bool:
    return get_path(data, path) is not MISSING
