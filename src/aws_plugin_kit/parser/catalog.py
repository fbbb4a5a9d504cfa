"""Plugin method catalog loader.

The catalog lists every plugin method with its parameter definitions and
is read once, then passed explicitly to whatever needs it.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from aws_plugin_kit.errors import CatalogLoadError
from aws_plugin_kit.parser.base import PluginCatalog

logger = logging.getLogger(__name__)


def load_catalog(file_path: Path) -> PluginCatalog:
    """Load a catalog from a YAML or JSON file.

    JSON is valid YAML, so both go through ``yaml.safe_load``.
    """
    try:
        text = Path(file_path).read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as e:
        raise CatalogLoadError(f"Could not retrieve the plugin configuration from {file_path}: {e}") from e

    catalog = parse_catalog(data)
    logger.debug("Loaded catalog %r with %d methods", catalog.name, len(catalog.methods))
    return catalog


def parse_catalog(data: object) -> PluginCatalog:
    if not isinstance(data, dict):
        raise CatalogLoadError("Plugin configuration must be a mapping")
    try:
        return PluginCatalog.model_validate(data)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid plugin configuration: {e}") from e
