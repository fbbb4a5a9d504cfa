"""CLI entry point for aws-plugin-kit."""

import asyncio
import json
import logging
from pathlib import Path

import click
from botocore.exceptions import BotoCoreError, ClientError

from aws_plugin_kit.autocomplete import get_region_label, list_regions
from aws_plugin_kit.core import catalog_plugin
from aws_plugin_kit.errors import PluginError
from aws_plugin_kit.parser.base import DEFAULT_CREDENTIAL_LABELS, PluginCatalog
from aws_plugin_kit.parser.catalog import load_catalog


def _load(catalog_path: Path) -> PluginCatalog:
    try:
        return load_catalog(catalog_path)
    except PluginError as e:
        raise click.ClickException(str(e))


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into a dict."""
    result = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got {pair!r}")
        result[key.strip()] = value
    return result


def _credential_settings(access_key: str | None, secret_key: str | None, region: str | None) -> dict:
    labels = DEFAULT_CREDENTIAL_LABELS
    values = {labels.access_key: access_key, labels.secret_key: secret_key, labels.region: region}
    return {k: v for k, v in values.items() if v is not None}


def _run(coro):
    try:
        return asyncio.run(coro)
    except (PluginError, ClientError, BotoCoreError) as e:
        raise click.ClickException(str(e))


def _echo_result(result) -> None:
    if isinstance(result, str):
        click.echo(result)
    else:
        click.echo(json.dumps(result, indent=2, default=str))


catalog_option = click.option(
    "--catalog", "catalog_path", required=True, envvar="AWS_PLUGIN_CATALOG",
    type=click.Path(exists=True, path_type=Path), help="Plugin method catalog (YAML or JSON).",
)


def credential_options(f):
    f = click.option("--region", envvar="AWS_DEFAULT_REGION", default=None, help="AWS region.")(f)
    f = click.option("--secret-key", envvar="AWS_SECRET_ACCESS_KEY", default=None, help="AWS secret access key.")(f)
    f = click.option("--access-key", envvar="AWS_ACCESS_KEY_ID", default=None, help="AWS access key id.")(f)
    return f


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """AWS Plugin Kit: run plugin methods and autocompletes against AWS."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("query", required=False, default="")
@click.option("--json", "as_json", is_flag=True, help="Print items as JSON.")
def regions(query: str, as_json: bool):
    """List AWS regions matching QUERY."""
    items = list_regions(query)
    if as_json:
        click.echo(json.dumps([item.model_dump() for item in items], indent=2))
        return
    for item in items:
        click.echo(item.value)


@main.command("region-label")
@click.argument("region_id")
def region_label(region_id: str):
    """Print the human-readable label of REGION_ID."""
    try:
        click.echo(get_region_label(region_id))
    except PluginError as e:
        raise click.ClickException(str(e))


@main.command()
@catalog_option
def methods(catalog_path: Path):
    """List the methods declared in the catalog."""
    catalog = _load(catalog_path)
    for method in catalog.methods:
        params = ", ".join(
            f"{p.name}: {p.effective_type}{'' if not p.required else ' (required)'}" for p in method.params
        )
        click.echo(f"{method.name}({params})")


@main.command()
@click.argument("method_name")
@catalog_option
@click.option("-p", "--param", "params", multiple=True, help="Method parameter as KEY=VALUE.")
@credential_options
def invoke(method_name: str, catalog_path: Path, params: tuple[str, ...],
           access_key: str | None, secret_key: str | None, region: str | None):
    """Run METHOD_NAME from the catalog and print its result."""
    catalog = _load(catalog_path)
    if catalog.find_method(method_name) is None:
        raise click.ClickException(f'Method "{method_name}" is not declared in {catalog_path}')

    handlers = catalog_plugin(catalog)
    action = {"method": {"name": method_name}, "params": _parse_pairs(params)}
    settings = _credential_settings(access_key, secret_key, region)

    _echo_result(_run(handlers[method_name](action, settings)))


@main.command()
@click.argument("name")
@click.argument("query", required=False, default="")
@catalog_option
@credential_options
def autocomplete(name: str, query: str, catalog_path: Path,
                 access_key: str | None, secret_key: str | None, region: str | None):
    """Run the NAME autocomplete with QUERY and print matching items."""
    catalog = _load(catalog_path)
    if name not in {a.name for a in catalog.autocompletes}:
        raise click.ClickException(f'Autocomplete "{name}" is not declared in {catalog_path}')

    handlers = catalog_plugin(catalog)
    plugin_settings = [
        {"name": key, "value": value, "valueType": "string"}
        for key, value in _credential_settings(access_key, secret_key, region).items()
    ]

    for item in _run(handlers[name](query, plugin_settings, [])):
        click.echo(f"{item['id']}\t{item['value']}")
