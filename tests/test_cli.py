import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import click
import pytest
from click.testing import CliRunner

from aws_plugin_kit.cli import _credential_settings, _parse_pairs, main
from aws_plugin_kit.errors import MissingRequiredValueError

FIXTURES = Path(__file__).parent / "fixtures"
CATALOG = str(FIXTURES / "ec2_catalog.yaml")
CREDENTIAL_ARGS = ["--access-key", "AKIA", "--secret-key", "secret", "--region", "us-east-1"]


class TestCliRegions:
    def test_regions_filtered(self):
        runner = CliRunner()
        result = runner.invoke(main, ["regions", "london"])
        assert result.exit_code == 0
        assert result.output.strip() == "eu-west-2 - Europe (London)"

    def test_regions_json(self):
        runner = CliRunner()
        result = runner.invoke(main, ["regions", "west", "--json"])
        assert result.exit_code == 0
        items = json.loads(result.output)
        assert all("west" in item["id"] for item in items)

    def test_region_label(self):
        runner = CliRunner()
        result = runner.invoke(main, ["region-label", "eu-west-2"])
        assert result.exit_code == 0
        assert result.output.strip() == "Europe (London)"

    def test_region_label_unknown(self):
        runner = CliRunner()
        result = runner.invoke(main, ["region-label", "mars-north-1"])
        assert result.exit_code != 0
        assert "mars-north-1" in result.output


class TestCliMethods:
    def test_lists_catalog_methods(self):
        runner = CliRunner()
        result = runner.invoke(main, ["methods", "--catalog", CATALOG])
        assert result.exit_code == 0
        assert "createKeyPair(" in result.output
        assert "KeyName: string (required)" in result.output
        assert "Filters: object" in result.output

    def test_catalog_from_env(self):
        runner = CliRunner()
        result = runner.invoke(main, ["methods"], env={"AWS_PLUGIN_CATALOG": CATALOG})
        assert result.exit_code == 0
        assert "describeInstances(" in result.output

    def test_invalid_catalog(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("- just\n- a list\n")
        runner = CliRunner()
        result = runner.invoke(main, ["methods", "--catalog", str(bad)])
        assert result.exit_code != 0
        assert "must be a mapping" in result.output


class TestCliInvoke:
    @patch("aws_plugin_kit.cli.catalog_plugin")
    def test_invoke_prints_json_result(self, mock_catalog_plugin):
        handler = AsyncMock(return_value={"KeyPairId": "key-1"})
        mock_catalog_plugin.return_value = {"createKeyPair": handler}

        runner = CliRunner()
        result = runner.invoke(main, [
            "invoke", "createKeyPair", "--catalog", CATALOG,
            "-p", "KeyName=my-key", "-p", "DryRun=true",
            *CREDENTIAL_ARGS,
        ])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"KeyPairId": "key-1"}
        action, settings = handler.await_args[0]
        assert action == {"method": {"name": "createKeyPair"}, "params": {"KeyName": "my-key", "DryRun": "true"}}
        assert settings == {"AWS_ACCESS_KEY_ID": "AKIA", "AWS_SECRET_ACCESS_KEY": "secret", "REGION": "us-east-1"}

    @patch("aws_plugin_kit.cli.catalog_plugin")
    def test_invoke_prints_success_message(self, mock_catalog_plugin):
        mock_catalog_plugin.return_value = {"createKeyPair": AsyncMock(return_value="Operation finished successfully!")}
        runner = CliRunner()
        result = runner.invoke(main, ["invoke", "createKeyPair", "--catalog", CATALOG, *CREDENTIAL_ARGS])
        assert result.exit_code == 0
        assert result.output.strip() == "Operation finished successfully!"

    @patch("aws_plugin_kit.cli.catalog_plugin")
    def test_invoke_reports_plugin_errors(self, mock_catalog_plugin):
        handler = AsyncMock(side_effect=MissingRequiredValueError("KeyName"))
        mock_catalog_plugin.return_value = {"createKeyPair": handler}
        runner = CliRunner()
        result = runner.invoke(main, ["invoke", "createKeyPair", "--catalog", CATALOG, *CREDENTIAL_ARGS])
        assert result.exit_code != 0
        assert 'Missing required "KeyName" value' in result.output

    def test_invoke_unknown_method(self):
        runner = CliRunner()
        result = runner.invoke(main, ["invoke", "deleteEverything", "--catalog", CATALOG])
        assert result.exit_code != 0
        assert "deleteEverything" in result.output


class TestCliAutocomplete:
    @patch("aws_plugin_kit.cli.catalog_plugin")
    def test_autocomplete_prints_items(self, mock_catalog_plugin):
        handler = AsyncMock(return_value=[{"id": "alpha", "value": "alpha"}, {"id": "beta", "value": "beta"}])
        mock_catalog_plugin.return_value = {"listKeyPairs": handler}

        runner = CliRunner()
        result = runner.invoke(main, ["autocomplete", "listKeyPairs", "a", "--catalog", CATALOG, *CREDENTIAL_ARGS])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["alpha\talpha", "beta\tbeta"]
        query, plugin_settings, action_params = handler.await_args[0]
        assert query == "a"
        assert {"name": "REGION", "value": "us-east-1", "valueType": "string"} in plugin_settings
        assert action_params == []

    def test_autocomplete_unknown_name(self):
        runner = CliRunner()
        result = runner.invoke(main, ["autocomplete", "listNothing", "--catalog", CATALOG])
        assert result.exit_code != 0
        assert "listNothing" in result.output


class TestHelpers:
    def test_parse_pairs(self):
        assert _parse_pairs(("a=1", "b=x=y", "c=")) == {"a": "1", "b": "x=y", "c": ""}

    def test_parse_pairs_invalid(self):
        with pytest.raises(click.BadParameter):
            _parse_pairs(("novalue",))

    def test_credential_settings_skip_missing(self):
        assert _credential_settings("a", None, "r") == {"AWS_ACCESS_KEY_ID": "a", "REGION": "r"}
