"""Tests for the aksconf normalize command."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from aksconf_cli.commands.normalize import normalize
from aksconf_cli.commands.validate import validate


class TestNormalizeCommand:
    """Tests for normalize command."""

    def test_prints_canonical_yaml(self, cli_runner: CliRunner, valid_cluster_yaml: Path) -> None:
        result = cli_runner.invoke(normalize, ["--file", str(valid_cluster_yaml)])

        assert result.exit_code == 0
        document = yaml.safe_load(result.output)
        assert document["name"] == "aks-prod-01"
        assert document["automatic_upgrade_channel"] == "stable"
        assert document["default_node_pool"]["zones"] == ["1", "2", "3"]
        assert document["node_pools"]["batch"]["os_sku"] == "AzureLinux"
        assert document["acr"] is None

    def test_prints_canonical_json(
        self, cli_runner: CliRunner, valid_cluster_yaml: Path
    ) -> None:
        result = cli_runner.invoke(
            normalize, ["--file", str(valid_cluster_yaml), "--format", "json"]
        )

        assert result.exit_code == 0
        document = json.loads(result.output)
        assert list(document["node_pools"]) == ["workload", "batch"]
        blackout = document["maintenance_window_auto_upgrade"]["blackout_periods"]
        assert len(blackout) == 1

    def test_output_validates(
        self, cli_runner: CliRunner, valid_cluster_yaml: Path, tmp_path: Path
    ) -> None:
        """The canonical output is itself a valid configuration."""
        output = tmp_path / "out" / "canonical.yaml"
        result = cli_runner.invoke(
            normalize, ["--file", str(valid_cluster_yaml), "-o", str(output)]
        )

        assert result.exit_code == 0
        assert "Canonical configuration written to" in result.output
        assert output.exists()

        again = cli_runner.invoke(validate, ["--file", str(output)])
        assert again.exit_code == 0

    def test_output_is_stable(
        self, cli_runner: CliRunner, valid_cluster_yaml: Path, tmp_path: Path
    ) -> None:
        first = tmp_path / "first.yaml"
        second = tmp_path / "second.yaml"
        cli_runner.invoke(normalize, ["--file", str(valid_cluster_yaml), "-o", str(first)])
        cli_runner.invoke(normalize, ["--file", str(first), "-o", str(second)])

        assert first.read_text() == second.read_text()

    def test_invalid_file(self, cli_runner: CliRunner, invalid_cluster_yaml: Path) -> None:
        result = cli_runner.invoke(normalize, ["--file", str(invalid_cluster_yaml)])

        assert result.exit_code == 1
        assert "6 diagnostic(s)" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(normalize, ["--file", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 2
