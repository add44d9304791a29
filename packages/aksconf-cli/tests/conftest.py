"""Shared test fixtures for aksconf-cli tests.

Provides CliRunner fixtures and fixture-file helpers for testing CLI
commands.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from aksconf_cli import output
from aksconf_core.observability import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    """Keep log events off the command output, as the CLI does by default."""
    configure_logging(log_level="WARNING", json_format=False)


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use a wide, colorless console so table rows are never folded."""
    monkeypatch.setattr(output, "console", Console(width=200, no_color=True))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def valid_cluster_yaml(fixtures_dir: Path) -> Path:
    """Return the path to a valid cluster configuration."""
    return fixtures_dir / "valid_cluster.yaml"


@pytest.fixture
def invalid_cluster_yaml(fixtures_dir: Path) -> Path:
    """Return the path to a cluster configuration with known diagnostics."""
    return fixtures_dir / "invalid_cluster.yaml"
