"""aksconf normalize command - Print the canonical cluster configuration."""

from __future__ import annotations

import json
from pathlib import Path

import click
import yaml

from aksconf_cli.commands.validate import DEFAULT_CONFIG_PATH, validate_file
from aksconf_cli.errors import EXIT_VALIDATION_ERROR, handle_permission_error
from aksconf_cli.output import error, format_diagnostics_table, success, write_raw


@click.command()
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=False),
    default=DEFAULT_CONFIG_PATH,
    help="Path to the cluster configuration [default: ./cluster.yaml]",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
    help="Output format of the canonical configuration.",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    default=None,
    help="Write the canonical configuration to a file instead of stdout.",
)
def normalize(file_path: str, output_format: str, output_path: str | None) -> None:
    """Print the canonical, defaults-applied configuration.

    The output is valid input: running `aksconf validate` on it succeeds
    and produces the same configuration.

    Examples:

        aksconf normalize --file cluster.yaml

        aksconf normalize --file cluster.yaml --format json -o build/cluster.json
    """
    report = validate_file(file_path)

    if not report.ok:
        format_diagnostics_table(report.diagnostics)
        error(f"{len(report.diagnostics)} diagnostic(s) in {file_path}")
        raise SystemExit(EXIT_VALIDATION_ERROR)

    assert report.config is not None
    document = report.config.to_document()
    if output_format == "json":
        text = json.dumps(document, indent=2)
    else:
        text = yaml.safe_dump(document, sort_keys=False)

    if output_path is None:
        write_raw(text)
        return

    output = Path(output_path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text if text.endswith("\n") else text + "\n")
    except PermissionError:
        handle_permission_error(output_path, "write")

    success(f"Canonical configuration written to {output}")
