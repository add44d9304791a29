"""aksconf validate command - Validate a cluster configuration document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from aksconf_cli.errors import (
    EXIT_VALIDATION_ERROR,
    handle_file_not_found,
    handle_internal_error,
    handle_settings_error,
    handle_structural_error,
)
from aksconf_cli.output import (
    error,
    format_diagnostics_table,
    format_report_json,
    success,
    write_raw,
)

if TYPE_CHECKING:
    from aksconf_core import ValidationReport

DEFAULT_CONFIG_PATH = "./cluster.yaml"


def validate_file(file_path: str) -> ValidationReport:
    """Load and validate one configuration file.

    Engine settings come from the environment (AKSCONF_MAX_WORKERS).

    Args:
        file_path: Path to a YAML or JSON document.

    Returns:
        The validation report.

    Raises:
        CLIError: If the file is missing or cannot be read as a document
            (exit code 2), if the engine settings are invalid (exit code 2),
            or if the engine itself failed (exit code 3).
    """
    # Import here to avoid heavy imports at CLI startup
    from aksconf_core import (
        AssemblyError,
        EngineSettings,
        SettingsError,
        StructuralError,
        ValidationTaskError,
        load_document,
        validate_cluster_config,
    )

    path = Path(file_path)
    if not path.exists():
        handle_file_not_found(file_path)

    try:
        settings = EngineSettings.from_env()
    except SettingsError as e:
        handle_settings_error(e)

    try:
        raw = load_document(path)
        return validate_cluster_config(raw, settings)
    except FileNotFoundError:
        handle_file_not_found(file_path)
    except StructuralError as e:
        handle_structural_error(e)
    except (ValidationTaskError, AssemblyError) as e:
        handle_internal_error(e)


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
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
    help="Report format.",
)
def validate(file_path: str, output_format: str) -> None:
    """Validate a cluster configuration document.

    Reports every diagnostic found in a single pass, with dotted field
    paths, so all problems can be fixed before re-submitting.

    Examples:

        aksconf validate

        aksconf validate --file clusters/prod.yaml --format json
    """
    report = validate_file(file_path)

    if output_format == "json":
        write_raw(format_report_json(report))
    elif report.ok:
        success(f"Configuration valid: {file_path}")
    else:
        format_diagnostics_table(report.diagnostics)
        error(f"{len(report.diagnostics)} diagnostic(s) in {file_path}")

    if not report.ok:
        raise SystemExit(EXIT_VALIDATION_ERROR)
