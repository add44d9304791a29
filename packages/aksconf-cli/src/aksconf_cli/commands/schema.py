"""aksconf schema command - Export JSON Schema."""

from __future__ import annotations

from pathlib import Path

import click

from aksconf_cli.errors import handle_permission_error
from aksconf_cli.output import success

DEFAULT_SCHEMA_PATH = "./schemas/cluster-config.schema.json"


@click.group()
def schema() -> None:
    """Manage the ClusterConfig JSON Schema.

    **Commands:**

    - `aksconf schema export` - Export the canonical ClusterConfig JSON Schema
    """
    pass


@schema.command("export")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    default=DEFAULT_SCHEMA_PATH,
    help=f"Output path [default: {DEFAULT_SCHEMA_PATH}]",
)
def export_schema(output_path: str) -> None:
    """Export the canonical ClusterConfig JSON Schema.

    Provisioning components can use it to check the output of
    `aksconf normalize --format json`.

    Examples:

        aksconf schema export

        aksconf schema export --output build/cluster-config.schema.json
    """
    # Import here to avoid heavy imports at CLI startup
    from aksconf_core import export_cluster_config_schema

    output = Path(output_path)
    try:
        export_cluster_config_schema(output)
    except PermissionError:
        handle_permission_error(output_path, "write")

    success(f"Schema exported to {output}")
