"""Rich console output utilities for aksconf-cli.

This module provides formatted console output with Rich, supporting colored
success and error lines, diagnostic tables, and respecting the
NO_COLOR environment variable.

Machine-readable output (JSON reports, canonical documents) is written
without Rich formatting so it stays parseable.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from aksconf_core import Diagnostic, ValidationReport

# NO_COLOR disables color even without --no-color
_NO_COLOR_ENV = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create the console used for human-readable output.

    With color disabled (flag or NO_COLOR) the console also stops
    treating stdout as a terminal, so no control codes are emitted.
    """
    plain = no_color or _NO_COLOR_ENV
    return Console(force_terminal=False if plain else None, no_color=plain)


console = create_console()


def _status(symbol: str, style: str, message: str) -> None:
    line = Text.assemble((symbol, style), " ", message)
    console.print(line)


def success(message: str) -> None:
    """Print ``✓ message``.

    Example:
        >>> success("Configuration valid: cluster.yaml")
        ✓ Configuration valid: cluster.yaml
    """
    _status("✓", "green", message)


def error(message: str) -> None:
    """Print ``✗ message``. Brackets in the message are printed literally."""
    _status("✗", "red", message)


def format_diagnostics_table(
    diagnostics: Sequence[Diagnostic],
    out: Console | None = None,
) -> None:
    """Print diagnostics as a Rich table.

    Args:
        diagnostics: Diagnostics in report order.
        out: Optional Rich console (defaults to the module console).
    """
    target = out if out is not None else console

    table = Table(show_header=True, header_style="bold")
    table.add_column("Path", overflow="fold")
    table.add_column("Kind", overflow="fold")
    table.add_column("Message", overflow="fold")

    for diagnostic in diagnostics:
        table.add_row(
            Text(diagnostic.path or "<root>", style="cyan"),
            Text(diagnostic.kind.value, style="red"),
            Text(diagnostic.message),
        )

    target.print(table)


def format_report_json(report: ValidationReport, pretty: bool = True) -> str:
    """Format a validation report as JSON.

    Args:
        report: Report to format.
        pretty: Whether to use indentation.

    Returns:
        JSON string with "valid", "diagnostics" and, on success, "config".
    """
    data: dict[str, Any] = {
        "valid": report.ok,
        "diagnostics": [d.model_dump(mode="json") for d in report.diagnostics],
    }
    if report.config is not None:
        data["config"] = report.config.to_document()
    return json.dumps(data, indent=2 if pretty else None, default=str)


def write_raw(text: str) -> None:
    """Write text to stdout without Rich markup or wrapping."""
    console.file.write(text if text.endswith("\n") else text + "\n")


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Args:
        no_color: If True, disable colored output.
    """
    global console
    console = create_console(no_color=no_color)
