"""CLI error handling for aksconf-cli.

Wraps aksconf-core exceptions into user-friendly messages with the CLI's
exit codes:

- 0: the configuration is valid
- 1: validation produced one or more diagnostics
- 2: the input could not be read into a document at all (missing file,
  undecodable YAML/JSON, wrong top-level shape) or the CLI itself could
  not do its job (bad settings, unwritable output)
- 3: an internal engine failure (a crashing rule, an unassemblable result);
  the input may be fine and the details are in the log
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from aksconf_cli.output import error

if TYPE_CHECKING:
    from aksconf_core import AksConfError, SettingsError, StructuralError

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_STRUCTURAL_ERROR = 2
EXIT_INTERNAL_ERROR = 3


class CLIError(click.ClickException):
    """A user-facing failure that ends the command with ``exit_code``.

    Click calls ``show()`` before exiting; the message is printed as an
    error line on the Rich console instead of Click's plain "Error:" form.
    """

    def __init__(self, message: str, exit_code: int = EXIT_STRUCTURAL_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        error(self.format_message())


def handle_file_not_found(file_path: str) -> NoReturn:
    """Raise a CLIError for a missing configuration file."""
    raise CLIError(
        f"File not found: {file_path}\n\nUse --file to specify the cluster configuration.",
        exit_code=EXIT_STRUCTURAL_ERROR,
    )


def handle_structural_error(err: StructuralError) -> NoReturn:
    """Raise a CLIError for a document that cannot be validated at all."""
    raise CLIError(
        f"Cannot read configuration: {err.user_message}",
        exit_code=EXIT_STRUCTURAL_ERROR,
    )


def handle_settings_error(err: SettingsError) -> NoReturn:
    """Raise a CLIError for invalid engine settings."""
    raise CLIError(err.user_message, exit_code=EXIT_STRUCTURAL_ERROR)


def handle_permission_error(path: str, operation: str = "access") -> NoReturn:
    """Raise a CLIError for a path the CLI may not use."""
    raise CLIError(
        f"Permission denied: Cannot {operation} {path}",
        exit_code=EXIT_STRUCTURAL_ERROR,
    )


def handle_internal_error(err: AksConfError) -> NoReturn:
    """Raise a CLIError for an engine defect (not a problem with the input)."""
    raise CLIError(
        f"Internal error: {err.user_message}\n\nDetails were logged to stderr.",
        exit_code=EXIT_INTERNAL_ERROR,
    )
