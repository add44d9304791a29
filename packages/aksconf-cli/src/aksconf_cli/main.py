"""CLI entry point for aksconf.

This module defines the main CLI group using the LazyGroup pattern so that
``aksconf --help`` does not import the validation engine.
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping
from typing import Any

import click
import rich_click as rclick

from aksconf_cli import __version__
from aksconf_cli.output import set_no_color

# Help text is markdown; arguments are listed with the options
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True

LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LazyGroup(rclick.RichGroup):
    """Root group whose subcommands are imported on first use.

    ``aksconf --help`` lists every command without importing aksconf_core;
    the engine is only loaded when a command actually runs.

    Attributes:
        lazy_subcommands: Command name to ``"module.attribute"`` import target.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Return an eagerly registered command, else import the lazy one.

        Raises:
            TypeError: If the import target is not a click command.
        """
        registered = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if registered is not None:
            return registered

        target = self.lazy_subcommands.get(cmd_name)
        if target is None:
            return None
        return _import_command(target)


def _import_command(target: str) -> click.Command:
    module_name, _, attr_name = target.rpartition(".")
    command = getattr(importlib.import_module(module_name), attr_name)
    if not isinstance(command, click.Command):
        raise TypeError(f"{target} is not a click command")
    return command


def _disable_color(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if value:
        set_no_color(True)


LAZY_COMMANDS = {
    "validate": "aksconf_cli.commands.validate.validate",
    "normalize": "aksconf_cli.commands.normalize.normalize",
    "schema": "aksconf_cli.commands.schema.schema",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="aksconf")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output (NO_COLOR is honored too).",
    is_eager=True,
    expose_value=False,
    callback=_disable_color,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="AKSCONF_LOG_LEVEL",
    help="Minimum level of log events written to stderr.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Write log events as JSON lines.",
)
def cli(log_level: str, log_json: bool) -> None:
    """aksconf - Managed Kubernetes cluster configuration checks.

    Validate cluster configuration documents and produce the canonical,
    defaults-applied configuration for provisioning.

    **Getting Started:**

    - `aksconf validate -f cluster.yaml` - Report every problem in one pass
    - `aksconf normalize -f cluster.yaml` - Print the canonical configuration
    - `aksconf schema export` - Export the ClusterConfig JSON Schema

    **Exit codes:** 0 valid, 1 diagnostics found, 2 input unreadable,
    3 internal error.
    """
    # Import here to keep --help fast
    from aksconf_core.observability import configure_logging

    configure_logging(log_level=log_level, json_format=log_json)


if __name__ == "__main__":
    cli()
