"""did CLI commands for time tracking."""

from __future__ import annotations

import logging

import typer

from ._helpers import SortedGroup
from ._output import set_json_flag

app = typer.Typer(
    help="did - log what you did and for how long",
    no_args_is_help=True,
    cls=SortedGroup,
)


def _enable_debug_logging() -> None:
    """Send the store's debug records to stderr."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON for all commands",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log storage operations to stderr",
    ),
) -> None:
    set_json_flag(json_output)
    if verbose:
        _enable_debug_logging()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import (  # noqa: E402
    _cmd_backup,
    _cmd_config,
    _cmd_delete,
    _cmd_entry,
    _cmd_maintenance,
)

for _mod in (
    _cmd_backup,
    _cmd_config,
    _cmd_delete,
    _cmd_entry,
    _cmd_maintenance,
):
    _mod.register(app)


def main() -> None:
    """Run the did CLI application."""
    app()
