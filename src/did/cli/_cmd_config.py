"""Configuration management commands for did CLI."""

from __future__ import annotations

import typer

from did.config import KNOWN_KEYS, get_config_path, load_config, save_config

from ._helpers import SortedGroup
from ._output import echo_error, echo_json, is_json_output

# Sub-app for 'did config' subcommands
config_app = typer.Typer(
    help="Manage did configuration.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def register(app: typer.Typer) -> None:
    """Register config commands."""
    app.add_typer(config_app, name="config")

    @config_app.command("set")
    def config_set(
        key: str = typer.Argument(..., help="Configuration key to set"),
        value: str = typer.Argument(..., help="Value to set"),
    ) -> None:
        """Set a configuration value."""
        if key not in KNOWN_KEYS:
            known = ", ".join(sorted(KNOWN_KEYS))
            echo_error(f"Unknown config key '{key}'. Known keys: {known}")
            raise typer.Exit(1)

        config = load_config()
        config[key] = value
        save_config(config)
        typer.echo(f"Set {key} = {value}")

    @config_app.command("get")
    def config_get(
        key: str = typer.Argument(..., help="Configuration key to read"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Get a configuration value."""
        is_json_output(json_output)  # sync local flag for echo_error
        config = load_config()
        if key not in config:
            echo_error(f"Key '{key}' not found in config")
            raise typer.Exit(1)
        if is_json_output():
            echo_json({key: config[key]})
        else:
            typer.echo(config[key])

    @config_app.command("list")
    def config_list(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all configuration values."""
        config = load_config()
        if is_json_output(json_output):
            echo_json(config)
        elif not config:
            typer.echo(f"No configuration values set ({get_config_path()}).")
        else:
            for k, v in sorted(config.items()):
                typer.echo(f"{k} = {v}")
