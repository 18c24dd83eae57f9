"""Maintenance commands for did CLI."""

from __future__ import annotations

import dataclasses

import typer

from did.errors import DidError

from ._helpers import FILE_HELP, get_storage
from ._output import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register maintenance commands."""

    @app.command()
    def validate(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Check the entries file for corrupted lines.

        Exits with status 1 when any line cannot be read.
        """
        is_json_output(json_output)
        try:
            storage = get_storage(file)
            health = storage.validate()
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json(
                {
                    "path": str(storage.path),
                    "healthy": health.is_healthy,
                    **dataclasses.asdict(health),
                },
            )
        else:
            typer.echo(f"Storage file: {storage.path}")
            typer.echo(f"  Total lines:     {health.total_lines}")
            typer.echo(f"  Valid entries:   {health.valid}")
            typer.echo(f"  Corrupted lines: {health.corrupted}")
            if health.is_healthy:
                typer.echo("✓ Storage is healthy")
            else:
                typer.echo("")
                typer.echo("Corrupted lines:")
                for warning in health.warnings:
                    typer.echo(f"  line {warning.line_number}: {warning.error}")
                    typer.echo(f"    {warning.content}")
                typer.echo("")
                typer.echo(
                    "Corrupted lines are skipped when reading. "
                    "Use 'did restore' to go back to a backup.",
                )

        if not health.is_healthy:
            raise typer.Exit(1)
