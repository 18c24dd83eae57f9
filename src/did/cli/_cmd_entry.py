"""Entry commands for did CLI: add, list, show, edit."""

from __future__ import annotations

import typer

from did.errors import DidError
from did.index import index_entries
from did.models import EntryPatch, entry_to_dict, new_entry

from ._formatting import format_entry_brief, format_entry_table, indexed_to_json
from ._helpers import (
    FILE_HELP,
    echo_warnings,
    get_storage,
    parse_tags,
    warn_before_rewrite,
)
from ._output import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register entry commands."""

    @app.command()
    def add(
        description: list[str] = typer.Argument(..., help="What you worked on"),
        minutes: int = typer.Option(
            ...,
            "--minutes",
            "-m",
            help="Duration in minutes (1-1440)",
        ),
        project: str = typer.Option(None, "--project", "-p", help="Project label"),
        tags: str = typer.Option(
            None,
            "--tags",
            "-t",
            help="Tags (comma or space separated)",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Log a new time entry."""
        is_json_output(json_output)
        try:
            storage = get_storage(file)
            entry = new_entry(
                " ".join(description),
                minutes,
                project=project,
                tags=parse_tags(tags),
            )
            storage.append(entry)
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json(entry_to_dict(entry))
        else:
            typer.echo(f"✓ Logged: {format_entry_brief(entry)}")

    @app.command("list")
    def list_entries(
        all_entries: bool = typer.Option(
            False,
            "--all",
            "-a",
            help="Include deleted entries and show physical positions",
        ),
        project: str = typer.Option(None, "--project", "-p", help="Filter by project"),
        tag: str = typer.Option(None, "--tag", "-t", help="Filter by tag"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """List logged entries with their index."""
        is_json_output(json_output)
        try:
            result = get_storage(file).read_all_with_warnings()
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        echo_warnings(result.warnings)

        entries = result.entries
        active = {ie.position: ie.active_index for ie in index_entries(entries)}
        rows = [
            (entry, active.get(position), position)
            for position, entry in enumerate(entries)
            if all_entries or not entry.is_deleted()
        ]
        if project:
            rows = [r for r in rows if r[0].project == project]
        if tag:
            rows = [r for r in rows if tag.lstrip("#") in r[0].tags]

        if is_json_output():
            echo_json(
                [
                    {"index": index, "position": position, **entry_to_dict(entry)}
                    for entry, index, position in rows
                ],
            )
            return

        if not rows:
            typer.echo("No entries found")
            return
        typer.echo(format_entry_table(rows, show_positions=all_entries))

    @app.command()
    def show(
        index: int = typer.Argument(..., help="Entry index as shown by 'did list'"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Show a single entry."""
        is_json_output(json_output)
        try:
            indexed = get_storage(file).get_by_index(index)
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json(indexed_to_json(indexed))
            return

        entry = indexed.entry
        typer.echo(format_entry_brief(entry, indexed.active_index))
        typer.echo(f"  Raw input: {entry.raw_input}")
        typer.echo(f"  Logged at: {entry.timestamp.isoformat()}")

    @app.command()
    def edit(
        index: int = typer.Argument(..., help="Entry index as shown by 'did list'"),
        description: str = typer.Option(
            None,
            "--description",
            "-d",
            help="New description",
        ),
        minutes: int = typer.Option(
            None,
            "--minutes",
            "-m",
            help="New duration in minutes (1-1440)",
        ),
        project: str = typer.Option(
            None,
            "--project",
            "-p",
            help="New project (empty string clears it)",
        ),
        tags: str = typer.Option(
            None,
            "--tags",
            "-t",
            help="Replace tags (comma or space separated, empty string clears)",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Edit the description, duration, project or tags of an entry."""
        is_json_output(json_output)
        patch = EntryPatch(
            description=description,
            duration_minutes=minutes,
            project=project,
            tags=parse_tags(tags) if tags is not None else None,
        )
        try:
            storage = get_storage(file)
            warn_before_rewrite(storage)
            entry = storage.edit(index, patch)
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json(entry_to_dict(entry))
        else:
            typer.echo(f"✓ Updated: {format_entry_brief(entry, index)}")
