"""Deletion commands for did CLI: delete, remove, undo, purge."""

from __future__ import annotations

import typer

from did.constants import RETENTION_DAYS
from did.errors import DidError
from did.models import PurgeMode, entry_to_dict

from ._formatting import format_entry_brief
from ._helpers import FILE_HELP, get_storage, warn_before_rewrite
from ._output import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register deletion commands."""

    @app.command()
    def delete(
        index: int = typer.Argument(..., help="Entry index as shown by 'did list'"),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Delete an entry (recoverable with 'did undo').

        Deleted entries are kept for 7 days before they are purged for good.
        """
        is_json_output(json_output)
        try:
            storage = get_storage(file)
            indexed = storage.get_by_index(index)
            warn_before_rewrite(storage)

            if not yes and not is_json_output():
                typer.echo(format_entry_brief(indexed.entry, index))
                if not typer.confirm("Delete this entry?", default=False):
                    typer.echo("Aborted.")
                    return

            deleted = storage.soft_delete(index)
            expired = storage.purge(PurgeMode.RETENTION)
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json({"deleted": entry_to_dict(deleted), "expired_purged": expired})
            return

        typer.echo(f"✓ Deleted: {format_entry_brief(deleted)}")
        typer.echo("  Use 'did undo' to restore it.")
        if expired:
            typer.echo(
                f"  Purged {expired} entry(ies) deleted more than "
                f"{RETENTION_DAYS} days ago.",
            )

    @app.command()
    def remove(
        position: int = typer.Argument(
            ...,
            help="0-based physical position as shown by 'did list --all'",
        ),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Permanently remove the entry at a physical position (no undo).

        A backup is still taken first, see 'did restore'.
        """
        is_json_output(json_output)
        try:
            storage = get_storage(file)
            warn_before_rewrite(storage)

            if not yes and not is_json_output():
                if not typer.confirm(
                    f"Permanently remove the entry at position {position}?",
                    default=False,
                ):
                    typer.echo("Aborted.")
                    return

            removed = storage.hard_delete(position)
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json({"removed": entry_to_dict(removed)})
        else:
            typer.echo(f"✓ Removed: {format_entry_brief(removed)}")

    @app.command()
    def undo(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Restore the most recently deleted entry."""
        is_json_output(json_output)
        try:
            storage = get_storage(file)
            warn_before_rewrite(storage)
            restored = storage.undo()
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json(entry_to_dict(restored))
        else:
            typer.echo(f"✓ Restored: {format_entry_brief(restored)}")

    @app.command()
    def purge(
        expired: bool = typer.Option(
            False,
            "--expired",
            help=f"Only purge entries deleted more than {RETENTION_DAYS} days ago",
        ),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Permanently remove deleted entries.

        This cannot be undone with 'did undo'; a backup is taken first.
        """
        is_json_output(json_output)
        mode = PurgeMode.RETENTION if expired else PurgeMode.EXPLICIT
        try:
            storage = get_storage(file)
            warn_before_rewrite(storage)

            if not yes and not is_json_output():
                if not typer.confirm(
                    "Permanently delete all soft-deleted entries? "
                    "This cannot be undone.",
                    default=False,
                ):
                    typer.echo("Purge cancelled")
                    return

            count = storage.purge(mode)
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json({"purged": count, "mode": mode.value})
        elif count == 0:
            typer.echo("No deleted entries to purge")
        elif count == 1:
            typer.echo("✓ Purged 1 entry")
        else:
            typer.echo(f"✓ Purged {count} entries")
