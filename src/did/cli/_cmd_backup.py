"""Backup commands for did CLI: backup, backups, restore."""

from __future__ import annotations

import typer

from did.backup import backup_path
from did.constants import MAX_BACKUP_COUNT
from did.errors import DidError

from ._helpers import FILE_HELP, get_storage
from ._output import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register backup commands."""

    @app.command()
    def backup(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Snapshot the entries file into backup slot 1."""
        is_json_output(json_output)
        try:
            storage = get_storage(file)
            created = storage.create_backup()
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json(
                {
                    "created": created,
                    "path": str(backup_path(storage.path, 1)) if created else None,
                },
            )
        elif created:
            typer.echo("✓ Backup created")
        else:
            typer.echo("Nothing to back up")

    @app.command()
    def backups(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """List available backups (1 is the most recent)."""
        is_json_output(json_output)
        try:
            infos = get_storage(file).list_backup_info()
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output():
            echo_json(
                [
                    {
                        "slot": info.slot,
                        "path": str(info.path),
                        "size": info.size,
                        "modified": info.modified.isoformat(),
                    }
                    for info in infos
                ],
            )
            return

        if not infos:
            typer.echo("No backups available")
            return

        typer.echo("Available backups:")
        for info in infos:
            modified = info.modified.strftime("%Y-%m-%d %H:%M:%S")
            suffix = " (most recent)" if info.slot == 1 else ""
            typer.echo(f"  {info.slot}: {info.path} [{modified}]{suffix}")

    @app.command()
    def restore(
        slot: int = typer.Argument(
            1,
            help=f"Backup to restore (1-{MAX_BACKUP_COUNT}, 1 is the most recent)",
        ),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        file: str = typer.Option(None, "--file", "-f", help=FILE_HELP),
    ) -> None:
        """Replace the entries file with a backup.

        The current file is backed up first, so the restore itself can be
        reverted.
        """
        is_json_output(json_output)
        try:
            storage = get_storage(file)

            if not yes and not is_json_output():
                if not typer.confirm(
                    f"Replace {storage.path} with backup {slot}?",
                    default=False,
                ):
                    typer.echo("Aborted.")
                    return

            storage.restore_backup(slot)
            restored = storage.read_all_with_warnings()
        except DidError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        active = sum(1 for e in restored.entries if not e.is_deleted())
        if is_json_output():
            echo_json(
                {
                    "restored_from": slot,
                    "active_entries": active,
                    "corrupted_lines": len(restored.warnings),
                },
            )
            return

        typer.echo(f"✓ Restored from backup {slot} ({active} active entries)")
        if restored.warnings:
            typer.echo(
                f"Warning: backup has {len(restored.warnings)} corrupted line(s)",
                err=True,
            )
