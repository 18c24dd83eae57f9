"""Shared infrastructure for did CLI commands."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import typer
from typer.core import TyperGroup

from did.config import get_storage_path
from did.storage import JSONLStorage

if TYPE_CHECKING:
    import click

    from did.models import ParseWarning


FILE_HELP = "Path to the entries file (default: from config or app directory)"


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def parse_tags(raw: str | None) -> list[str]:
    """Parse a tags string that may be comma-separated, space-separated, or both.

    A leading ``#`` on a tag is dropped.

    Examples:
        "bug,fix"     -> ["bug", "fix"]
        "#bug #fix"   -> ["bug", "fix"]
        ""            -> []
    """
    if not raw:
        return []
    return [tag.lstrip("#") for tag in re.split(r"[,\s]+", raw) if tag.lstrip("#")]


def get_storage(file: str | None = None) -> JSONLStorage:
    """Get a storage instance for the resolved entries file.

    The app directory is created on demand when no explicit file is given;
    an explicit file's directory must already exist.

    Args:
        file: Explicit path to the entries file, if any.

    Returns:
        JSONLStorage instance
    """
    return JSONLStorage(get_storage_path(file), create_dir=file is None)


def echo_warnings(warnings: list[ParseWarning]) -> None:
    """Report corrupted lines on stderr."""
    if not warnings:
        return
    typer.echo(
        f"Warning: skipped {len(warnings)} corrupted line(s); "
        "run 'did validate' for details",
        err=True,
    )
    for warning in warnings:
        typer.echo(
            f"  line {warning.line_number}: {warning.error} ({warning.content})",
            err=True,
        )


def warn_before_rewrite(storage: JSONLStorage) -> None:
    """Warn that corrupted lines will not survive a rewrite of the file.

    Mutating commands rewrite the whole file from the entries that decoded,
    so any corrupted line is dropped. The file as it was goes into
    a backup slot first.
    """
    warnings = storage.read_all_with_warnings().warnings
    if not warnings:
        return
    echo_warnings(warnings)
    typer.echo(
        f"Warning: {len(warnings)} corrupted line(s) will be dropped from "
        f"{storage.path}; the current file is backed up first "
        "(see 'did backups' and 'did restore')",
        err=True,
    )
