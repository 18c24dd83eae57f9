"""Display and formatting functions for did CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import typer

from did.models import entry_to_dict, format_duration_simple

if TYPE_CHECKING:
    from did.models import Entry, IndexedEntry


def format_entry_brief(entry: Entry, active_index: int | None = None) -> str:
    """Format an entry on one line with color coding.

    Args:
        entry: The entry to format
        active_index: Index to show in front of the entry, if any

    Returns:
        Formatted string with index, time, duration, description, project and tags
    """
    index_str = (
        typer.style(f"[{active_index}] ", fg="bright_black")
        if active_index is not None
        else ""
    )
    when = entry.timestamp.strftime("%Y-%m-%d %H:%M")
    duration = typer.style(f"{format_duration_simple(entry.duration_minutes)}", bold=True)
    project_str = (
        " " + typer.style(f"@{entry.project}", fg="magenta") if entry.project else ""
    )
    tags_str = (
        " " + typer.style(" ".join(f"#{t}" for t in entry.tags), fg="cyan")
        if entry.tags
        else ""
    )
    deleted_str = ""
    if entry.deleted_at is not None:
        deleted_ts = entry.deleted_at.strftime("%Y-%m-%d %H:%M")
        deleted_str = " " + typer.style(f"[deleted {deleted_ts}]", fg="red")
    base = f"{index_str}{when} {duration} {entry.description}"
    return f"{base}{project_str}{tags_str}{deleted_str}"


def format_entry_table(
    rows: list[tuple[Entry, int | None, int]],
    show_positions: bool = False,
) -> str:
    """Format entries as a table.

    Args:
        rows: (entry, active index or None for tombstones, physical position)
        show_positions: Add a column with the 0-based physical position

    Returns:
        Formatted table string (rendered by Rich)
    """
    from io import StringIO

    from rich import box
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    if not rows:
        return ""

    table = Table(
        show_header=True,
        header_style="bold",
        box=box.ROUNDED,
        pad_edge=False,
        show_edge=False,
    )
    table.add_column("#", justify="right", no_wrap=True)
    if show_positions:
        table.add_column("Pos", justify="right", no_wrap=True)
    table.add_column("When", no_wrap=True)
    table.add_column("Time", justify="right", no_wrap=True)
    table.add_column("Description", overflow="fold")
    table.add_column("Project", no_wrap=True)
    table.add_column("Tags", no_wrap=False)

    total = 0
    for entry, active_index, position in rows:
        if entry.deleted_at is None:
            total += entry.duration_minutes
        row = [str(active_index) if active_index is not None else "[red]✗[/]"]
        if show_positions:
            row.append(str(position))
        description = escape(entry.description)
        if entry.deleted_at is not None:
            description = f"[strike bright_black]{description}[/]"
        row.extend(
            [
                entry.timestamp.strftime("%Y-%m-%d %H:%M"),
                format_duration_simple(entry.duration_minutes),
                description,
                f"[magenta]{escape(entry.project)}[/]" if entry.project else "",
                f"[cyan]{escape(', '.join(entry.tags))}[/]" if entry.tags else "",
            ],
        )
        table.add_row(*row)

    string_io = StringIO()
    console = Console(file=string_io, force_terminal=True, width=None)
    console.print(table)
    console.print(f"Total: [bold]{format_duration_simple(total)}[/]" if total else "")

    return string_io.getvalue().rstrip()


def indexed_to_json(indexed: IndexedEntry) -> dict[str, Any]:
    """Serialize an indexed entry for JSON output."""
    return {
        "index": indexed.active_index,
        "position": indexed.position,
        **entry_to_dict(indexed.entry),
    }
