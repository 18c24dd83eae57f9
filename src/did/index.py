"""Translation between user-facing active indices and physical positions.

The active index is the 1-based position of an entry among the entries
that are not tombstoned, in file order. It is never stored: it is derived
on every read and shifts when an earlier entry is deleted or restored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from did.errors import OutOfBoundsError
from did.models import IndexedEntry

if TYPE_CHECKING:
    from did.models import Entry


def count_active(entries: list[Entry]) -> int:
    """Return the number of entries that are not tombstoned."""
    return sum(1 for e in entries if not e.is_deleted())


def resolve_active(entries: list[Entry], active_index: int) -> int:
    """Resolve a 1-based active index to a 0-based physical position.

    Raises:
        OutOfBoundsError: If the index is below 1 or beyond the active count.
    """
    if active_index >= 1:
        counter = 0
        for position, entry in enumerate(entries):
            if entry.is_deleted():
                continue
            counter += 1
            if counter == active_index:
                return position
    raise OutOfBoundsError(active_index, count_active(entries))


def active_position(entries: list[Entry], position: int) -> int | None:
    """Return the active index of the entry at a physical position.

    Returns None for tombstones and positions outside the list.
    """
    if position < 0 or position >= len(entries) or entries[position].is_deleted():
        return None
    return count_active(entries[:position]) + 1


def index_entries(entries: list[Entry]) -> list[IndexedEntry]:
    """Project the active entries with their active indices, in file order."""
    indexed: list[IndexedEntry] = []
    for position, entry in enumerate(entries):
        if entry.is_deleted():
            continue
        indexed.append(IndexedEntry(entry, len(indexed) + 1, position))
    return indexed


def check_position(entries: list[Entry], position: int) -> int:
    """Validate a raw 0-based physical position against the full list.

    Raises:
        OutOfBoundsError: If the position is negative or past the end.
    """
    if position < 0 or position >= len(entries):
        raise OutOfBoundsError(position, len(entries), kind="position")
    return position
