"""JSONL-based storage for time entries with atomic rewrites and backups."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path

from did import backup
from did.codec import (
    decode_content,
    encode_entries,
    encode_entry,
    read_all,
    read_content,
)
from did.constants import RETENTION_DAYS
from did.errors import EntryValidationError, NotFoundError
from did.fileio import append_line, atomic_write
from did.index import check_position, index_entries, resolve_active
from did.models import (
    Entry,
    EntryPatch,
    IndexedEntry,
    PurgeMode,
    ReadResult,
    StorageHealth,
    build_raw_input,
    validate_description,
    validate_duration,
    validate_entry,
)


class JSONLStorage:
    """Durable JSON Lines store for time entries.

    Nothing is cached between calls: every operation re-reads the file, so
    changes made by another process are visible on the next call. Every
    mutation other than ``append`` snapshots the file into a rotating backup
    and then rewrites it in full through ``write_all``.
    """

    def __init__(self, path: str | Path, create_dir: bool = False) -> None:
        """Initialize storage.

        Args:
            path: Path to the JSONL storage file
            create_dir: If True, create the parent directory if it doesn't
                exist. If False (default), a missing directory surfaces as a
                StorageError on the first write.
        """
        self.path = Path(path)
        if create_dir:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    # -- Append log ------------------------------------------------------

    def append(self, entry: Entry) -> Entry:
        """Append a new entry to the end of the log.

        Raises:
            EntryValidationError: If the entry is invalid
            StorageError: If the file cannot be written
        """
        validate_entry(entry)
        append_line(self.path, encode_entry(entry))
        return entry

    def read_all_with_warnings(self) -> ReadResult:
        """Read all entries (tombstones included) and corrupted-line warnings."""
        return read_all(self.path)

    def read_all(self) -> list[Entry]:
        """Read all entries, tombstones included, in file order."""
        return self.read_all_with_warnings().entries

    def read_active(self) -> list[IndexedEntry]:
        """Read the active entries with their active indices."""
        return index_entries(self.read_all())

    def write_all(self, entries: list[Entry]) -> None:
        """Atomically replace the log with ``entries`` in the given order."""
        atomic_write(self.path, encode_entries(entries))
        logging.getLogger(__name__).debug(
            "Rewrote %s with %d entries",
            self.path,
            len(entries),
        )

    def _rewrite(self, entries: list[Entry]) -> None:
        """Back up the current file, then rewrite it."""
        self.create_backup()
        self.write_all(entries)

    # -- Index-addressed operations --------------------------------------

    def get_by_index(self, active_index: int) -> IndexedEntry:
        """Get the entry currently shown at a 1-based active index.

        Raises:
            OutOfBoundsError: If no active entry has that index
        """
        entries = self.read_all()
        position = resolve_active(entries, active_index)
        return IndexedEntry(entries[position], active_index, position)

    def edit(self, active_index: int, patch: EntryPatch) -> Entry:
        """Apply a patch to the entry at a 1-based active index.

        The timestamp and physical position are preserved; ``raw_input`` is
        rebuilt from the updated fields.

        Raises:
            EntryValidationError: If the patch is empty or invalid
            OutOfBoundsError: If no active entry has that index
        """
        if patch.is_empty():
            msg = "At least one change must be specified"
            raise EntryValidationError(msg)
        if patch.description is not None:
            validate_description(patch.description)
        if patch.duration_minutes is not None:
            validate_duration(patch.duration_minutes)

        entries = self.read_all()
        position = resolve_active(entries, active_index)
        entry = entries[position]

        if patch.description is not None:
            entry.description = patch.description.strip()
        if patch.duration_minutes is not None:
            entry.duration_minutes = patch.duration_minutes
        if patch.project is not None:
            entry.project = patch.project or None
        if patch.tags is not None:
            entry.tags = list(patch.tags)
        entry.raw_input = build_raw_input(
            entry.description,
            entry.duration_minutes,
            entry.project,
            entry.tags,
        )

        self._rewrite(entries)
        return entry

    # -- Soft delete & restore -------------------------------------------

    def soft_delete(self, active_index: int, *, now: datetime | None = None) -> Entry:
        """Tombstone the entry at a 1-based active index.

        Args:
            active_index: Index of the entry among active entries
            now: Deletion time (default: current time)

        Returns:
            The tombstoned entry

        Raises:
            OutOfBoundsError: If no active entry has that index
        """
        entries = self.read_all()
        position = resolve_active(entries, active_index)
        entry = entries[position]
        entry.deleted_at = now or datetime.now().astimezone()

        self._rewrite(entries)
        return entry

    def get_most_recently_deleted(self) -> tuple[Entry, int]:
        """Find the tombstone with the latest ``deleted_at``.

        Ties go to the entry with the highest physical position.

        Returns:
            The tombstoned entry and its physical position

        Raises:
            NotFoundError: If there are no tombstones
        """
        found: tuple[Entry, int] | None = None
        latest: datetime | None = None
        for position, entry in enumerate(self.read_all()):
            if entry.deleted_at is None:
                continue
            if latest is None or entry.deleted_at >= latest:
                found = (entry, position)
                latest = entry.deleted_at
        if found is None:
            msg = "No deleted entries to restore"
            raise NotFoundError(msg)
        return found

    def restore(self, position: int) -> Entry:
        """Clear the tombstone on the entry at a 0-based physical position.

        Restoring an entry that is already active returns it unchanged.

        Raises:
            OutOfBoundsError: If the position is outside the log
        """
        entries = self.read_all()
        check_position(entries, position)
        entry = entries[position]
        if entry.deleted_at is None:
            return entry

        entry.deleted_at = None
        self._rewrite(entries)
        logging.getLogger(__name__).debug("Restored entry at position %d", position)
        return entry

    def undo(self) -> Entry:
        """Restore the most recently deleted entry.

        Raises:
            NotFoundError: If there are no tombstones
        """
        _, position = self.get_most_recently_deleted()
        return self.restore(position)

    # -- Hard delete & purge ---------------------------------------------

    def hard_delete(self, position: int) -> Entry:
        """Permanently remove the entry at a 0-based physical position.

        The position addresses the full log, tombstones included.

        Raises:
            OutOfBoundsError: If the position is outside the log
        """
        entries = self.read_all()
        check_position(entries, position)
        removed = entries.pop(position)

        self._rewrite(entries)
        return removed

    def purge(
        self,
        mode: PurgeMode = PurgeMode.EXPLICIT,
        *,
        now: datetime | None = None,
    ) -> int:
        """Permanently drop tombstones from the log.

        Args:
            mode: EXPLICIT removes every tombstone; RETENTION only those
                deleted at least ``RETENTION_DAYS`` ago
            now: Reference time for the retention window (default: now)

        Returns:
            Number of entries removed. When nothing is eligible the file is
            left untouched and no backup is taken.
        """
        mode = PurgeMode(mode)
        cutoff = (now or datetime.now().astimezone()) - timedelta(days=RETENTION_DAYS)

        def eligible(entry: Entry) -> bool:
            if entry.deleted_at is None:
                return False
            return mode is PurgeMode.EXPLICIT or entry.deleted_at <= cutoff

        entries = self.read_all()
        kept = [e for e in entries if not eligible(e)]
        removed = len(entries) - len(kept)
        if removed == 0:
            return 0

        self._rewrite(kept)
        logging.getLogger(__name__).debug(
            "Purged %d deleted entries from %s (%s)",
            removed,
            self.path,
            mode.value,
        )
        return removed

    # -- Backups ---------------------------------------------------------

    def create_backup(self) -> bool:
        """Snapshot the current file into backup slot 1."""
        return backup.create_backup(self.path)

    def list_backups(self) -> list[int]:
        """Return the existing backup slots, newest first."""
        return backup.list_backups(self.path)

    def list_backup_info(self) -> list[backup.BackupInfo]:
        """Return details for each existing backup slot, newest first."""
        return backup.list_backup_info(self.path)

    def restore_backup(self, slot: int = 1) -> None:
        """Replace the file with the contents of a backup slot.

        Raises:
            BackupNotFoundError: If the slot has no backup file
        """
        backup.restore_backup(self.path, slot)

    # -- Health ----------------------------------------------------------

    def validate(self) -> StorageHealth:
        """Report how many lines of the file decode cleanly."""
        content = read_content(self.path)
        if content is None:
            return StorageHealth()

        result = decode_content(content)
        return StorageHealth(
            total_lines=len(content.splitlines()),
            valid=len(result.entries),
            corrupted=len(result.warnings),
            warnings=result.warnings,
        )
