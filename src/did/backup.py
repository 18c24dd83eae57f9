"""Rotating backups of the entries file.

Slot 1 is always the newest snapshot. Rotation is decided from the slot
files that exist on disk at call time; there is no persisted counter.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from did.constants import BACKUP_SUFFIX, FILE_MODE, MAX_BACKUP_COUNT
from did.errors import BackupNotFoundError, StorageError
from did.fileio import atomic_write


@dataclass
class BackupInfo:
    """A backup slot that exists on disk."""

    slot: int
    path: Path
    size: int
    modified: datetime


def backup_path(path: str | Path, slot: int) -> Path:
    """Return the backup file path for a slot, e.g. ``entries.jsonl.bak.1``."""
    return Path(f"{path}{BACKUP_SUFFIX}.{slot}")


def list_backups(path: str | Path) -> list[int]:
    """Return the existing backup slots, newest (1) first."""
    return [
        slot
        for slot in range(1, MAX_BACKUP_COUNT + 1)
        if backup_path(path, slot).is_file()
    ]


def list_backup_info(path: str | Path) -> list[BackupInfo]:
    """Return details for each existing backup slot, newest first."""
    infos: list[BackupInfo] = []
    for slot in list_backups(path):
        bpath = backup_path(path, slot)
        try:
            stat = bpath.stat()
        except OSError as e:
            msg = f"Failed to inspect backup {bpath}: {e}"
            raise StorageError(msg) from e
        infos.append(
            BackupInfo(
                slot=slot,
                path=bpath,
                size=stat.st_size,
                modified=datetime.fromtimestamp(stat.st_mtime).astimezone(),
            ),
        )
    return infos


def _rotate(path: str | Path) -> None:
    """Shift every existing slot k to k+1, dropping the oldest retained slot."""
    for slot in reversed(list_backups(path)):
        current = backup_path(path, slot)
        if slot >= MAX_BACKUP_COUNT:
            current.unlink()
            logging.getLogger(__name__).debug("Dropped oldest backup %s", current)
        else:
            current.replace(backup_path(path, slot + 1))


def create_backup(path: str | Path) -> bool:
    """Snapshot the entries file into slot 1, rotating older slots.

    Returns:
        True if a backup was written, False if there was no file to back up.

    Raises:
        StorageError: If rotation or copying fails.
    """
    path = Path(path)
    if not path.exists():
        return False

    target = backup_path(path, 1)
    try:
        _rotate(path)
        shutil.copyfile(path, target)
        target.chmod(FILE_MODE)
    except OSError as e:
        msg = f"Failed to back up {path}: {e}"
        raise StorageError(msg) from e

    logging.getLogger(__name__).debug("Backed up %s to %s", path, target)
    return True


def restore_backup(path: str | Path, slot: int) -> None:
    """Overwrite the entries file with the verbatim bytes of a backup slot.

    The current entries file is itself backed up first, so a restore can be
    undone by restoring the next-older slot.

    Raises:
        BackupNotFoundError: If the slot has no backup file.
        StorageError: If reading the backup or writing the entries file fails.
    """
    path = Path(path)
    source = backup_path(path, slot)
    if not 1 <= slot <= MAX_BACKUP_COUNT or not source.is_file():
        raise BackupNotFoundError(slot)

    try:
        payload = source.read_bytes()
    except OSError as e:
        msg = f"Failed to read backup {source}: {e}"
        raise StorageError(msg) from e

    create_backup(path)
    atomic_write(path, payload)
    logging.getLogger(__name__).debug("Restored %s from backup %d", path, slot)
