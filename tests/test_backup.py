"""Tests for rotating backups."""

from __future__ import annotations

from pathlib import Path

import pytest

from did.backup import (
    backup_path,
    create_backup,
    list_backup_info,
    list_backups,
    restore_backup,
)
from did.errors import BackupNotFoundError, NotFoundError


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "entries.jsonl"


def snapshot(path: Path, content: str) -> None:
    """Write content to the log, then back it up."""
    path.write_text(content)
    assert create_backup(path)


class TestCreateBackup:
    """Tests for create_backup and rotation."""

    def test_backup_path(self, log_path: Path) -> None:
        """Slots are named by suffixing the log path."""
        assert backup_path(log_path, 2).name == "entries.jsonl.bak.2"

    def test_missing_source_is_noop(self, log_path: Path) -> None:
        """Backing up a log that does not exist writes nothing."""
        assert create_backup(log_path) is False
        assert list_backups(log_path) == []

    def test_first_backup(self, log_path: Path) -> None:
        """The first backup lands in slot 1."""
        snapshot(log_path, "one\n")
        assert list_backups(log_path) == [1]
        assert backup_path(log_path, 1).read_text() == "one\n"

    def test_rotation_keeps_three(self, log_path: Path) -> None:
        """After four backups, slots hold the fourth, third and second."""
        for content in ("first", "second", "third", "fourth"):
            snapshot(log_path, content)

        assert list_backups(log_path) == [1, 2, 3]
        assert backup_path(log_path, 1).read_text() == "fourth"
        assert backup_path(log_path, 2).read_text() == "third"
        assert backup_path(log_path, 3).read_text() == "second"
        assert not backup_path(log_path, 4).exists()

    def test_rotation_fills_gaps(self, log_path: Path) -> None:
        """Rotation works from the slots present, even with a gap."""
        snapshot(log_path, "old")
        snapshot(log_path, "newer")
        backup_path(log_path, 1).unlink()

        snapshot(log_path, "newest")
        assert list_backups(log_path) == [1, 3]
        assert backup_path(log_path, 1).read_text() == "newest"
        assert backup_path(log_path, 3).read_text() == "old"

    def test_backup_does_not_touch_log(self, log_path: Path) -> None:
        """The source file is copied, not moved."""
        snapshot(log_path, "data")
        assert log_path.read_text() == "data"


class TestListBackupInfo:
    """Tests for list_backup_info."""

    def test_info(self, log_path: Path) -> None:
        """Info reports slot, path and size for each backup."""
        snapshot(log_path, "abc")
        snapshot(log_path, "abcdef")

        infos = list_backup_info(log_path)
        assert [(i.slot, i.size) for i in infos] == [(1, 6), (2, 3)]
        assert infos[0].path == backup_path(log_path, 1)
        assert infos[0].modified.tzinfo is not None

    def test_no_backups(self, log_path: Path) -> None:
        """Without backups the list is empty."""
        assert list_backup_info(log_path) == []


class TestRestoreBackup:
    """Tests for restore_backup."""

    def test_restores_verbatim_bytes(self, log_path: Path) -> None:
        """Restoring writes the backup bytes exactly, corruption included."""
        raw = b'{"broken\n\xff\n'
        log_path.write_bytes(raw)
        create_backup(log_path)
        log_path.write_bytes(b"replaced\n")

        restore_backup(log_path, 1)
        assert log_path.read_bytes() == raw

    def test_restore_backs_up_current_file(self, log_path: Path) -> None:
        """The file being replaced becomes the new slot 1."""
        snapshot(log_path, "old")
        log_path.write_text("current")

        restore_backup(log_path, 1)
        assert log_path.read_text() == "old"
        assert backup_path(log_path, 1).read_text() == "current"
        assert backup_path(log_path, 2).read_text() == "old"

    def test_restore_older_slot(self, log_path: Path) -> None:
        """Any existing slot can be restored."""
        snapshot(log_path, "first")
        snapshot(log_path, "second")
        restore_backup(log_path, 2)
        assert log_path.read_text() == "first"

    def test_restore_when_log_missing(self, log_path: Path) -> None:
        """A deleted log can be brought back from a backup."""
        snapshot(log_path, "data")
        log_path.unlink()

        restore_backup(log_path, 1)
        assert log_path.read_text() == "data"

    @pytest.mark.parametrize("slot", [0, 1, 4])
    def test_missing_slot(self, log_path: Path, slot: int) -> None:
        """Slots without a file raise BackupNotFoundError."""
        log_path.write_text("data")
        with pytest.raises(BackupNotFoundError, match=f"Backup {slot} does not exist"):
            restore_backup(log_path, slot)
        assert log_path.read_text() == "data"

    def test_not_found_hierarchy(self, log_path: Path) -> None:
        """BackupNotFoundError is a NotFoundError and a LookupError."""
        with pytest.raises(NotFoundError):
            restore_backup(log_path, 1)
        with pytest.raises(LookupError):
            restore_backup(log_path, 1)
