"""Low-level file writes shared by the store and the backup manager."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from did.constants import FILE_MODE
from did.errors import StorageError


def atomic_write(path: str | Path, payload: bytes) -> None:
    """Replace a file's contents with ``payload`` atomically.

    The payload is staged in a temporary file next to the target, fsynced,
    and renamed over it, so a failure at any point leaves the target
    exactly as it was.

    Raises:
        StorageError: If staging or the final rename fails.
    """
    path = Path(path)
    try:
        tmp_file = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
    except OSError as e:
        msg = f"Failed to create temporary file for {path}: {e}"
        raise StorageError(msg) from e

    tmp_path = Path(tmp_file.name)
    try:
        with tmp_file:
            tmp_file.write(payload)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        tmp_path.chmod(FILE_MODE)
        tmp_path.replace(path)
    except OSError as e:
        _discard(tmp_path)
        msg = f"Failed to write storage file {path}: {e}"
        raise StorageError(msg) from e


def append_line(path: str | Path, line: bytes) -> None:
    """Append one newline-terminated line, creating the file with mode 0644.

    If the file does not end with a newline (e.g. a prior truncated write),
    one is written first so the new line does not merge with the garbage.

    Raises:
        StorageError: If the file cannot be opened or written (including a
            missing parent directory).
    """
    path = Path(path)
    payload = line + b"\n"
    try:
        fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, FILE_MODE)
        with os.fdopen(fd, "ab") as f:
            if os.fstat(fd).st_size > 0 and not _ends_with_newline(path):
                payload = b"\n" + payload
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        msg = f"Failed to append to storage file {path}: {e}"
        raise StorageError(msg) from e


def _ends_with_newline(path: Path) -> bool:
    with path.open("rb") as check:
        check.seek(-1, os.SEEK_END)
        return check.read(1) == b"\n"


def _discard(tmp_path: Path) -> None:
    try:
        tmp_path.unlink(missing_ok=True)
    except OSError:
        logging.getLogger(__name__).warning(
            "Could not remove temporary file %s",
            tmp_path,
            exc_info=True,
        )
