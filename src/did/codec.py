"""JSON Lines codec for time entries.

One entry per line. Lines are decoded independently so a corrupted line
is reported as a warning and never stops the rest of the file from loading.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import orjson

from did.constants import WARNING_CONTENT_LIMIT
from did.errors import CorruptionError, StorageError
from did.models import Entry, ParseWarning, ReadResult, dict_to_entry, entry_to_dict


def encode_entry(entry: Entry) -> bytes:
    """Serialize an entry to a single JSON line (without the newline)."""
    return orjson.dumps(entry_to_dict(entry))


def encode_entries(entries: list[Entry]) -> bytes:
    """Serialize entries to JSON Lines content, one newline-terminated line each."""
    return b"".join(encode_entry(e) + b"\n" for e in entries)


def decode_line(line: bytes | str, line_number: int | None = None) -> Entry:
    """Decode a single line into an entry.

    Raises:
        CorruptionError: If the line is blank, not valid JSON, not an object,
            or an incomplete record.
    """
    raw = line.encode() if isinstance(line, str) else line
    if not raw.strip():
        msg = "empty line"
        raise CorruptionError(msg, line_number)

    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        msg = f"invalid JSON: {e}"
        raise CorruptionError(msg, line_number) from e

    if not isinstance(data, dict):
        msg = f"expected JSON object, got {type(data).__name__}"
        raise CorruptionError(msg, line_number)

    try:
        return dict_to_entry(cast("dict[str, Any]", data))
    except KeyError as e:
        msg = f"incomplete record: missing field {e}"
        raise CorruptionError(msg, line_number) from e
    except (TypeError, ValueError) as e:
        msg = f"invalid record: {e}"
        raise CorruptionError(msg, line_number) from e


def truncate_content(content: str, limit: int = WARNING_CONTENT_LIMIT) -> str:
    """Cut warning content to ``limit`` characters, marking the cut with '...'."""
    if len(content) <= limit:
        return content
    return content[:limit] + "..."


def decode_content(content: bytes) -> ReadResult:
    """Decode JSON Lines content, collecting a warning per corrupted line."""
    result = ReadResult()
    for lineno, raw in enumerate(content.splitlines(), start=1):
        try:
            result.entries.append(decode_line(raw, lineno))
        except CorruptionError as e:
            result.warnings.append(
                ParseWarning(
                    line_number=lineno,
                    content=truncate_content(raw.decode("utf-8", errors="replace")),
                    error=str(e),
                ),
            )
    return result


def read_content(path: str | Path) -> bytes | None:
    """Read the raw bytes of a log, or None if the file does not exist.

    Raises:
        StorageError: If the file exists but cannot be read.
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        msg = f"Failed to read storage file {path}: {e}"
        raise StorageError(msg) from e


def read_all(path: str | Path) -> ReadResult:
    """Read every decodable entry of a log along with per-line warnings.

    A missing file yields an empty result. Warnings are returned, never printed.
    """
    content = read_content(path)
    if content is None:
        return ReadResult()
    return decode_content(content)


def read_all_or_empty(path: str | Path) -> list[Entry]:
    """Read the entries of a log, dropping warnings; missing file is empty."""
    return read_all(path).entries
