"""Data models for did time entries using dataclasses."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from did.constants import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES
from did.errors import EntryValidationError

# Fractional seconds of any precision (RFC 3339 allows 1-9 digits)
_FRACTION = re.compile(r"\.(\d+)")


class PurgeMode(str, Enum):
    """Which tombstones a purge removes."""

    EXPLICIT = "explicit"  # every tombstone, regardless of age
    RETENTION = "retention"  # only tombstones past the retention window


@dataclass
class Entry:
    """A single logged activity."""

    timestamp: datetime
    description: str
    duration_minutes: int
    raw_input: str = ""
    project: str | None = None
    tags: list[str] = field(default_factory=list[str])
    deleted_at: datetime | None = None

    def is_deleted(self) -> bool:
        """Check if the entry is a tombstone (soft deleted)."""
        return self.deleted_at is not None


@dataclass
class EntryPatch:
    """Changes to apply to an entry; ``None`` leaves a field untouched."""

    description: str | None = None
    duration_minutes: int | None = None
    project: str | None = None
    tags: list[str] | None = None

    def is_empty(self) -> bool:
        """Check whether the patch changes nothing."""
        return (
            self.description is None
            and self.duration_minutes is None
            and self.project is None
            and self.tags is None
        )


@dataclass
class IndexedEntry:
    """An entry paired with its 1-based active index and 0-based position."""

    entry: Entry
    active_index: int
    position: int


@dataclass
class ParseWarning:
    """A corrupted line that was skipped while reading."""

    line_number: int  # 1-based
    content: str  # truncated raw line
    error: str


@dataclass
class ReadResult:
    """Entries decoded from a log plus warnings for the lines that were not."""

    entries: list[Entry] = field(default_factory=list[Entry])
    warnings: list[ParseWarning] = field(default_factory=list[ParseWarning])


@dataclass
class StorageHealth:
    """Health summary of a storage file."""

    total_lines: int = 0
    valid: int = 0
    corrupted: int = 0
    warnings: list[ParseWarning] = field(default_factory=list[ParseWarning])

    @property
    def is_healthy(self) -> bool:
        """True when no line is corrupted."""
        return self.corrupted == 0


def _to_microseconds(match: re.Match[str]) -> str:
    # fromisoformat before 3.11 only takes exactly 3 or 6 fractional digits
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Accepts a trailing ``Z`` and any number of fractional digits (extra
    digits past microseconds are dropped). Naive values are interpreted in
    local time.
    """
    if not isinstance(value, str) or not value:
        msg = f"timestamp must be a non-empty string, got {value!r}"
        raise ValueError(msg)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(_to_microseconds, text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def format_duration_simple(minutes: int) -> str:
    """Format minutes as ``45m``, ``2h`` or ``1h30m``."""
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h{mins}m"


def build_raw_input(
    description: str,
    duration_minutes: int,
    project: str | None = None,
    tags: list[str] | None = None,
) -> str:
    """Reconstruct the textual form of an entry from its fields."""
    text = description
    if project:
        text += f" @{project}"
    for tag in tags or []:
        text += f" #{tag}"
    return f"{text} for {format_duration_simple(duration_minutes)}"


def validate_duration(duration_minutes: Any) -> None:
    """Validate that a duration is an int within 1..1440 minutes."""
    if (
        not isinstance(duration_minutes, int)
        or isinstance(duration_minutes, bool)
        or duration_minutes < MIN_DURATION_MINUTES
        or duration_minutes > MAX_DURATION_MINUTES
    ):
        msg = (
            f"Duration must be between {MIN_DURATION_MINUTES} and "
            f"{MAX_DURATION_MINUTES} minutes, got {duration_minutes!r}"
        )
        raise EntryValidationError(msg)


def validate_description(description: Any) -> None:
    """Validate that a description is a non-blank string."""
    if not isinstance(description, str) or not description.strip():
        msg = "Entry must have a non-empty description"
        raise EntryValidationError(msg)


def validate_entry(entry: Entry) -> None:
    """Validate that an entry satisfies the data model."""
    validate_description(entry.description)
    validate_duration(entry.duration_minutes)
    if entry.project == "":
        msg = "Entry project must be None or a non-empty string"
        raise EntryValidationError(msg)
    if entry.timestamp.tzinfo is None:
        msg = "Entry timestamp must be timezone-aware"
        raise EntryValidationError(msg)


def new_entry(
    description: str,
    duration_minutes: int,
    project: str | None = None,
    tags: list[str] | None = None,
    timestamp: datetime | None = None,
) -> Entry:
    """Create a validated, active entry stamped with the current time."""
    entry = Entry(
        timestamp=timestamp or datetime.now().astimezone(),
        description=description.strip(),
        duration_minutes=duration_minutes,
        raw_input=build_raw_input(description.strip(), duration_minutes, project, tags),
        project=project or None,
        tags=list(tags or []),
    )
    validate_entry(entry)
    return entry


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    """Convert an Entry to a dictionary, omitting unset optional fields."""
    data: dict[str, Any] = {
        "timestamp": entry.timestamp.isoformat(),
        "description": entry.description,
        "duration_minutes": entry.duration_minutes,
        "raw_input": entry.raw_input,
    }
    if entry.project:
        data["project"] = entry.project
    if entry.tags:
        data["tags"] = entry.tags
    if entry.deleted_at is not None:
        data["deleted_at"] = entry.deleted_at.isoformat()
    return data


def dict_to_entry(data: dict[str, Any]) -> Entry:
    """Convert a dictionary to an Entry, deserializing datetimes.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a field has an unusable value
        TypeError: If a field has the wrong type
    """
    description = data["description"]
    if not isinstance(description, str):
        msg = f"description must be a string, got {type(description).__name__}"
        raise TypeError(msg)

    duration = data["duration_minutes"]
    if not isinstance(duration, int) or isinstance(duration, bool):
        msg = f"duration_minutes must be an integer, got {type(duration).__name__}"
        raise TypeError(msg)

    raw_input = data.get("raw_input") or ""
    if not isinstance(raw_input, str):
        msg = f"raw_input must be a string, got {type(raw_input).__name__}"
        raise TypeError(msg)

    project = data.get("project") or None
    if project is not None and not isinstance(project, str):
        msg = f"project must be a string, got {type(project).__name__}"
        raise TypeError(msg)

    tags = data.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        msg = "tags must be a list of strings"
        raise TypeError(msg)

    deleted_at = (
        parse_timestamp(data["deleted_at"]) if data.get("deleted_at") else None
    )

    return Entry(
        timestamp=parse_timestamp(data["timestamp"]),
        description=description,
        duration_minutes=duration,
        raw_input=raw_input,
        project=project,
        tags=list(tags),
        deleted_at=deleted_at,
    )
