"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import orjson
import pytest

from did.models import Entry, build_raw_input, entry_to_dict
from did.storage import JSONLStorage

BASE_TIME = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


def make_entry(
    description: str = "work",
    minutes: int = 30,
    *,
    offset_hours: int = 0,
    project: str | None = None,
    tags: list[str] | None = None,
    deleted_at: datetime | None = None,
) -> Entry:
    """Build an entry with a deterministic timestamp."""
    return Entry(
        timestamp=BASE_TIME + timedelta(hours=offset_hours),
        description=description,
        duration_minutes=minutes,
        raw_input=build_raw_input(description, minutes, project, tags),
        project=project,
        tags=list(tags or []),
        deleted_at=deleted_at,
    )


def entry_line(entry: Entry) -> str:
    """Return the JSONL line for an entry."""
    return orjson.dumps(entry_to_dict(entry)).decode()


@pytest.fixture(autouse=True)
def isolated_app_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the app directory at a temp dir so tests never touch ~/.config."""
    app_home = tmp_path / "did-home"
    monkeypatch.setenv("DID_HOME", str(app_home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return app_home


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    """Path to an entries file inside an existing temp directory."""
    return tmp_path / "entries.jsonl"


@pytest.fixture
def storage(storage_path: Path) -> JSONLStorage:
    """Create a storage instance backed by a temp file."""
    return JSONLStorage(storage_path)


@pytest.fixture
def abc_storage(storage: JSONLStorage) -> JSONLStorage:
    """Storage holding three active entries: a (30m), b (60m), c (45m)."""
    storage.append(make_entry("a", 30, offset_hours=0))
    storage.append(make_entry("b", 60, offset_hours=1))
    storage.append(make_entry("c", 45, offset_hours=2))
    return storage
