"""Tests for configuration file handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from did.config import (
    get_app_dir,
    get_config_path,
    get_storage_path,
    load_config,
    save_config,
)


class TestAppDir:
    """Tests for resolving the application directory."""

    def test_did_home_wins(self, isolated_app_home: Path) -> None:
        """DID_HOME is used when set."""
        assert get_app_dir() == isolated_app_home

    def test_xdg_config_home(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Without DID_HOME the XDG config directory is used."""
        monkeypatch.delenv("DID_HOME")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert get_app_dir() == tmp_path / "xdg" / "did"

    def test_home_fallback(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """With neither variable set, ~/.config/did is used."""
        monkeypatch.delenv("DID_HOME")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_app_dir() == tmp_path / ".config" / "did"


class TestLoadSave:
    """Tests for loading and saving config.toml."""

    def test_missing_config(self, tmp_path: Path) -> None:
        """A missing config file loads as empty."""
        assert load_config(tmp_path) == {}

    def test_round_trip(self, tmp_path: Path) -> None:
        """Saved values load back, creating the directory as needed."""
        app_dir = tmp_path / "nested"
        save_config({"storage_path": "/data/entries.jsonl"}, app_dir)
        assert get_config_path(app_dir).exists()
        assert load_config(app_dir) == {"storage_path": "/data/entries.jsonl"}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """An unparsable config file loads as empty."""
        get_config_path(tmp_path).write_text("storage_path = [unclosed")
        assert load_config(tmp_path) == {}


class TestStoragePath:
    """Tests for resolving the entries file path."""

    def test_default(self, tmp_path: Path) -> None:
        """Without config the log lives in the app directory."""
        assert get_storage_path(app_dir=tmp_path) == tmp_path / "entries.jsonl"

    def test_configured(self, tmp_path: Path) -> None:
        """storage_path from config.toml overrides the default."""
        save_config({"storage_path": str(tmp_path / "elsewhere.jsonl")}, tmp_path)
        assert get_storage_path(app_dir=tmp_path) == tmp_path / "elsewhere.jsonl"

    def test_explicit_wins(self, tmp_path: Path) -> None:
        """An explicit path beats the config file."""
        save_config({"storage_path": str(tmp_path / "elsewhere.jsonl")}, tmp_path)
        explicit = tmp_path / "explicit.jsonl"
        assert get_storage_path(explicit, app_dir=tmp_path) == explicit

    def test_uses_env_app_dir(self, isolated_app_home: Path) -> None:
        """The default app directory follows DID_HOME."""
        assert get_storage_path() == isolated_app_home / "entries.jsonl"
