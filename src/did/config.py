"""Configuration file handling for did."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from did.constants import APP_HOME_ENV, APP_NAME, CONFIG_FILENAME, ENTRIES_FILENAME

# Keys understood in config.toml
KNOWN_KEYS: dict[str, str] = {
    "storage_path": "Path to the entries file (default: <app dir>/entries.jsonl)",
}


def get_app_dir() -> Path:
    """Get the did application directory.

    Precedence:
    1. $DID_HOME
    2. $XDG_CONFIG_HOME/did
    3. ~/.config/did

    Returns:
        Path to the application directory (not created)
    """
    override = os.environ.get(APP_HOME_ENV)
    if override:
        return Path(override).expanduser()

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / APP_NAME


def get_config_path(app_dir: str | Path | None = None) -> Path:
    """Get the path to the config file.

    Args:
        app_dir: Application directory (default: get_app_dir())

    Returns:
        Path to config.toml
    """
    return Path(app_dir or get_app_dir()) / CONFIG_FILENAME


def load_config(app_dir: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from config.toml.

    Args:
        app_dir: Application directory (default: get_app_dir())

    Returns:
        Configuration dictionary, or empty dict if no usable config exists
    """
    config_path = get_config_path(app_dir)
    if not config_path.exists():
        return {}

    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def save_config(config: dict[str, Any], app_dir: str | Path | None = None) -> None:
    """Save configuration to config.toml.

    Args:
        config: Configuration dictionary to save
        app_dir: Application directory (default: get_app_dir())
    """
    config_path = get_config_path(app_dir)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with config_path.open("wb") as f:
        tomli_w.dump(config, f)


def get_storage_path(
    explicit: str | Path | None = None,
    app_dir: str | Path | None = None,
) -> Path:
    """Resolve the entries file path.

    Precedence:
    1. explicit path (e.g. a --file option)
    2. storage_path from config.toml
    3. <app dir>/entries.jsonl

    Args:
        explicit: Path given by the caller, if any
        app_dir: Application directory (default: get_app_dir())

    Returns:
        Path to the entries file
    """
    if explicit:
        return Path(explicit).expanduser()

    configured = load_config(app_dir).get("storage_path")
    if isinstance(configured, str) and configured:
        return Path(configured).expanduser()

    return Path(app_dir or get_app_dir()) / ENTRIES_FILENAME
