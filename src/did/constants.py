"""Constants for the did store and CLI."""

from __future__ import annotations

# Application directory name under the user's config home
APP_NAME = "did"

# Name of the JSON Lines storage file inside the app directory
ENTRIES_FILENAME = "entries.jsonl"

# Config filename inside the app directory
CONFIG_FILENAME = "config.toml"

# Environment variable overriding the app directory
APP_HOME_ENV = "DID_HOME"

# File mode for the entries file and its backups
FILE_MODE = 0o644

# Backup files are named "<path>.bak.<n>", n in 1..MAX_BACKUP_COUNT (1 = newest)
BACKUP_SUFFIX = ".bak"
MAX_BACKUP_COUNT = 3

# Tombstones older than this become eligible for retention purge
RETENTION_DAYS = 7

# Entry duration bounds (24 hours)
MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 1440

# Corrupted line content in warnings is cut to this many characters
WARNING_CONTENT_LIMIT = 50
