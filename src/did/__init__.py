"""did - a personal time tracker backed by a durable JSON Lines store."""

from did._version import version as __version__

__all__ = ["__version__"]
