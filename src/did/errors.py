"""Exception types raised by the did store.

Each error also derives from the closest builtin so callers that only
know about ``ValueError``/``IndexError``/``RuntimeError`` keep working.
"""

from __future__ import annotations


class DidError(Exception):
    """Base class for all store errors."""


class CorruptionError(DidError, ValueError):
    """A single line of the log could not be decoded into an entry."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class OutOfBoundsError(DidError, IndexError):
    """An active index or physical position is outside the current bounds."""

    def __init__(self, requested: int, available: int, *, kind: str = "index") -> None:
        self.requested = requested
        self.available = available
        self.kind = kind
        if kind == "index":
            if available == 0:
                msg = f"Index {requested} out of range: there are no entries"
            else:
                msg = f"Index {requested} out of range: valid range is 1-{available}"
        elif available == 0:
            msg = f"Position {requested} out of range: the log is empty"
        else:
            msg = (
                f"Position {requested} out of range: valid range is 0-{available - 1}"
            )
        super().__init__(msg)


class NotFoundError(DidError, LookupError):
    """Nothing matched the request (no tombstone, no backup, ...)."""


class BackupNotFoundError(NotFoundError):
    """The requested backup slot has no file."""

    def __init__(self, slot: int) -> None:
        self.slot = slot
        super().__init__(f"Backup {slot} does not exist")


class StorageError(DidError, RuntimeError):
    """An underlying I/O operation failed.

    The original ``OSError`` is available as ``__cause__``.
    """


class EntryValidationError(DidError, ValueError):
    """An entry or edit does not satisfy the data model."""
