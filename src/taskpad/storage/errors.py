# src/taskpad/storage/errors.py

from __future__ import annotations


class StorageError(RuntimeError):
    """Base class for durable storage failures."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class StorageReadError(StorageError):
    """Durable read failed or returned data that cannot be parsed."""


class StorageWriteError(StorageError):
    """Durable write failed after a mutation was computed."""
