"""
Local durable storage.

Components:
- kv_store.py: SQLite-backed key/value store
- errors.py: StorageReadError / StorageWriteError
"""

from .errors import StorageError, StorageReadError, StorageWriteError
from .kv_store import SqliteKVStore

__all__ = ["SqliteKVStore", "StorageError", "StorageReadError", "StorageWriteError"]
