# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and platform services (sign-in, dialogs) swappable
and makes testing easier.
"""

from typing import Protocol

from ..auth.session import AuthResult


class KeyValueStore(Protocol):
    """
    Durable key/value storage.

    get -> None when the key is absent.
    Implementations raise StorageReadError / StorageWriteError on failure.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class IdentityProvider(Protocol):
    """External sign-in flow. Only the outcome and the credential matter here."""
    def authenticate(self) -> AuthResult: ...


class ConfirmDialog(Protocol):
    """Platform confirm/cancel prompt shown before destructive actions."""
    def confirm(self, title: str, message: str) -> bool: ...
