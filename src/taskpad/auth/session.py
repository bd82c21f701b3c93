# src/taskpad/auth/session.py

"""
Session credential storage.

The identity provider runs its own redirect flow; we only receive the outcome
and, on success, an opaque access token which is kept in the key/value store.
Tokens are never validated or refreshed here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..storage.errors import StorageReadError

if TYPE_CHECKING:
    from ..core.ports import IdentityProvider, KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_KEY = "userToken"


@dataclass(frozen=True, slots=True)
class AuthResult:
    type: str  # "success" | "cancel" | "dismiss" | "error"
    access_token: str | None = None

    @property
    def ok(self) -> bool:
        return self.type == "success" and bool(self.access_token)


class SessionStore:
    def __init__(self, kv: KeyValueStore, *, key: str = DEFAULT_TOKEN_KEY) -> None:
        self._kv = kv
        self._key = key

    def handle_auth_result(self, result: AuthResult) -> bool:
        """
        Store the credential from a successful sign-in.

        Returns True if the user is now signed in. Non-success outcomes leave
        any previously stored credential untouched.
        StorageWriteError propagates.
        """
        if not result.ok:
            logger.info("Sign-in not completed (type=%s).", result.type)
            return False

        self._kv.set(self._key, str(result.access_token))
        logger.info("Sign-in succeeded, credential stored.")
        return True

    def sign_in(self, provider: IdentityProvider) -> bool:
        return self.handle_auth_result(provider.authenticate())

    def credential(self) -> str | None:
        try:
            token = self._kv.get(self._key)
        except StorageReadError:
            logger.warning("Failed to read stored credential; treating as signed out.", exc_info=True)
            return None
        return token or None

    @property
    def is_authenticated(self) -> bool:
        return self.credential() is not None

    def sign_out(self) -> None:
        self._kv.remove(self._key)
        logger.info("Signed out, credential removed.")
