"""Token-based CSRF protection for admin forms."""

from __future__ import annotations

import hmac
import uuid

from folio.shared.store import CSRF_TOKEN_KEY, KeyValueStore


class CsrfProtection:
    """Issues one token at a time and checks submissions against it."""

    def __init__(self, store: KeyValueStore, key: str = CSRF_TOKEN_KEY) -> None:
        self._store = store
        self._key = key

    def generate_token(self) -> str:
        token = str(uuid.uuid4())
        self._store.set(self._key, token)
        return token

    def get_token(self) -> str | None:
        return self._store.get(self._key)

    def validate_token(self, token: str) -> bool:
        stored = self.get_token()
        if not stored or not token:
            return False
        return hmac.compare_digest(stored.encode("utf-8"), token.encode("utf-8"))

    def clear_token(self) -> None:
        self._store.delete(self._key)
