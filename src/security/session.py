"""Admin session record with lazy expiry and renew-on-read."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from folio.shared.clock import MsClock, now_ms
from folio.shared.store import SESSION_KEY, KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_MS = 30 * 60 * 1000


class SessionRecord(BaseModel):
    """Persisted session.  Times are epoch milliseconds."""

    subject: Any
    issued_at: int
    expires_at: int


class SessionManager:
    """Owns the single admin session stored under ``admin_session``.

    Expiry is enforced only when the record is read.  A read that finds
    less than half the TTL remaining slides the expiry forward by a full
    TTL from now.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_ms: int = DEFAULT_SESSION_TTL_MS,
        clock: MsClock = now_ms,
        key: str = SESSION_KEY,
    ) -> None:
        self._store = store
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._key = key

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def create_session(self, subject: Any) -> SessionRecord:
        """Start a session for *subject*, replacing any existing one."""
        now = self._clock()
        record = SessionRecord(subject=subject, issued_at=now, expires_at=now + self._ttl_ms)
        self._store.set(self._key, record.model_dump_json())
        return record

    def read_record(self) -> SessionRecord | None:
        """Return the raw record without expiry checks, or None if absent/corrupt."""
        raw = self._store.get(self._key)
        if raw is None:
            return None
        try:
            return SessionRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning("Corrupt session record, clearing it")
            self.clear_session()
            return None

    def get_session(self) -> Any | None:
        """Return the session subject, or None when there is no live session."""
        record = self.read_record()
        if record is None:
            return None

        now = self._clock()
        if now > record.expires_at:
            logger.warning("Session expired, please log in again")
            self.clear_session()
            return None

        if record.expires_at - now < self._ttl_ms / 2:
            record.expires_at = now + self._ttl_ms
            self._store.set(self._key, record.model_dump_json())
            logger.debug("Session renewed until %d", record.expires_at)

        return record.subject

    def clear_session(self) -> None:
        self._store.delete(self._key)

    def is_session_valid(self) -> bool:
        return self.get_session() is not None
