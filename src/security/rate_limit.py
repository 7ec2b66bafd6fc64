"""Sliding-window rate limiting keyed by action and actor."""

from __future__ import annotations

import json
import logging
import threading

from folio.shared.clock import MsClock, now_ms
from folio.shared.store import KeyValueStore

logger = logging.getLogger(__name__)


def rate_key(action: str, actor_id: str) -> str:
    """Build the window key for an action performed by an actor."""
    return f"{action}_{actor_id}"


class RateLimiter:
    """Counts timestamped requests inside a trailing window.

    Each key maps to the list of accepted request times (epoch ms) in the
    store.  Entries that have left the window are dropped on every check.
    A rejected request is not recorded.
    """

    def __init__(self, store: KeyValueStore, clock: MsClock = now_ms) -> None:
        self._store = store
        self._clock = clock
        self._lock = threading.Lock()

    def _load_window(self, key: str) -> list[int]:
        raw = self._store.get(key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            return [int(ts) for ts in data]
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.warning("Corrupt rate window for %s, discarding", key)
            self._store.delete(key)
            return []

    def is_allowed(self, key: str, max_requests: int = 10, window_ms: int = 60_000) -> bool:
        """Record a request for *key* and return whether it is within the limit."""
        with self._lock:
            now = self._clock()
            window_start = now - window_ms
            recent = [ts for ts in self._load_window(key) if ts > window_start]

            if len(recent) >= max_requests:
                logger.debug("Rate limit hit for %s (%d in %d ms)", key, len(recent), window_ms)
                return False

            recent.append(now)
            self._store.set(key, json.dumps(recent))
            return True

    def remaining(self, key: str, max_requests: int = 10, window_ms: int = 60_000) -> int:
        """How many more requests *key* may make right now, without recording one."""
        with self._lock:
            window_start = self._clock() - window_ms
            recent = [ts for ts in self._load_window(key) if ts > window_start]
            return max(0, max_requests - len(recent))

    def reset(self, key: str) -> None:
        """Forget all history for *key*."""
        with self._lock:
            self._store.delete(key)
