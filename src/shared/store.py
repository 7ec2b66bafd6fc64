"""Key-value storage collaborators.

Every stateful component (sessions, audit log, rate windows, posts,
profile) persists string values through a ``KeyValueStore``.  Two
implementations ship here: an in-memory table and a single JSON file on
disk.  A remote document store only needs the same three methods.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from folio.shared.errors import StoreError

logger = logging.getLogger(__name__)

STORE_FILENAME = ".folio-store.json"

SESSION_KEY = "admin_session"
AUDIT_LOG_KEY = "admin_audit_log"
POSTS_KEY = "local_blog_posts"
PROFILE_KEY = "local_profile"
CSRF_TOKEN_KEY = "csrf_token"


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string key-value interface."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store, scoped to the owning process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """All keys in one JSON object on disk.

    The file is re-read on every operation and rewritten after every
    mutation, so processes sharing a file see each other's writes with
    last-writer-wins semantics.  There is no cross-process locking.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError):
            logger.warning("Corrupt store file at %s, starting fresh", self._path)
            return {}
        except OSError as exc:
            raise StoreError(self._path, str(exc)) from exc
        if not isinstance(raw, dict):
            logger.warning("Store file at %s is not a JSON object, starting fresh", self._path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StoreError(self._path, str(exc)) from exc

    # ── Public interface ─────────────────────────────────────────

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def keys(self) -> list[str]:
        return list(self._load())
