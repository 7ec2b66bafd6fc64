"""Capped, newest-first audit log of admin actions.

Entries are kept as a JSON array under ``admin_audit_log``.  The log is
advisory: a failure to write an entry is logged and never interrupts
the action being audited.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from folio.shared.clock import MsClock, ms_to_datetime, now_ms
from folio.shared.errors import StoreError
from folio.shared.store import AUDIT_LOG_KEY, KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOGS = 100


class ActorContext(BaseModel):
    """Where an audited action came from."""

    user_agent: str = "folio-cli"
    ip: str = "client-side"


class AuditEntry(BaseModel):
    """A single audited action."""

    timestamp: datetime
    action: str
    detail: dict[str, Any] | None = None
    actor_context: ActorContext = Field(default_factory=ActorContext)


class AuditSummary(BaseModel):
    """Counts shown on the security dashboard."""

    total: int = 0
    login_attempts: int = 0
    failed_logins: int = 0
    blog_actions: int = 0
    entries: list[AuditEntry] = Field(default_factory=list)


_entries_adapter = TypeAdapter(list[AuditEntry])


class AuditLogger:
    """Append-only log capped at ``max_logs`` entries; the oldest are dropped."""

    def __init__(
        self,
        store: KeyValueStore,
        max_logs: int = DEFAULT_MAX_LOGS,
        actor_context: ActorContext | None = None,
        clock: MsClock = now_ms,
        key: str = AUDIT_LOG_KEY,
    ) -> None:
        self._store = store
        self._max_logs = max_logs
        self._actor = actor_context or ActorContext()
        self._clock = clock
        self._key = key

    @property
    def max_logs(self) -> int:
        return self._max_logs

    def log(self, action: str, detail: dict[str, Any] | None = None) -> None:
        """Prepend an entry for *action* and truncate to the cap."""
        entry = AuditEntry(
            timestamp=ms_to_datetime(self._clock()),
            action=action,
            detail=detail,
            actor_context=self._actor,
        )
        try:
            logs = self.get_logs()
            logs.insert(0, entry)
            del logs[self._max_logs :]
            self._store.set(self._key, _entries_adapter.dump_json(logs).decode("utf-8"))
        except (StoreError, TypeError, ValueError) as exc:
            logger.error("Failed to write audit entry %s: %s", action, exc)

    def get_logs(self) -> list[AuditEntry]:
        """Return entries newest-first; a corrupt log is discarded."""
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            return _entries_adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Corrupt audit log, clearing it")
            self.clear_logs()
            return []

    def clear_logs(self) -> None:
        self._store.delete(self._key)


def _is_dashboard_action(action: str) -> bool:
    return "login" in action or "blog_post" in action or "post_" in action


def summarize(entries: Iterable[AuditEntry]) -> AuditSummary:
    """Filter *entries* down to login and blog events and count them."""
    shown = [
        e
        for e in entries
        if "session_restored" not in e.action and _is_dashboard_action(e.action)
    ]
    return AuditSummary(
        total=len(shown),
        login_attempts=sum(
            1 for e in shown if "login_attempt" in e.action or "login_success" in e.action
        ),
        failed_logins=sum(
            1 for e in shown if "login_failed" in e.action or "login_error" in e.action
        ),
        blog_actions=sum(1 for e in shown if "blog_post" in e.action),
        entries=shown,
    )


def export_logs(entries: Iterable[AuditEntry]) -> str:
    """Serialise entries as an indented JSON array."""
    return json.dumps([e.model_dump(mode="json") for e in entries], indent=2)
