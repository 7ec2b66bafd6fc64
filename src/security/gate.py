"""Admin login path: rate limiting, audit and session creation.

Credential verification itself is external; callers pass a callable
that performs it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from folio.security.audit import AuditLogger
from folio.security.rate_limit import RateLimiter, rate_key
from folio.security.session import SessionManager

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_MAX_ATTEMPTS = 5
DEFAULT_LOGIN_WINDOW_MS = 15 * 60 * 1000


class LoginOutcome(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"
    BLOCKED = "blocked"


class AdminGate:
    """Guards the admin surface."""

    def __init__(
        self,
        limiter: RateLimiter,
        sessions: SessionManager,
        audit: AuditLogger,
        max_attempts: int = DEFAULT_LOGIN_MAX_ATTEMPTS,
        window_ms: int = DEFAULT_LOGIN_WINDOW_MS,
    ) -> None:
        self._limiter = limiter
        self._sessions = sessions
        self._audit = audit
        self._max_attempts = max_attempts
        self._window_ms = window_ms

    def login(self, actor_id: str, verify: Callable[[], bool], subject: Any) -> LoginOutcome:
        """Attempt a login for *actor_id*.

        Blocked attempts do not call *verify*.  A successful login clears
        the actor's login window so earlier failures stop counting.
        """
        key = rate_key("login", actor_id)
        if not self._limiter.is_allowed(key, self._max_attempts, self._window_ms):
            self._audit.log("login_blocked", {"actor": actor_id})
            logger.warning("Too many login attempts for %s", actor_id)
            return LoginOutcome.BLOCKED

        self._audit.log("login_attempt", {"actor": actor_id})
        if not verify():
            self._audit.log("login_failed", {"actor": actor_id})
            return LoginOutcome.FAILED

        self._sessions.create_session(subject)
        self._limiter.reset(key)
        self._audit.log("login_success", {"actor": actor_id})
        return LoginOutcome.SUCCESS

    def logout(self) -> None:
        subject = self._sessions.get_session()
        if subject is not None:
            self._audit.log("logout", {"subject": subject})
        self._sessions.clear_session()

    def require_session(self) -> Any | None:
        """Return the current subject, or None if nobody is logged in."""
        return self._sessions.get_session()
