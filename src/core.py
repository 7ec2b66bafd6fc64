"""Wiring: builds every component from a FolioConfig and one store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from folio.config import FolioConfig
from folio.content.service import PostService
from folio.content.store import ContentStore
from folio.markdown.renderer import MarkdownRenderer
from folio.profile.store import ProfileStore
from folio.security.audit import ActorContext, AuditLogger
from folio.security.csrf import CsrfProtection
from folio.security.gate import AdminGate
from folio.security.rate_limit import RateLimiter
from folio.security.session import SessionManager
from folio.shared.clock import DatetimeClock, MsClock, now_ms, utc_now
from folio.shared.store import JsonFileStore, KeyValueStore


@dataclass
class Folio:
    """All components sharing one backing store."""

    config: FolioConfig
    store: KeyValueStore
    limiter: RateLimiter
    sessions: SessionManager
    audit: AuditLogger
    gate: AdminGate
    csrf: CsrfProtection
    posts: PostService
    profile: ProfileStore
    renderer: MarkdownRenderer


def build_folio(
    config: FolioConfig,
    store: KeyValueStore | None = None,
    clock: MsClock = now_ms,
    now: DatetimeClock = utc_now,
) -> Folio:
    """Construct the component graph.

    Uses a JsonFileStore at ``config.storage.path`` unless *store* is given.
    """
    if store is None:
        store = JsonFileStore(Path(config.storage.path))

    limiter = RateLimiter(store, clock=clock)
    sessions = SessionManager(store, ttl_ms=config.session.ttl_ms, clock=clock)
    audit = AuditLogger(
        store,
        max_logs=config.audit.max_logs,
        actor_context=ActorContext(user_agent=config.audit.user_agent),
        clock=clock,
    )
    gate = AdminGate(
        limiter,
        sessions,
        audit,
        max_attempts=config.rate_limits.login_max,
        window_ms=config.rate_limits.login_window_ms,
    )
    posts = PostService(
        ContentStore(store),
        limiter,
        audit,
        policy=config.to_post_policy(),
        now=now,
    )
    return Folio(
        config=config,
        store=store,
        limiter=limiter,
        sessions=sessions,
        audit=audit,
        gate=gate,
        csrf=CsrfProtection(store),
        posts=posts,
        profile=ProfileStore(store, audit),
        renderer=MarkdownRenderer(),
    )
