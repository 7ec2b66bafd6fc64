"""Post lifecycle rules on top of ContentStore.

Every write path sanitises author text, enforces the content policy and
records an audit entry.  Rejections come back as ``PostResult`` values
carrying a user-facing message; nothing here raises for bad input.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from folio.content.models import (
    DEFAULT_SLUG_MAX_LENGTH,
    BlogStats,
    ContentDocument,
    ContentStatus,
    PostDraft,
    PostResult,
    PostUpdate,
    generate_slug,
)
from folio.content.stats import compute_stats
from folio.content.store import ContentStore
from folio.security.audit import AuditLogger
from folio.security.rate_limit import RateLimiter, rate_key
from folio.security.sanitizer import (
    DEFAULT_IMAGE_DOMAINS,
    sanitize,
    sanitize_tags,
    validate_image_url,
)
from folio.shared.clock import DatetimeClock, utc_now

logger = logging.getLogger(__name__)

AUDIT_METHOD = "local_storage"


class PostPolicy(BaseModel):
    """Limits applied when posts are written."""

    max_body_length: int = 50_000
    slug_max_length: int = DEFAULT_SLUG_MAX_LENGTH
    create_max_requests: int = 5
    create_window_ms: int = 300_000
    allowed_image_domains: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IMAGE_DOMAINS)
    )


class PostService:
    """Create, update, delete and query blog posts."""

    def __init__(
        self,
        store: ContentStore,
        limiter: RateLimiter,
        audit: AuditLogger,
        policy: PostPolicy | None = None,
        now: DatetimeClock = utc_now,
    ) -> None:
        self._store = store
        self._limiter = limiter
        self._audit = audit
        self._policy = policy or PostPolicy()
        self._now = now

    # ── Queries ──────────────────────────────────────────────────

    def list_posts(self, include_unpublished: bool = False) -> list[ContentDocument]:
        if include_unpublished:
            return self._store.list()
        return self._store.list(status=ContentStatus.PUBLISHED)

    def get_post(self, post_id: str) -> ContentDocument | None:
        return self._store.get(post_id)

    def get_post_by_slug(self, slug: str) -> ContentDocument | None:
        """Public lookup: only published posts are visible."""
        post = self._store.get_by_slug(slug)
        if post is None or not post.is_published:
            return None
        return post

    def stats(self) -> BlogStats:
        return compute_stats(self._store.list(), self._now())

    # ── Writes ───────────────────────────────────────────────────

    def create_post(self, draft: PostDraft, actor_id: str = "local") -> PostResult:
        key = rate_key("create_post", actor_id)
        if not self._limiter.is_allowed(
            key, self._policy.create_max_requests, self._policy.create_window_ms
        ):
            self._audit.log("blog_post_create_blocked", {"actor": actor_id})
            return PostResult.rejected(
                "Too many posts created recently. Please wait before creating another."
            )

        title = sanitize(draft.title)
        body = sanitize(draft.body)
        excerpt = sanitize(draft.excerpt) or None
        featured_image = sanitize(draft.featured_image) or None
        tags = sanitize_tags(draft.tags)

        error = self._check_fields(title, body, featured_image)
        slug = generate_slug(title, self._policy.slug_max_length) if not error else ""
        if not error and not slug:
            error = "Title must contain letters or digits"
        if not error and self._store.slug_taken(slug):
            error = "A post with this title already exists"
        if error:
            self._audit.log(
                "blog_post_create_failed", {"error": error, "method": AUDIT_METHOD}
            )
            return PostResult.rejected(error)

        now = self._now()
        post = ContentDocument(
            title=title,
            slug=slug,
            body=body,
            excerpt=excerpt,
            featured_image=featured_image,
            tags=tags,
            status=draft.status,
            created_at=now,
            updated_at=now,
            published_at=now if draft.status == ContentStatus.PUBLISHED else None,
        )
        self._store.insert(post)
        self._audit.log(
            "blog_post_created",
            {
                "post_id": post.id,
                "title": post.title,
                "status": str(post.status),
                "method": AUDIT_METHOD,
            },
        )
        logger.info("Created post %s (%s)", post.slug, post.status)
        return PostResult.success(post)

    def update_post(self, update: PostUpdate) -> PostResult:
        existing = self._store.get(update.id)
        if existing is None:
            return PostResult.rejected("Post not found")

        title = existing.title if update.title is None else sanitize(update.title)
        body = existing.body if update.body is None else sanitize(update.body)
        featured_image = (
            existing.featured_image
            if update.featured_image is None
            else sanitize(update.featured_image) or None
        )
        error = self._check_fields(title, body, featured_image)
        if error:
            return PostResult.rejected(error)

        changes: dict[str, object] = {
            "title": title,
            "body": body,
            "featured_image": featured_image,
        }
        if update.excerpt is not None:
            changes["excerpt"] = sanitize(update.excerpt) or None
        if update.tags is not None:
            changes["tags"] = sanitize_tags(update.tags)
        if update.status is not None:
            changes["status"] = update.status

        if update.title is not None:
            slug = generate_slug(title, self._policy.slug_max_length)
            if not slug:
                return PostResult.rejected("Title must contain letters or digits")
            if self._store.slug_taken(slug, exclude_id=existing.id):
                return PostResult.rejected("A post with this title already exists")
            changes["slug"] = slug

        now = self._now()
        changes["updated_at"] = now
        # published_at is stamped on the first publish and kept afterwards.
        if update.status == ContentStatus.PUBLISHED and existing.published_at is None:
            changes["published_at"] = now

        post = existing.model_copy(update=changes)
        self._store.replace(post)
        self._audit.log(
            "blog_post_updated",
            {"post_id": post.id, "status": str(post.status), "method": AUDIT_METHOD},
        )
        return PostResult.success(post)

    def set_status(self, post_id: str, status: ContentStatus) -> PostResult:
        return self.update_post(PostUpdate(id=post_id, status=status))

    def delete_post(self, post_id: str) -> bool:
        deleted = self._store.delete(post_id)
        if deleted:
            self._audit.log("blog_post_deleted", {"post_id": post_id, "method": AUDIT_METHOD})
        return deleted

    # ── Validation ───────────────────────────────────────────────

    def _check_fields(self, title: str, body: str, featured_image: str | None) -> str:
        if not title:
            return "Title is required"
        if featured_image and not validate_image_url(
            featured_image, self._policy.allowed_image_domains
        ):
            return "Invalid or unsafe image URL"
        if len(body) > self._policy.max_body_length:
            return (
                f"Content is too long (maximum {self._policy.max_body_length:,} characters)"
            )
        return ""
