"""Content domain models as Pydantic v2 data types.

A blog post moves through draft, published and archived states.  Posts
are identified by a UUID and addressed publicly by a slug derived from
the title.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

DEFAULT_SLUG_MAX_LENGTH = 100

_SLUG_STRIP = re.compile(r"[^a-z0-9 -]")
_SLUG_SPACES = re.compile(r"\s+")
_SLUG_HYPHENS = re.compile(r"-+")


class ContentStatus(StrEnum):
    """Lifecycle status of a post."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


def generate_slug(title: str, max_length: int = DEFAULT_SLUG_MAX_LENGTH) -> str:
    """Derive a URL-friendly slug from *title*.

    Lowercases, drops everything but ``a-z``, digits, spaces and hyphens,
    turns whitespace runs into single hyphens, collapses repeated
    hyphens and truncates.  Leading and trailing hyphens are dropped.
    """
    slug = _SLUG_STRIP.sub("", title.lower())
    slug = _SLUG_SPACES.sub("-", slug)
    slug = _SLUG_HYPHENS.sub("-", slug)
    return slug.strip("-")[:max_length].rstrip("-")


def _new_id() -> str:
    return str(uuid.uuid4())


class ContentDocument(BaseModel):
    """A blog post as persisted by the content store."""

    id: str = Field(default_factory=_new_id)
    title: str
    slug: str
    body: str
    excerpt: str | None = None
    featured_image: str | None = None
    tags: list[str] = Field(default_factory=list)
    status: ContentStatus = ContentStatus.DRAFT
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None

    @property
    def is_published(self) -> bool:
        return self.status == ContentStatus.PUBLISHED


class PostDraft(BaseModel):
    """Author input for a new post."""

    title: str
    body: str
    excerpt: str | None = None
    featured_image: str | None = None
    tags: list[str] = Field(default_factory=list)
    status: ContentStatus = ContentStatus.DRAFT


class PostUpdate(BaseModel):
    """Partial update; fields left as None are unchanged."""

    id: str
    title: str | None = None
    body: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    tags: list[str] | None = None
    status: ContentStatus | None = None


class PostResult(BaseModel):
    """Outcome of a write: the stored post, or why it was rejected."""

    ok: bool
    post: ContentDocument | None = None
    error: str = ""

    @classmethod
    def success(cls, post: ContentDocument) -> PostResult:
        return cls(ok=True, post=post)

    @classmethod
    def rejected(cls, error: str) -> PostResult:
        return cls(ok=False, error=error)


class BlogStats(BaseModel):
    """Aggregate figures for the admin dashboard."""

    total: int = 0
    published: int = 0
    drafts: int = 0
    archived: int = 0
    recent: int = 0
    top_tags: list[tuple[str, int]] = Field(default_factory=list)
