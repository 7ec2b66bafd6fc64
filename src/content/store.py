"""Key-value backed post store.

Persists all posts as one JSON array under ``local_blog_posts``, newest
first.  The array is loaded before and saved after every operation, so
the store holds no state of its own beyond the backing collaborator.
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from folio.content.models import ContentDocument, ContentStatus
from folio.shared.store import POSTS_KEY, KeyValueStore

logger = logging.getLogger(__name__)

# Alias to avoid shadowing by ContentStore.list method
_list = list

_posts_adapter = TypeAdapter(_list[ContentDocument])


class ContentStore:
    """CRUD over the post array.  No validation; see PostService for rules."""

    def __init__(self, store: KeyValueStore, key: str = POSTS_KEY) -> None:
        self._store = store
        self._key = key

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> _list[ContentDocument]:
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            return _posts_adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Corrupt post list under %s, starting fresh", self._key)
            return []

    def _save(self, posts: _list[ContentDocument]) -> None:
        self._store.set(self._key, _posts_adapter.dump_json(posts, indent=2).decode("utf-8"))

    # ── Write operations ─────────────────────────────────────────

    def insert(self, post: ContentDocument) -> None:
        """Add *post* at the front of the list."""
        posts = self._load()
        posts.insert(0, post)
        self._save(posts)

    def replace(self, post: ContentDocument) -> None:
        """Replace the stored post with the same id.

        Raises KeyError if the id does not exist.
        """
        posts = self._load()
        for index, existing in enumerate(posts):
            if existing.id == post.id:
                posts[index] = post
                self._save(posts)
                return
        raise KeyError(post.id)

    def delete(self, post_id: str) -> bool:
        """Remove a post by id.  Returns False if it was not found."""
        posts = self._load()
        remaining = [p for p in posts if p.id != post_id]
        if len(remaining) == len(posts):
            return False
        self._save(remaining)
        return True

    # ── Read operations ──────────────────────────────────────────

    def get(self, post_id: str) -> ContentDocument | None:
        for post in self._load():
            if post.id == post_id:
                return post
        return None

    def get_by_slug(self, slug: str) -> ContentDocument | None:
        for post in self._load():
            if post.slug == slug:
                return post
        return None

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        """Check whether another post already uses *slug*."""
        return any(p.slug == slug and p.id != exclude_id for p in self._load())

    def list(self, status: ContentStatus | None = None) -> _list[ContentDocument]:
        """Return posts newest-first, optionally filtered by status."""
        posts = self._load()
        if status is not None:
            posts = [p for p in posts if p.status == status]
        return posts
