"""Dashboard statistics over a set of posts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta

from folio.content.models import BlogStats, ContentDocument, ContentStatus

RECENT_DAYS = 7
TOP_TAG_COUNT = 5


def compute_stats(posts: Iterable[ContentDocument], now: datetime) -> BlogStats:
    """Count posts by status, recent publications and the most used tags."""
    posts = list(posts)
    cutoff = now - timedelta(days=RECENT_DAYS)
    by_status = Counter(p.status for p in posts)
    tag_counts = Counter(tag for p in posts for tag in p.tags)

    return BlogStats(
        total=len(posts),
        published=by_status[ContentStatus.PUBLISHED],
        drafts=by_status[ContentStatus.DRAFT],
        archived=by_status[ContentStatus.ARCHIVED],
        recent=sum(
            1
            for p in posts
            if p.is_published and p.published_at is not None and p.published_at > cutoff
        ),
        top_tags=tag_counts.most_common(TOP_TAG_COUNT),
    )
