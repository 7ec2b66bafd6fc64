"""Content domain: blog post models, store, lifecycle rules and export."""

from folio.content.models import (
    BlogStats,
    ContentDocument,
    ContentStatus,
    PostDraft,
    PostResult,
    PostUpdate,
    generate_slug,
)
from folio.content.publisher import HtmlExporter, MarkdownExporter
from folio.content.service import PostPolicy, PostService
from folio.content.store import ContentStore

__all__ = [
    "BlogStats",
    "ContentDocument",
    "ContentStatus",
    "ContentStore",
    "HtmlExporter",
    "MarkdownExporter",
    "PostDraft",
    "PostPolicy",
    "PostResult",
    "PostService",
    "PostUpdate",
    "generate_slug",
]
