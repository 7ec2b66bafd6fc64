"""Export posts to static files.

Two formats: markdown with YAML frontmatter (for a repository or a
static-site generator) and HTML fragments rendered the same way the site
renders them.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from folio.content.models import ContentDocument, ContentStatus
from folio.markdown.renderer import MarkdownRenderer
from folio.markdown.text import make_excerpt, reading_time

logger = logging.getLogger(__name__)


class PostExporter(ABC):
    """Base class for static export formats."""

    @abstractmethod
    def format_post(self, post: ContentDocument) -> str:
        """Render one post in this format."""

    @abstractmethod
    def post_path(self, output_dir: Path, post: ContentDocument) -> Path:
        """Compute the output file path for a post."""

    @abstractmethod
    def format_index(self, posts: list[ContentDocument]) -> str:
        """Generate an index page listing the exported posts."""

    @abstractmethod
    def index_path(self, output_dir: Path) -> Path:
        """Compute the output file path for the index."""

    def export(self, posts: Iterable[ContentDocument], output_dir: Path) -> list[Path]:
        """Write every post plus the index.  Returns the written paths."""
        posts = list(posts)
        written: list[Path] = []
        for post in posts:
            path = self.post_path(output_dir, post)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.format_post(post), encoding="utf-8")
            written.append(path)

        index = self.index_path(output_dir)
        index.parent.mkdir(parents=True, exist_ok=True)
        index.write_text(self.format_index(posts), encoding="utf-8")
        written.append(index)
        logger.info("Exported %d posts to %s", len(posts), output_dir)
        return written


class MarkdownExporter(PostExporter):
    """Plain markdown with minimal frontmatter."""

    def format_post(self, post: ContentDocument) -> str:
        return self._frontmatter(post) + f"# {post.title}\n\n{post.body}\n"

    def post_path(self, output_dir: Path, post: ContentDocument) -> Path:
        return output_dir / "posts" / f"{post.slug}.md"

    def format_index(self, posts: list[ContentDocument]) -> str:
        lines: list[str] = ["# Blog", ""]

        published = [p for p in posts if p.status == ContentStatus.PUBLISHED]
        if published:
            lines.append("## Published")
            lines.append("")
            for post in published:
                date_str = post.published_at.strftime("%Y-%m-%d") if post.published_at else ""
                lines.append(f"- [{post.title}](posts/{post.slug}.md) ({date_str})")
            lines.append("")

        drafts = [p for p in posts if p.status == ContentStatus.DRAFT]
        if drafts:
            lines.append("## Drafts")
            lines.append("")
            for post in drafts:
                lines.append(f"- [{post.title}](posts/{post.slug}.md)")
            lines.append("")

        return "\n".join(lines)

    def index_path(self, output_dir: Path) -> Path:
        return output_dir / "README.md"

    def _frontmatter(self, post: ContentDocument) -> str:
        # json.dumps gives a double-quoted scalar that YAML reads back verbatim.
        lines: list[str] = ["---"]
        lines.append(f"title: {json.dumps(post.title)}")
        lines.append(f"slug: {post.slug}")
        lines.append(f"status: {post.status}")
        lines.append(f"created: {post.created_at.isoformat()}")
        lines.append(f"updated: {post.updated_at.isoformat()}")
        if post.published_at:
            lines.append(f"published: {post.published_at.isoformat()}")
        if post.tags:
            lines.append("tags:")
            for tag in post.tags:
                lines.append(f"  - {json.dumps(tag)}")
        excerpt = post.excerpt or make_excerpt(post.body)
        if excerpt:
            lines.append(f"excerpt: {json.dumps(excerpt)}")
        lines.append(f"reading_time: {reading_time(post.body)}")
        lines.append("---")
        lines.append("")
        return "\n".join(lines)


class HtmlExporter(PostExporter):
    """HTML fragments, rendered as the site displays them."""

    def __init__(self, renderer: MarkdownRenderer | None = None) -> None:
        self._renderer = renderer or MarkdownRenderer()

    def format_post(self, post: ContentDocument) -> str:
        return (
            f'<article data-slug="{post.slug}">\n'
            f"<h1>{post.title}</h1>\n"
            f"{self._renderer.render(post.body)}\n"
            "</article>\n"
        )

    def post_path(self, output_dir: Path, post: ContentDocument) -> Path:
        return output_dir / "posts" / f"{post.slug}.html"

    def format_index(self, posts: list[ContentDocument]) -> str:
        items = "\n".join(
            f'<li><a href="posts/{p.slug}.html">{p.title}</a></li>'
            for p in posts
            if p.status == ContentStatus.PUBLISHED
        )
        return f"<ul>\n{items}\n</ul>\n"

    def index_path(self, output_dir: Path) -> Path:
        return output_dir / "index.html"
