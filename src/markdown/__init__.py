"""Markdown rendering and plain-text extraction for blog content."""

from folio.markdown.renderer import MarkdownRenderer, escape_html, render
from folio.markdown.text import extract_plain_text, make_excerpt, reading_time

__all__ = [
    "MarkdownRenderer",
    "escape_html",
    "extract_plain_text",
    "make_excerpt",
    "reading_time",
    "render",
]
