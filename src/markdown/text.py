"""Plain-text views of markdown: excerpts and reading time."""

from __future__ import annotations

import math
import re

_FENCED = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE = re.compile(r"`[^`]+`")
_HEADING_MARK = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_ITALIC = re.compile(r"\*(.*?)\*")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_NEWLINES = re.compile(r"\n+")

DEFAULT_WORDS_PER_MINUTE = 200


def extract_plain_text(markdown: str | None) -> str:
    """Strip markdown constructs, leaving a single line of prose.

    Removes fenced and inline code entirely, drops heading markers and
    emphasis markers, and keeps only the text of links.
    """
    if not markdown:
        return ""

    text = _FENCED.sub("", markdown)
    text = _INLINE_CODE.sub("", text)
    text = _HEADING_MARK.sub("", text)
    text = _BOLD.sub(r"\1", text)
    text = _ITALIC.sub(r"\1", text)
    text = _LINK.sub(r"\1", text)
    return _NEWLINES.sub(" ", text).strip()


def make_excerpt(markdown: str | None, length: int = 160) -> str:
    """Plain-text excerpt of at most *length* characters, cut on a word boundary."""
    text = extract_plain_text(markdown)
    if len(text) <= length:
        return text
    cut = text[:length].rsplit(" ", 1)[0].rstrip(" ,.;:")
    return f"{cut}..."


def reading_time(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Estimated minutes to read *text*, rounded up, never less than one."""
    word_count = len(text.split())
    return max(1, math.ceil(word_count / words_per_minute))
