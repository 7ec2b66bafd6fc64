"""Input sanitisation for author-supplied text.

Applied to every free-text field (title, body, excerpt, tags, image URL,
profile text) before it is persisted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

_SCRIPT_BLOCK = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
    re.IGNORECASE,
)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)

DEFAULT_IMAGE_DOMAINS: tuple[str, ...] = (
    "images.unsplash.com",
    "cdn.pixabay.com",
    "images.pexels.com",
    "i.imgur.com",
    "github.com",
    "githubusercontent.com",
    "cloudinary.com",
    "amazonaws.com",
)


def _strip_dangerous(text: str) -> str:
    # Repeat until stable: removing one match can splice a new one together.
    while True:
        cleaned = _SCRIPT_BLOCK.sub("", text)
        cleaned = _JS_SCHEME.sub("", cleaned)
        cleaned = _EVENT_HANDLER.sub("", cleaned)
        if cleaned == text:
            return cleaned
        text = cleaned


def sanitize(text: str | None) -> str:
    """Strip scripts, ``javascript:`` and ``on*=`` handlers, then escape tags.

    Remaining ``<`` and ``>`` become ``&lt;`` / ``&gt;``; ``&`` is left
    alone so already-escaped text is not escaped twice.  Idempotent.
    """
    if not text:
        return ""
    cleaned = _strip_dangerous(text.strip())
    cleaned = cleaned.replace("<", "&lt;").replace(">", "&gt;")
    return cleaned.strip()


def sanitize_tags(tags: Iterable[str]) -> list[str]:
    """Sanitise tags, dropping empties and duplicates (first occurrence wins)."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        clean = sanitize(tag)
        if clean and clean not in seen:
            seen.add(clean)
            result.append(clean)
    return result


def validate_image_url(
    url: str | None,
    allowed_domains: Iterable[str] = DEFAULT_IMAGE_DOMAINS,
) -> bool:
    """Return True if *url* is empty or an https URL with a host.

    Hosts outside *allowed_domains* are still accepted but logged.
    """
    if not url:
        return True
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    if parts.scheme != "https" or not parts.hostname:
        return False

    hostname = parts.hostname
    if not any(domain in hostname for domain in allowed_domains):
        logger.warning("Image URL from untrusted domain: %s", hostname)
    return True
