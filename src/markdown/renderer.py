"""Markdown-to-HTML rendering for blog posts.

This is a sequential regex transform over a small markdown dialect, not
a parser: there is no AST and nested constructs are not balanced.
Fenced code is lifted out first and swapped for placeholder tokens so
nothing inside a code sample is touched by the later passes.

Output classes match the site's stylesheet; the result is meant for a
trusted-render region and assumes the input was sanitised on the way in.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable

PLACEHOLDER_PREFIX = "__CODE_BLOCK_"
PARAGRAPH_OPEN = '<p class="mb-4">'
EMPTY_PARAGRAPH = '<p class="mb-4"></p>'

_FENCE = re.compile(r"```(\w+)?\n(.*?)```", re.DOTALL)
_DANGLING_FENCE = "```"

_H3 = re.compile(r"^### (.*)$", re.MULTILINE)
_H2 = re.compile(r"^## (.*)$", re.MULTILINE)
_H1 = re.compile(r"^# (.*)$", re.MULTILINE)

_BOLD = re.compile(r"\*\*(.*?)\*\*")
_ITALIC = re.compile(r"\*(.*?)\*")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_IMAGE = re.compile(r"!\[(.*?)\]\((.*?)\)(?:\{(.*?)\})?")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

_PARAGRAPH_BREAK = re.compile(r"\r?\n\r?\n+")
_LINE_BREAK = re.compile(r"\r?\n")
_PLACEHOLDER = re.compile(r"__CODE_BLOCK_(\d+)__")


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` for literal display inside HTML."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def _attr(value: str) -> str:
    return value.replace('"', "&quot;")


def _random_code_id() -> str:
    return f"code-block-{uuid.uuid4().hex[:7]}"


def _placeholder(index: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{index}__"


def _resolve_placeholders(text: str, code_blocks: list[str]) -> str:
    """Swap placeholder tokens for stored HTML; unknown indices become empty."""

    def _lookup(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return code_blocks[index] if index < len(code_blocks) else ""

    return _PLACEHOLDER.sub(_lookup, text)


class MarkdownRenderer:
    """Renders the blog's markdown dialect to HTML.

    Args:
        code_id_factory: Produces the element id a code block's copy
            button targets.  Defaults to a short random id.
    """

    def __init__(self, code_id_factory: Callable[[], str] = _random_code_id) -> None:
        self._code_id_factory = code_id_factory

    def render(self, markdown: str | None) -> str:
        if not markdown:
            return ""

        code_blocks: list[str] = []
        text = self._isolate_code(markdown, code_blocks)
        text = self._headings(text)
        text = self._inline(text)
        text = _IMAGE.sub(self._figure, text)
        text = _LINK.sub(
            lambda m: (
                f'<a href="{_attr(m.group(2))}" class="text-primary hover:underline" '
                f'target="_blank" rel="noopener noreferrer">{m.group(1)}</a>'
            ),
            text,
        )
        html = self._paragraphs(text)
        html = _resolve_placeholders(html, code_blocks)
        return html.replace(EMPTY_PARAGRAPH, "")

    # ── Passes ───────────────────────────────────────────────────

    def _isolate_code(self, text: str, code_blocks: list[str]) -> str:
        def _lift(match: re.Match[str]) -> str:
            language = match.group(1) or "text"
            code = escape_html((match.group(2) or "").strip())
            code_blocks.append(self._code_block(language, code))
            return _placeholder(len(code_blocks) - 1)

        text = _FENCE.sub(_lift, text)

        # An unterminated fence: everything from it onward is shown as
        # escaped text, outside any code container.
        start = text.find(_DANGLING_FENCE)
        if start != -1:
            tail = _LINE_BREAK.sub("<br>", escape_html(text[start:].strip()))
            tail = _resolve_placeholders(tail, code_blocks)
            code_blocks.append(tail)
            text = text[:start] + _placeholder(len(code_blocks) - 1)
        return text

    def _code_block(self, language: str, escaped_code: str) -> str:
        code_id = self._code_id_factory()
        return (
            '<div class="relative group code-block-container">'
            '<div class="absolute right-2 top-2 opacity-0 group-hover:opacity-100 transition-opacity">'
            '<button class="bg-primary text-primary-foreground hover:bg-primary/90 px-2 py-1 '
            f'rounded text-xs font-medium copy-code-button" data-code-id="{code_id}" '
            'aria-label="Copy code to clipboard">Copy</button>'
            "</div>"
            '<div class="flex items-center justify-between bg-muted/50 px-4 py-1 text-xs '
            f'font-mono border-b border-border/30 rounded-t-md"><span>{language}</span></div>'
            '<pre class="bg-muted p-4 rounded-b-md my-0 overflow-x-auto">'
            f'<code id="{code_id}" class="font-mono text-sm">{escaped_code}</code></pre>'
            "</div>"
        )

    @staticmethod
    def _headings(text: str) -> str:
        text = _H3.sub(r'<h3 class="text-lg font-semibold mb-2 mt-4">\1</h3>', text)
        text = _H2.sub(r'<h2 class="text-xl font-bold mb-3 mt-6">\1</h2>', text)
        return _H1.sub(r'<h1 class="text-2xl font-bold mb-4 mt-8">\1</h1>', text)

    @staticmethod
    def _inline(text: str) -> str:
        text = _BOLD.sub(r'<strong class="font-semibold">\1</strong>', text)
        text = _ITALIC.sub(r'<em class="italic">\1</em>', text)
        return _INLINE_CODE.sub(
            r'<code class="bg-muted px-1 py-0.5 rounded text-sm font-mono">\1</code>', text
        )

    @staticmethod
    def _figure(match: re.Match[str]) -> str:
        alt = match.group(1) or ""
        src = match.group(2) or ""
        caption = match.group(3)
        figcaption = (
            f'<figcaption class="text-center text-sm text-muted-foreground mt-2">{caption}</figcaption>'
            if caption
            else ""
        )
        return (
            '<figure class="my-6">'
            f'<img src="{_attr(src)}" alt="{_attr(alt)}" '
            'class="rounded-lg shadow-md max-w-full mx-auto" loading="lazy" />'
            f"{figcaption}"
            "</figure>"
        )

    @staticmethod
    def _paragraphs(text: str) -> str:
        parts: list[str] = []
        for part in _PARAGRAPH_BREAK.split(text):
            trimmed = part.strip()
            if not trimmed:
                continue
            if _PLACEHOLDER.fullmatch(trimmed):
                parts.append(trimmed)
                continue
            parts.append(f"{PARAGRAPH_OPEN}{_LINE_BREAK.sub('<br>', trimmed)}</p>")
        return "".join(parts)


_default_renderer = MarkdownRenderer()


def render(markdown: str | None) -> str:
    """Render *markdown* with the default renderer."""
    return _default_renderer.render(markdown)
