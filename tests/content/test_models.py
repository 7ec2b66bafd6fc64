"""Tests for content models and slug generation."""

import uuid
from datetime import UTC, datetime

import pytest

from folio.content.models import (
    BlogStats,
    ContentDocument,
    ContentStatus,
    PostResult,
    PostUpdate,
    generate_slug,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _doc(**kwargs) -> ContentDocument:
    defaults = dict(title="Hello", slug="hello", body="Body", created_at=NOW, updated_at=NOW)
    defaults.update(kwargs)
    return ContentDocument(**defaults)


class TestGenerateSlug:
    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Hello, World!  Foo", "hello-world-foo"),
            ("  Leading and trailing  ", "leading-and-trailing"),
            ("Hello---World", "hello-world"),
            ("C++ & Rust", "c-rust"),
            ("Version 2 Released", "version-2-released"),
            ("Ünïcödé", "ncd"),
            ("!!!", ""),
        ],
    )
    def test_examples(self, title: str, expected: str) -> None:
        assert generate_slug(title) == expected

    def test_truncates_to_max_length(self) -> None:
        assert generate_slug("a" * 150) == "a" * 100

    def test_truncation_does_not_leave_trailing_hyphen(self) -> None:
        assert generate_slug("a" * 99 + " b") == "a" * 99

    def test_custom_max_length(self) -> None:
        assert generate_slug("one two three", max_length=7) == "one-two"

    def test_idempotent(self) -> None:
        slug = generate_slug("Some Post: Part 2")
        assert generate_slug(slug) == slug


class TestContentStatus:
    def test_values(self) -> None:
        assert [s.value for s in ContentStatus] == ["draft", "published", "archived"]

    def test_str(self) -> None:
        assert str(ContentStatus.PUBLISHED) == "published"


class TestContentDocument:
    def test_defaults(self) -> None:
        doc = _doc()
        uuid.UUID(doc.id)
        assert doc.status == ContentStatus.DRAFT
        assert doc.tags == []
        assert doc.published_at is None
        assert doc.is_published is False

    def test_ids_are_unique(self) -> None:
        assert _doc().id != _doc().id

    def test_is_published(self) -> None:
        assert _doc(status=ContentStatus.PUBLISHED).is_published is True
        assert _doc(status=ContentStatus.ARCHIVED).is_published is False

    def test_json_round_trip(self) -> None:
        doc = _doc(tags=["a", "b"], status=ContentStatus.PUBLISHED, published_at=NOW)
        assert ContentDocument.model_validate_json(doc.model_dump_json()) == doc


class TestPostUpdate:
    def test_only_id_required(self) -> None:
        update = PostUpdate(id="p1")
        assert update.title is None
        assert update.status is None


class TestPostResult:
    def test_success(self) -> None:
        doc = _doc()
        result = PostResult.success(doc)
        assert result.ok is True
        assert result.post == doc
        assert result.error == ""

    def test_rejected(self) -> None:
        result = PostResult.rejected("nope")
        assert result.ok is False
        assert result.post is None
        assert result.error == "nope"


def test_blog_stats_defaults() -> None:
    stats = BlogStats()
    assert stats.total == 0
    assert stats.top_tags == []
