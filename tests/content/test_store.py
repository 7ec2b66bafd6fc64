"""Tests for ContentStore."""

import json
import logging
from datetime import UTC, datetime, timedelta

import pytest

from folio.content.models import ContentDocument, ContentStatus
from folio.content.store import ContentStore
from folio.shared.store import POSTS_KEY, JsonFileStore, MemoryStore

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _doc(slug: str, status: ContentStatus = ContentStatus.DRAFT, **kwargs) -> ContentDocument:
    return ContentDocument(
        title=slug.title(),
        slug=slug,
        body=f"Body of {slug}",
        status=status,
        created_at=kwargs.pop("created_at", NOW),
        updated_at=NOW,
        **kwargs,
    )


@pytest.fixture
def store() -> ContentStore:
    return ContentStore(MemoryStore())


class TestWrites:
    def test_insert_prepends(self, store: ContentStore) -> None:
        store.insert(_doc("first"))
        store.insert(_doc("second"))
        assert [p.slug for p in store.list()] == ["second", "first"]

    def test_get(self, store: ContentStore) -> None:
        doc = _doc("a")
        store.insert(doc)
        assert store.get(doc.id) == doc
        assert store.get("missing") is None

    def test_replace(self, store: ContentStore) -> None:
        doc = _doc("a")
        store.insert(doc)
        store.replace(doc.model_copy(update={"title": "Changed"}))
        stored = store.get(doc.id)
        assert stored is not None
        assert stored.title == "Changed"

    def test_replace_keeps_position(self, store: ContentStore) -> None:
        a, b = _doc("a"), _doc("b")
        store.insert(a)
        store.insert(b)
        store.replace(a.model_copy(update={"title": "A2"}))
        assert [p.slug for p in store.list()] == ["b", "a"]

    def test_replace_missing_raises(self, store: ContentStore) -> None:
        with pytest.raises(KeyError):
            store.replace(_doc("ghost"))

    def test_delete(self, store: ContentStore) -> None:
        doc = _doc("a")
        store.insert(doc)
        assert store.delete(doc.id) is True
        assert store.delete(doc.id) is False
        assert store.list() == []


class TestReads:
    def test_get_by_slug(self, store: ContentStore) -> None:
        doc = _doc("my-post")
        store.insert(doc)
        assert store.get_by_slug("my-post") == doc
        assert store.get_by_slug("other") is None

    def test_slug_taken(self, store: ContentStore) -> None:
        doc = _doc("taken")
        store.insert(doc)
        assert store.slug_taken("taken") is True
        assert store.slug_taken("taken", exclude_id=doc.id) is False
        assert store.slug_taken("free") is False

    def test_list_filters_by_status(self, store: ContentStore) -> None:
        store.insert(_doc("d"))
        store.insert(_doc("p", ContentStatus.PUBLISHED, published_at=NOW))
        store.insert(_doc("x", ContentStatus.ARCHIVED))
        assert [p.slug for p in store.list(ContentStatus.PUBLISHED)] == ["p"]
        assert [p.slug for p in store.list(ContentStatus.DRAFT)] == ["d"]
        assert len(store.list()) == 3


class TestPersistence:
    def test_stored_as_json_array(self) -> None:
        backing = MemoryStore()
        ContentStore(backing).insert(_doc("a"))
        data = json.loads(backing.get(POSTS_KEY) or "")
        assert isinstance(data, list)
        assert data[0]["slug"] == "a"
        assert data[0]["status"] == "draft"

    def test_survives_reopen_on_disk(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        doc = _doc("a", created_at=NOW - timedelta(days=1))
        ContentStore(JsonFileStore(path)).insert(doc)
        assert ContentStore(JsonFileStore(path)).get(doc.id) == doc

    def test_corrupt_data_reads_as_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        backing = MemoryStore({POSTS_KEY: "[{\"title\": 1}]"})
        with caplog.at_level(logging.WARNING):
            assert ContentStore(backing).list() == []
        assert "Corrupt post list" in caplog.text
