"""Tests for the admin session manager."""

import json

from folio.security.session import SessionManager
from folio.shared.store import SESSION_KEY, MemoryStore


class FakeClock:
    def __init__(self, start: int = 0) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def _manager(ttl_ms: int = 1000) -> tuple[SessionManager, MemoryStore, FakeClock]:
    store = MemoryStore()
    clock = FakeClock()
    return SessionManager(store, ttl_ms=ttl_ms, clock=clock), store, clock


class TestCreateAndGet:
    def test_round_trip(self) -> None:
        sessions, store, _ = _manager()
        record = sessions.create_session({"id": "u1"})
        assert record.issued_at == 0
        assert record.expires_at == 1000
        assert sessions.get_session() == {"id": "u1"}
        assert json.loads(store.get(SESSION_KEY) or "")["subject"] == {"id": "u1"}

    def test_no_session(self) -> None:
        sessions, _, _ = _manager()
        assert sessions.get_session() is None
        assert sessions.is_session_valid() is False

    def test_create_replaces_existing(self) -> None:
        sessions, _, _ = _manager()
        sessions.create_session("first")
        sessions.create_session("second")
        assert sessions.get_session() == "second"


class TestExpiry:
    def test_expired_session_is_deleted(self) -> None:
        sessions, store, clock = _manager()
        sessions.create_session("u1")
        clock.advance(1001)
        assert sessions.get_session() is None
        assert store.get(SESSION_KEY) is None

    def test_exact_expiry_time_is_still_valid(self) -> None:
        sessions, _, clock = _manager()
        sessions.create_session("u1")
        clock.advance(1000)
        assert sessions.get_session() == "u1"


class TestRenewal:
    def test_no_renewal_while_more_than_half_remains(self) -> None:
        sessions, _, clock = _manager()
        sessions.create_session("u1")
        clock.advance(400)
        sessions.get_session()
        record = sessions.read_record()
        assert record is not None
        assert record.expires_at == 1000

    def test_renews_when_less_than_half_remains(self) -> None:
        sessions, _, clock = _manager()
        sessions.create_session("u1")
        clock.advance(600)
        sessions.get_session()
        record = sessions.read_record()
        assert record is not None
        assert record.expires_at == 1600
        assert record.issued_at == 0

    def test_regular_reads_keep_session_alive(self) -> None:
        sessions, _, clock = _manager()
        sessions.create_session("u1")
        for _ in range(5):
            clock.advance(900)
            assert sessions.get_session() == "u1"


class TestCorruptRecords:
    def test_unparseable_record_is_cleared(self) -> None:
        sessions, store, _ = _manager()
        store.set(SESSION_KEY, "{broken")
        assert sessions.get_session() is None
        assert store.get(SESSION_KEY) is None

    def test_wrong_shape_is_cleared(self) -> None:
        sessions, store, _ = _manager()
        store.set(SESSION_KEY, json.dumps({"foo": 1}))
        assert sessions.get_session() is None
        assert store.get(SESSION_KEY) is None


def test_clear_session() -> None:
    sessions, store, _ = _manager()
    sessions.create_session("u1")
    sessions.clear_session()
    assert store.get(SESSION_KEY) is None
    assert sessions.is_session_valid() is False
