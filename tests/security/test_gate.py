"""Tests for the admin login gate."""

from folio.security.audit import AuditLogger
from folio.security.gate import AdminGate, LoginOutcome
from folio.security.rate_limit import RateLimiter
from folio.security.session import SessionManager
from folio.shared.store import MemoryStore


class FakeClock:
    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now


class Verifier:
    """Counts calls and returns a fixed answer."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.calls = 0

    def __call__(self) -> bool:
        self.calls += 1
        return self.answer


def _gate(max_attempts: int = 3) -> tuple[AdminGate, SessionManager, AuditLogger, RateLimiter]:
    store = MemoryStore()
    clock = FakeClock()
    limiter = RateLimiter(store, clock=clock)
    sessions = SessionManager(store, ttl_ms=60_000, clock=clock)
    audit = AuditLogger(store, clock=clock)
    gate = AdminGate(limiter, sessions, audit, max_attempts=max_attempts, window_ms=60_000)
    return gate, sessions, audit, limiter


class TestLogin:
    def test_success_creates_session(self) -> None:
        gate, sessions, audit, _ = _gate()
        outcome = gate.login("admin", Verifier(True), {"id": "local-admin"})
        assert outcome == LoginOutcome.SUCCESS
        assert sessions.get_session() == {"id": "local-admin"}
        assert gate.require_session() == {"id": "local-admin"}
        assert [e.action for e in audit.get_logs()] == ["login_success", "login_attempt"]

    def test_failure_creates_no_session(self) -> None:
        gate, sessions, audit, _ = _gate()
        assert gate.login("admin", Verifier(False), "s") == LoginOutcome.FAILED
        assert sessions.get_session() is None
        assert audit.get_logs()[0].action == "login_failed"

    def test_blocked_after_max_attempts(self) -> None:
        gate, _, audit, _ = _gate(max_attempts=3)
        verify = Verifier(False)
        outcomes = [gate.login("admin", verify, "s") for _ in range(4)]
        assert outcomes == [
            LoginOutcome.FAILED,
            LoginOutcome.FAILED,
            LoginOutcome.FAILED,
            LoginOutcome.BLOCKED,
        ]
        assert verify.calls == 3
        assert audit.get_logs()[0].action == "login_blocked"

    def test_success_resets_attempt_window(self) -> None:
        gate, _, _, limiter = _gate(max_attempts=3)
        gate.login("admin", Verifier(False), "s")
        gate.login("admin", Verifier(False), "s")
        gate.login("admin", Verifier(True), "s")
        assert limiter.remaining("login_admin", 3, 60_000) == 3

    def test_attempts_are_per_actor(self) -> None:
        gate, _, _, _ = _gate(max_attempts=1)
        gate.login("alice", Verifier(False), "s")
        assert gate.login("alice", Verifier(True), "s") == LoginOutcome.BLOCKED
        assert gate.login("bob", Verifier(True), "s") == LoginOutcome.SUCCESS


class TestLogout:
    def test_logout_clears_session_and_audits(self) -> None:
        gate, sessions, audit, _ = _gate()
        gate.login("admin", Verifier(True), "admin-subject")
        gate.logout()
        assert sessions.get_session() is None
        entry = audit.get_logs()[0]
        assert entry.action == "logout"
        assert entry.detail == {"subject": "admin-subject"}

    def test_logout_without_session_is_quiet(self) -> None:
        gate, _, audit, _ = _gate()
        gate.logout()
        assert audit.get_logs() == []
