"""Admin-surface security: sanitising, rate limiting, sessions and audit."""

from folio.security.audit import ActorContext, AuditEntry, AuditLogger, AuditSummary
from folio.security.csrf import CsrfProtection
from folio.security.gate import AdminGate, LoginOutcome
from folio.security.passwords import PasswordStrength, check_password_strength
from folio.security.rate_limit import RateLimiter, rate_key
from folio.security.sanitizer import sanitize, sanitize_tags, validate_image_url
from folio.security.session import SessionManager, SessionRecord

__all__ = [
    "ActorContext",
    "AdminGate",
    "AuditEntry",
    "AuditLogger",
    "AuditSummary",
    "CsrfProtection",
    "LoginOutcome",
    "PasswordStrength",
    "RateLimiter",
    "SessionManager",
    "SessionRecord",
    "check_password_strength",
    "rate_key",
    "sanitize",
    "sanitize_tags",
    "validate_image_url",
]
