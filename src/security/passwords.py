"""Password strength scoring for the admin account."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

_SPECIAL = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
_REPEATED = re.compile(r"(.)\1{2,}")
_COMMON = re.compile(r"123|abc|qwe|password|admin", re.IGNORECASE)


class PasswordStrength(BaseModel):
    is_valid: bool
    score: int
    feedback: list[str] = Field(default_factory=list)


def check_password_strength(password: str) -> PasswordStrength:
    """Score *password* from 0 to 5; four or more points is acceptable."""
    feedback: list[str] = []
    score = 0

    checks = [
        (len(password) >= 8, "At least 8 characters"),
        (re.search(r"[a-z]", password) is not None, "Include lowercase letters"),
        (re.search(r"[A-Z]", password) is not None, "Include uppercase letters"),
        (re.search(r"\d", password) is not None, "Include numbers"),
        (_SPECIAL.search(password) is not None, "Include special characters"),
    ]
    for passed, message in checks:
        if passed:
            score += 1
        else:
            feedback.append(message)

    if _REPEATED.search(password):
        score -= 1
        feedback.append("Avoid repeated characters")

    if _COMMON.search(password):
        score -= 1
        feedback.append("Avoid common patterns")

    return PasswordStrength(is_valid=score >= 4, score=max(0, score), feedback=feedback)
