"""Profile persistence under ``local_profile``.

Stored fields are merged over the defaults, so a partial record still
yields a complete profile.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from folio.profile.models import DEFAULT_PROFILE, Profile
from folio.security.audit import AuditLogger
from folio.security.sanitizer import sanitize
from folio.shared.store import PROFILE_KEY, KeyValueStore

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("name", "headline", "bio")
_LINK_FIELDS = ("email", "phone", "portfolio", "website", "github", "twitter", "linkedin")


class ProfileStore:
    def __init__(
        self,
        store: KeyValueStore,
        audit: AuditLogger | None = None,
        key: str = PROFILE_KEY,
    ) -> None:
        self._store = store
        self._audit = audit
        self._key = key

    def load(self) -> Profile:
        raw = self._store.get(self._key)
        if raw is None:
            return DEFAULT_PROFILE.model_copy()
        try:
            stored = json.loads(raw)
            if not isinstance(stored, dict):
                raise ValueError("profile record is not an object")
            merged = DEFAULT_PROFILE.model_dump() | {
                k: v for k, v in stored.items() if v is not None
            }
            return Profile.model_validate(merged)
        except (ValueError, ValidationError):
            logger.warning("Corrupt profile record, using defaults")
            return DEFAULT_PROFILE.model_copy()

    def save(self, profile: Profile) -> Profile:
        """Sanitise and persist *profile*; returns what was stored."""
        data = profile.model_dump()
        for field in _TEXT_FIELDS:
            data[field] = sanitize(data[field])
        for field in _LINK_FIELDS:
            data[field] = sanitize(data[field]) or None
        clean = Profile.model_validate(data)
        self._store.set(self._key, clean.model_dump_json(exclude_none=True))
        if self._audit is not None:
            self._audit.log("profile_updated", {"name": clean.name})
        return clean
