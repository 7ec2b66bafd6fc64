"""Site owner profile shown on the home page."""

from folio.profile.models import DEFAULT_PROFILE, Profile
from folio.profile.store import ProfileStore

__all__ = ["DEFAULT_PROFILE", "Profile", "ProfileStore"]
