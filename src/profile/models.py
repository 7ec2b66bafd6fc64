"""Profile data model."""

from __future__ import annotations

from pydantic import BaseModel


class Profile(BaseModel):
    """Public profile; optional fields are hidden on the site when unset."""

    name: str
    headline: str
    bio: str
    email: str | None = None
    phone: str | None = None
    portfolio: str | None = None
    website: str | None = None
    github: str | None = None
    twitter: str | None = None
    linkedin: str | None = None


DEFAULT_PROFILE = Profile(
    name="Your Name",
    headline="Developer | Writer",
    bio="A short introduction goes here. Edit it from the admin profile page.",
)
