"""Unified configuration loaded from .folio.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from folio.content.service import PostPolicy
from folio.security.sanitizer import DEFAULT_IMAGE_DOMAINS
from folio.shared.store import STORE_FILENAME

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".folio.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]


class StorageConfig(BaseModel):
    """[storage] section."""

    path: str = f"./{STORE_FILENAME}"


class SessionConfig(BaseModel):
    """[session] section."""

    ttl_minutes: int = 30

    @property
    def ttl_ms(self) -> int:
        return self.ttl_minutes * 60 * 1000


class AuditConfig(BaseModel):
    """[audit] section."""

    max_logs: int = 100
    user_agent: str = "folio-cli"


class RateLimitConfig(BaseModel):
    """[rate_limits] section."""

    create_post_max: int = 5
    create_post_window_ms: int = 300_000
    login_max: int = 5
    login_window_ms: int = 900_000


class ContentConfig(BaseModel):
    """[content] section."""

    max_body_length: int = 50_000
    slug_max_length: int = 100
    words_per_minute: int = 200
    excerpt_length: int = 160


class ImagesConfig(BaseModel):
    """[images] section."""

    allowed_domains: list[str] = Field(default_factory=lambda: list(DEFAULT_IMAGE_DOMAINS))


class AdminConfig(BaseModel):
    """[admin] section: local credentials for the CLI login."""

    username: str = "admin"
    password: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)


class FolioConfig(BaseModel):
    """Top-level configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    rate_limits: RateLimitConfig = Field(default_factory=RateLimitConfig)
    content: ContentConfig = Field(default_factory=ContentConfig)
    images: ImagesConfig = Field(default_factory=ImagesConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)

    def to_post_policy(self) -> PostPolicy:
        """Convert to the PostPolicy used by PostService."""
        return PostPolicy(
            max_body_length=self.content.max_body_length,
            slug_max_length=self.content.slug_max_length,
            create_max_requests=self.rate_limits.create_post_max,
            create_window_ms=self.rate_limits.create_post_window_ms,
            allowed_image_domains=list(self.images.allowed_domains),
        )


# (section, field) each override lands in.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "FOLIO_STORE_PATH": ("storage", "path"),
    "FOLIO_SESSION_TTL_MINUTES": ("session", "ttl_minutes"),
    "FOLIO_AUDIT_MAX_LOGS": ("audit", "max_logs"),
    "FOLIO_ADMIN_USERNAME": ("admin", "username"),
    "FOLIO_ADMIN_PASSWORD": ("admin", "password"),
}
CLI_OVERRIDES: dict[str, tuple[str, str]] = {
    "store_path": ("storage", "path"),
    "session_ttl": ("session", "ttl_minutes"),
    "max_logs": ("audit", "max_logs"),
    "admin_username": ("admin", "username"),
}


def load_config(path: str | Path | None = None) -> FolioConfig:
    """Build the config from *path* (or the first file found), then env vars.

    Without *path*, ``.folio.toml`` in the working directory wins over
    ``~/.config/folio/config.toml``.  A missing or unreadable file leaves
    the defaults in place.
    """
    if path is not None:
        source: Path | None = Path(path)
        if not source.exists():
            logger.warning("Config file not found: %s", source)
            source = None
    else:
        source = _find_config_file()

    data = _load_toml(source) if source is not None else {}
    config = FolioConfig.model_validate(data)

    env = {
        target: os.environ[name] for name, target in ENV_OVERRIDES.items() if name in os.environ
    }
    return _with_values(config, env)


def merge_cli_overrides(config: FolioConfig, **cli_kwargs: object) -> FolioConfig:
    """Apply CLI flags that were actually given; ``None`` means "not set"."""
    values = {
        CLI_OVERRIDES[name]: value
        for name, value in cli_kwargs.items()
        if value is not None and name in CLI_OVERRIDES
    }
    return _with_values(config, values)


# ── Private helpers ──────────────────────────────────────────────


def _find_config_file() -> Path | None:
    candidates = [search_dir / CONFIG_FILENAME for search_dir in CONFIG_SEARCH_PATHS]
    candidates.append(Path.home() / ".config" / "folio" / "config.toml")
    for candidate in candidates:
        if candidate.exists():
            logger.info("Using config file %s", candidate)
            return candidate
    return None


def _load_toml(path: Path) -> dict[str, object]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _with_values(config: FolioConfig, values: dict[tuple[str, str], object]) -> FolioConfig:
    """Copy *config* with each (section, field) set, re-validating the result."""
    if not values:
        return config
    data = config.model_dump()
    for (section, field), value in values.items():
        data[section][field] = value
    return FolioConfig.model_validate(data)
