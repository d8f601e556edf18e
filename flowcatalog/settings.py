"""Catalog configuration loaded from FLOWCAT_* environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogSettings(BaseSettings):
    """Flow catalog settings.

    All fields are read from environment variables with the ``FLOWCAT_`` prefix.
    For example, ``FLOWCAT_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWCAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Query cache -----------------------------------------------------------
    query_stale_seconds: float | None = None
    """Age after which a successful entry is refetched on read.  ``None`` keeps
    entries fresh until explicitly invalidated."""

    count_stale_seconds: float | None = 300.0
    """Freshness window for per-workspace executable counts."""

    # -- Catalog ---------------------------------------------------------------
    search_debounce_seconds: float = Field(default=0.3, ge=0)
    """Quiet period before a search keystroke is applied to the result list."""

    description_preview_chars: int = Field(default=140, gt=0)

    # -- Snapshot backend ------------------------------------------------------
    snapshot_path: str | None = None
    """JSON snapshot used by the CLI when ``--snapshot`` is not given."""


@lru_cache(maxsize=1)
def get_settings() -> CatalogSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return CatalogSettings()
