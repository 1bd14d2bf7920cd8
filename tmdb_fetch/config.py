"""Central configuration for tmdb_fetch."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"


def _read_float(name: str, default: float) -> float:
    """Parse a float environment variable, falling back to ``default``.

    Example:
        >>> os.environ["TMDB_RETRY_DELAY_S"] = "oops"
        >>> _read_float("TMDB_RETRY_DELAY_S", 1.0)
        1.0
    """
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _read_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Configuration settings for tmdb_fetch.

    All settings are loaded from environment variables with sensible defaults.
    """

    TMDB_API_KEY: str | None
    TMDB_BASE_URL: str
    TMDB_LANGUAGE: str
    TMDB_TIMEOUT_S: float
    TMDB_MAX_RETRIES: int
    TMDB_RETRY_DELAY_S: float
    CACHE_TTL_S: int
    CACHE_MAX_ENTRIES: int
    CACHE_KEY_PREFIX: str
    REDIS_URL: str | None


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Returns:
        Settings object with all configuration values.

    Note:
        Invalid numeric values fall back to the defaults. The attempt ceiling
        is clamped to at least one attempt.
    """
    api_key = os.environ.get("TMDB_API_KEY") or None
    base_url = (os.environ.get("TMDB_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    language = os.environ.get("TMDB_LANGUAGE") or "en-US"

    timeout = _read_float("TMDB_TIMEOUT_S", 10.0)
    if timeout <= 0:
        timeout = 10.0
    max_retries = max(1, _read_int("TMDB_MAX_RETRIES", 3))
    retry_delay = max(0.0, _read_float("TMDB_RETRY_DELAY_S", 1.0))

    # Cache
    ttl = _read_int("CACHE_TTL_S", 3600)
    if ttl <= 0:
        ttl = 3600
    max_entries = max(1, _read_int("CACHE_MAX_ENTRIES", 1000))
    key_prefix = os.environ.get("CACHE_KEY_PREFIX", "tmdb:")
    redis_url = os.environ.get("REDIS_URL") or None

    return Settings(
        TMDB_API_KEY=api_key,
        TMDB_BASE_URL=base_url,
        TMDB_LANGUAGE=language,
        TMDB_TIMEOUT_S=timeout,
        TMDB_MAX_RETRIES=max_retries,
        TMDB_RETRY_DELAY_S=retry_delay,
        CACHE_TTL_S=ttl,
        CACHE_MAX_ENTRIES=max_entries,
        CACHE_KEY_PREFIX=key_prefix,
        REDIS_URL=redis_url,
    )


settings = _read_settings()


def validate_settings(current: Settings | None = None) -> None:
    """Log warnings for configuration that will make fetches fail.

    Nothing here raises: a missing key is reported again, as a classified
    error, on every fetch.
    """
    current = current or settings
    if current.TMDB_API_KEY is None:
        logger.error("TMDB_API_KEY environment variable is not set")
    if current.REDIS_URL is None:
        logger.info("REDIS_URL is not set; using the in-memory cache")


# Exported constants
TMDB_API_KEY: str | None = settings.TMDB_API_KEY
TMDB_BASE_URL: str = settings.TMDB_BASE_URL
TMDB_LANGUAGE: str = settings.TMDB_LANGUAGE
CACHE_TTL_S: int = settings.CACHE_TTL_S
