"""Command-line entrypoint: fetch one TMDB resource through the cache.

Usage::

    python -m tmdb_fetch.main /trending/movie/day
    python -m tmdb_fetch.main "https://api.themoviedb.org/3/movie/550?language=en-US"
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from . import config
from .errors import ClassifiedError
from .fetcher import TmdbFetcher
from .logger import setup_logging

logger = logging.getLogger(__name__)


def resolve_url(target: str) -> str:
    """Accept a full URL or a path relative to ``TMDB_BASE_URL``."""
    if target.startswith(("http://", "https://")):
        return target
    return f"{config.TMDB_BASE_URL}/{target.lstrip('/')}"


async def fetch_once(target: str, fetcher: TmdbFetcher | None = None) -> tuple[int, dict]:
    """Return ``(exit_code, body)`` for one fetch."""
    url = resolve_url(target)
    owned = fetcher is None
    fetcher = fetcher or TmdbFetcher.from_settings()
    try:
        return 0, await fetcher.fetch(url)
    except ClassifiedError as err:
        return 1, err.to_envelope()
    finally:
        if owned:
            await fetcher.aclose()


def run(argv: list[str] | None = None) -> int:
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("usage: python -m tmdb_fetch.main <url-or-path>", file=sys.stderr)
        return 2
    config.validate_settings()
    code, body = asyncio.run(fetch_once(args[0]))
    print(json.dumps(body, indent=2))
    return code


if __name__ == "__main__":
    sys.exit(run())
