"""TMDB content helpers.

Each helper builds the canonical URL for one content endpoint and serves it
through the shared fetcher, so repeated calls within the TTL hit the cache.
"""

from __future__ import annotations

import random
from typing import Any
from urllib.parse import quote

from . import config
from .fetcher import TmdbFetcher, get_fetcher

SEARCH_KINDS = {"person", "movie", "tv"}


def _url(path: str, *params: str) -> str:
    query = "&".join([f"language={config.TMDB_LANGUAGE}", *params])
    return f"{config.TMDB_BASE_URL}{path}?{query}"


async def _fetch(url: str, fetcher: TmdbFetcher | None) -> dict[str, Any]:
    return await (fetcher or get_fetcher()).fetch(url)


def _results(data: dict[str, Any]) -> list[dict[str, Any]]:
    results = data.get("results") if isinstance(data, dict) else None
    return results if isinstance(results, list) else []


async def trending(
    media_type: str, fetcher: TmdbFetcher | None = None
) -> dict[str, Any] | None:
    """Return one random title from today's trending list, or None if empty."""
    data = await _fetch(_url(f"/trending/{media_type}/day"), fetcher)
    results = _results(data)
    if not results:
        return None
    return random.choice(results)


async def trailers(
    media_type: str, item_id: int | str, fetcher: TmdbFetcher | None = None
) -> list[dict[str, Any]]:
    data = await _fetch(_url(f"/{media_type}/{item_id}/videos"), fetcher)
    return _results(data)


async def details(
    media_type: str, item_id: int | str, fetcher: TmdbFetcher | None = None
) -> dict[str, Any]:
    return await _fetch(_url(f"/{media_type}/{item_id}"), fetcher)


async def similar(
    media_type: str, item_id: int | str, fetcher: TmdbFetcher | None = None
) -> list[dict[str, Any]]:
    data = await _fetch(_url(f"/{media_type}/{item_id}/similar", "page=1"), fetcher)
    return _results(data)


async def by_category(
    media_type: str, category: str, fetcher: TmdbFetcher | None = None
) -> list[dict[str, Any]]:
    """Category lists such as ``popular``, ``top_rated`` or ``now_playing``."""
    data = await _fetch(_url(f"/{media_type}/{category}", "page=1"), fetcher)
    return _results(data)


async def search(
    kind: str, query: str, fetcher: TmdbFetcher | None = None
) -> list[dict[str, Any]]:
    if kind not in SEARCH_KINDS:
        raise ValueError(f"Unsupported search kind: {kind}")
    url = (
        f"{config.TMDB_BASE_URL}/search/{kind}?query={quote(query, safe='')}"
        f"&language={config.TMDB_LANGUAGE}&page=1&include_adult=false"
    )
    return _results(await _fetch(url, fetcher))


async def trending_movie(fetcher: TmdbFetcher | None = None) -> dict[str, Any] | None:
    return await trending("movie", fetcher)


async def trending_tv(fetcher: TmdbFetcher | None = None) -> dict[str, Any] | None:
    return await trending("tv", fetcher)


async def movie_trailers(movie_id: int | str, fetcher: TmdbFetcher | None = None):
    return await trailers("movie", movie_id, fetcher)


async def tv_trailers(tv_id: int | str, fetcher: TmdbFetcher | None = None):
    return await trailers("tv", tv_id, fetcher)


async def movie_details(movie_id: int | str, fetcher: TmdbFetcher | None = None):
    return await details("movie", movie_id, fetcher)


async def tv_details(tv_id: int | str, fetcher: TmdbFetcher | None = None):
    return await details("tv", tv_id, fetcher)


async def similar_movies(movie_id: int | str, fetcher: TmdbFetcher | None = None):
    return await similar("movie", movie_id, fetcher)


async def similar_tv(tv_id: int | str, fetcher: TmdbFetcher | None = None):
    return await similar("tv", tv_id, fetcher)


async def movies_by_category(category: str, fetcher: TmdbFetcher | None = None):
    return await by_category("movie", category, fetcher)


async def tv_by_category(category: str, fetcher: TmdbFetcher | None = None):
    return await by_category("tv", category, fetcher)


async def search_person(query: str, fetcher: TmdbFetcher | None = None):
    return await search("person", query, fetcher)


async def search_movie(query: str, fetcher: TmdbFetcher | None = None):
    return await search("movie", query, fetcher)


async def search_tv(query: str, fetcher: TmdbFetcher | None = None):
    return await search("tv", query, fetcher)

