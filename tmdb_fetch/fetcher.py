"""Cached, retrying fetch of TMDB JSON resources.

Flow for one ``fetch(url)``: check the credential, look the URL up in the
cache store, on a miss call TMDB under the retry policy, cache a successful
body for the configured TTL and return it. Failures surface as
:class:`~tmdb_fetch.errors.ClassifiedError`.

Concurrent calls for the same URL during a miss each hit TMDB; there is no
request coalescing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from . import classifier
from . import config as config_mod
from .cache_store import CacheStore, build_cache_store
from .errors import ClassifiedError
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

__all__ = ["TmdbFetcher", "get_fetcher", "set_fetcher", "fetch_from_tmdb"]


class TmdbFetcher:
    def __init__(
        self,
        api_key: str | None,
        cache: CacheStore,
        client: httpx.AsyncClient | None = None,
        policy: RetryPolicy | None = None,
        ttl_s: int = 3600,
        timeout_s: float = 10.0,
        owns_cache: bool = False,
    ) -> None:
        self.api_key = api_key
        self.cache = cache
        self.policy = policy or RetryPolicy()
        self.ttl_s = ttl_s
        self.timeout_s = timeout_s
        self._owns_client = client is None
        self._owns_cache = owns_cache
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    @classmethod
    def from_settings(
        cls, settings: config_mod.Settings | None = None
    ) -> "TmdbFetcher":
        settings = settings or config_mod.settings
        return cls(
            api_key=settings.TMDB_API_KEY,
            cache=build_cache_store(settings),
            policy=RetryPolicy(
                max_attempts=settings.TMDB_MAX_RETRIES,
                delay_s=settings.TMDB_RETRY_DELAY_S,
            ),
            ttl_s=settings.CACHE_TTL_S,
            timeout_s=settings.TMDB_TIMEOUT_S,
            owns_cache=True,
        )

    async def __aenter__(self) -> "TmdbFetcher":
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
        if self._owns_cache and hasattr(self.cache, "aclose"):
            await self.cache.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def _get_json(self, url: str) -> Any:
        resp = await self._client.get(
            url, headers=self._headers(), timeout=self.timeout_s
        )
        if not resp.is_success:
            raise classifier.from_response(resp)
        return resp.json()

    async def _attempt(self, url: str) -> Any:
        """One upstream GET; every failure leaves here classified.

        httpx applies ``timeout`` per phase (connect, read, ...), so a slow
        trickling body never trips it. ``wait_for`` bounds the whole attempt.
        """
        try:
            return await asyncio.wait_for(self._get_json(url), self.timeout_s)
        except (
            httpx.HTTPError,
            httpx.InvalidURL,
            asyncio.TimeoutError,
            ValueError,
        ) as exc:
            raise classifier.from_exception(exc) from exc

    async def fetch(self, url: str) -> Any:
        """Return the parsed JSON body for ``url``.

        Raises:
            ClassifiedError: configuration problems immediately, client errors
                after one attempt, anything retryable once the attempt ceiling
                is reached.
        """
        if not self.api_key:
            err = classifier.missing_credentials()
            logger.error("TMDB_API_KEY is not set; refusing to fetch %s", url)
            raise err

        cached = await self.cache.get(url)
        if cached is not None:
            return cached

        logger.info("Cache miss for %s", url, extra={"url": url})
        try:
            data = await self.policy.run(lambda: self._attempt(url), label=url)
        except ClassifiedError as err:
            logger.error(
                "Error fetching from TMDB url=%s attempts=%d status=%d error=%s",
                url,
                err.attempts,
                err.http_status,
                err.message,
                extra={
                    "url": url,
                    "attempts": err.attempts,
                    "status": err.http_status,
                    "error": err.message,
                },
            )
            raise

        await self.cache.set(url, data, self.ttl_s)
        return data


_default_fetcher: TmdbFetcher | None = None


def get_fetcher() -> TmdbFetcher:
    """Return the process-wide fetcher, building it from settings on first use."""
    global _default_fetcher
    if _default_fetcher is None:
        _default_fetcher = TmdbFetcher.from_settings()
    return _default_fetcher


def set_fetcher(fetcher: TmdbFetcher | None) -> None:
    global _default_fetcher
    _default_fetcher = fetcher


async def fetch_from_tmdb(url: str) -> Any:
    return await get_fetcher().fetch(url)
