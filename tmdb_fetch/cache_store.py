"""Key-value stores for upstream responses.

Both stores are best-effort: ``get`` never raises on backend trouble (it
logs and reports a miss) and ``set`` never propagates a failure. A cache
outage therefore degrades to "always fetch".

Keys are the canonical request URL verbatim. No normalisation is done, so
``?a=1&b=2`` and ``?b=2&a=1`` are separate entries.
"""

from __future__ import annotations

import json
import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from .config import Settings
from .models.cache import CacheEntry

logger = logging.getLogger(__name__)

__all__ = [
    "CacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "build_cache_store",
]


class CacheStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_s: int) -> None: ...


class MemoryCacheStore:
    """In-process store with lazy TTL expiry and LRU eviction."""

    def __init__(
        self,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            self._entries.pop(key, None)
            return None
        self._entries.move_to_end(key)
        return entry.value

    async def set(self, key: str, value: Any, ttl_s: int) -> None:
        self._entries[key] = CacheEntry(
            key=key, value=value, expires_at=self._clock() + ttl_s
        )
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


class RedisCacheStore:
    """Redis-backed store. Values are JSON with ``SET ... EX ttl``.

    Redis handles expiry itself; an unreachable server is reported as a
    warning and treated as a miss.
    """

    def __init__(
        self,
        url: str | None = None,
        key_prefix: str = "tmdb:",
        client: Any | None = None,
    ) -> None:
        if client is None and url is None:
            raise ValueError("RedisCacheStore needs a url or a client")
        self.key_prefix = key_prefix
        if client is None:
            client = aioredis.from_url(
                url,
                socket_timeout=2.0,
                socket_connect_timeout=2.0,
            )
        self._client = client

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(self._key(key))
        except (RedisError, OSError) as exc:
            logger.warning("Cache read failed for %s: %s", key, exc, extra={"url": key})
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.warning("Dropping undecodable cache value for %s: %s", key, exc)
            return None

    async def set(self, key: str, value: Any, ttl_s: int) -> None:
        try:
            payload = json.dumps(value)
            await self._client.set(self._key(key), payload, ex=ttl_s)
        except (RedisError, OSError, TypeError, ValueError) as exc:
            logger.warning("Cache write failed for %s: %s", key, exc, extra={"url": key})

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except (RedisError, OSError) as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)

    async def aclose(self) -> None:
        await self._client.aclose()


def build_cache_store(settings: Settings) -> CacheStore:
    if settings.REDIS_URL:
        logger.info("Using Redis cache store")
        return RedisCacheStore(settings.REDIS_URL, key_prefix=settings.CACHE_KEY_PREFIX)
    return MemoryCacheStore(max_entries=settings.CACHE_MAX_ENTRIES)
