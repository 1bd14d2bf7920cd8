"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx

from tmdb_fetch.cache_store import MemoryCacheStore
from tmdb_fetch.fetcher import TmdbFetcher
from tmdb_fetch.retry import RetryPolicy


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class DummyRedis:
    """Minimal async Redis client storing raw values in a dict."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.data: dict[str, Any] = {}
        self.expiry: dict[str, int] = {}
        self.closed = False

    async def get(self, key: str) -> Any:
        if self.fail:
            raise ConnectionError("Connection refused")
        return self.data.get(key)

    async def set(self, key: str, value: Any, ex: int | None = None) -> None:
        if self.fail:
            raise ConnectionError("Connection refused")
        self.data[key] = value
        self.expiry[key] = ex

    async def delete(self, key: str) -> None:
        if self.fail:
            raise ConnectionError("Connection refused")
        self.data.pop(key, None)

    async def aclose(self) -> None:
        self.closed = True


class Upstream:
    """Scripted TMDB stand-in for ``httpx.MockTransport``.

    Each entry in ``script`` is either an ``(status, body)`` tuple or an
    exception instance to raise; the last entry repeats once exhausted.
    """

    def __init__(self, *script: Any) -> None:
        self.script = list(script) or [(200, {"results": []})]
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        idx = min(len(self.requests), len(self.script)) - 1
        step = self.script[idx]
        if isinstance(step, Exception):
            raise step
        status, body = step
        if isinstance(body, (dict, list)):
            return httpx.Response(status, content=json.dumps(body).encode())
        return httpx.Response(status, content=body)

    @property
    def calls(self) -> int:
        return len(self.requests)


def make_fetcher(
    upstream: Upstream,
    api_key: str | None = "test-key",
    cache: Any | None = None,
    sleep: Callable | None = None,
    max_attempts: int = 3,
    ttl_s: int = 3600,
) -> TmdbFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    policy = RetryPolicy(
        max_attempts=max_attempts, delay_s=1.0, sleep=sleep or RecordingSleep()
    )
    return TmdbFetcher(
        api_key=api_key,
        cache=cache if cache is not None else MemoryCacheStore(),
        client=client,
        policy=policy,
        ttl_s=ttl_s,
    )
