import json

import pytest

from tmdb_fetch import config, main

from conftest import Upstream, make_fetcher


def test_resolve_url_accepts_paths_and_urls(monkeypatch) -> None:
    monkeypatch.setattr(config, "TMDB_BASE_URL", "https://api.themoviedb.org/3")
    assert main.resolve_url("/movie/1") == "https://api.themoviedb.org/3/movie/1"
    assert main.resolve_url("tv/2") == "https://api.themoviedb.org/3/tv/2"
    assert main.resolve_url("https://x.test/a?b=1") == "https://x.test/a?b=1"


@pytest.mark.asyncio
async def test_fetch_once_success() -> None:
    fetcher = make_fetcher(Upstream((200, {"id": 1})))
    assert await main.fetch_once("https://x.test/movie/1", fetcher) == (0, {"id": 1})


@pytest.mark.asyncio
async def test_fetch_once_failure_returns_envelope() -> None:
    fetcher = make_fetcher(Upstream((404, {})))
    code, body = await main.fetch_once("https://x.test/movie/0", fetcher)
    assert code == 1
    assert body == {"success": False, "message": "TMDB Error: Not Found"}


def test_run_usage_error(capsys) -> None:
    assert main.run([]) == 2
    assert "usage" in capsys.readouterr().err


def test_run_prints_json(monkeypatch, capsys) -> None:
    async def fake_fetch_once(target, fetcher=None):
        return 0, {"target": target}

    monkeypatch.setattr(main, "fetch_once", fake_fetch_once)
    assert main.run(["/movie/1"]) == 0
    assert json.loads(capsys.readouterr().out) == {"target": "/movie/1"}
