import pytest

from tmdb_fetch import config, tmdb

from conftest import Upstream, make_fetcher

BASE = "https://api.themoviedb.org/3"


@pytest.fixture(autouse=True)
def _base_url(monkeypatch) -> None:
    monkeypatch.setattr(config, "TMDB_BASE_URL", BASE)
    monkeypatch.setattr(config, "TMDB_LANGUAGE", "en-US")


@pytest.mark.asyncio
async def test_trending_movie_picks_from_results() -> None:
    upstream = Upstream((200, {"results": [{"id": 7, "title": "Se7en"}]}))
    fetcher = make_fetcher(upstream)

    assert await tmdb.trending_movie(fetcher) == {"id": 7, "title": "Se7en"}
    assert str(upstream.requests[0].url) == f"{BASE}/trending/movie/day?language=en-US"


@pytest.mark.asyncio
async def test_trending_tv_empty_results_returns_none() -> None:
    fetcher = make_fetcher(Upstream((200, {"results": []})))
    assert await tmdb.trending_tv(fetcher) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("helper", "arg", "path"),
    [
        (tmdb.movie_trailers, 550, "/movie/550/videos?language=en-US"),
        (tmdb.tv_trailers, 1399, "/tv/1399/videos?language=en-US"),
        (tmdb.similar_movies, 550, "/movie/550/similar?language=en-US&page=1"),
        (tmdb.similar_tv, 1399, "/tv/1399/similar?language=en-US&page=1"),
        (tmdb.movies_by_category, "popular", "/movie/popular?language=en-US&page=1"),
        (tmdb.tv_by_category, "top_rated", "/tv/top_rated?language=en-US&page=1"),
    ],
)
async def test_list_helpers_build_canonical_urls(helper, arg, path) -> None:
    upstream = Upstream((200, {"results": [{"id": 1}]}))
    fetcher = make_fetcher(upstream)

    assert await helper(arg, fetcher) == [{"id": 1}]
    assert str(upstream.requests[0].url) == f"{BASE}{path}"


@pytest.mark.asyncio
async def test_details_returns_whole_payload() -> None:
    upstream = Upstream((200, {"id": 550, "title": "Fight Club"}))
    fetcher = make_fetcher(upstream)

    assert await tmdb.movie_details(550, fetcher) == {"id": 550, "title": "Fight Club"}
    assert await tmdb.movie_details(550, fetcher) == {"id": 550, "title": "Fight Club"}
    assert upstream.calls == 1
    assert str(upstream.requests[0].url) == f"{BASE}/movie/550?language=en-US"


@pytest.mark.asyncio
async def test_search_encodes_query() -> None:
    upstream = Upstream((200, {"results": [{"id": 3, "name": "Tom Hanks"}]}))
    fetcher = make_fetcher(upstream)

    assert await tmdb.search_person("tom hanks/&", fetcher) == [
        {"id": 3, "name": "Tom Hanks"}
    ]
    url = str(upstream.requests[0].url)
    assert url.startswith(f"{BASE}/search/person?query=tom%20hanks%2F%26&")
    assert url.endswith("&language=en-US&page=1&include_adult=false")


@pytest.mark.asyncio
async def test_search_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        await tmdb.search("collection", "x", make_fetcher(Upstream()))
