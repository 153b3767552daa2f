"""Tests for the RSS feed endpoints."""

import xml.etree.ElementTree as ET
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tomatofeed.services.response_cache import InMemoryResponseCache

FIXTURE_DIR = Path(__file__).parent.parent / "scrapers" / "fixtures" / "rotten_tomatoes"

DUNE_PAGE = """
<div class="articleContentBody">
  <div class="row countdown-item">
    <div class="article_movie_title">
      <h2><a href="/m/dune">Dune</a> <span class="start-year">(2024)</span> <span class="tMeterScore">92%</span></h2>
    </div>
  </div>
</div>
"""

EMPTY_PAGE = "<html><body><div class='articleContentBody'></div></body></html>"

MISSING_LINK_PAGE = """
<div class="articleContentBody">
  <div class="row countdown-item"><div class="article_movie_title"><a href="/m/dune">Dune</a></div></div>
  <div class="row countdown-item"><div class="article_movie_title"><a>Civil War</a></div></div>
  <div class="row countdown-item"><div class="article_movie_title"><a>Challengers</a></div></div>
</div>
"""


# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------


def make_upstream(html: str) -> AsyncMock:
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.text = html
    mock_response.raise_for_status = MagicMock()

    mock_client = AsyncMock()
    mock_client.get = AsyncMock(return_value=mock_response)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


def make_failing_upstream(error: Exception) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.get = AsyncMock(side_effect=error)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


async def fetch(app: FastAPI, path: str) -> httpx.Response:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.get(path)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


async def test_movies_feed_renders_single_entry(test_app: FastAPI) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        response = await fetch(test_app, "/movies")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "max-age=3600"
    assert response.headers["content-type"].startswith("application/rss+xml")

    channel = ET.fromstring(response.content).find("channel")
    assert channel.findtext("title") == "Hot on RottenTomatoes: Movies"
    assert channel.findtext("link") == "http://test/movies"
    [item] = channel.findall("item")
    assert item.findtext("title") == "Dune (2024, 92%)"
    assert item.findtext("link") == "/m/dune"


async def test_shows_feed_uses_shows_upstream(test_app: FastAPI) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        response = await fetch(test_app, "/shows")

    assert response.status_code == 200
    upstream.get.assert_awaited_once_with(
        "https://editorial.rottentomatoes.com/guide/popular-tv-shows/"
    )
    channel = ET.fromstring(response.content).find("channel")
    assert channel.findtext("title") == "Hot on RottenTomatoes: Shows"


async def test_feed_items_follow_document_order(test_app: FastAPI) -> None:
    html = (FIXTURE_DIR / "popular_movies.html").read_text(encoding="utf-8")

    with patch("httpx.AsyncClient", return_value=make_upstream(html)):
        response = await fetch(test_app, "/movies")

    items = ET.fromstring(response.content).find("channel").findall("item")
    assert [item.findtext("title") for item in items] == [
        "Dune: Part Two (2024, 92%)",
        "Civil War (2024, )",
        "Challengers (2024,  88%)",
    ]


async def test_unknown_path_returns_not_found(test_app: FastAPI) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        response = await fetch(test_app, "/other")

    assert response.status_code == 404
    assert response.text == "Not found!"
    upstream.get.assert_not_called()


async def test_nested_unknown_path_returns_not_found(test_app: FastAPI) -> None:
    response = await fetch(test_app, "/movies/extra")

    assert response.status_code == 404
    assert response.text == "Not found!"


async def test_empty_page_returns_500_and_is_not_cached(
    test_app: FastAPI, response_cache: InMemoryResponseCache
) -> None:
    with patch("httpx.AsyncClient", return_value=make_upstream(EMPTY_PAGE)):
        response = await fetch(test_app, "/movies")

    assert response.status_code == 500
    assert response.text == "Found no elements!"
    assert len(response_cache) == 0


async def test_missing_link_names_first_offending_title(
    test_app: FastAPI, response_cache: InMemoryResponseCache
) -> None:
    with patch("httpx.AsyncClient", return_value=make_upstream(MISSING_LINK_PAGE)):
        response = await fetch(test_app, "/movies")

    assert response.status_code == 500
    assert response.text == "Failed to find a URL for 'Civil War'"
    assert len(response_cache) == 0


async def test_upstream_connection_error_returns_502(
    test_app: FastAPI, response_cache: InMemoryResponseCache
) -> None:
    upstream = make_failing_upstream(httpx.ConnectError("Connection refused"))

    with patch("httpx.AsyncClient", return_value=upstream):
        response = await fetch(test_app, "/movies")

    assert response.status_code == 502
    assert response.text.startswith("Failed to fetch ")
    assert len(response_cache) == 0


async def test_upstream_timeout_returns_504(test_app: FastAPI) -> None:
    upstream = make_failing_upstream(httpx.ReadTimeout("timed out"))

    with patch("httpx.AsyncClient", return_value=upstream):
        response = await fetch(test_app, "/movies")

    assert response.status_code == 504


async def test_second_request_within_ttl_is_served_from_cache(test_app: FastAPI, clock) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        first = await fetch(test_app, "/movies")
        clock.advance(3599)
        second = await fetch(test_app, "/movies")

    assert first.status_code == second.status_code == 200
    assert first.content == second.content
    assert second.headers["cache-control"] == "max-age=3600"
    assert upstream.get.await_count == 1


async def test_request_after_ttl_fetches_again(test_app: FastAPI, clock) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        await fetch(test_app, "/movies")
        clock.advance(3600)
        response = await fetch(test_app, "/movies")

    assert response.status_code == 200
    assert upstream.get.await_count == 2


async def test_error_is_not_cached_and_next_request_retries_upstream(test_app: FastAPI) -> None:
    with patch("httpx.AsyncClient", return_value=make_upstream(EMPTY_PAGE)):
        failed = await fetch(test_app, "/movies")

    upstream = make_upstream(DUNE_PAGE)
    with patch("httpx.AsyncClient", return_value=upstream):
        recovered = await fetch(test_app, "/movies")

    assert failed.status_code == 500
    assert recovered.status_code == 200
    assert upstream.get.await_count == 1


async def test_cache_is_keyed_by_full_request_url(test_app: FastAPI) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        await fetch(test_app, "/movies")
        await fetch(test_app, "/movies?utm=feedreader")

    assert upstream.get.await_count == 2


async def test_other_http_errors_keep_default_handling(test_app: FastAPI) -> None:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        response = await client.post("/movies")

    assert response.status_code == 405
    assert response.json() == {"detail": "Method Not Allowed"}


async def test_trailing_slash_returns_not_found(test_app: FastAPI) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        response = await fetch(test_app, "/movies/")

    assert response.status_code == 404
    assert response.text == "Not found!"
    upstream.get.assert_not_called()


async def test_head_returns_feed_headers(test_app: FastAPI) -> None:
    upstream = make_upstream(DUNE_PAGE)

    with patch("httpx.AsyncClient", return_value=upstream):
        async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
            response = await client.head("/movies")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "max-age=3600"
    assert response.headers["content-type"].startswith("application/rss+xml")
