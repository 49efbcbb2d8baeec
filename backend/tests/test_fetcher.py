"""Tests for the provider fetcher against fake HTTP transports."""
from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
import requests

from backend.catalog_api.schemas import SortField, SortOrder
from backend.catalog_api.services import (
    CatalogFetcher,
    FetcherConfig,
    FetchStatus,
    UpstreamError,
)

from stubs import popcorn_movie, yts_movie

CONFIG = FetcherConfig(
    yts_base_url="https://yts.test/api/v2",
    popcorn_base_url="https://popcorn.test",
    search_base_url="https://search.test",
    search_api_host="search.test",
    search_api_key="secret",
    primary_page_size=37,
    timeout=5.0,
)


def _response(body: Any = None, *, status: int = 200, raw: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = "https://upstream.test"
    response.encoding = "utf-8"
    text = raw if raw is not None else ("" if body is None else json.dumps(body))
    response._content = text.encode("utf-8")
    return response


class FakeSession:
    """Minimal stand-in for a cloudscraper session."""

    def __init__(self, *responses: requests.Response | Exception) -> None:
        self._responses = list(responses)
        self.requests: list[tuple[str, dict[str, Any] | None, float | None]] = []

    def get(self, url: str, params: dict[str, Any] | None = None, timeout: float | None = None):
        self.requests.append((url, params, timeout))
        outcome = self._responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _fetcher(session: FakeSession, transport: httpx.BaseTransport | None = None) -> CatalogFetcher:
    return CatalogFetcher(CONFIG, session_factory=lambda: session, search_transport=transport)


def test_list_primary_sends_page_parameters() -> None:
    session = FakeSession(_response({"status": "ok", "data": {"movies": [yts_movie("tt1")]}}))

    result = _fetcher(session).list_primary(3, sort_by=SortField.title, genre="horror")

    assert result.status is FetchStatus.FOUND
    assert result.items[0]["imdb_code"] == "tt1"
    url, params, timeout = session.requests[0]
    assert url == "https://yts.test/api/v2/list_movies.json"
    assert params == {
        "sort_by": "title",
        "order_by": "desc",
        "page": 3,
        "limit": 37,
        "genre": "horror",
    }
    assert timeout == 5.0


def test_list_primary_translates_genre_and_order() -> None:
    """Secondary genre slugs and the sort direction should reach the primary provider in its terms."""

    session = FakeSession(
        _response({"data": {"movies": [yts_movie("tt1")]}}),
        _response({"data": {"movies": [yts_movie("tt2")]}}),
        _response({"data": {"movies": [yts_movie("tt3")]}}),
    )
    fetcher = _fetcher(session)

    fetcher.list_primary(1, order=SortOrder.asc, genre="science-fiction")
    fetcher.list_primary(1, sort_by=SortField.runtime, genre="holiday")
    fetcher.list_primary(1, genre="sports")

    first, second, third = (params for _, params, _ in session.requests)
    assert first["genre"] == "sci-fi"
    assert first["order_by"] == "asc"
    assert "genre" not in second
    assert second["sort_by"] == "rating"
    assert second["order_by"] == "desc"
    assert third["genre"] == "sport"


def test_list_primary_without_movies_is_not_found() -> None:
    session = FakeSession(_response({"status": "ok", "data": {"movie_count": 10, "page_number": 99}}))

    result = _fetcher(session).list_primary(99)

    assert result.status is FetchStatus.NOT_FOUND
    assert not result.has_data


def test_primary_by_imdb_keeps_exact_matches_only() -> None:
    session = FakeSession(
        _response({"data": {"movies": [yts_movie("tt0111161"), yts_movie("tt01111610")]}})
    )

    result = _fetcher(session).primary_by_imdb("tt0111161")

    assert [item["imdb_code"] for item in result.items] == ["tt0111161"]
    assert session.requests[0][1] == {"query_term": "tt0111161"}


def test_primary_provider_skips_non_object_entries() -> None:
    session = FakeSession(
        _response({"data": {"movies": ["junk", None, yts_movie("tt0111161")]}}),
        _response({"data": {"movies": ["junk", 42]}}),
    )
    fetcher = _fetcher(session)

    result = fetcher.primary_by_imdb("tt0111161")

    assert [item["imdb_code"] for item in result.items] == ["tt0111161"]
    assert fetcher.list_primary(1).status is FetchStatus.EMPTY


def test_primary_details_reads_single_movie() -> None:
    session = FakeSession(
        _response({"data": {"movie": yts_movie("tt1", cast=[{"name": "Actor"}])}}),
        _response({"data": {"movie": {"id": 0, "imdb_code": ""}}}),
    )
    fetcher = _fetcher(session)

    assert fetcher.primary_details("tt1").items[0]["cast"] == [{"name": "Actor"}]
    assert fetcher.primary_details("tt2").status is FetchStatus.NOT_FOUND


def test_list_secondary_maps_sort_and_order() -> None:
    session = FakeSession(_response([popcorn_movie("tt1")]))

    result = _fetcher(session).list_secondary(2, sort_by=SortField.title, order=SortOrder.asc)

    assert result.has_data
    url, params, _ = session.requests[0]
    assert url == "https://popcorn.test/movies/2"
    assert params == {"sort": "name", "order": 1}


def test_secondary_empty_body_and_empty_list_are_distinguished() -> None:
    session = FakeSession(_response(raw=""), _response([]))
    fetcher = _fetcher(session)

    assert fetcher.list_secondary(1).status is FetchStatus.UNAVAILABLE
    assert fetcher.list_secondary(2).status is FetchStatus.EMPTY


def test_secondary_by_imdb_treats_empty_object_as_not_found() -> None:
    session = FakeSession(_response({}), _response(popcorn_movie("tt5")))
    fetcher = _fetcher(session)

    assert fetcher.secondary_by_imdb("tt4").status is FetchStatus.NOT_FOUND
    found = fetcher.secondary_by_imdb("tt5")
    assert found.has_data
    assert session.requests[1][0] == "https://popcorn.test/movie/tt5"


def test_http_errors_raise_upstream_error() -> None:
    session = FakeSession(_response(status=503, raw="unavailable"))

    with pytest.raises(UpstreamError) as excinfo:
        _fetcher(session).list_primary(1)

    assert excinfo.value.provider == "yts"
    assert "503" in str(excinfo.value)


def test_network_errors_raise_upstream_error() -> None:
    session = FakeSession(requests.ConnectionError("connection refused"))

    with pytest.raises(UpstreamError) as excinfo:
        _fetcher(session).secondary_by_imdb("tt1")

    assert excinfo.value.provider == "popcorn"


def test_malformed_json_raises_upstream_error() -> None:
    session = FakeSession(_response(raw="<html>challenge</html>"))

    with pytest.raises(UpstreamError, match="invalid JSON"):
        _fetcher(session).list_secondary(1)


def test_search_titles_sends_key_and_returns_results() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "Search": [{"Title": "Alien", "imdbID": "tt0078748"}],
                "totalResults": "1",
                "Response": "True",
            },
        )

    result = _fetcher(FakeSession(), httpx.MockTransport(handler)).search_titles("alien", 2)

    assert [item["imdbID"] for item in result.items] == ["tt0078748"]
    request = seen[0]
    assert request.headers["x-rapidapi-key"] == "secret"
    assert request.headers["x-rapidapi-host"] == "search.test"
    assert request.url.params["s"] == "alien"
    assert request.url.params["page"] == "2"


def test_search_titles_false_response_is_not_found() -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"Response": "False", "Error": "Movie not found!"})
    )

    result = _fetcher(FakeSession(), transport).search_titles("zzzz")

    assert result.status is FetchStatus.NOT_FOUND


def test_search_titles_server_error_raises_upstream_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(UpstreamError) as excinfo:
        _fetcher(FakeSession(), transport).search_titles("alien")

    assert excinfo.value.provider == "search"
