"""HTTP access to the upstream movie providers."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
from typing import Any, Callable
from urllib.parse import quote

import cloudscraper
from cloudscraper.exceptions import CloudflareException
import httpx
import requests

from ..schemas import SortField, SortOrder
from ..settings import CatalogSettings
from .errors import UpstreamError

logger = logging.getLogger(__name__)

YTS = "yts"
POPCORN = "popcorn"
SEARCH = "search"

# The secondary provider calls the title field "name". Neither provider sorts by
# runtime, so runtime pages are fetched by rating and reordered after merging.
_POPCORN_SORT_FIELDS = {
    SortField.rating: "rating",
    SortField.title: "name",
    SortField.year: "year",
    SortField.runtime: "rating",
}
_YTS_SORT_FIELDS = {
    SortField.rating: "rating",
    SortField.title: "title",
    SortField.year: "year",
    SortField.runtime: "rating",
}

# Secondary provider genre slugs mapped to the primary provider's genre names.
# Slugs missing here (holiday, indie, ...) have no primary equivalent.
_YTS_GENRES = {
    "action": "action",
    "adventure": "adventure",
    "animation": "animation",
    "comedy": "comedy",
    "crime": "crime",
    "documentary": "documentary",
    "drama": "drama",
    "family": "family",
    "fantasy": "fantasy",
    "film-noir": "film-noir",
    "history": "history",
    "horror": "horror",
    "music": "music",
    "mystery": "mystery",
    "romance": "romance",
    "science-fiction": "sci-fi",
    "sports": "sport",
    "thriller": "thriller",
    "war": "war",
    "western": "western",
}


class FetchStatus(str, Enum):
    """Outcome of a single provider request."""

    FOUND = "found"
    EMPTY = "empty"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(slots=True)
class FetchResult:
    """Raw provider items together with the outcome that produced them."""

    status: FetchStatus
    items: list[dict[str, Any]] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.status is FetchStatus.FOUND and bool(self.items)

    @classmethod
    def found(cls, items: list[dict[str, Any]]) -> "FetchResult":
        return cls(FetchStatus.FOUND if items else FetchStatus.EMPTY, items)


@dataclass(frozen=True, slots=True)
class FetcherConfig:
    """Connection details injected into :class:`CatalogFetcher`."""

    yts_base_url: str
    popcorn_base_url: str
    search_base_url: str
    search_api_host: str
    search_api_key: str | None
    primary_page_size: int = 37
    timeout: float = 15.0

    @classmethod
    def from_settings(cls, settings: CatalogSettings) -> "FetcherConfig":
        return cls(
            yts_base_url=settings.yts_base_url.rstrip("/"),
            popcorn_base_url=settings.popcorn_base_url.rstrip("/"),
            search_base_url=settings.search_base_url.rstrip("/"),
            search_api_host=settings.search_api_host,
            search_api_key=settings.search_api_key,
            primary_page_size=settings.primary_page_size,
            timeout=settings.request_timeout,
        )


class CatalogFetcher:
    """Issues one GET per call against the primary, secondary and search providers."""

    def __init__(
        self,
        config: FetcherConfig,
        *,
        session_factory: Callable[[], requests.Session] | None = None,
        search_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._session_factory = session_factory or cloudscraper.create_scraper
        self._search_transport = search_transport
        self._local = threading.local()

    # ------------------------------------------------------------------
    # Transport helpers

    def _session(self) -> requests.Session:
        # Scraper sessions keep challenge cookies and are not shared across threads.
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
        return session

    def _get(self, provider: str, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``url`` through the scraper session and decode the JSON body.

        Returns ``None`` when the provider answers with an empty body.
        """

        logger.debug("GET %s params=%s", url, params)
        try:
            response = self._session().get(url, params=params, timeout=self._config.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise UpstreamError(
                provider, f"responded with HTTP {exc.response.status_code}"
            ) from exc
        except (requests.RequestException, CloudflareException) as exc:
            raise UpstreamError(provider, f"request failed: {exc}") from exc

        if not response.text.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(provider, "returned invalid JSON") from exc

    def _yts_movies(self, payload: Any) -> FetchResult:
        if not isinstance(payload, dict):
            raise UpstreamError(YTS, "response must be an object")
        data = payload.get("data")
        movies = data.get("movies") if isinstance(data, dict) else None
        if not movies:
            return FetchResult(FetchStatus.NOT_FOUND)
        if not isinstance(movies, list):
            raise UpstreamError(YTS, "movies must be a list")
        return FetchResult.found([item for item in movies if isinstance(item, dict)])

    # ------------------------------------------------------------------
    # Primary provider

    def list_primary(
        self,
        page: int,
        sort_by: SortField = SortField.rating,
        order: SortOrder = SortOrder.desc,
        genre: str | None = None,
    ) -> FetchResult:
        """Fetch one page of the primary provider's listing.

        ``genre`` is a secondary provider slug; it is translated to the primary
        provider's name and dropped when the primary catalogue has no equivalent.
        """

        params: dict[str, Any] = {
            "sort_by": _YTS_SORT_FIELDS[sort_by],
            "order_by": order.value,
            "page": page,
            "limit": self._config.primary_page_size,
        }
        yts_genre = _YTS_GENRES.get(genre) if genre else None
        if yts_genre:
            params["genre"] = yts_genre
        elif genre:
            logger.debug("Primary provider has no genre matching %r; listing unfiltered", genre)
        payload = self._get(YTS, f"{self._config.yts_base_url}/list_movies.json", params)
        if payload is None:
            return FetchResult(FetchStatus.UNAVAILABLE)
        return self._yts_movies(payload)

    def primary_by_imdb(self, imdb_code: str) -> FetchResult:
        """Look a movie up on the primary provider by IMDb code."""

        payload = self._get(
            YTS,
            f"{self._config.yts_base_url}/list_movies.json",
            {"query_term": imdb_code},
        )
        if payload is None:
            return FetchResult(FetchStatus.UNAVAILABLE)
        result = self._yts_movies(payload)
        if result.has_data:
            # query_term is a fuzzy match; keep exact identifier hits only.
            matches = [item for item in result.items if item.get("imdb_code") == imdb_code]
            return FetchResult.found(matches) if matches else FetchResult(FetchStatus.NOT_FOUND)
        return result

    def primary_details(self, imdb_code: str) -> FetchResult:
        """Fetch the detailed primary provider entry, including cast."""

        payload = self._get(
            YTS,
            f"{self._config.yts_base_url}/movie_details.json",
            {"imdb_id": imdb_code, "with_cast": "true", "with_images": "true"},
        )
        if payload is None:
            return FetchResult(FetchStatus.UNAVAILABLE)
        if not isinstance(payload, dict):
            raise UpstreamError(YTS, "response must be an object")
        data = payload.get("data")
        movie = data.get("movie") if isinstance(data, dict) else None
        if not isinstance(movie, dict) or not movie.get("imdb_code"):
            return FetchResult(FetchStatus.NOT_FOUND)
        return FetchResult.found([movie])

    # ------------------------------------------------------------------
    # Secondary provider

    def list_secondary(
        self,
        page: int,
        sort_by: SortField = SortField.rating,
        order: SortOrder = SortOrder.desc,
        genre: str | None = None,
    ) -> FetchResult:
        """Fetch one page of the secondary provider's listing."""

        params: dict[str, Any] = {
            "sort": _POPCORN_SORT_FIELDS[sort_by],
            "order": -1 if order is SortOrder.desc else 1,
        }
        if genre:
            params["genre"] = genre
        payload = self._get(POPCORN, f"{self._config.popcorn_base_url}/movies/{page}", params)
        if payload is None:
            return FetchResult(FetchStatus.UNAVAILABLE)
        if not isinstance(payload, list):
            raise UpstreamError(POPCORN, "movie listing must be a list")
        return FetchResult.found([item for item in payload if isinstance(item, dict)])

    def secondary_by_imdb(self, imdb_code: str) -> FetchResult:
        """Look a movie up on the secondary provider by IMDb code."""

        payload = self._get(
            POPCORN, f"{self._config.popcorn_base_url}/movie/{quote(imdb_code)}"
        )
        if payload is None:
            return FetchResult(FetchStatus.UNAVAILABLE)
        if not isinstance(payload, dict) or not payload:
            return FetchResult(FetchStatus.NOT_FOUND)
        return FetchResult.found([payload])

    # ------------------------------------------------------------------
    # Title search provider

    def search_titles(self, keyword: str, page: int = 1) -> FetchResult:
        """Query the title search API for candidates matching ``keyword``."""

        headers = {"x-rapidapi-host": self._config.search_api_host}
        if self._config.search_api_key:
            headers["x-rapidapi-key"] = self._config.search_api_key
        params = {"s": keyword, "page": str(page), "r": "json"}

        logger.debug("Searching titles for %r page=%s", keyword, page)
        try:
            with httpx.Client(
                base_url=self._config.search_base_url,
                timeout=self._config.timeout,
                transport=self._search_transport,
            ) as client:
                response = client.get("/", params=params, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                SEARCH, f"responded with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(SEARCH, f"request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(SEARCH, "returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise UpstreamError(SEARCH, "response must be an object")
        if payload.get("Response") != "True":
            return FetchResult(FetchStatus.NOT_FOUND)
        results = payload.get("Search") or []
        if not isinstance(results, list):
            raise UpstreamError(SEARCH, "search results must be a list")
        return FetchResult.found([item for item in results if isinstance(item, dict)])
