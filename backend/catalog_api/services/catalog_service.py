"""Catalog aggregation workflows behind the movie endpoints."""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
from typing import Any

from ..schemas import Genre, MovieRecord, SortField, SortOrder
from . import merge
from .cache import ResponseCache
from .errors import NotFoundError, UpstreamError
from .fetcher import CatalogFetcher, FetchResult
from .normalizer import normalize_popcorn_list, normalize_yts, normalize_yts_list

logger = logging.getLogger(__name__)


class CatalogService:
    """Runs the fetch, normalize and merge pipeline for each endpoint."""

    def __init__(
        self,
        fetcher: CatalogFetcher,
        cache: ResponseCache,
        *,
        search_concurrency: int = 4,
        search_max_pages: int = 1,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._search_concurrency = search_concurrency
        self._search_max_pages = search_max_pages

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # ------------------------------------------------------------------
    # List by page

    def list_page(
        self,
        page: int,
        *,
        sort_by: SortField = SortField.rating,
        order: SortOrder = SortOrder.desc,
        genre: Genre | None = None,
    ) -> list[MovieRecord]:
        """Merge one page of both providers, deduplicated by IMDb code."""

        genre_value = genre.value if genre else None
        return self._cache.get_or_set(
            ("page", page, sort_by, order, genre_value),
            lambda: self._list_page(page, sort_by, order, genre_value),
        )

    def _list_page(
        self, page: int, sort_by: SortField, order: SortOrder, genre: str | None
    ) -> list[MovieRecord]:
        primary = self._fetcher.list_primary(page, sort_by=sort_by, order=order, genre=genre)
        if not primary.has_data:
            raise NotFoundError(f"No movies on page {page}")
        primary_movies = normalize_yts_list(primary.items)

        secondary = self._fetcher.list_secondary(page, sort_by=sort_by, order=order, genre=genre)
        if not secondary.has_data:
            logger.info("Secondary provider has no data for page %s", page)
            return merge.sort_movies(primary_movies, sort_by, order)

        merged = merge.union(primary_movies, normalize_popcorn_list(secondary.items))
        return merge.sort_movies(merge.dedup_by_identifier(merged), sort_by, order)

    # ------------------------------------------------------------------
    # Search by keyword

    def search(self, keyword: str) -> list[MovieRecord]:
        """Resolve ``keyword`` to IMDb codes and gather both providers' matches."""

        normalized = keyword.strip()
        return self._cache.get_or_set(
            ("keyword", normalized.casefold()), lambda: self._search(normalized)
        )

    def _search_candidates(self, keyword: str) -> list[str]:
        codes: list[str] = []
        for page in range(1, self._search_max_pages + 1):
            result = self._fetcher.search_titles(keyword, page)
            if not result.has_data:
                break
            for item in result.items:
                code = item.get("imdbID")
                if isinstance(code, str) and code and code not in codes:
                    codes.append(code)
        return codes

    def _search(self, keyword: str) -> list[MovieRecord]:
        candidates = self._search_candidates(keyword)
        if not candidates:
            raise NotFoundError(f"No titles match {keyword!r}")

        with ThreadPoolExecutor(max_workers=self._search_concurrency) as executor:
            primary_futures = [
                executor.submit(self._fetcher.primary_by_imdb, code) for code in candidates
            ]
            secondary_futures = [
                executor.submit(self._fetcher.secondary_by_imdb, code) for code in candidates
            ]
            primary_results = [
                _tolerate(future, code) for future, code in zip(primary_futures, candidates)
            ]
            secondary_results = [
                _tolerate(future, code) for future, code in zip(secondary_futures, candidates)
            ]

        primary_movies = [
            movie
            for result in primary_results
            if result is not None and result.has_data
            for movie in normalize_yts_list(result.items)
        ]
        if not primary_movies:
            raise NotFoundError(f"No torrents found for {keyword!r}")

        secondary_movies = [
            movie
            for result in secondary_results
            if result is not None and result.has_data
            for movie in normalize_popcorn_list(result.items)
        ]

        merged = merge.union(primary_movies, secondary_movies)
        return merge.sort_movies(merge.dedup_by_max_seeds(merged), SortField.rating, SortOrder.desc)

    # ------------------------------------------------------------------
    # Lookup by identifier

    def lookup(self, imdb_code: str) -> MovieRecord:
        """Return the best-seeded record for ``imdb_code`` across both providers."""

        return self._cache.get_or_set(("imdb_code", imdb_code), lambda: self._lookup(imdb_code))

    def _lookup(self, imdb_code: str) -> MovieRecord:
        primary = self._fetcher.primary_by_imdb(imdb_code)
        primary_movies = normalize_yts_list(primary.items) if primary.has_data else []
        if not primary_movies:
            raise NotFoundError(f"No movie with IMDb code {imdb_code}")
        best = primary_movies[0]

        secondary = self._fetcher.secondary_by_imdb(imdb_code)
        if secondary.has_data:
            secondary_movies = normalize_popcorn_list(secondary.items)
            if secondary_movies:
                best = merge.pick_best(best, secondary_movies[0])

        return self._enrich(best)

    def _enrich(self, movie: MovieRecord) -> MovieRecord:
        try:
            details = self._fetcher.primary_details(movie.imdb_code)
        except UpstreamError as exc:
            logger.warning("Skipping enrichment for %s: %s", movie.imdb_code, exc)
            return movie
        if not details.has_data:
            return movie

        raw = details.items[0]
        detailed = normalize_yts(raw)
        update: dict[str, Any] = {}
        cast = [
            member["name"]
            for member in raw.get("cast") or []
            if isinstance(member, dict) and isinstance(member.get("name"), str)
        ]
        if cast:
            update["cast"] = cast
        if detailed is not None:
            if movie.summary is None and detailed.summary is not None:
                update["summary"] = detailed.summary
            if movie.trailer is None and detailed.trailer is not None:
                update["trailer"] = detailed.trailer
        return movie.model_copy(update=update) if update else movie

    # ------------------------------------------------------------------
    # List by genre

    def list_genre(self, genre: Genre, page: int = 1) -> list[MovieRecord]:
        """Return the secondary provider's movies for ``genre``, or an empty list."""

        return self._cache.get_or_set(
            ("genre", genre.value, page), lambda: self._list_genre(genre, page)
        )

    def _list_genre(self, genre: Genre, page: int) -> list[MovieRecord]:
        result = self._fetcher.list_secondary(page, genre=genre.value)
        if not result.has_data:
            logger.info("Secondary provider returned %s for genre %s", result.status.value, genre.value)
            return []
        return normalize_popcorn_list(result.items)


def _tolerate(future: Future[FetchResult], code: str) -> FetchResult | None:
    """Resolve a candidate lookup, logging and skipping provider failures."""

    try:
        return future.result()
    except UpstreamError as exc:
        logger.warning("Skipping search candidate %s: %s", code, exc)
        return None

