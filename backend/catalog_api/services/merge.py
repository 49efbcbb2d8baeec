"""Combine, deduplicate and order normalized movie lists."""
from __future__ import annotations

from typing import Iterable

from ..schemas import MovieRecord, SortField, SortOrder


def union(*lists: Iterable[MovieRecord]) -> list[MovieRecord]:
    """Concatenate movie lists, preserving their order."""

    merged: list[MovieRecord] = []
    for movies in lists:
        merged.extend(movies)
    return merged


def dedup_by_identifier(movies: Iterable[MovieRecord]) -> list[MovieRecord]:
    """Keep the first record seen for every IMDb code."""

    seen: set[str] = set()
    unique: list[MovieRecord] = []
    for movie in movies:
        if movie.imdb_code in seen:
            continue
        seen.add(movie.imdb_code)
        unique.append(movie)
    return unique


def max_seeds(movie: MovieRecord) -> int:
    """Return the best seed count among the record's torrents."""

    return max((torrent.seeds for torrent in movie.torrents), default=0)


def pick_best(primary: MovieRecord, secondary: MovieRecord) -> MovieRecord:
    """Return whichever record is better seeded; the primary wins ties."""

    if max_seeds(secondary) > max_seeds(primary):
        return secondary
    return primary


def dedup_by_max_seeds(movies: Iterable[MovieRecord]) -> list[MovieRecord]:
    """Keep the best-seeded record per IMDb code.

    The surviving record takes the slot of the first occurrence, and an
    earlier record beats a later one with the same seed count.
    """

    order: list[str] = []
    best: dict[str, MovieRecord] = {}
    for movie in movies:
        current = best.get(movie.imdb_code)
        if current is None:
            order.append(movie.imdb_code)
            best[movie.imdb_code] = movie
        else:
            best[movie.imdb_code] = pick_best(current, movie)
    return [best[code] for code in order]


def sort_movies(
    movies: Iterable[MovieRecord],
    field: SortField = SortField.rating,
    order: SortOrder = SortOrder.desc,
) -> list[MovieRecord]:
    """Order movies by ``field``; records missing the field always come last."""

    present: list[MovieRecord] = []
    missing: list[MovieRecord] = []
    for movie in movies:
        (missing if getattr(movie, field.value) is None else present).append(movie)

    def _key(movie: MovieRecord):
        value = getattr(movie, field.value)
        if field is SortField.title:
            return value.casefold()
        return value

    present.sort(key=_key, reverse=order is SortOrder.desc)
    return present + missing
