"""Map provider payloads onto the shared movie record shape."""
from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping, Optional

from ..schemas import MovieRecord, Torrent

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={code}"

_BTIH_PATTERN = re.compile(r"urn:btih:([0-9a-zA-Z]+)")


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _as_genres(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [genre.strip() for genre in value if isinstance(genre, str) and genre.strip()]


def _hash_from_magnet(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = _BTIH_PATTERN.search(url)
    return match.group(1).upper() if match else None


def normalize_yts(raw: Mapping[str, Any]) -> Optional[MovieRecord]:
    """Convert a single YTS movie object, returning ``None`` when it lacks an identifier."""

    imdb_code = _as_text(raw.get("imdb_code"))
    title = _as_text(raw.get("title"))
    if not imdb_code or not title:
        return None

    torrents: list[Torrent] = []
    for item in raw.get("torrents") or []:
        if not isinstance(item, Mapping):
            continue
        torrents.append(
            Torrent(
                quality=_as_text(item.get("quality")) or "unknown",
                seeds=max(_as_int(item.get("seeds")) or 0, 0),
                peers=max(_as_int(item.get("peers")) or 0, 0),
                url=_as_text(item.get("url")),
                hash=_as_text(item.get("hash")),
                size=_as_text(item.get("size")),
            )
        )

    trailer_code = _as_text(raw.get("yt_trailer_code"))
    return MovieRecord(
        imdb_code=imdb_code,
        title=title,
        year=_as_int(raw.get("year")),
        runtime=_as_int(raw.get("runtime")),
        rating=_as_float(raw.get("rating")),
        genres=_as_genres(raw.get("genres")),
        summary=_as_text(raw.get("summary")) or _as_text(raw.get("description_full")),
        language=_as_text(raw.get("language")),
        large_cover_image=_as_text(raw.get("large_cover_image")),
        torrents=torrents,
        source="yts",
        trailer=YOUTUBE_WATCH_URL.format(code=trailer_code) if trailer_code else None,
    )


def normalize_popcorn(raw: Mapping[str, Any]) -> Optional[MovieRecord]:
    """Convert a single popcorn movie object, returning ``None`` when it lacks an identifier."""

    imdb_code = _as_text(raw.get("imdb_id"))
    title = _as_text(raw.get("title"))
    if not imdb_code or not title:
        return None

    torrents: list[Torrent] = []
    by_language = raw.get("torrents")
    if isinstance(by_language, Mapping):
        for qualities in by_language.values():
            if not isinstance(qualities, Mapping):
                continue
            for quality, item in qualities.items():
                if not isinstance(item, Mapping):
                    continue
                url = _as_text(item.get("url"))
                torrents.append(
                    Torrent(
                        quality=str(quality),
                        seeds=max(_as_int(item.get("seed")) or 0, 0),
                        peers=max(_as_int(item.get("peer")) or 0, 0),
                        url=url,
                        hash=_hash_from_magnet(url),
                        size=_as_text(item.get("filesize")) or _as_text(item.get("size")),
                    )
                )

    rating: Optional[float] = None
    raw_rating = raw.get("rating")
    if isinstance(raw_rating, Mapping):
        percentage = _as_float(raw_rating.get("percentage"))
        if percentage is not None:
            rating = round(percentage / 10, 1)

    images = raw.get("images")
    poster = _as_text(images.get("poster")) if isinstance(images, Mapping) else None

    return MovieRecord(
        imdb_code=imdb_code,
        title=title,
        year=_as_int(raw.get("year")),
        runtime=_as_int(raw.get("runtime")),
        rating=rating,
        genres=_as_genres(raw.get("genres")),
        summary=_as_text(raw.get("synopsis")),
        large_cover_image=poster,
        torrents=torrents,
        source="popcorn",
        trailer=_as_text(raw.get("trailer")),
    )


def normalize_yts_list(items: Iterable[Any]) -> list[MovieRecord]:
    """Normalize a YTS movie array, skipping malformed entries."""

    records = (normalize_yts(item) for item in items if isinstance(item, Mapping))
    return [record for record in records if record is not None]


def normalize_popcorn_list(items: Iterable[Any]) -> list[MovieRecord]:
    """Normalize a popcorn movie array, skipping malformed entries."""

    records = (normalize_popcorn(item) for item in items if isinstance(item, Mapping))
    return [record for record in records if record is not None]
