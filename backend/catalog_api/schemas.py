"""Pydantic models exposed by the Catalog API."""
from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(default="0.1.0", description="Semantic version of the API service.")
    cache_entries: int = Field(
        default=0, description="Number of endpoint responses currently held in the cache."
    )


class Torrent(BaseModel):
    """A downloadable torrent attached to a movie record."""

    quality: str = Field(..., description="Quality label such as 720p or 1080p.")
    seeds: int = Field(default=0, ge=0, description="Number of active seeders.")
    peers: int = Field(default=0, ge=0, description="Number of active peers.")
    url: str | None = Field(default=None, description="Torrent file URL or magnet link.")
    hash: str | None = Field(default=None, description="BitTorrent info hash.")
    size: str | None = Field(default=None, description="Human-readable payload size.")


class MovieRecord(BaseModel):
    """Movie shape shared by every provider once normalized."""

    imdb_code: str = Field(..., description="IMDb identifier used to match movies across providers.")
    title: str
    year: int | None = None
    runtime: int | None = Field(default=None, description="Runtime in minutes.")
    rating: float | None = Field(default=None, description="Rating on a 0-10 scale.")
    genres: list[str] = Field(default_factory=list)
    summary: str | None = None
    language: str | None = None
    large_cover_image: str | None = None
    torrents: list[Torrent] = Field(default_factory=list)
    source: Literal["yts", "popcorn"] = Field(..., description="Provider the record came from.")
    trailer: str | None = Field(default=None, description="Trailer URL when the provider exposes one.")
    cast: list[str] | None = Field(
        default=None, description="Cast names, only present on enriched identifier lookups."
    )


class SortField(str, Enum):
    """Fields the merged movie lists can be ordered by."""

    rating = "rating"
    title = "title"
    year = "year"
    runtime = "runtime"


class SortOrder(str, Enum):
    """Direction applied when ordering movie lists."""

    desc = "desc"
    asc = "asc"


class Genre(str, Enum):
    """Genres recognized by the secondary metadata provider."""

    action = "action"
    adventure = "adventure"
    animation = "animation"
    comedy = "comedy"
    crime = "crime"
    disaster = "disaster"
    documentary = "documentary"
    drama = "drama"
    eastern = "eastern"
    family = "family"
    fan_film = "fan-film"
    fantasy = "fantasy"
    film_noir = "film-noir"
    history = "history"
    holiday = "holiday"
    horror = "horror"
    indie = "indie"
    music = "music"
    mystery = "mystery"
    road = "road"
    romance = "romance"
    science_fiction = "science-fiction"
    short = "short"
    sports = "sports"
    sporting_event = "sporting-event"
    suspense = "suspense"
    thriller = "thriller"
    tv_movie = "tv-movie"
    war = "war"
    western = "western"
