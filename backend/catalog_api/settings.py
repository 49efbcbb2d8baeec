"""Runtime configuration for the Catalog API."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogSettings(BaseSettings):
    """Environment-aware settings for the Catalog API service."""

    yts_base_url: str = Field(
        "https://yts.mx/api/v2", description="Base URL for the primary torrent listing API."
    )
    popcorn_base_url: str = Field(
        "https://popcorn-time.ga", description="Base URL for the secondary metadata API."
    )
    search_base_url: str = Field(
        "https://movie-database-imdb-alternative.p.rapidapi.com",
        description="Base URL for the third-party title search API.",
    )
    search_api_host: str = Field(
        "movie-database-imdb-alternative.p.rapidapi.com",
        description="Value sent in the x-rapidapi-host header.",
    )
    search_api_key: str | None = Field(
        default=None, description="API key for the title search provider."
    )
    search_max_pages: int = Field(
        default=1, ge=1, le=10, description="Number of search result pages consulted per keyword."
    )
    search_concurrency: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum number of provider lookups running at once during keyword search.",
    )
    primary_page_size: int = Field(
        default=37, ge=1, le=50, description="Number of movies requested per primary provider page."
    )
    request_timeout: float = Field(
        default=15.0, gt=0, description="Timeout in seconds applied to every upstream request."
    )
    cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0,
        description="Lifetime of cached endpoint responses; 0 disables the cache.",
    )
    cache_max_entries: int = Field(
        default=256, ge=1, description="Maximum number of cached endpoint responses."
    )
    log_level: str = Field(default="INFO", description="Root logging level for the service.")

    model_config = SettingsConfigDict(
        env_prefix="HYPERTUBE_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
