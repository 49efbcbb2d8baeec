"""Shared state container for the Catalog API."""
from __future__ import annotations

from dataclasses import dataclass

from .services import CatalogFetcher, CatalogService, FetcherConfig, ResponseCache
from .settings import CatalogSettings


@dataclass(slots=True)
class AppState:
    """Encapsulates the long-lived collaborators shared across routers."""

    settings: CatalogSettings
    fetcher: CatalogFetcher
    cache: ResponseCache
    catalog_service: CatalogService

    def __init__(self, settings: CatalogSettings) -> None:
        self.settings = settings
        self.fetcher = CatalogFetcher(FetcherConfig.from_settings(settings))
        self.cache = ResponseCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )
        self.catalog_service = self.build_service(self.fetcher)

    def build_service(self, fetcher: CatalogFetcher) -> CatalogService:
        """Wire a catalog service around ``fetcher`` and the shared cache."""

        return CatalogService(
            fetcher,
            self.cache,
            search_concurrency=self.settings.search_concurrency,
            search_max_pages=self.settings.search_max_pages,
        )
