"""Service layer helpers for the upstream movie providers."""

from .cache import ResponseCache
from .catalog_service import CatalogService
from .errors import CatalogServiceError, NotFoundError, UpstreamError
from .fetcher import CatalogFetcher, FetchResult, FetchStatus, FetcherConfig

__all__ = [
    "CatalogFetcher",
    "CatalogService",
    "CatalogServiceError",
    "FetchResult",
    "FetchStatus",
    "FetcherConfig",
    "NotFoundError",
    "ResponseCache",
    "UpstreamError",
]
