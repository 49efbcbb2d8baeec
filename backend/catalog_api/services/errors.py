"""Exceptions raised by the catalog service layer."""
from __future__ import annotations


class CatalogServiceError(RuntimeError):
    """Base class for failures raised while assembling catalog responses."""


class NotFoundError(CatalogServiceError):
    """Raised when the providers hold no data matching the query."""


class UpstreamError(CatalogServiceError):
    """Raised when a provider cannot be reached or returns an unusable payload."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
