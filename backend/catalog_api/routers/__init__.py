"""Router exports for the Catalog API."""
from . import health, movies

__all__ = ["health", "movies"]
