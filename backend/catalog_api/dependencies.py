"""FastAPI dependencies for the Catalog API."""
from fastapi import Depends, Request

from .services import CatalogService
from .settings import CatalogSettings
from .state import AppState


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_settings(app_state: AppState = Depends(get_app_state)) -> CatalogSettings:
    """Return the settings the application was built with."""
    return app_state.settings


def get_catalog_service(app_state: AppState = Depends(get_app_state)) -> CatalogService:
    """Return the catalog aggregation service dependency."""
    return app_state.catalog_service
