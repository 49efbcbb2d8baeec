"""Shared fixtures for the catalog test-suite."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.catalog_api import create_app  # noqa: E402
from backend.catalog_api.settings import CatalogSettings  # noqa: E402

from stubs import StubFetcher  # noqa: E402


@pytest.fixture()
def settings() -> CatalogSettings:
    """Settings isolated from the environment with caching disabled."""

    return CatalogSettings(
        _env_file=None,
        search_api_key="test-key",
        cache_ttl_seconds=0,
        search_concurrency=2,
    )


@pytest.fixture()
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture()
def client(settings: CatalogSettings, stub_fetcher: StubFetcher) -> TestClient:
    """Provide a test client whose catalog service talks to the stub fetcher."""

    app = create_app(settings=settings)
    app_state = app.state.app_state
    app_state.catalog_service = app_state.build_service(stub_fetcher)
    return TestClient(app)
