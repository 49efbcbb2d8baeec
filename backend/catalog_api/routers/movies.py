"""Movie catalog endpoints merging the upstream providers."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..dependencies import get_catalog_service
from ..schemas import Genre, MovieRecord, SortField, SortOrder
from ..services import CatalogService, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/movies",
    tags=["movies"],
)

NOT_FOUND_DETAIL = "Movies not found"
SERVER_ERROR_DETAIL = "Server error"


def _upstream_failure(exc: UpstreamError) -> HTTPException:
    logger.error("Upstream failure: %s", exc)
    return HTTPException(status_code=500, detail=SERVER_ERROR_DETAIL)


@router.get("/page", response_model=list[MovieRecord], response_model_exclude_none=True)
def list_movies_page(
    page: int = Query(..., ge=1, description="Page number starting at 1."),
    sort_by: SortField = Query(
        default=SortField.rating, description="Field used to order the merged list."
    ),
    order: SortOrder = Query(default=SortOrder.desc, description="Sort direction."),
    genre: Genre | None = Query(default=None, description="Optional genre filter."),
    service: CatalogService = Depends(get_catalog_service),
) -> list[MovieRecord]:
    """Return both providers' movies for a page, merged and deduplicated."""

    try:
        return service.list_page(page, sort_by=sort_by, order=order, genre=genre)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL) from exc
    except UpstreamError as exc:
        raise _upstream_failure(exc) from exc


@router.get("/keyword", include_in_schema=False)
@router.get("/keyword/", include_in_schema=False)
def search_movies_without_keyword() -> None:
    """Reject keyword searches that omit the keyword."""

    raise HTTPException(status_code=400, detail="Keyword is required")


@router.get(
    "/keyword/{keyword}", response_model=list[MovieRecord], response_model_exclude_none=True
)
def search_movies(
    keyword: str = Path(..., max_length=200, description="Title keyword to search for."),
    service: CatalogService = Depends(get_catalog_service),
) -> list[MovieRecord]:
    """Search titles by keyword and return the matching movies with torrents."""

    if not keyword.strip():
        raise HTTPException(status_code=400, detail="Keyword is required")
    try:
        return service.search(keyword)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL) from exc
    except UpstreamError as exc:
        raise _upstream_failure(exc) from exc


@router.get("/imdb_code", include_in_schema=False)
@router.get("/imdb_code/", include_in_schema=False)
def get_movie_without_code() -> None:
    raise HTTPException(status_code=400, detail="IMDb code is required")


@router.get(
    "/imdb_code/{imdb_code}", response_model=MovieRecord, response_model_exclude_none=True
)
def get_movie(
    imdb_code: str = Path(..., pattern=r"^tt\d{1,10}$", description="IMDb identifier."),
    service: CatalogService = Depends(get_catalog_service),
) -> MovieRecord:
    """Return the best-seeded record for an IMDb code."""

    try:
        return service.lookup(imdb_code)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Movie not found") from exc
    except UpstreamError as exc:
        raise _upstream_failure(exc) from exc


@router.get("/genre/{genre}", response_model=list[MovieRecord], response_model_exclude_none=True)
def list_movies_by_genre(
    genre: Genre,
    page: int = Query(default=1, ge=1, description="Page number starting at 1."),
    service: CatalogService = Depends(get_catalog_service),
) -> list[MovieRecord]:
    """Return the secondary provider's movies for a genre; empty when it has none."""

    try:
        return service.list_genre(genre, page)
    except UpstreamError as exc:
        raise _upstream_failure(exc) from exc
