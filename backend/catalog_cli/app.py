"""Command line interface for the Hypertube Catalog API."""
from __future__ import annotations

import json
from typing import Any, Optional
from urllib.parse import quote

import httpx
import typer

from .client import create_client


DEFAULT_API_BASE = "http://localhost:8000"

SORT_FIELDS = ("rating", "title", "year", "runtime")
SORT_ORDERS = ("desc", "asc")

app = typer.Typer(help="Query the Hypertube movie catalog service.")
movies_app = typer.Typer(help="Browse and search the merged movie catalog.")
app.add_typer(movies_app, name="movies")


def _api_base_option() -> typer.Option:
    return typer.Option(
        DEFAULT_API_BASE,
        "--api-base",
        help="Base URL for the Catalog API service.",
        show_default=True,
        envvar="HYPERTUBE_CATALOG_API_BASE",
    )


def _echo_response(response: httpx.Response, *, missing: str = "Movies not found") -> None:
    if response.status_code == 404:
        typer.echo(missing, err=True)
        raise typer.Exit(code=1)
    if response.status_code == 400:
        typer.echo(f"Invalid request: {response.json().get('detail')}", err=True)
        raise typer.Exit(code=2)
    response.raise_for_status()
    typer.echo(json.dumps(response.json(), indent=2, ensure_ascii=False))


@app.command()
def health(api_base: str = _api_base_option()) -> None:
    """Call the /health endpoint and pretty-print the response."""

    with create_client(api_base) as client:
        response = client.get("/health")
        response.raise_for_status()
        typer.echo(json.dumps(response.json(), indent=2, ensure_ascii=False))


@movies_app.command("page")
def list_page(
    page: int = typer.Argument(1, min=1, help="Page number starting at 1."),
    sort_by: str = typer.Option("rating", help="Field used to order results.", show_default=True),
    order: str = typer.Option("desc", help="Sort direction (desc or asc).", show_default=True),
    genre: Optional[str] = typer.Option(None, help="Optional genre filter."),
    api_base: str = _api_base_option(),
) -> None:
    """Display one merged page of the catalog."""

    if sort_by not in SORT_FIELDS:
        typer.echo(f"Unsupported sort field: {sort_by}", err=True)
        raise typer.Exit(code=2)
    if order not in SORT_ORDERS:
        typer.echo(f"Unsupported sort order: {order}", err=True)
        raise typer.Exit(code=2)

    params: dict[str, Any] = {"page": page, "sort_by": sort_by, "order": order}
    if genre:
        params["genre"] = genre

    with create_client(api_base) as client:
        _echo_response(client.get("/movies/page", params=params))


@movies_app.command("search")
def search(
    keyword: str = typer.Argument(..., help="Title keyword to search for."),
    api_base: str = _api_base_option(),
) -> None:
    """Search movies by title keyword."""

    with create_client(api_base) as client:
        _echo_response(client.get(f"/movies/keyword/{quote(keyword, safe='')}"))


@movies_app.command("show")
def show(
    imdb_code: str = typer.Argument(..., help="IMDb identifier, e.g. tt0111161."),
    api_base: str = _api_base_option(),
) -> None:
    """Display the best-seeded record for an IMDb code."""

    with create_client(api_base) as client:
        _echo_response(client.get(f"/movies/imdb_code/{imdb_code}"), missing="Movie not found")


@movies_app.command("genre")
def list_genre(
    genre: str = typer.Argument(..., help="Genre slug, e.g. horror or science-fiction."),
    page: int = typer.Option(1, min=1, help="Page number starting at 1."),
    api_base: str = _api_base_option(),
) -> None:
    """Display the movies listed for a genre."""

    with create_client(api_base) as client:
        _echo_response(client.get(f"/movies/genre/{genre}", params={"page": page}))
