"""Tests for provider payload normalization."""
from __future__ import annotations

from backend.catalog_api.services.normalizer import (
    normalize_popcorn,
    normalize_popcorn_list,
    normalize_yts,
    normalize_yts_list,
)

from stubs import popcorn_movie, yts_movie


def test_yts_movie_maps_onto_common_record() -> None:
    """Primary provider fields should land on the shared record shape."""

    record = normalize_yts(yts_movie("tt0111161", "The Shawshank Redemption", rating=9.3, seeds=(40, 90)))

    assert record is not None
    assert record.imdb_code == "tt0111161"
    assert record.title == "The Shawshank Redemption"
    assert record.year == 2000
    assert record.runtime == 110
    assert record.rating == 9.3
    assert record.genres == ["Drama"]
    assert record.summary == "Summary of tt0111161"
    assert record.language == "en"
    assert record.large_cover_image == "https://img.example/tt0111161.jpg"
    assert record.source == "yts"
    assert [(t.quality, t.seeds, t.peers) for t in record.torrents] == [
        ("720p", 40, 20),
        ("1080p", 90, 45),
    ]
    assert record.torrents[0].hash == "TT0111161HASH0"


def test_yts_summary_falls_back_to_full_description_and_builds_trailer() -> None:
    raw = yts_movie("tt0000002", summary="", description_full="Long text", yt_trailer_code="abc123")

    record = normalize_yts(raw)

    assert record is not None
    assert record.summary == "Long text"
    assert record.trailer == "https://www.youtube.com/watch?v=abc123"


def test_absent_fields_stay_unset() -> None:
    """Missing provider fields must not be replaced by made-up defaults."""

    record = normalize_yts({"imdb_code": "tt0000003", "title": "Bare"})

    assert record is not None
    assert record.year is None
    assert record.rating is None
    assert record.runtime is None
    assert record.summary is None
    assert record.language is None
    assert record.large_cover_image is None
    assert record.trailer is None
    assert record.torrents == []
    assert record.genres == []


def test_popcorn_movie_maps_onto_common_record() -> None:
    """Secondary provider payloads use different keys and string numbers."""

    record = normalize_popcorn(popcorn_movie("tt0068646", "The Godfather", percentage=92, year="1972", seeds=(15, 80)))

    assert record is not None
    assert record.imdb_code == "tt0068646"
    assert record.title == "The Godfather"
    assert record.year == 1972
    assert record.runtime == 110
    assert record.rating == 9.2
    assert record.summary == "Synopsis of tt0068646"
    assert record.language is None
    assert record.large_cover_image == "https://popcorn.example/tt0068646.jpg"
    assert record.source == "popcorn"
    assert [(t.quality, t.seeds, t.peers, t.size) for t in record.torrents] == [
        ("720p", 15, 7, "1.5 GB"),
        ("1080p", 80, 40, "1.5 GB"),
    ]
    assert record.torrents[1].hash == "TT0068646ABC1"


def test_popcorn_without_rating_leaves_rating_unset() -> None:
    record = normalize_popcorn(popcorn_movie("tt0000004", percentage=None))

    assert record is not None
    assert record.rating is None


def test_list_helpers_skip_entries_without_identifier() -> None:
    yts_records = normalize_yts_list([yts_movie("tt1"), {"title": "No id"}, "garbage", None])
    popcorn_records = normalize_popcorn_list([{"imdb_id": "", "title": "Blank"}, popcorn_movie("tt2")])

    assert [record.imdb_code for record in yts_records] == ["tt1"]
    assert [record.imdb_code for record in popcorn_records] == ["tt2"]


def test_normalization_is_idempotent_and_leaves_input_untouched() -> None:
    raw = popcorn_movie("tt0000005", seeds=(3, 4))
    snapshot = {**raw}

    first = normalize_popcorn(raw)
    second = normalize_popcorn(raw)

    assert first == second
    assert raw == snapshot


def test_out_of_range_numbers_are_left_unset() -> None:
    """Numbers that cannot be represented should not break normalization."""

    record = normalize_popcorn(
        popcorn_movie("tt0000006", runtime="1e999", year="inf", rating={"percentage": "nan"})
    )
    yts_record = normalize_yts(yts_movie("tt0000007", rating="inf", runtime=float("inf")))

    assert record is not None
    assert record.runtime is None
    assert record.year is None
    assert record.rating is None
    assert yts_record is not None
    assert yts_record.rating is None
    assert yts_record.runtime is None
