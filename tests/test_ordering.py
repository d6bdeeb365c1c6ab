"""Tests for slideshow photo ordering."""

from dataclasses import replace

import pytest

from memories_api.core.errors import DataIntegrity
from memories_api.schemas.requests import SortBy
from memories_api.services.ordering import order_photos, parse_upload_date
from tests.conftest import make_photo


def test_upload_date_sorts_ascending(store) -> None:
    photos = [store.photos[i] for i in (1, 2, 3, 5, 7)]

    ordered = order_photos(photos, SortBy.UPLOAD_DATE)

    assert [p.id for p in ordered] == [7, 2, 3, 1, 5]
    dates = [parse_upload_date(p) for p in ordered]
    assert dates == sorted(dates)


def test_upload_date_ties_keep_request_order(photo_dir) -> None:
    same = "2024-01-01T00:00:00Z"
    photos = [
        make_photo(photo_dir, 4, upload_date=same),
        make_photo(photo_dir, 2, upload_date="2023-12-31T23:59:59Z"),
        make_photo(photo_dir, 8, upload_date=same),
        make_photo(photo_dir, 6, upload_date=same),
    ]

    ordered = order_photos(photos, SortBy.UPLOAD_DATE)

    assert [p.id for p in ordered] == [2, 4, 8, 6]


def test_upload_date_mixes_naive_and_offset_timestamps(photo_dir) -> None:
    photos = [
        make_photo(photo_dir, 1, upload_date="2024-01-01T12:00:00+02:00"),  # 10:00 UTC
        make_photo(photo_dir, 2, upload_date="2024-01-01T11:00:00"),
    ]

    ordered = order_photos(photos, SortBy.UPLOAD_DATE)

    assert [p.id for p in ordered] == [1, 2]


def test_event_sorts_lexicographically_with_missing_first(store) -> None:
    photos = [store.photos[i] for i in (1, 3, 2, 7)]

    ordered = order_photos(photos, SortBy.EVENT)

    # 3 and 7 have no event and sort as "" in their original order
    assert [p.id for p in ordered] == [3, 7, 2, 1]


def test_custom_keeps_request_order(store) -> None:
    photos = [store.photos[i] for i in (5, 1, 7, 2)]

    ordered = order_photos(photos, SortBy.CUSTOM)

    assert [p.id for p in ordered] == [5, 1, 7, 2]
    assert ordered is not photos


def test_malformed_upload_date_is_data_integrity_error(store) -> None:
    broken = replace(
        store.photos[3],
        metadata=replace(store.photos[3].metadata, upload_date="last tuesday"),
    )

    with pytest.raises(DataIntegrity):
        order_photos([store.photos[1], broken], SortBy.UPLOAD_DATE)


def test_malformed_upload_date_ignored_for_other_sorts(store) -> None:
    broken = replace(
        store.photos[3],
        metadata=replace(store.photos[3].metadata, upload_date=""),
    )

    ordered = order_photos([store.photos[1], broken], SortBy.CUSTOM)

    assert [p.id for p in ordered] == [1, 3]
