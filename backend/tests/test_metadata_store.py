#!/usr/bin/env python3
# backend/tests/test_metadata_store.py
import pytest

from photo_catalog.services.storage.metadata import DuplicatePhotoError


def test_get_count_delete(add_photo, metadata_store):
    add_photo("A")
    add_photo("B")

    assert metadata_store.get_by_id("A").title == "Photo A"
    assert metadata_store.get_by_id("missing") is None
    assert metadata_store.count() == 2

    assert metadata_store.delete_by_id("A") is True
    assert metadata_store.delete_by_id("A") is False
    assert metadata_store.count() == 1


def test_delete_all_reports_rows(add_photo, metadata_store):
    for i in range(3):
        add_photo(f"P{i}")
    assert metadata_store.delete_all() == 3
    assert metadata_store.count() == 0


def test_duplicate_add(add_photo, metadata_store):
    add_photo("A")
    with pytest.raises(DuplicatePhotoError):
        metadata_store.add({"id": "A", "title": "again", "path": "photos/A.jpg"})
    # ロールバック後もセッションは使える
    assert metadata_store.count() == 1


def test_upsert_inserts_then_updates(metadata_store):
    metadata_store.upsert({"id": "A", "title": "first", "path": "photos/A.jpg"})
    metadata_store.upsert({"id": "A", "title": "second", "path": "photos/A.jpg"})

    assert metadata_store.count() == 1
    assert metadata_store.get_by_id("A").title == "second"


def test_update_ignores_unknown_fields(add_photo, metadata_store):
    add_photo("A")
    obj = metadata_store.update("A", {"title": "renamed", "bogus": 1, "id": "B"})
    assert obj.id == "A"
    assert obj.title == "renamed"
    assert metadata_store.update("missing", {"title": "x"}) is None


def test_list_page_and_ids(add_photo, metadata_store):
    add_photo("A", date_time_original="2024-01-01 10:00:00")
    add_photo("B", date_time_original="2024-06-01 10:00:00")
    add_photo("C", date_time_original="2023-01-01 10:00:00")

    assert [p.id for p in metadata_store.list_page(2, 0)] == ["B", "A"]
    assert [p.id for p in metadata_store.list_page(2, 2)] == ["C"]
    assert metadata_store.list_ids(10, 1) == ["B", "C"]
