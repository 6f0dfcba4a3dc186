#!/usr/bin/env python3
# backend/tests/test_existence.py
from unittest.mock import MagicMock

import pytest

from fakes import FakeBlobStore
from photo_catalog.exceptions import DeadlineExceeded, ExistenceCheckError, MetadataStoreError
from photo_catalog.services.verification.deadline import Deadline
from photo_catalog.services.verification.existence import check_exists
from photo_catalog.services.verification.models import ExistenceStatus


def test_blob_present_short_circuits_metadata(fake_blobs):
    fake_blobs.add("photos/ABC.jpg")
    metadata = MagicMock()

    assert check_exists("ABC", metadata, fake_blobs) is ExistenceStatus.FOUND
    assert fake_blobs.head_calls == ["photos/ABC.jpg"]
    metadata.get_by_id.assert_not_called()


def test_metadata_only_when_blob_missing(add_photo, metadata_store, fake_blobs):
    add_photo("ABC")
    assert check_exists("ABC", metadata_store, fake_blobs) is ExistenceStatus.METADATA_ONLY


def test_not_found_when_both_absent(metadata_store, fake_blobs):
    assert check_exists("nope", metadata_store, fake_blobs) is ExistenceStatus.NOT_FOUND


def test_probe_error_is_not_mapped_to_not_found(metadata_store, fake_blobs):
    fake_blobs.failing.add("photos/ABC.jpg")
    with pytest.raises(ExistenceCheckError) as exc_info:
        check_exists("ABC", metadata_store, fake_blobs)
    assert exc_info.value.identifier == "ABC"


def test_metadata_error_is_reported(fake_blobs):
    metadata = MagicMock()
    metadata.get_by_id.side_effect = MetadataStoreError("database is locked")
    with pytest.raises(ExistenceCheckError):
        check_exists("ABC", metadata, fake_blobs)


def test_expired_deadline_makes_no_calls():
    blobs = FakeBlobStore()
    metadata = MagicMock()
    with pytest.raises(DeadlineExceeded):
        check_exists("ABC", metadata, blobs, deadline=Deadline(expires_at=0.0, clock=lambda: 5.0))
    assert blobs.head_calls == []
    metadata.get_by_id.assert_not_called()
