#!/usr/bin/env python3
# backend/tests/test_config.py
from pathlib import Path
from unittest.mock import MagicMock

from photo_catalog.config import Settings
from photo_catalog.dependencies import get_blob_store
from photo_catalog.services.storage import s3
from photo_catalog.services.storage.blob import LocalBlobStore
from photo_catalog.services.verification.policy import identifier_from_key, photo_key


def test_defaults_follow_policy_constants(tmp_path):
    s = Settings(data_directory=str(tmp_path))
    assert s.min_original_size_bytes == 10_000
    assert s.batch_verify_limit == 100
    assert s.purge_object_cap == 1000
    assert s.blob_root_path == Path(tmp_path) / "blobs"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("BATCH_VERIFY_LIMIT", "25")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("BLOB_ROOT", str(tmp_path / "bucket"))

    s = Settings()

    assert s.batch_verify_limit == 25
    assert s.cors_origins_list == ["http://a.test", "http://b.test"]
    assert s.blob_root_path == tmp_path / "bucket"


def test_key_conventions():
    assert photo_key("ABC") == "photos/ABC.jpg"
    assert identifier_from_key("photos/ABC.jpg") == "ABC"
    assert identifier_from_key("thumbnails/100/ABC.jpg") is None
    assert identifier_from_key("photos/") is None


def test_blob_store_follows_given_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(s3.boto3, "client", MagicMock())
    first = get_blob_store(
        Settings(data_directory=str(tmp_path), blob_backend="s3", s3_bucket="catalog-a")
    )
    second = get_blob_store(
        Settings(data_directory=str(tmp_path), blob_backend="s3", s3_bucket="catalog-b")
    )

    assert isinstance(first, s3.S3BlobStore)
    assert (first.bucket, second.bucket) == ("catalog-a", "catalog-b")


def test_blob_store_local_root_from_settings(tmp_path):
    store = get_blob_store(Settings(data_directory=str(tmp_path), blob_root=str(tmp_path / "b")))
    assert isinstance(store, LocalBlobStore)
    assert store.root == tmp_path / "b"
