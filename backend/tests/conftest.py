# backend/tests/conftest.py
"""
Pytest configuration and shared fixtures for the photo catalog tests.
"""

import os

# photo_catalog.db はインポート時にエンジンを作るので先に設定する
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fakes import FakeBlobStore
from photo_catalog.config import Settings, get_settings
from photo_catalog.db import init_db
from photo_catalog.dependencies import get_blob_store, get_metadata_store
from photo_catalog.main import app
from photo_catalog.models.photo import Photo
from photo_catalog.services.storage.blob import LocalBlobStore
from photo_catalog.services.storage.metadata import SqlMetadataStore


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def metadata_store(db_session):
    return SqlMetadataStore(db_session)


@pytest.fixture
def fake_blobs():
    return FakeBlobStore()


@pytest.fixture
def local_blobs(tmp_path):
    return LocalBlobStore(tmp_path / "blobs")


def photo_paths(photo_id: str) -> dict:
    return {
        "path": f"photos/{photo_id}.jpg",
        "thumbnail_path_100": f"thumbnails/100/{photo_id}.jpg",
        "thumbnail_path_350": f"thumbnails/350/{photo_id}.jpg",
    }


@pytest.fixture
def add_photo(metadata_store):
    """Insert a photo row; optionally create its blobs in the given store."""

    def _add(photo_id, blobs=None, original_size=20_000, skip=(), **fields):
        paths = photo_paths(photo_id)
        row = {"id": photo_id, "title": f"Photo {photo_id}", **paths, **fields}
        metadata_store.add(row)
        if blobs is not None:
            sizes = {"path": original_size, "thumbnail_path_100": 800, "thumbnail_path_350": 4000}
            for column, key in paths.items():
                if column in skip:
                    continue
                if isinstance(blobs, FakeBlobStore):
                    blobs.add(key, sizes[column])
                else:
                    blobs.put(key, b"x" * sizes[column])
        return metadata_store.get_by_id(photo_id)

    return _add


@pytest.fixture
def make_record():
    def _make(photo_id="P1", **overrides):
        return Photo(id=photo_id, title="t", **{**photo_paths(photo_id), **overrides})

    return _make


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url="sqlite://",
        data_directory=str(tmp_path),
        clear_token="let-me-clear",
        request_timeout_seconds=30,
        verify_workers=4,
    )


@pytest.fixture
def client(db_session, local_blobs, test_settings):
    """TestClient wired to the in-memory database and a tmp_path blob store."""
    app.dependency_overrides[get_metadata_store] = lambda: SqlMetadataStore(db_session)
    app.dependency_overrides[get_blob_store] = lambda: local_blobs
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()
