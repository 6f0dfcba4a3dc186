# backend/photo_catalog/dependencies.py
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from photo_catalog.config import Settings, get_settings
from photo_catalog.db import get_db
from photo_catalog.services.storage.blob import BlobStore, LocalBlobStore
from photo_catalog.services.storage.metadata import SqlMetadataStore
from photo_catalog.services.storage.s3 import S3BlobStore
from photo_catalog.services.verification.deadline import Deadline


def get_metadata_store(db: Session = Depends(get_db)) -> SqlMetadataStore:
    return SqlMetadataStore(db)


@lru_cache
def _blob_store_for(
    backend: str,
    root: str,
    bucket: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    region: Optional[str] = None,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
) -> BlobStore:
    if backend == "s3":
        return S3BlobStore.connect(bucket, endpoint_url, region, access_key_id, secret_access_key)
    return LocalBlobStore(root)


def get_blob_store(settings: Settings = Depends(get_settings)) -> BlobStore:
    # 設定値ごとにキャッシュする（上書きされた Settings もそのまま反映される）
    return _blob_store_for(
        settings.blob_backend,
        str(settings.blob_root_path),
        settings.s3_bucket,
        settings.s3_endpoint_url,
        settings.s3_region,
        settings.s3_access_key_id,
        settings.s3_secret_access_key,
    )


def get_deadline(settings: Settings = Depends(get_settings)) -> Deadline:
    # リクエスト単位の締め切り（リクエスト受付時点から計測）
    return Deadline.after(settings.request_timeout_seconds)
