# backend/photo_catalog/services/storage/s3.py
"""S3-compatible blob store (AWS S3, Cloudflare R2, MinIO) via boto3."""

from __future__ import annotations

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from photo_catalog.exceptions import BlobStoreError, InvalidInputError
from photo_catalog.services.storage.blob import BlobHead, BlobListing, normalize_key

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(e: ClientError) -> str:
    return str(e.response.get("Error", {}).get("Code", "Unknown"))


def _require_key(key: str) -> str:
    # S3 のキーは任意の文字列。ディレクトリ脱出の検査は put 側だけで行う
    if not key:
        raise InvalidInputError("blob key must not be empty")
    return key


class S3BlobStore:
    def __init__(self, bucket: str, client: Any = None, **client_kwargs: Any):
        self.bucket = bucket
        self.client = client if client is not None else boto3.client("s3", **client_kwargs)

    @classmethod
    def connect(
        cls,
        bucket: Optional[str],
        endpoint_url: Optional[str] = None,
        region: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ) -> "S3BlobStore":
        if not bucket:
            raise BlobStoreError("s3 blob backend requires S3_BUCKET")
        return cls(
            bucket,
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    def head(self, key: str) -> Optional[BlobHead]:
        key = _require_key(key)
        try:
            resp = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise BlobStoreError(f"head {key}: {e}") from e
        except BotoCoreError as e:
            raise BlobStoreError(f"head {key}: {e}") from e
        return BlobHead(key=key, size=int(resp.get("ContentLength", 0)))

    def get(self, key: str) -> Optional[bytes]:
        key = _require_key(key)
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
            return resp["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise BlobStoreError(f"get {key}: {e}") from e
        except BotoCoreError as e:
            raise BlobStoreError(f"get {key}: {e}") from e

    def put(self, key: str, data: bytes) -> BlobHead:
        key = normalize_key(key)
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise BlobStoreError(f"put {key}: {e}") from e
        return BlobHead(key=key, size=len(data))

    def delete(self, key: str) -> None:
        key = _require_key(key)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise BlobStoreError(f"delete {key}: {e}") from e

    def list(
        self, prefix: str = "", limit: int = 1000, cursor: Optional[str] = None
    ) -> BlobListing:
        params = {"Bucket": self.bucket, "Prefix": prefix, "MaxKeys": limit}
        if cursor:
            params["ContinuationToken"] = cursor
        try:
            resp = self.client.list_objects_v2(**params)
        except (ClientError, BotoCoreError) as e:
            raise BlobStoreError(f"list {prefix!r}: {e}") from e

        objects = tuple(
            BlobHead(key=o["Key"], size=int(o.get("Size", 0))) for o in resp.get("Contents", [])
        )
        next_cursor = resp.get("NextContinuationToken") if resp.get("IsTruncated") else None
        return BlobListing(objects=objects, cursor=next_cursor)
