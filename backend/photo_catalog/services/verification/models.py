# backend/photo_catalog/services/verification/models.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AssetRole(str, Enum):
    ORIGINAL = "original"
    THUMBNAIL_100 = "thumbnail100"
    THUMBNAIL_350 = "thumbnail350"


class IssueCode(str, Enum):
    ORIGINAL_MISSING = "original_missing"
    ORIGINAL_TOO_SMALL = "original_too_small"
    THUMBNAIL100_MISSING = "thumbnail100_missing"
    THUMBNAIL350_MISSING = "thumbnail350_missing"


class ExistenceStatus(str, Enum):
    FOUND = "found"  # blob あり
    METADATA_ONLY = "metadata_only"  # DB 行のみ（drift）
    NOT_FOUND = "not_found"


PHOTO_NOT_IN_DATABASE = "photo_not_in_database"


class VerificationModel(BaseModel):
    # レスポンスは camelCase（isIntact, missingFiles ...）
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class AssetProbe(VerificationModel):
    path: Optional[str] = None
    exists: bool = False
    size: Optional[int] = None
    error: Optional[str] = None


class IntegrityVerdict(VerificationModel):
    is_intact: bool
    issues: Tuple[IssueCode, ...] = ()
    per_asset: Dict[AssetRole, AssetProbe]


class PhotoFileCheck(VerificationModel):
    id: str
    exists: bool
    missing_files: Tuple[str, ...] = ()
    reason: Optional[str] = None
    assets: Dict[AssetRole, bool] = {}
    errors: Tuple[str, ...] = ()


class BatchCounts(VerificationModel):
    success: int
    failed: int


class BatchVerification(VerificationModel):
    total: int
    results: Tuple[PhotoFileCheck, ...]
    summary: BatchCounts


class CollectionCount(VerificationModel):
    reconciled_count: int
    blob_derived_count: int
    metadata_count: int
    total_blob_files_scanned: int
    thumbnails_directory_present: bool
    listing_complete: bool = True


class DatabasePurgeResult(VerificationModel):
    success: bool
    records_deleted: int = 0
    error: Optional[str] = None


class StoragePurgeResult(VerificationModel):
    success: bool
    objects_deleted: int = 0
    cap_reached: bool = False
    partial: bool = False
    error: Optional[str] = None
    message: str = ""


class PurgeResult(VerificationModel):
    database: DatabasePurgeResult
    storage: StoragePurgeResult
