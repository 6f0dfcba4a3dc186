# backend/photo_catalog/services/verification/purge.py
"""
Bounded clearing of both stores.

Callers must authorize before reaching this module. Storage deletion stops
at a hard object cap so one call has a bounded cost; a capped result means
the caller should invoke it again.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import MetadataStore
from photo_catalog.services.verification.deadline import Deadline, check_deadline
from photo_catalog.services.verification.models import (
    DatabasePurgeResult,
    PurgeResult,
    StoragePurgeResult,
)
from photo_catalog.services.verification.policy import (
    MAX_LIST_PAGES,
    PURGE_OBJECT_CAP,
    PURGE_PAGE_SIZE,
)


def purge_database(metadata: MetadataStore) -> DatabasePurgeResult:
    try:
        deleted = metadata.delete_all()
    except Exception as e:
        logger.error(f"database purge failed: {e}")
        return DatabasePurgeResult(success=False, error=str(e))
    logger.info(f"database purge removed {deleted} records")
    return DatabasePurgeResult(success=True, records_deleted=deleted)


def purge_storage(
    blobs: BlobStore,
    *,
    cap: int = PURGE_OBJECT_CAP,
    page_size: int = PURGE_PAGE_SIZE,
    max_pages: int = MAX_LIST_PAGES,
    deadline: Optional[Deadline] = None,
) -> StoragePurgeResult:
    deleted = 0
    cursor: Optional[str] = None
    pages = 0
    try:
        while deleted < cap and pages < max_pages:
            check_deadline(deadline, "storage purge")
            listing = blobs.list(limit=page_size, cursor=cursor)
            pages += 1
            if not listing.objects:
                break
            for obj in listing.objects:
                blobs.delete(obj.key)
                deleted += 1
                if deleted >= cap:
                    break
            cursor = listing.cursor
            if not cursor:
                break
    except Exception as e:
        # 途中失敗はこの呼び出し内では回復しない。状態は再検証まで不定
        logger.error(f"storage purge failed after {deleted} deletions: {e}")
        return StoragePurgeResult(
            success=False,
            objects_deleted=deleted,
            cap_reached=False,
            partial=deleted > 0,
            error=str(e),
            message=(
                f"partially purged {deleted} objects" if deleted else "no objects were deleted"
            ),
        )

    cap_reached = deleted >= cap
    message = (
        f"deleted {deleted} objects (cap reached, call again to continue)"
        if cap_reached
        else f"deleted all {deleted} objects"
    )
    logger.info(f"storage purge: {message}")
    return StoragePurgeResult(
        success=True, objects_deleted=deleted, cap_reached=cap_reached, message=message
    )


def purge_all(
    metadata: MetadataStore,
    blobs: BlobStore,
    *,
    cap: int = PURGE_OBJECT_CAP,
    page_size: int = PURGE_PAGE_SIZE,
    max_pages: int = MAX_LIST_PAGES,
    deadline: Optional[Deadline] = None,
) -> PurgeResult:
    # 期限切れなら何も消さずに失敗させる
    check_deadline(deadline, "purge")
    database = purge_database(metadata)
    storage = purge_storage(
        blobs, cap=cap, page_size=page_size, max_pages=max_pages, deadline=deadline
    )
    return PurgeResult(database=database, storage=storage)
