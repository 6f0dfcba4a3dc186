# backend/photo_catalog/services/verification/counting.py
from __future__ import annotations

from typing import Optional, Set

from loguru import logger

from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import MetadataStore
from photo_catalog.services.verification.deadline import Deadline, check_deadline
from photo_catalog.services.verification.models import CollectionCount
from photo_catalog.services.verification.policy import (
    COUNT_PAGE_SIZE,
    MAX_LIST_PAGES,
    PHOTOS_PREFIX,
    THUMBNAILS_PREFIX,
    identifier_from_key,
)


def _thumbnails_present(blobs: BlobStore) -> bool:
    # 存在確認のみ。全件は走査しない
    try:
        listing = blobs.list(prefix=THUMBNAILS_PREFIX, limit=1)
    except Exception as e:
        logger.warning(f"thumbnail listing failed: {e}")
        return False
    return len(listing.objects) > 0


def reconcile_count(
    metadata: MetadataStore,
    blobs: BlobStore,
    *,
    page_size: int = COUNT_PAGE_SIZE,
    max_pages: int = MAX_LIST_PAGES,
    deadline: Optional[Deadline] = None,
) -> CollectionCount:
    """
    Count photos from the blob listing, falling back to the metadata row
    count only when the listing yields no identifiers.

    An empty listing more likely means the bucket is unreachable than that
    the catalog is empty; a non-zero blob count is never overridden.
    """
    check_deadline(deadline, "collection count")

    photo_ids: Set[str] = set()
    files_scanned = 0
    listing_complete = True
    seen_cursors: Set[str] = set()
    cursor: Optional[str] = None
    pages = 0

    while True:
        check_deadline(deadline, "collection count")
        if pages >= max_pages:
            logger.warning(f"stopped listing {PHOTOS_PREFIX} after {pages} pages")
            listing_complete = False
            break
        listing = blobs.list(prefix=PHOTOS_PREFIX, limit=page_size, cursor=cursor)
        pages += 1
        files_scanned += len(listing.objects)
        for obj in listing.objects:
            photo_id = identifier_from_key(obj.key)
            if photo_id:
                photo_ids.add(photo_id)

        cursor = listing.cursor
        if not cursor:
            break
        if not listing.objects or cursor in seen_cursors:
            logger.warning(f"blob store returned a non-advancing cursor {cursor!r}; stopping")
            listing_complete = False
            break
        seen_cursors.add(cursor)

    thumbnails_present = _thumbnails_present(blobs)
    blob_count = len(photo_ids)
    logger.debug(
        f"{files_scanned} files under {PHOTOS_PREFIX}, {blob_count} unique ids, "
        f"thumbnails present: {thumbnails_present}"
    )

    metadata_count = 0
    if blob_count == 0:
        check_deadline(deadline, "collection count")
        try:
            metadata_count = metadata.count()
            logger.info(f"blob listing empty, using metadata count {metadata_count}")
        except Exception as e:
            logger.warning(f"metadata count fallback failed: {e}")

    return CollectionCount(
        reconciled_count=blob_count if blob_count > 0 else metadata_count,
        blob_derived_count=blob_count,
        metadata_count=metadata_count,
        total_blob_files_scanned=files_scanned,
        thumbnails_directory_present=thumbnails_present,
        listing_complete=listing_complete,
    )
