# backend/photo_catalog/services/verification/audit.py
from __future__ import annotations

from typing import Optional, Tuple

from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import SqlMetadataStore
from photo_catalog.services.verification.batch import verify_batch
from photo_catalog.services.verification.counting import reconcile_count
from photo_catalog.services.verification.deadline import Deadline
from photo_catalog.services.verification.models import (
    CollectionCount,
    PhotoFileCheck,
    VerificationModel,
)
from photo_catalog.services.verification.policy import BATCH_VERIFY_LIMIT, VERIFY_WORKERS


class CollectionAudit(VerificationModel):
    count: CollectionCount
    checked: int
    drifting: Tuple[PhotoFileCheck, ...]


def audit_collection(
    store: SqlMetadataStore,
    blobs: BlobStore,
    *,
    chunk_size: int = BATCH_VERIFY_LIMIT,
    workers: int = VERIFY_WORKERS,
    deadline: Optional[Deadline] = None,
) -> CollectionAudit:
    """Reconciled count plus batch verification of every record, chunk by chunk."""
    count = reconcile_count(store, blobs, deadline=deadline)
    drifting = []
    checked = 0
    offset = 0
    while True:
        ids = store.list_ids(chunk_size, offset)
        if not ids:
            break
        batch = verify_batch(
            ids, store, blobs, limit=chunk_size, workers=workers, deadline=deadline
        )
        checked += batch.total
        drifting.extend(r for r in batch.results if not r.exists)
        offset += len(ids)
    return CollectionAudit(count=count, checked=checked, drifting=tuple(drifting))
