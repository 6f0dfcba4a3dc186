# backend/photo_catalog/services/verification/existence.py
from __future__ import annotations

from typing import Optional

from loguru import logger

from photo_catalog.exceptions import ExistenceCheckError
from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import MetadataStore
from photo_catalog.services.verification.deadline import Deadline, check_deadline
from photo_catalog.services.verification.models import ExistenceStatus
from photo_catalog.services.verification.policy import photo_key


def check_exists(
    identifier: str,
    metadata: MetadataStore,
    blobs: BlobStore,
    *,
    deadline: Optional[Deadline] = None,
) -> ExistenceStatus:
    """
    Blob first, metadata second.

    A present blob at photos/{id}.jpg answers FOUND without touching the
    metadata store. Failures raise ExistenceCheckError rather than
    degrading to NOT_FOUND.
    """
    check_deadline(deadline, "existence check")
    key = photo_key(identifier)

    try:
        head = blobs.head(key)
    except Exception as e:
        logger.warning(f"existence probe failed for {key}: {e}")
        raise ExistenceCheckError(identifier, f"blob probe failed: {e}") from e
    if head is not None:
        return ExistenceStatus.FOUND

    check_deadline(deadline, "existence check")
    try:
        record = metadata.get_by_id(identifier)
    except Exception as e:
        raise ExistenceCheckError(identifier, f"metadata lookup failed: {e}") from e

    if record is not None:
        logger.info(f"photo {identifier} has a metadata row but no blob at {key}")
        return ExistenceStatus.METADATA_ONLY
    return ExistenceStatus.NOT_FOUND
