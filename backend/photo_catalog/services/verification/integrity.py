# backend/photo_catalog/services/verification/integrity.py
"""
Integrity of a single photo record against the blob store.

Probing is fail-closed: an exception from the blob store marks the asset as
absent, with the error message kept on the probe for diagnostics.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from loguru import logger

from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.verification.deadline import Deadline, check_deadline
from photo_catalog.services.verification.models import (
    AssetProbe,
    AssetRole,
    IntegrityVerdict,
    IssueCode,
)
from photo_catalog.services.verification.policy import MIN_ORIGINAL_SIZE_BYTES

_MISSING_ISSUE = {
    AssetRole.ORIGINAL: IssueCode.ORIGINAL_MISSING,
    AssetRole.THUMBNAIL_100: IssueCode.THUMBNAIL100_MISSING,
    AssetRole.THUMBNAIL_350: IssueCode.THUMBNAIL350_MISSING,
}


def asset_paths(record) -> Dict[AssetRole, Optional[str]]:
    """Role -> recorded path, in the order the assets are checked."""
    return {
        AssetRole.ORIGINAL: record.path or None,
        AssetRole.THUMBNAIL_100: record.thumbnail_path_100 or None,
        AssetRole.THUMBNAIL_350: record.thumbnail_path_350 or None,
    }


def probe_asset(blobs: BlobStore, path: Optional[str]) -> AssetProbe:
    if not path:
        return AssetProbe(path=None, exists=False)
    try:
        head = blobs.head(path)
    except Exception as e:
        logger.warning(f"probe failed for {path}: {e}")
        return AssetProbe(path=path, exists=False, error=str(e))
    if head is None:
        logger.debug(f"blob missing: {path}")
        return AssetProbe(path=path, exists=False)
    return AssetProbe(path=path, exists=True, size=head.size)


def issues_for(
    per_asset: Dict[AssetRole, AssetProbe], min_original_size: int = MIN_ORIGINAL_SIZE_BYTES
) -> tuple[IssueCode, ...]:
    # パス未設定は issue にしない。記録されたパスの blob が無い場合のみ
    issues: List[IssueCode] = []
    original = per_asset[AssetRole.ORIGINAL]
    if original.path and not original.exists:
        issues.append(IssueCode.ORIGINAL_MISSING)
    elif original.exists and (original.size or 0) < min_original_size:
        issues.append(IssueCode.ORIGINAL_TOO_SMALL)
    for role in (AssetRole.THUMBNAIL_100, AssetRole.THUMBNAIL_350):
        probe = per_asset[role]
        if probe.path and not probe.exists:
            issues.append(_MISSING_ISSUE[role])
    return tuple(issues)


def is_intact(
    per_asset: Dict[AssetRole, AssetProbe], min_original_size: int = MIN_ORIGINAL_SIZE_BYTES
) -> bool:
    original = per_asset[AssetRole.ORIGINAL]
    return (
        original.exists
        and (original.size or 0) >= min_original_size
        and per_asset[AssetRole.THUMBNAIL_100].exists
        and per_asset[AssetRole.THUMBNAIL_350].exists
    )


def evaluate(
    record,
    blobs: BlobStore,
    *,
    min_original_size: int = MIN_ORIGINAL_SIZE_BYTES,
    deadline: Optional[Deadline] = None,
) -> IntegrityVerdict:
    if record is None:
        raise ValueError("evaluate() needs a record; handle not-found before calling")
    check_deadline(deadline, "integrity check")

    per_asset = {role: probe_asset(blobs, path) for role, path in asset_paths(record).items()}
    return IntegrityVerdict(
        is_intact=is_intact(per_asset, min_original_size),
        issues=issues_for(per_asset, min_original_size),
        per_asset=per_asset,
    )
