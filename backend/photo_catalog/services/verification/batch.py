# backend/photo_catalog/services/verification/batch.py
from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from loguru import logger

from photo_catalog.exceptions import DeadlineExceeded, InvalidInputError
from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import MetadataStore
from photo_catalog.services.verification.deadline import Deadline, check_deadline
from photo_catalog.services.verification.integrity import asset_paths, probe_asset
from photo_catalog.services.verification.models import (
    PHOTO_NOT_IN_DATABASE,
    AssetRole,
    BatchCounts,
    BatchVerification,
    PhotoFileCheck,
)
from photo_catalog.services.verification.policy import BATCH_VERIFY_LIMIT, VERIFY_WORKERS

# (role, path) の組。ORM オブジェクトをワーカースレッドに渡さないための平の値
AssetPaths = Tuple[Tuple[AssetRole, Optional[str]], ...]


def record_asset_paths(record) -> Optional[AssetPaths]:
    if record is None:
        return None
    return tuple(asset_paths(record).items())


def check_asset_paths(
    identifier: str,
    paths: Optional[AssetPaths],
    blobs: BlobStore,
    deadline: Optional[Deadline] = None,
) -> PhotoFileCheck:
    """Probe every non-empty asset path; None means the record is absent."""
    if paths is None:
        return PhotoFileCheck(id=identifier, exists=False, reason=PHOTO_NOT_IN_DATABASE)
    check_deadline(deadline, f"verification of {identifier}")

    assets = {}
    missing: List[str] = []
    errors: List[str] = []
    for role, path in paths:
        if not path:
            continue
        probe = probe_asset(blobs, path)
        assets[role] = probe.exists
        if not probe.exists:
            missing.append(path)
        if probe.error:
            errors.append(f"{path}: {probe.error}")
    return PhotoFileCheck(
        id=identifier,
        exists=not missing,
        missing_files=tuple(missing),
        assets=assets,
        errors=tuple(errors),
    )


def check_record_files(
    identifier: str, record, blobs: BlobStore, deadline: Optional[Deadline] = None
) -> PhotoFileCheck:
    return check_asset_paths(identifier, record_asset_paths(record), blobs, deadline)


def verify_photo(
    identifier: str,
    metadata: MetadataStore,
    blobs: BlobStore,
    *,
    deadline: Optional[Deadline] = None,
) -> PhotoFileCheck:
    check_deadline(deadline, "verification")
    return check_record_files(identifier, metadata.get_by_id(identifier), blobs, deadline)


def _validate_identifiers(identifiers, limit: int) -> List[str]:
    if isinstance(identifiers, (str, bytes)) or not isinstance(identifiers, Sequence):
        raise InvalidInputError("ids should be a non-empty array")
    if len(identifiers) == 0:
        raise InvalidInputError("ids should be a non-empty array")
    if len(identifiers) > limit:
        logger.debug(f"batch of {len(identifiers)} ids truncated to {limit}")
    return [str(i) for i in identifiers[:limit]]


def verify_batch(
    identifiers: Sequence[str],
    metadata: MetadataStore,
    blobs: BlobStore,
    *,
    limit: int = BATCH_VERIFY_LIMIT,
    workers: int = VERIFY_WORKERS,
    deadline: Optional[Deadline] = None,
) -> BatchVerification:
    ids = _validate_identifiers(identifiers, limit)
    check_deadline(deadline, "batch verification")

    # Session はスレッドセーフではないので DB 参照は呼び出しスレッドで順に行う
    targets = []
    for identifier in ids:
        check_deadline(deadline, "batch verification")
        targets.append((identifier, record_asset_paths(metadata.get_by_id(identifier))))

    def _check(pair) -> PhotoFileCheck:
        identifier, paths = pair
        try:
            return check_asset_paths(identifier, paths, blobs, deadline)
        except DeadlineExceeded:
            raise
        except Exception as e:
            # 1 件の失敗でバッチ全体を止めない
            logger.warning(f"verification of {identifier} failed: {e}")
            return PhotoFileCheck(id=identifier, exists=False, errors=(str(e),))

    # map は入力順を保つ
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(ids)))) as pool:
        results = tuple(pool.map(_check, targets))

    success = sum(1 for r in results if r.exists)
    return BatchVerification(
        total=len(results),
        results=results,
        summary=BatchCounts(success=success, failed=len(results) - success),
    )
