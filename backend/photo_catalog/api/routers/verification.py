import secrets

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from photo_catalog.config import Settings, get_settings
from photo_catalog.dependencies import get_blob_store, get_deadline, get_metadata_store
from photo_catalog.schemas.photo import BatchVerifyIn, PhotoMetadata
from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import SqlMetadataStore
from photo_catalog.services.verification.batch import verify_batch, verify_photo
from photo_catalog.services.verification.deadline import Deadline
from photo_catalog.services.verification.models import (
    BatchVerification,
    PhotoFileCheck,
    PurgeResult,
)
from photo_catalog.services.verification.purge import purge_all

router = APIRouter()


@router.get("/metadata/{photo_id}")
def get_metadata(photo_id: str, store: SqlMetadataStore = Depends(get_metadata_store)):
    p = store.get_by_id(photo_id)
    if not p:
        raise HTTPException(status_code=404, detail="photo metadata not found")
    return {"metadata": PhotoMetadata.model_validate(p).model_dump(by_alias=True)}


@router.get("/verify/{photo_id}")
def verify_photo_files(
    photo_id: str,
    store: SqlMetadataStore = Depends(get_metadata_store),
    blobs: BlobStore = Depends(get_blob_store),
    deadline: Deadline = Depends(get_deadline),
) -> PhotoFileCheck:
    return verify_photo(photo_id, store, blobs, deadline=deadline)


@router.post("/batch-verify")
def batch_verify(
    payload: BatchVerifyIn,
    store: SqlMetadataStore = Depends(get_metadata_store),
    blobs: BlobStore = Depends(get_blob_store),
    deadline: Deadline = Depends(get_deadline),
    settings: Settings = Depends(get_settings),
) -> BatchVerification:
    return verify_batch(
        payload.ids,
        store,
        blobs,
        limit=settings.batch_verify_limit,
        workers=settings.verify_workers,
        deadline=deadline,
    )


@router.post("/clear")
def clear_all(
    token: str = "",
    store: SqlMetadataStore = Depends(get_metadata_store),
    blobs: BlobStore = Depends(get_blob_store),
    deadline: Deadline = Depends(get_deadline),
    settings: Settings = Depends(get_settings),
) -> PurgeResult:
    # 破壊的操作。token 未設定なら無効化
    if not settings.clear_token:
        raise HTTPException(status_code=403, detail="clearing is disabled")
    if not secrets.compare_digest(token.encode(), settings.clear_token.encode()):
        raise HTTPException(status_code=401, detail="unauthorized")
    logger.warning("clear-all requested")
    return purge_all(store, blobs, cap=settings.purge_object_cap, deadline=deadline)
