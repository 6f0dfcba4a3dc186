from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger

from photo_catalog.dependencies import get_blob_store, get_deadline, get_metadata_store
from photo_catalog.models.photo import ASSET_PATH_COLUMNS
from photo_catalog.schemas.photo import PhotoIn, PhotoOut, PhotoUpdate
from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import DuplicatePhotoError, SqlMetadataStore
from photo_catalog.services.verification.deadline import Deadline
from photo_catalog.services.verification.existence import check_exists
from photo_catalog.services.verification.models import ExistenceStatus

router = APIRouter()


@router.get("")
@router.get("/")
def list_photos(
    limit: int = 50, offset: int = 0, store: SqlMetadataStore = Depends(get_metadata_store)
) -> list[PhotoOut]:
    if limit < 1 or offset < 0:
        raise HTTPException(status_code=400, detail="limit must be >= 1 and offset >= 0")
    return [PhotoOut.model_validate(p) for p in store.list_page(limit, offset)]


# /{photo_id} より先に登録すること
@router.get("/count")
def count_photos(store: SqlMetadataStore = Depends(get_metadata_store)):
    return {"count": store.count()}


@router.get("/{photo_id}")
def get_photo(photo_id: str, store: SqlMetadataStore = Depends(get_metadata_store)) -> PhotoOut:
    p = store.get_by_id(photo_id)
    if not p:
        raise HTTPException(status_code=404, detail="photo not found")
    return PhotoOut.model_validate(p)


@router.head("/{photo_id}")
def photo_exists(
    photo_id: str,
    store: SqlMetadataStore = Depends(get_metadata_store),
    blobs: BlobStore = Depends(get_blob_store),
    deadline: Deadline = Depends(get_deadline),
):
    status = check_exists(photo_id, store, blobs, deadline=deadline)
    if status is ExistenceStatus.FOUND:
        return Response(status_code=200)
    if status is ExistenceStatus.METADATA_ONLY:
        # DB にはあるが blob が無い（drift）
        return Response(status_code=204, headers={"X-Photo-Files-Missing": "true"})
    return Response(status_code=404)


@router.post("", status_code=201)
@router.post("/", status_code=201)
def create_photo(payload: PhotoIn, store: SqlMetadataStore = Depends(get_metadata_store)) -> PhotoOut:
    if not payload.id or not payload.title or not payload.path:
        raise HTTPException(status_code=400, detail="missing required fields: id, title, path")
    fields = payload.to_fields()
    fields["id"] = payload.id
    try:
        obj = store.add(fields)
    except DuplicatePhotoError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return PhotoOut.model_validate(obj)


@router.put("/{photo_id}")
def update_photo(
    photo_id: str, payload: PhotoUpdate, store: SqlMetadataStore = Depends(get_metadata_store)
) -> PhotoOut:
    obj = store.update(photo_id, payload.to_fields())
    if not obj:
        raise HTTPException(status_code=404, detail="photo not found")
    return PhotoOut.model_validate(obj)


@router.delete("/{photo_id}")
def delete_photo(
    photo_id: str,
    store: SqlMetadataStore = Depends(get_metadata_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    p = store.get_by_id(photo_id)
    if not p:
        raise HTTPException(status_code=404, detail="photo not found")

    # blob の削除は best-effort。失敗しても行は削除する
    for column in ASSET_PATH_COLUMNS:
        key = getattr(p, column)
        if not key:
            continue
        try:
            blobs.delete(key)
        except Exception as e:
            logger.error(f"failed to delete blob {key} of photo {photo_id}: {e}")

    store.delete_by_id(photo_id)
    return {"ok": True}
