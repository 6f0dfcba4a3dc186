import mimetypes

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile

from photo_catalog.config import Settings, get_settings
from photo_catalog.dependencies import get_blob_store, get_deadline, get_metadata_store
from photo_catalog.services.storage.blob import BlobStore
from photo_catalog.services.storage.metadata import SqlMetadataStore
from photo_catalog.services.verification.counting import reconcile_count
from photo_catalog.services.verification.deadline import Deadline
from photo_catalog.services.verification.integrity import evaluate
from photo_catalog.services.verification.models import CollectionCount, IntegrityVerdict

router = APIRouter()


@router.post("/upload")
def upload_file(
    file: UploadFile = File(...),
    path: str = Form(...),
    blobs: BlobStore = Depends(get_blob_store),
):
    if not path:
        raise HTTPException(status_code=400, detail="missing file or path")
    data = file.file.read()
    head = blobs.put(path, data)
    return {"success": True, "path": head.key, "size": head.size, "type": file.content_type}


@router.get("/files/count")
def count_files(
    store: SqlMetadataStore = Depends(get_metadata_store),
    blobs: BlobStore = Depends(get_blob_store),
    deadline: Deadline = Depends(get_deadline),
) -> CollectionCount:
    return reconcile_count(store, blobs, deadline=deadline)


@router.get("/files/integrity/{photo_id}")
def file_integrity(
    photo_id: str,
    store: SqlMetadataStore = Depends(get_metadata_store),
    blobs: BlobStore = Depends(get_blob_store),
    deadline: Deadline = Depends(get_deadline),
    settings: Settings = Depends(get_settings),
) -> IntegrityVerdict:
    p = store.get_by_id(photo_id)
    if not p:
        raise HTTPException(status_code=404, detail="photo not found")
    return evaluate(p, blobs, min_original_size=settings.min_original_size_bytes, deadline=deadline)


# 固定パス（count / integrity）より後に登録すること
@router.get("/files/{key:path}")
def get_file(key: str, blobs: BlobStore = Depends(get_blob_store)):
    data = blobs.get(key)
    if data is None:
        raise HTTPException(status_code=404, detail="file not found")
    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
