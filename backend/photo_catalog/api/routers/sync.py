from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import ValidationError

from photo_catalog.dependencies import get_metadata_store
from photo_catalog.exceptions import MetadataStoreError
from photo_catalog.schemas.photo import PhotoIn, SyncError, SyncIn, SyncResult
from photo_catalog.services.storage.metadata import SqlMetadataStore

router = APIRouter()


@router.post("")
@router.post("/")
def sync_photos(payload: SyncIn, store: SqlMetadataStore = Depends(get_metadata_store)) -> SyncResult:
    """
    写真メタデータの一括同期（既存なら更新、無ければ追加）。
    - 1 件の失敗で全体を止めず、errors に id とメッセージを積む
    """
    result = SyncResult()
    for raw in payload.photos:
        photo_id = raw.get("id") if isinstance(raw, dict) else None
        try:
            if not isinstance(raw, dict):
                raise ValueError("photo entry must be an object")
            photo = PhotoIn.from_payload(raw)
            if not photo.id:
                raise ValueError("photo id is required")
            fields = photo.to_fields()
            fields["id"] = photo.id
            store.upsert(fields)
            result.success += 1
        except (ValueError, ValidationError, MetadataStoreError) as e:
            logger.warning(f"sync failed for photo {photo_id or 'unknown'}: {e}")
            result.failed += 1
            result.errors.append(SyncError(id=str(photo_id or "unknown"), error=str(e)))
    return result
