# backend/photo_catalog/services/storage/metadata.py
"""Metadata store: the photos table behind a small key-indexed interface."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from photo_catalog.exceptions import MetadataStoreError
from photo_catalog.models.photo import Photo


class MetadataStore(Protocol):
    def get_by_id(self, photo_id: str) -> Optional[Photo]: ...

    def count(self) -> int: ...

    def delete_by_id(self, photo_id: str) -> bool: ...

    def delete_all(self) -> int: ...


class DuplicatePhotoError(MetadataStoreError):
    pass


_UPDATABLE = {c.name for c in Photo.__table__.columns} - {"id"}


class SqlMetadataStore:
    def __init__(self, db: Session):
        self.db = db

    def _fail(self, op: str, e: SQLAlchemyError) -> MetadataStoreError:
        self.db.rollback()
        return MetadataStoreError(f"{op} failed: {e}")

    # --- verification が使う primitive ---

    def get_by_id(self, photo_id: str) -> Optional[Photo]:
        try:
            return self.db.get(Photo, photo_id)
        except SQLAlchemyError as e:
            raise self._fail("get_by_id", e) from e

    def count(self) -> int:
        try:
            return int(self.db.scalar(select(func.count()).select_from(Photo)) or 0)
        except SQLAlchemyError as e:
            raise self._fail("count", e) from e

    def delete_by_id(self, photo_id: str) -> bool:
        try:
            result = self.db.execute(delete(Photo).where(Photo.id == photo_id))
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_by_id", e) from e
        return (result.rowcount or 0) > 0

    def delete_all(self) -> int:
        try:
            result = self.db.execute(delete(Photo))
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_all", e) from e
        return result.rowcount or 0

    # --- CRUD 用 ---

    def list_page(self, limit: int, offset: int) -> List[Photo]:
        try:
            stmt = (
                select(Photo)
                .order_by(Photo.date_time_original.desc(), Photo.id.asc())
                .limit(limit)
                .offset(offset)
            )
            return list(self.db.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._fail("list_page", e) from e

    def list_ids(self, limit: int, offset: int) -> List[str]:
        try:
            stmt = select(Photo.id).order_by(Photo.id.asc()).limit(limit).offset(offset)
            return list(self.db.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._fail("list_ids", e) from e

    def add(self, fields: dict[str, Any]) -> Photo:
        if self.get_by_id(fields["id"]) is not None:
            raise DuplicatePhotoError(f"photo {fields['id']} already exists")
        obj = Photo(**fields)
        try:
            self.db.add(obj)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicatePhotoError(f"photo {fields.get('id')} already exists") from e
        except SQLAlchemyError as e:
            raise self._fail("add", e) from e
        self.db.refresh(obj)
        return obj

    def update(self, photo_id: str, fields: dict[str, Any]) -> Optional[Photo]:
        obj = self.get_by_id(photo_id)
        if obj is None:
            return None
        self._assign(obj, fields.items())
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e
        self.db.refresh(obj)
        return obj

    def upsert(self, fields: dict[str, Any]) -> Photo:
        obj = self.get_by_id(fields["id"])
        if obj is None:
            obj = Photo(id=fields["id"])
            self.db.add(obj)
        self._assign(obj, fields.items())
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("upsert", e) from e
        return obj

    @staticmethod
    def _assign(obj: Photo, items: Iterable[tuple[str, Any]]) -> None:
        for name, value in items:
            if name in _UPDATABLE:
                setattr(obj, name, value)
