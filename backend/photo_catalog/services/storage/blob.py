# backend/photo_catalog/services/storage/blob.py
"""
Blob store primitives.

Keys are relative POSIX paths ("photos/ABC.jpg"). Implementations return None
for absent objects and raise BlobStoreError for backend failures; absence is
never an exception.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol, Tuple

from loguru import logger

from photo_catalog.exceptions import BlobStoreError, InvalidInputError


@dataclass(frozen=True)
class BlobHead:
    key: str
    size: int


@dataclass(frozen=True)
class BlobListing:
    objects: Tuple[BlobHead, ...] = field(default_factory=tuple)
    cursor: Optional[str] = None  # None / "" は「続きなし」


class BlobStore(Protocol):
    def head(self, key: str) -> Optional[BlobHead]: ...

    def get(self, key: str) -> Optional[bytes]: ...

    def put(self, key: str, data: bytes) -> BlobHead: ...

    def delete(self, key: str) -> None: ...

    def list(
        self, prefix: str = "", limit: int = 1000, cursor: Optional[str] = None
    ) -> BlobListing: ...


def normalize_key(key: str) -> str:
    """Reject keys that could escape the store root."""
    if not key or key.startswith("/") or "\\" in key:
        raise InvalidInputError(f"invalid blob key: {key!r}")
    parts = PurePosixPath(key).parts
    if any(p in ("..", ".") for p in parts):
        raise InvalidInputError(f"invalid blob key: {key!r}")
    return "/".join(parts)


class LocalBlobStore:
    """Directory-backed blob store. The list cursor is the last key returned."""

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / normalize_key(key)

    def _existing_path(self, key: str) -> Optional[Path]:
        # put が拒否するキーは保存されていないので「無い」扱い
        try:
            return self._path(key)
        except InvalidInputError:
            return None

    def head(self, key: str) -> Optional[BlobHead]:
        p = self._existing_path(key)
        if p is None:
            return None
        try:
            st = p.stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise BlobStoreError(f"head {key}: {e}") from e
        if not p.is_file():
            return None
        return BlobHead(key=normalize_key(key), size=st.st_size)

    def get(self, key: str) -> Optional[bytes]:
        p = self._existing_path(key)
        if p is None:
            return None
        try:
            return p.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            return None
        except OSError as e:
            raise BlobStoreError(f"get {key}: {e}") from e

    def put(self, key: str, data: bytes) -> BlobHead:
        p = self._path(key)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            # 途中で落ちても中途半端なファイルを残さない
            fd, tmp = tempfile.mkstemp(dir=str(p.parent), prefix=".upload-")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, p)
        except OSError as e:
            raise BlobStoreError(f"put {key}: {e}") from e
        return BlobHead(key=normalize_key(key), size=len(data))

    def delete(self, key: str) -> None:
        p = self._existing_path(key)
        if p is None:
            return
        try:
            p.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise BlobStoreError(f"delete {key}: {e}") from e
        self._prune_empty_dirs(p.parent)

    def _prune_empty_dirs(self, directory: Path) -> None:
        while directory != self.root and self.root in directory.parents:
            try:
                directory.rmdir()
            except OSError:
                return
            directory = directory.parent

    def list(
        self, prefix: str = "", limit: int = 1000, cursor: Optional[str] = None
    ) -> BlobListing:
        if limit <= 0:
            raise InvalidInputError("list limit must be positive")
        try:
            keys = sorted(
                p.relative_to(self.root).as_posix()
                for p in self.root.rglob("*")
                if p.is_file() and not p.name.startswith(".upload-")
            )
        except OSError as e:
            raise BlobStoreError(f"list {prefix!r}: {e}") from e

        keys = [k for k in keys if k.startswith(prefix) and (not cursor or k > cursor)]
        page = keys[:limit]
        objects = []
        for k in page:
            try:
                objects.append(BlobHead(key=k, size=(self.root / k).stat().st_size))
            except FileNotFoundError:
                # 一覧取得と stat の間に削除された
                logger.debug(f"blob vanished while listing: {k}")
        next_cursor = page[-1] if len(keys) > limit else None
        return BlobListing(objects=tuple(objects), cursor=next_cursor)
