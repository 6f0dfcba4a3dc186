# backend/photo_catalog/services/verification/policy.py
"""
Operational policy for the consistency checks.

These are tunable by operators through Settings; the values below are the
defaults every verification function falls back to.
"""

# 原本がこのサイズ未満なら存在していても破損とみなす（10KB）
MIN_ORIGINAL_SIZE_BYTES = 10_000

# 1 リクエストで検証する最大 ID 数。超過分は黙って切り捨てる
BATCH_VERIFY_LIMIT = 100

# バッチ検証で blob store に同時に投げるプローブ数
VERIFY_WORKERS = 8

# 1 回の purge で削除する最大オブジェクト数。残りは再実行で消す
PURGE_OBJECT_CAP = 1000
PURGE_PAGE_SIZE = 100

# コレクション件数を数えるときの list ページサイズ
COUNT_PAGE_SIZE = 1000

# 壊れたカーソルを返すストアに対するページ数の上限
MAX_LIST_PAGES = 10_000

# blob key の規約: photos/{id}.jpg と thumbnails/...
PHOTOS_PREFIX = "photos/"
THUMBNAILS_PREFIX = "thumbnails/"
PHOTO_EXTENSION = "jpg"


def photo_key(identifier: str) -> str:
    return f"{PHOTOS_PREFIX}{identifier}.{PHOTO_EXTENSION}"


def identifier_from_key(key: str) -> str | None:
    """photos/ABC.jpg -> ABC. Returns None for keys outside the prefix or without a stem."""
    if not key.startswith(PHOTOS_PREFIX):
        return None
    file_name = key[len(PHOTOS_PREFIX):]
    stem = file_name.split(".")[0]
    return stem or None
