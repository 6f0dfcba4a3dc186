from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from photo_catalog.api.routers import files, photos, sync, verification
from photo_catalog.config import get_settings
from photo_catalog.db import init_db
from photo_catalog.exceptions import (
    CatalogError,
    DeadlineExceeded,
    InvalidInputError,
    MetadataStoreError,
)
from photo_catalog.logging import init_logging

settings = get_settings()

app = FastAPI(title="Photo Catalog API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["X-Photo-Files-Missing"],
    max_age=86400,
)


@app.get("/health")
def health():
    return {"ok": True}


# 初回起動時にログ設定と DB スキーマ作成
@app.on_event("startup")
def on_startup():
    init_logging(settings.log_level, settings.log_dir)
    init_db()


# 例外 → HTTP ステータス（サブクラスから先に判定）
_STATUS_BY_ERROR = (
    (InvalidInputError, 400),
    (DeadlineExceeded, 504),
    (MetadataStoreError, 503),
    (CatalogError, 500),
)


@app.exception_handler(CatalogError)
def handle_catalog_error(request: Request, exc: CatalogError):
    status = next(code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls))
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status, content={"detail": str(exc)})


app.include_router(photos.router,       prefix="/api/photos", tags=["photos"])
app.include_router(sync.router,         prefix="/api/sync",   tags=["sync"])
app.include_router(files.router,        prefix="/api",        tags=["files"])
app.include_router(verification.router, prefix="/api",        tags=["verification"])
