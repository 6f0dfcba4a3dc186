# backend/photo_catalog/config.py
from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from photo_catalog.services.verification.policy import (
    BATCH_VERIFY_LIMIT,
    MIN_ORIGINAL_SIZE_BYTES,
    PURGE_OBJECT_CAP,
    VERIFY_WORKERS,
)


def _default_data_directory() -> str:
    # コンテナ内では /app/data、ローカル開発では repo 直下の data
    container_data = Path("/app/data")
    if container_data.exists():
        return str(container_data)
    # backend/photo_catalog/config.py → ../../.. = <repo root>
    return str(Path(__file__).resolve().parents[2] / "data")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database（未指定なら SQLite）
    database_url: Optional[str] = Field(
        default=None, description="SQLAlchemy URL, e.g. postgresql+psycopg://..."
    )
    data_directory: str = Field(default_factory=_default_data_directory)

    # Blob store
    blob_backend: Literal["local", "s3"] = "local"
    blob_root: Optional[str] = Field(
        default=None, description="Root directory of the local blob store"
    )
    s3_bucket: Optional[str] = None
    s3_endpoint_url: Optional[str] = Field(
        default=None, description="Custom endpoint for S3-compatible stores (R2, MinIO)"
    )
    s3_region: Optional[str] = None
    s3_access_key_id: Optional[str] = None
    s3_secret_access_key: Optional[str] = None

    # API
    cors_origins: Union[str, List[str]] = "*"
    clear_token: Optional[str] = Field(
        default=None, description="Token required by POST /api/clear; unset disables it"
    )
    request_timeout_seconds: float = Field(default=25.0, gt=0)

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    # Verification policy
    verify_workers: int = Field(default=VERIFY_WORKERS, ge=1, le=64)
    min_original_size_bytes: int = Field(default=MIN_ORIGINAL_SIZE_BYTES, ge=0)
    batch_verify_limit: int = Field(default=BATCH_VERIFY_LIMIT, ge=1)
    purge_object_cap: int = Field(default=PURGE_OBJECT_CAP, ge=1)

    @property
    def cors_origins_list(self) -> List[str]:
        if isinstance(self.cors_origins, str):
            return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        return self.cors_origins

    @property
    def data_path(self) -> Path:
        return Path(self.data_directory)

    @property
    def blob_root_path(self) -> Path:
        if self.blob_root:
            return Path(self.blob_root)
        return self.data_path / "blobs"


@lru_cache
def get_settings() -> Settings:
    return Settings()
