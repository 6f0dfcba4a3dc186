# backend/photo_catalog/schemas/photo.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional

# クライアント（同期ツール）は camelCase で送ってくる
_ALIASES = {
    "thumbnail_path_100": "thumbnailPath100",
    "thumbnail_path_350": "thumbnailPath350",
    "star_rating": "starRating",
    "date_time_original": "dateTimeOriginal",
    "add_timestamp": "addTimestamp",
    "lens_model": "lensModel",
    "exposure_time": "exposureTime",
    "f_number": "fNumber",
    "focal_len_in_35mm_film": "focalLenIn35mmFilm",
    "focal_length": "focalLength",
    "iso_speed_ratings": "isoSPEEDRatings",
    "object_name": "objectName",
}


class _PhotoFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    title: str = ""
    path: str = ""
    thumbnail_path_100: str = Field(default="", alias=_ALIASES["thumbnail_path_100"])
    thumbnail_path_350: str = Field(default="", alias=_ALIASES["thumbnail_path_350"])
    star_rating: int = Field(default=0, alias=_ALIASES["star_rating"])
    country: str = ""
    area: str = ""
    locality: str = ""
    date_time_original: str = Field(default="", alias=_ALIASES["date_time_original"])
    add_timestamp: str = Field(default="", alias=_ALIASES["add_timestamp"])
    lens_model: str = Field(default="", alias=_ALIASES["lens_model"])
    model: str = ""
    exposure_time: float = Field(default=0.0, alias=_ALIASES["exposure_time"])
    f_number: float = Field(default=0.0, alias=_ALIASES["f_number"])
    focal_len_in_35mm_film: float = Field(default=0.0, alias=_ALIASES["focal_len_in_35mm_film"])
    focal_length: float = Field(default=0.0, alias=_ALIASES["focal_length"])
    iso_speed_ratings: int = Field(default=0, alias=_ALIASES["iso_speed_ratings"])
    altitude: float = 0.0
    latitude: float = 0.0
    longitude: float = 0.0
    object_name: str = Field(default="", alias=_ALIASES["object_name"])
    caption: str = ""

    @classmethod
    def from_payload(cls, data: dict[str, Any]):
        # null は既定値 "" / 0 に寄せる（DB に null を入れない）
        return cls.model_validate({k: v for k, v in data.items() if v is not None})

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=False)


class PhotoIn(_PhotoFields):
    id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        # 同期ツールは数値 id を送ることがある
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class PhotoUpdate(_PhotoFields):
    pass


class PhotoOut(_PhotoFields):
    id: str


class SyncIn(BaseModel):
    # 1 件ずつ検証してエラーを個別に返すため、ここでは dict のまま受ける
    photos: List[Any]


class SyncError(BaseModel):
    id: str
    error: str


class SyncResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[SyncError] = []


class PhotoMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    title: str = ""
    path: str = ""
    date_time_original: Optional[str] = Field(default=None, alias="dateTimeOriginal")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    object_name: Optional[str] = Field(default=None, alias="objectName")


class BatchVerifyIn(BaseModel):
    ids: List[str]
