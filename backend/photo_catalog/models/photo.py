# backend/photo_catalog/models/photo.py
from sqlalchemy import Column, Float, Integer, String, Text
from .base import Base

# 資産パスの列名（blob store のキーを規約で参照する。外部キー制約は無い）
ASSET_PATH_COLUMNS = ("path", "thumbnail_path_100", "thumbnail_path_350")


class Photo(Base):
    __tablename__ = "photos"
    id = Column(String, primary_key=True)
    title = Column(String, nullable=False, default="")
    path = Column(String, nullable=False, default="")  # 原本 (photos/{id}.jpg)
    thumbnail_path_100 = Column(String, default="")
    thumbnail_path_350 = Column(String, default="")
    star_rating = Column(Integer, default=0)
    country = Column(String, default="")
    area = Column(String, default="")
    locality = Column(String, default="")
    date_time_original = Column(String, default="")  # クライアントの文字列をそのまま保持
    add_timestamp = Column(String, default="")
    lens_model = Column(String, default="")
    model = Column(String, default="")
    exposure_time = Column(Float, default=0.0)
    f_number = Column(Float, default=0.0)
    focal_len_in_35mm_film = Column(Float, default=0.0)
    focal_length = Column(Float, default=0.0)
    iso_speed_ratings = Column(Integer, default=0)
    altitude = Column(Float, default=0.0)
    latitude = Column(Float, default=0.0)
    longitude = Column(Float, default=0.0)
    object_name = Column(String, default="")
    caption = Column(Text, default="")
