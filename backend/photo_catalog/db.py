from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from pathlib import Path

# モデル定義側の Base（photo_catalog.models.base）を利用してメタデータを統一
from photo_catalog.models.base import Base
from photo_catalog.config import get_settings

# 1) DATABASE_URL が指定されていれば優先（例: postgresql+psycopg://...）
# 2) それ以外は data ディレクトリ配下の SQLite を使用
_settings = get_settings()
if _settings.database_url:
    SQLALCHEMY_DATABASE_URL = _settings.database_url
    _is_sqlite = SQLALCHEMY_DATABASE_URL.startswith("sqlite")
else:
    db_path = Path(_settings.data_directory) / "app.db"
    # ディレクトリ作成（存在しない場合）
    db_path.parent.mkdir(parents=True, exist_ok=True)
    SQLALCHEMY_DATABASE_URL = f"sqlite:///{db_path}"
    _is_sqlite = True

_connect_args = {"check_same_thread": False} if _is_sqlite else {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=_connect_args,
    pool_pre_ping=not _is_sqlite,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    # モデルモジュールを明示 import してメタデータ登録を確実化
    import photo_catalog.models.photo  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
