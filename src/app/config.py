"""Application configuration builder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .core.config import Settings
from .db.db_init import init_db

VIDEO_CONTENT_TYPE = "video/mp4"
THUMBNAIL_CONTENT_TYPES = ("image/jpeg", "image/png")


@dataclass(slots=True)
class UploadLimits:
    accepted_content_types: tuple[str, ...]
    max_bytes: int
    chunk_size_bytes: int


@dataclass(slots=True)
class AssetPaths:
    root: Path
    scratch: Path


@dataclass(slots=True)
class ObjectStoreSettings:
    backend: str
    bucket: str
    region: str
    endpoint_url: str | None
    access_key: str | None
    secret_key: str | None
    local_root: Path
    public_base_url: str
    signing_key: str


@dataclass(slots=True)
class AppConfig:
    asset_paths: AssetPaths
    video_limits: UploadLimits
    thumbnail_limits: UploadLimits
    object_store: ObjectStoreSettings
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]
    jwt_secret: str
    access_token_ttl: timedelta
    signed_url_ttl: timedelta
    ffprobe_path: str
    ffmpeg_path: str
    media_process_timeout_seconds: float | None
    scratch_ttl: timedelta
    scratch_sweep_interval_seconds: int
    log_level: str


def ensure_asset_paths(paths: AssetPaths) -> None:
    paths.root.mkdir(parents=True, exist_ok=True)
    paths.scratch.mkdir(parents=True, exist_ok=True)


def load_config(settings: Settings | None = None) -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    settings = settings or Settings()

    asset_paths = AssetPaths(
        root=settings.assets_root,
        scratch=settings.assets_root / "scratch",
    )
    ensure_asset_paths(asset_paths)

    video_limits = UploadLimits(
        accepted_content_types=(VIDEO_CONTENT_TYPE,),
        max_bytes=settings.max_video_upload_bytes,
        chunk_size_bytes=settings.upload_chunk_size_bytes,
    )
    thumbnail_limits = UploadLimits(
        accepted_content_types=THUMBNAIL_CONTENT_TYPES,
        max_bytes=settings.max_thumbnail_upload_bytes,
        chunk_size_bytes=settings.upload_chunk_size_bytes,
    )
    object_store = ObjectStoreSettings(
        backend=settings.storage_backend,
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
        access_key=settings.s3_access_key,
        secret_key=settings.s3_secret_key,
        local_root=settings.local_storage_root,
        public_base_url=settings.public_base_url,
        signing_key=settings.jwt_secret,
    )

    engine = create_engine(settings.database_url, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)

    return AppConfig(
        asset_paths=asset_paths,
        video_limits=video_limits,
        thumbnail_limits=thumbnail_limits,
        object_store=object_store,
        database_url=settings.database_url,
        engine=engine,
        session_factory=session_factory,
        jwt_secret=settings.jwt_secret,
        access_token_ttl=timedelta(hours=settings.access_token_ttl_hours),
        signed_url_ttl=timedelta(seconds=settings.signed_url_ttl_seconds),
        ffprobe_path=settings.ffprobe_path,
        ffmpeg_path=settings.ffmpeg_path,
        media_process_timeout_seconds=settings.media_process_timeout_seconds,
        scratch_ttl=timedelta(seconds=settings.scratch_ttl_seconds),
        scratch_sweep_interval_seconds=settings.scratch_sweep_interval_seconds,
        log_level=settings.log_level,
    )
