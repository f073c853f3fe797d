"""Environment-backed settings for the Tubely service.

Values are read from ``TUBELY_*`` environment variables (or a local ``.env``
file). Secrets default to development placeholders and must be overridden in
any shared deployment.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_assets_root() -> Path:
    return Path("assets")


def _default_local_storage_root() -> Path:
    return Path("var/storage")


class Settings(BaseSettings):
    """Pydantic settings container for the service layer."""

    model_config = SettingsConfigDict(
        env_prefix="TUBELY_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///tubely.db",
        description="SQLAlchemy URL of the video record store.",
    )
    assets_root: Path = Field(
        default_factory=_default_assets_root,
        description="Directory holding thumbnails and the scratch area.",
    )
    jwt_secret: str = Field(
        default="change-me",
        min_length=1,
        description="HS256 signing key for access tokens.",
    )
    access_token_ttl_hours: int = Field(default=1, ge=1)
    storage_backend: str = Field(
        default="s3",
        pattern="^(s3|local)$",
        description="Object store used for published videos.",
    )
    local_storage_root: Path = Field(default_factory=_default_local_storage_root)
    public_base_url: str = Field(
        default="http://localhost:8091",
        description="Base URL used when signing local storage links.",
    )
    s3_bucket: str = ""
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    max_video_upload_bytes: int = Field(default=1 << 30, ge=1)
    max_thumbnail_upload_bytes: int = Field(default=10 << 20, ge=1)
    upload_chunk_size_bytes: int = Field(default=1 << 20, ge=1024)
    signed_url_ttl_seconds: int = Field(default=3600, ge=1)
    ffprobe_path: str = "ffprobe"
    ffmpeg_path: str = "ffmpeg"
    media_process_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Optional wall-clock limit for a single ffprobe/ffmpeg run.",
    )
    scratch_ttl_seconds: int = Field(
        default=6 * 3600,
        ge=60,
        description="Age after which leftover scratch files are swept.",
    )
    scratch_sweep_interval_seconds: int = Field(default=15 * 60, ge=1)
    log_level: str = "INFO"


__all__ = ["Settings"]
