"""Thumbnail uploads written directly under the assets directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..config import UploadLimits
from ..exceptions import ValidationError, ensure_owner
from ..media.media_models import UploadedMedia, extension_for, generate_asset_name
from ..videos.videos_models import Video
from ..videos.videos_repository import VideoRepository

logger = logging.getLogger(__name__)

ASSETS_URL_PREFIX = "/assets"


@dataclass(slots=True)
class ThumbnailService:
    """Store a thumbnail image and point the video record at it."""

    video_repo: VideoRepository
    assets_root: Path
    limits: UploadLimits
    log: logging.Logger = field(default_factory=lambda: logger)

    def _validate(self, media: UploadedMedia) -> str:
        content_type = (media.content_type or "").split(";", 1)[0].strip().lower()
        if not content_type:
            raise ValidationError("Missing Content-Type for thumbnail")
        if content_type not in self.limits.accepted_content_types:
            raise ValidationError(f"Invalid file type: {content_type}")
        if media.size is not None and media.size > self.limits.max_bytes:
            raise ValidationError("File too large")
        return content_type

    def _write(self, target: Path, media: UploadedMedia) -> int:
        size = 0
        try:
            with target.open("wb") as sink:
                while chunk := media.stream.read(self.limits.chunk_size_bytes):
                    size += len(chunk)
                    if size > self.limits.max_bytes:
                        raise ValidationError("File too large")
                    sink.write(chunk)
        except Exception:
            target.unlink(missing_ok=True)
            raise
        return size

    def upload_thumbnail(self, video_id: str, user_id: str, media: UploadedMedia) -> Video:
        content_type = self._validate(media)
        video = self.video_repo.get(video_id)
        ensure_owner(owner_id=video.user_id, user_id=user_id, action="upload this thumbnail")

        name = generate_asset_name(extension_for(content_type))
        self.assets_root.mkdir(parents=True, exist_ok=True)
        target = self.assets_root / name
        size = self._write(target, media)

        video.thumbnail_url = f"{ASSETS_URL_PREFIX}/{name}"
        updated = self.video_repo.update(video)
        self.log.info(
            "thumbnails.uploaded",
            extra={
                "video_id": video_id,
                "user_id": user_id,
                "path": str(target),
                "size_bytes": size,
            },
        )
        return updated
