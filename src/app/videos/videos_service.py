"""Video record operations and delivery URL resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import timedelta

from ..exceptions import ensure_owner
from ..storage.object_store import DEFAULT_SIGNED_URL_TTL, ObjectStore
from .videos_models import Video
from .videos_repository import VideoRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VideoService:
    """Owner-checked access to video records with signed ``video_url`` values."""

    repo: VideoRepository
    store: ObjectStore
    signed_url_ttl: timedelta = DEFAULT_SIGNED_URL_TTL
    log: logging.Logger = field(default_factory=lambda: logger)

    def sign_video(self, video: Video) -> Video:
        """Return a copy of ``video`` whose storage key is replaced by a signed URL."""
        if not video.video_url:
            return video
        return replace(video, video_url=self.store.presign(video.video_url, self.signed_url_ttl))

    def create(self, *, user_id: str, title: str, description: str = "") -> Video:
        video = self.repo.create(user_id=user_id, title=title, description=description)
        self.log.info("videos.created", extra={"video_id": video.id, "user_id": user_id})
        return video

    def get_for_user(self, video_id: str, user_id: str) -> Video:
        video = self.repo.get(video_id)
        ensure_owner(owner_id=video.user_id, user_id=user_id, action="view this video")
        return self.sign_video(video)

    def list_for_user(self, user_id: str) -> list[Video]:
        return [self.sign_video(video) for video in self.repo.list_for_user(user_id)]

    def delete_for_user(self, video_id: str, user_id: str) -> None:
        video = self.repo.get(video_id)
        ensure_owner(owner_id=video.user_id, user_id=user_id, action="delete this video")
        self.repo.delete(video_id)
        self.log.info("videos.deleted", extra={"video_id": video_id, "user_id": user_id})
