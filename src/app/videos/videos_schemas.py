"""Pydantic schemas for video endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .videos_models import Video


class VideoCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""


class VideoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: str
    thumbnail_url: str | None = None
    video_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_video(cls, video: Video) -> "VideoResponse":
        return cls.model_validate(video)
