"""Domain models for video records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Video:
    """Video record as seen by services and routers.

    ``video_url`` holds the storage key written by ingestion; it is resolved
    to a signed URL only when the record is returned to a client.
    """

    id: str
    user_id: str
    title: str
    description: str
    created_at: datetime
    updated_at: datetime
    thumbnail_url: str | None = None
    video_url: str | None = None
