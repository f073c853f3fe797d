"""Data structures for the video ingest pipeline."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ..media.media_models import Orientation


class IngestStage(StrEnum):
    """Stages an ingestion moves through, in order."""

    RECEIVED = "received"
    SCRATCH_WRITTEN = "scratch_written"
    PROBED = "probed"
    REWRITTEN = "rewritten"
    PUBLISHED = "published"
    RECORD_UPDATED = "record_updated"
    FAILED = "failed"
    CLEANED_UP = "cleaned_up"


class FailureReason(StrEnum):
    """Failure reasons reported in HTTP error bodies."""

    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    PROBE_FAILED = "probe_failed"
    REWRITE_FAILED = "rewrite_failed"
    PUBLISH_FAILED = "publish_failed"
    INTERNAL_ERROR = "internal_error"


@dataclass(slots=True)
class IngestContext:
    """State carried across the stages of one ingestion."""

    video_id: str
    user_id: str
    content_type: str | None = None
    stage: IngestStage = IngestStage.RECEIVED
    asset_name: str | None = None
    original_path: Path | None = None
    rewritten_path: Path | None = None
    orientation: Orientation | None = None
    storage_key: str | None = None
    failed_stage: IngestStage | None = None

    def advance(self, stage: IngestStage) -> None:
        if stage is IngestStage.FAILED and self.stage is not IngestStage.FAILED:
            self.failed_stage = self.stage
        self.stage = stage

    def log_extra(self, **extra: object) -> dict[str, object]:
        payload: dict[str, object] = {
            "video_id": self.video_id,
            "user_id": self.user_id,
            "stage": self.stage.value,
        }
        if self.storage_key is not None:
            payload["storage_key"] = self.storage_key
        payload.update(extra)
        return payload
