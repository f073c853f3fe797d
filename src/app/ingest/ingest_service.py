"""Domain service for video ingest operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..config import UploadLimits
from ..exceptions import ensure_owner
from ..media.faststart import ContainerRewriter
from ..media.media_models import (
    UploadedMedia,
    build_storage_key,
    extension_for,
    generate_asset_name,
)
from ..media.probe import MediaProber
from ..media.scratch import ScratchKind, ScratchSession, ScratchSpace
from ..storage.object_store import ObjectStore
from ..videos.videos_models import Video
from ..videos.videos_repository import VideoRepository
from .ingest_errors import ValidationError
from .ingest_models import IngestContext, IngestStage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VideoIngestService:
    """Coordinates probe, rewrite, publish and record update for one upload.

    Every scratch file created during :meth:`ingest_video` is removed before
    the call returns, whether it succeeds or raises.
    """

    video_repo: VideoRepository
    scratch: ScratchSpace
    prober: MediaProber
    rewriter: ContainerRewriter
    store: ObjectStore
    limits: UploadLimits
    log: logging.Logger = field(default_factory=lambda: logger)

    def validate_upload(self, media: UploadedMedia) -> str:
        """Check the declared media type and size, returning the media type."""
        content_type = (media.content_type or "").split(";", 1)[0].strip().lower()
        if not content_type:
            raise ValidationError("Missing Content-Type for video")
        if content_type not in self.limits.accepted_content_types:
            raise ValidationError(f"Invalid file type: {content_type}")
        if media.size is not None and media.size > self.limits.max_bytes:
            raise ValidationError("File too large")
        return content_type

    def ingest_video(self, video_id: str, user_id: str, media: UploadedMedia) -> Video:
        ctx = IngestContext(video_id=video_id, user_id=user_id)
        ctx.content_type = self.validate_upload(media)
        video = self.video_repo.get(video_id)
        ensure_owner(owner_id=video.user_id, user_id=user_id, action="upload this video")

        self.log.info(
            "ingest.upload.started",
            extra=ctx.log_extra(content_type=ctx.content_type, size_bytes=media.size),
        )
        with self.scratch.session() as session:
            try:
                updated = self._run_stages(ctx, video, media, session)
            except Exception as exc:
                ctx.advance(IngestStage.FAILED)
                self.log.warning(
                    "ingest.stage.failed",
                    extra=ctx.log_extra(
                        failed_stage=ctx.failed_stage.value if ctx.failed_stage else None,
                        error_type=type(exc).__name__,
                        error=str(exc),
                    ),
                )
                self._cleanup(ctx, session)
                raise
            self._cleanup(ctx, session)
        return updated

    def _run_stages(
        self,
        ctx: IngestContext,
        video: Video,
        media: UploadedMedia,
        session: ScratchSession,
    ) -> Video:
        extension = extension_for(ctx.content_type or "")
        ctx.asset_name = generate_asset_name(extension)
        ctx.original_path = session.write_original(
            ctx.asset_name,
            media.stream,
            max_bytes=self.limits.max_bytes,
            chunk_size=self.limits.chunk_size_bytes,
        )
        ctx.advance(IngestStage.SCRATCH_WRITTEN)
        self.log.info("ingest.scratch.written", extra=ctx.log_extra(path=str(ctx.original_path)))

        ctx.orientation = self.prober.probe(ctx.original_path)
        ctx.advance(IngestStage.PROBED)
        self.log.info(
            "ingest.media.probed",
            extra=ctx.log_extra(orientation=ctx.orientation.value),
        )

        expected = session.register(
            ScratchKind.REWRITTEN, self.rewriter.output_path(ctx.original_path)
        )
        ctx.rewritten_path = self.rewriter.rewrite(ctx.original_path)
        if ctx.rewritten_path != expected:
            session.replace(ScratchKind.REWRITTEN, ctx.rewritten_path)
        ctx.advance(IngestStage.REWRITTEN)
        self.log.info("ingest.media.rewritten", extra=ctx.log_extra(path=str(ctx.rewritten_path)))

        ctx.storage_key = build_storage_key(ctx.orientation, ctx.asset_name)
        self.store.upload(ctx.storage_key, ctx.rewritten_path, ctx.content_type or "")
        ctx.advance(IngestStage.PUBLISHED)
        self.log.info("ingest.media.published", extra=ctx.log_extra())

        video.video_url = ctx.storage_key
        try:
            updated = self.video_repo.update(video)
        except Exception:
            self.log.error(
                "ingest.record_update_failed_after_publish",
                extra=ctx.log_extra(orphaned_key=ctx.storage_key),
            )
            raise
        ctx.advance(IngestStage.RECORD_UPDATED)
        self.log.info("ingest.record.updated", extra=ctx.log_extra())
        return updated

    def _cleanup(self, ctx: IngestContext, session: ScratchSession) -> None:
        warnings = session.cleanup()
        stage = ctx.stage
        ctx.advance(IngestStage.CLEANED_UP)
        self.log.info(
            "ingest.scratch.cleaned_up",
            extra=ctx.log_extra(previous_stage=stage.value, cleanup_warnings=len(warnings)),
        )
