"""HTTP routes for video ingest operations."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from ..api.errors import http_error_for
from ..auth.auth_dependencies import require_user_id
from ..exceptions import AppError
from ..media.media_models import UploadedMedia
from ..videos.videos_api import get_video_service
from ..videos.videos_schemas import VideoResponse
from ..videos.videos_service import VideoService
from .ingest_schemas import IngestErrorSchema
from .ingest_service import VideoIngestService

router = APIRouter(prefix="/api", tags=["ingest"])
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    code: {"model": IngestErrorSchema} for code in (400, 401, 403, 404, 500)
}


def get_ingest_service(request: Request) -> VideoIngestService:
    """Fetch ingest service from application state."""
    try:
        return request.app.state.ingest_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("VideoIngestService is not configured") from exc


@router.post(
    "/video_upload/{video_id}",
    response_model=VideoResponse,
    responses=_ERROR_RESPONSES,
)
async def upload_video(
    video_id: str,
    video: UploadFile = File(...),
    user_id: str = Depends(require_user_id),
    service: VideoIngestService = Depends(get_ingest_service),
    videos: VideoService = Depends(get_video_service),
) -> VideoResponse:
    """Run the ingest pipeline for ``video`` and return the signed record."""
    media = UploadedMedia(
        stream=video.file,
        content_type=video.content_type,
        size=video.size,
        filename=video.filename,
    )
    try:
        updated = await run_in_threadpool(service.ingest_video, video_id, user_id, media)
        signed = videos.sign_video(updated)
    except AppError as exc:
        raise http_error_for(exc) from exc
    except Exception as exc:
        logger.exception(
            "ingest.unexpected_error",
            extra={"video_id": video_id, "user_id": user_id},
        )
        raise http_error_for(exc) from exc
    finally:
        await video.close()
    return VideoResponse.from_video(signed)
