"""HTTP routes for thumbnail uploads."""

from __future__ import annotations

import os

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.types import Scope

from ..api.errors import http_error_for
from ..auth.auth_dependencies import require_user_id
from ..exceptions import AppError
from ..media.media_models import UploadedMedia
from ..videos.videos_api import get_video_service
from ..videos.videos_schemas import VideoResponse
from ..videos.videos_service import VideoService
from .thumbnails_service import ThumbnailService

router = APIRouter(prefix="/api", tags=["thumbnails"])


class ThumbnailFiles(StaticFiles):
    """Serve files stored directly in the assets root, never its subdirectories."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        if os.sep in path or (os.altsep and os.altsep in path):
            raise StarletteHTTPException(status_code=404)
        return await super().get_response(path, scope)


def get_thumbnail_service(request: Request) -> ThumbnailService:
    try:
        return request.app.state.thumbnail_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("ThumbnailService is not configured") from exc


@router.post("/thumbnail_upload/{video_id}", response_model=VideoResponse)
async def upload_thumbnail(
    video_id: str,
    thumbnail: UploadFile = File(...),
    user_id: str = Depends(require_user_id),
    service: ThumbnailService = Depends(get_thumbnail_service),
    videos: VideoService = Depends(get_video_service),
) -> VideoResponse:
    media = UploadedMedia(
        stream=thumbnail.file,
        content_type=thumbnail.content_type,
        size=thumbnail.size,
        filename=thumbnail.filename,
    )
    try:
        updated = await run_in_threadpool(service.upload_thumbnail, video_id, user_id, media)
        signed = videos.sign_video(updated)
    except AppError as exc:
        raise http_error_for(exc) from exc
    finally:
        await thumbnail.close()
    return VideoResponse.from_video(signed)
