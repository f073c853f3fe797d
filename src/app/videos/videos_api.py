"""HTTP routes for video records."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ..api.errors import http_error_for
from ..auth.auth_dependencies import require_user_id
from ..exceptions import AppError
from .videos_schemas import VideoCreateRequest, VideoResponse
from .videos_service import VideoService

router = APIRouter(prefix="/api/videos", tags=["videos"])


def get_video_service(request: Request) -> VideoService:
    """Fetch video service from application state."""
    try:
        return request.app.state.video_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("VideoService is not configured") from exc


@router.post("", status_code=status.HTTP_201_CREATED, response_model=VideoResponse)
def create_video(
    payload: VideoCreateRequest,
    user_id: str = Depends(require_user_id),
    service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    try:
        video = service.create(
            user_id=user_id, title=payload.title, description=payload.description
        )
    except AppError as exc:
        raise http_error_for(exc) from exc
    return VideoResponse.from_video(video)


@router.get("", response_model=list[VideoResponse])
def list_videos(
    user_id: str = Depends(require_user_id),
    service: VideoService = Depends(get_video_service),
) -> list[VideoResponse]:
    try:
        videos = service.list_for_user(user_id)
    except AppError as exc:
        raise http_error_for(exc) from exc
    return [VideoResponse.from_video(video) for video in videos]


@router.get("/{video_id}", response_model=VideoResponse)
def get_video(
    video_id: str,
    user_id: str = Depends(require_user_id),
    service: VideoService = Depends(get_video_service),
) -> VideoResponse:
    try:
        video = service.get_for_user(video_id, user_id)
    except AppError as exc:
        raise http_error_for(exc) from exc
    return VideoResponse.from_video(video)


@router.delete("/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_video(
    video_id: str,
    user_id: str = Depends(require_user_id),
    service: VideoService = Depends(get_video_service),
) -> Response:
    try:
        service.delete_for_user(video_id, user_id)
    except AppError as exc:
        raise http_error_for(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
