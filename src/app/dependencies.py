"""Dependency wiring helpers."""

from fastapi import FastAPI

from .auth.auth_service import TokenService
from .config import AppConfig
from .ingest.ingest_api import router as ingest_router
from .ingest.ingest_service import VideoIngestService
from .media.faststart import FFmpegFastStartRewriter
from .media.probe import FFprobeProber
from .media.scratch import ScratchSpace
from .storage.object_store import LocalObjectStore, ObjectStore, build_object_store
from .storage.storage_api import router as storage_router
from .thumbnails.thumbnails_api import ThumbnailFiles
from .thumbnails.thumbnails_api import router as thumbnails_router
from .thumbnails.thumbnails_service import ASSETS_URL_PREFIX, ThumbnailService
from .videos.videos_api import router as videos_router
from .videos.videos_repository import VideoRepository
from .videos.videos_service import VideoService


def include_routers(
    app: FastAPI,
    config: AppConfig,
    *,
    object_store: ObjectStore | None = None,
) -> None:
    """Mount module routers and attach services."""
    store = object_store or build_object_store(config.object_store)
    video_repo = VideoRepository(config.session_factory)
    scratch = ScratchSpace(directory=config.asset_paths.scratch)

    ingest_service = VideoIngestService(
        video_repo=video_repo,
        scratch=scratch,
        prober=FFprobeProber(
            ffprobe_path=config.ffprobe_path,
            timeout_seconds=config.media_process_timeout_seconds,
        ),
        rewriter=FFmpegFastStartRewriter(
            ffmpeg_path=config.ffmpeg_path,
            timeout_seconds=config.media_process_timeout_seconds,
        ),
        store=store,
        limits=config.video_limits,
    )
    video_service = VideoService(
        repo=video_repo, store=store, signed_url_ttl=config.signed_url_ttl
    )
    thumbnail_service = ThumbnailService(
        video_repo=video_repo,
        assets_root=config.asset_paths.root,
        limits=config.thumbnail_limits,
    )

    app.state.config = config
    app.state.object_store = store
    app.state.video_repo = video_repo
    app.state.scratch = scratch
    app.state.ingest_service = ingest_service
    app.state.video_service = video_service
    app.state.thumbnail_service = thumbnail_service
    app.state.token_service = TokenService(
        signing_key=config.jwt_secret, token_ttl=config.access_token_ttl
    )

    app.include_router(videos_router)
    app.include_router(ingest_router)
    app.include_router(thumbnails_router)
    if isinstance(store, LocalObjectStore):
        app.include_router(storage_router)

    app.mount(
        ASSETS_URL_PREFIX,
        ThumbnailFiles(directory=config.asset_paths.root),
        name="assets",
    )
