"""Persistence layer for video records."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_models import VideoModel
from ..exceptions import NotFoundError, handle_sqlalchemy_errors
from .videos_models import Video


class VideoRepository:
    """CRUD access to the ``videos`` table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create(
        self,
        *,
        user_id: str,
        title: str,
        description: str = "",
        now: datetime | None = None,
    ) -> Video:
        timestamp = now or datetime.utcnow()
        model = VideoModel(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            description=description,
            created_at=timestamp,
            updated_at=timestamp,
        )
        with handle_sqlalchemy_errors(entity="video"):
            with self._session_factory() as session:
                session.add(model)
                session.commit()
                return self._to_domain(model)

    def get(self, video_id: str) -> Video:
        with handle_sqlalchemy_errors(entity="video"):
            with self._session_factory() as session:
                model = session.get(VideoModel, video_id)
                if model is None:
                    raise NotFoundError(f"video '{video_id}' not found")
                return self._to_domain(model)

    def list_for_user(self, user_id: str) -> list[Video]:
        stmt = (
            select(VideoModel)
            .where(VideoModel.user_id == user_id)
            .order_by(VideoModel.created_at.desc())
        )
        with handle_sqlalchemy_errors(entity="video"):
            with self._session_factory() as session:
                return [self._to_domain(model) for model in session.scalars(stmt)]

    def update(self, video: Video) -> Video:
        """Persist mutable fields of ``video``; last writer wins."""
        with handle_sqlalchemy_errors(entity="video"):
            with self._session_factory() as session:
                model = session.get(VideoModel, video.id)
                if model is None:
                    raise NotFoundError(f"video '{video.id}' not found")
                model.title = video.title
                model.description = video.description
                model.thumbnail_url = video.thumbnail_url
                model.video_url = video.video_url
                model.updated_at = datetime.utcnow()
                session.commit()
                return self._to_domain(model)

    def delete(self, video_id: str) -> None:
        with handle_sqlalchemy_errors(entity="video"):
            with self._session_factory() as session:
                model = session.get(VideoModel, video_id)
                if model is None:
                    raise NotFoundError(f"video '{video_id}' not found")
                session.delete(model)
                session.commit()

    @staticmethod
    def _to_domain(model: VideoModel) -> Video:
        return Video(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            description=model.description,
            thumbnail_url=model.thumbnail_url,
            video_url=model.video_url,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
