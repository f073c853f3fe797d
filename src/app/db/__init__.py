"""Database models and bootstrap helpers for the video record store."""

from .db_init import init_db
from .db_models import Base, VideoModel

__all__ = ["Base", "VideoModel", "init_db"]
