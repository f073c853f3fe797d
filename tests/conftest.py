from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.app.config import AppConfig, load_config
from src.app.core.config import Settings
from src.app.db.db_init import init_db
from src.app.videos.videos_repository import VideoRepository

TEST_JWT_SECRET = "test-signing-key"


@pytest.fixture
def session_factory() -> sessionmaker[Session]:
    engine = create_engine("sqlite:///:memory:", future=True)
    factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)
    return factory


@pytest.fixture
def video_repo(session_factory: sessionmaker[Session]) -> VideoRepository:
    return VideoRepository(session_factory)


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {
            "database_url": f"sqlite:///{tmp_path / 'tubely-test.db'}",
            "assets_root": tmp_path / "assets",
            "jwt_secret": TEST_JWT_SECRET,
            "storage_backend": "local",
            "local_storage_root": tmp_path / "storage",
            "public_base_url": "http://testserver",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def app_config(make_settings: Callable[..., Settings]) -> AppConfig:
    return load_config(make_settings())
