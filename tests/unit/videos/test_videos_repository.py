from datetime import datetime, timedelta

import pytest

from src.app.exceptions import NotFoundError


def test_create_and_get_round_trip(video_repo):
    created = video_repo.create(user_id="user-1", title="Boots", description="How to")

    fetched = video_repo.get(created.id)

    assert fetched.title == "Boots"
    assert fetched.description == "How to"
    assert fetched.video_url is None
    assert fetched.thumbnail_url is None


def test_list_for_user_filters_and_orders_newest_first(video_repo):
    base = datetime(2024, 1, 1)
    older = video_repo.create(user_id="user-1", title="older", now=base)
    newer = video_repo.create(user_id="user-1", title="newer", now=base + timedelta(days=1))
    video_repo.create(user_id="user-2", title="foreign", now=base)

    videos = video_repo.list_for_user("user-1")

    assert [video.id for video in videos] == [newer.id, older.id]


def test_update_persists_urls_and_bumps_timestamp(video_repo):
    video = video_repo.create(user_id="user-1", title="Boots", now=datetime(2024, 1, 1))
    video.video_url = "landscape/abc.mp4"
    video.thumbnail_url = "/assets/thumb.png"

    updated = video_repo.update(video)

    assert updated.video_url == "landscape/abc.mp4"
    assert video_repo.get(video.id).thumbnail_url == "/assets/thumb.png"
    assert updated.updated_at > datetime(2024, 1, 1)


def test_missing_records_raise_not_found(video_repo):
    video = video_repo.create(user_id="user-1", title="Boots")
    video_repo.delete(video.id)

    with pytest.raises(NotFoundError):
        video_repo.get(video.id)
    with pytest.raises(NotFoundError):
        video_repo.update(video)
    with pytest.raises(NotFoundError):
        video_repo.delete(video.id)
