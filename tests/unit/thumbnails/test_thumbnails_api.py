import pytest
from fastapi.testclient import TestClient

from src.app.config import load_config
from src.app.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def app(app_config):
    return create_app(app_config)


@pytest.fixture
def client(app):
    return TestClient(app)


def _auth(app, user_id: str = "user-1") -> dict[str, str]:
    return {"Authorization": f"Bearer {app.state.token_service.issue_token(user_id)}"}


def _create_video(client, app, user_id: str = "user-1") -> str:
    return client.post("/api/videos", json={"title": "Boots"}, headers=_auth(app, user_id)).json()["id"]


def test_thumbnail_upload_is_served_from_assets(client, app, app_config):
    video_id = _create_video(client, app)

    response = client.post(
        f"/api/thumbnail_upload/{video_id}",
        files={"thumbnail": ("thumb.png", PNG_BYTES, "image/png")},
        headers=_auth(app),
    )

    assert response.status_code == 200
    thumbnail_url = response.json()["thumbnail_url"]
    assert thumbnail_url.startswith("/assets/") and thumbnail_url.endswith(".png")
    name = thumbnail_url.removeprefix("/assets/")
    assert (app_config.asset_paths.root / name).read_bytes() == PNG_BYTES
    assert client.get(thumbnail_url).content == PNG_BYTES


def test_thumbnail_rejects_unsupported_type(client, app):
    video_id = _create_video(client, app)

    response = client.post(
        f"/api/thumbnail_upload/{video_id}",
        files={"thumbnail": ("thumb.gif", b"GIF89a", "image/gif")},
        headers=_auth(app),
    )

    assert response.status_code == 400
    assert response.json()["detail"]["failure_reason"] == "invalid_request"


def test_thumbnail_for_foreign_video_is_forbidden(client, app, app_config):
    video_id = _create_video(client, app, user_id="owner")

    response = client.post(
        f"/api/thumbnail_upload/{video_id}",
        files={"thumbnail": ("thumb.png", PNG_BYTES, "image/png")},
        headers=_auth(app, "intruder"),
    )

    assert response.status_code == 403
    assert [p for p in app_config.asset_paths.root.iterdir() if p.is_file()] == []


def test_thumbnail_over_limit_is_rejected(make_settings):
    config = load_config(make_settings(max_thumbnail_upload_bytes=32))
    app = create_app(config)
    client = TestClient(app)
    video_id = _create_video(client, app)

    response = client.post(
        f"/api/thumbnail_upload/{video_id}",
        files={"thumbnail": ("thumb.png", PNG_BYTES, "image/png")},
        headers=_auth(app),
    )

    assert response.status_code == 400
    assert [p for p in config.asset_paths.root.iterdir() if p.is_file()] == []


def test_assets_mount_does_not_expose_scratch_files(client, app_config):
    leaked = app_config.asset_paths.scratch / "leaked.mp4"
    leaked.write_bytes(b"in-flight upload")

    response = client.get("/assets/scratch/leaked.mp4")

    assert response.status_code == 404
