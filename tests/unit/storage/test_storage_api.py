from datetime import timedelta
from urllib.parse import urlparse

import pytest
from fastapi.testclient import TestClient

from src.app.config import load_config
from src.app.main import create_app


@pytest.fixture
def app(app_config):
    return create_app(app_config)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def stored_key(app, tmp_path):
    source = tmp_path / "artifact.mp4"
    source.write_bytes(b"published")
    app.state.object_store.upload("landscape/abc.mp4", source, "video/mp4")
    return "landscape/abc.mp4"


def _relative(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.path}?{parsed.query}"


def test_signed_url_serves_object(client, app, stored_key):
    url = app.state.object_store.presign(stored_key, timedelta(minutes=1))

    response = client.get(_relative(url))

    assert response.status_code == 200
    assert response.content == b"published"


def test_tampered_signature_is_forbidden(client, app, stored_key):
    url = app.state.object_store.presign(stored_key, timedelta(minutes=1))

    response = client.get(_relative(url).replace("landscape/abc", "landscape/abd"))

    assert response.status_code == 403


def test_expired_signature_is_forbidden(client, app, stored_key):
    url = app.state.object_store.presign(stored_key, timedelta(seconds=-10))

    assert client.get(_relative(url)).status_code == 403


def test_missing_object_is_not_found(client, app):
    url = app.state.object_store.presign("portrait/missing.mp4", timedelta(minutes=1))

    assert client.get(_relative(url)).status_code == 404


def test_storage_route_absent_for_s3_backend(make_settings):
    config = load_config(make_settings(storage_backend="s3", s3_bucket="tubely-videos"))
    app = create_app(config)

    paths = {getattr(route, "path", None) for route in app.routes}
    assert "/storage/{key:path}" not in paths
