from datetime import timedelta
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import boto3
import pytest
from botocore.stub import ANY, Stubber

from src.app.config import ObjectStoreSettings
from src.app.ingest.ingest_errors import PublishError
from src.app.storage.object_store import (
    LocalObjectStore,
    S3ObjectStore,
    build_object_store,
)


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test-access",
        aws_secret_access_key="test-secret",
    )


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    path = tmp_path / "abc.processed.mp4"
    path.write_bytes(b"video-bytes")
    return path


def test_s3_upload_puts_object_with_content_type(s3_client, artifact):
    store = S3ObjectStore(bucket="tubely-videos", client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "put_object",
            {"ETag": '"etag"'},
            {
                "Bucket": "tubely-videos",
                "Key": "landscape/abc.mp4",
                "Body": ANY,
                "ContentType": "video/mp4",
            },
        )
        store.upload("landscape/abc.mp4", artifact, "video/mp4")
        stubber.assert_no_pending_responses()


def test_s3_upload_error_becomes_publish_error(s3_client, artifact):
    store = S3ObjectStore(bucket="tubely-videos", client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(PublishError):
            store.upload("landscape/abc.mp4", artifact, "video/mp4")


def test_s3_upload_missing_file_becomes_publish_error(s3_client, tmp_path):
    store = S3ObjectStore(bucket="tubely-videos", client=s3_client)

    with pytest.raises(PublishError):
        store.upload("landscape/abc.mp4", tmp_path / "missing.mp4", "video/mp4")


def test_s3_presign_builds_get_url_without_round_trip(s3_client):
    store = S3ObjectStore(bucket="tubely-videos", client=s3_client)

    with Stubber(s3_client):
        url = store.presign("portrait/abc.mp4", timedelta(minutes=5))

    assert "tubely-videos" in url
    assert urlparse(url).path.endswith("portrait/abc.mp4")


def test_presign_rejects_empty_key(s3_client, tmp_path):
    with pytest.raises(PublishError):
        S3ObjectStore(bucket="b", client=s3_client).presign("")
    with pytest.raises(PublishError):
        LocalObjectStore(root=tmp_path, public_base_url="http://x", signing_key="k").presign("  ")


def test_local_store_upload_and_signed_url(tmp_path, artifact):
    store = LocalObjectStore(
        root=tmp_path / "storage",
        public_base_url="http://testserver/",
        signing_key="secret",
        clock=lambda: 1_000.0,
    )

    store.upload("other/abc.mp4", artifact, "video/mp4")
    url = store.presign("other/abc.mp4", timedelta(seconds=60))

    assert (tmp_path / "storage" / "other" / "abc.mp4").read_bytes() == b"video-bytes"
    parsed = urlparse(url)
    assert parsed.path == "/storage/other/abc.mp4"
    query = parse_qs(parsed.query)
    assert query["expires"] == ["1060"]
    assert store.verify("other/abc.mp4", 1060, query["signature"][0])
    assert not store.verify("other/other.mp4", 1060, query["signature"][0])
    assert not store.verify("other/abc.mp4", 1061, query["signature"][0])


def test_local_store_rejects_expired_signature(tmp_path):
    now = [1_000.0]
    store = LocalObjectStore(
        root=tmp_path, public_base_url="http://x", signing_key="secret", clock=lambda: now[0]
    )
    signature = parse_qs(urlparse(store.presign("a/b.mp4", timedelta(seconds=10))).query)["signature"][0]

    now[0] = 2_000.0

    assert not store.verify("a/b.mp4", 1010, signature)


def test_local_store_rejects_escaping_keys(tmp_path, artifact):
    store = LocalObjectStore(root=tmp_path / "storage", public_base_url="http://x", signing_key="k")

    with pytest.raises(PublishError):
        store.upload("../outside.mp4", artifact, "video/mp4")


def test_local_store_missing_source_is_publish_error(tmp_path):
    store = LocalObjectStore(root=tmp_path / "storage", public_base_url="http://x", signing_key="k")

    with pytest.raises(PublishError):
        store.upload("other/abc.mp4", tmp_path / "missing.mp4", "video/mp4")


def _store_settings(tmp_path: Path, backend: str) -> ObjectStoreSettings:
    return ObjectStoreSettings(
        backend=backend,
        bucket="tubely-videos",
        region="us-east-1",
        endpoint_url="http://localhost:9000",
        access_key="minio",
        secret_key="minio-secret",
        local_root=tmp_path / "storage",
        public_base_url="http://x",
        signing_key="k",
    )


def test_build_object_store_selects_backend(tmp_path):
    assert isinstance(build_object_store(_store_settings(tmp_path, "local")), LocalObjectStore)
    s3_store = build_object_store(_store_settings(tmp_path, "s3"))
    assert isinstance(s3_store, S3ObjectStore)
    assert s3_store.client.meta.endpoint_url == "http://localhost:9000"

    with pytest.raises(ValueError):
        build_object_store(_store_settings(tmp_path, "ftp"))
