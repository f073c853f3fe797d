"""Durable object storage for published video artifacts."""

from __future__ import annotations

import hashlib
import hmac
import logging
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote, urlencode

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..config import ObjectStoreSettings
from ..ingest.ingest_errors import PublishError

DEFAULT_SIGNED_URL_TTL = timedelta(hours=1)


class ObjectStore(Protocol):
    def upload(self, key: str, local_path: Path, content_type: str) -> None: ...

    def presign(self, key: str, ttl: timedelta = DEFAULT_SIGNED_URL_TTL) -> str: ...


def _require_key(key: str) -> str:
    if not key or not key.strip():
        raise PublishError("Storage key must not be empty")
    return key


@dataclass(slots=True)
class S3ObjectStore:
    """S3 (or S3-compatible) backend driven by a boto3 client."""

    bucket: str
    client: Any
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def upload(self, key: str, local_path: Path, content_type: str) -> None:
        _require_key(key)
        try:
            with local_path.open("rb") as body:
                self.client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                )
        except (BotoCoreError, ClientError, OSError) as exc:
            raise PublishError(f"Failed to upload {key} to bucket {self.bucket}: {exc}") from exc
        self.log.info(
            "storage.s3.uploaded",
            extra={"bucket": self.bucket, "key": key, "content_type": content_type},
        )

    def presign(self, key: str, ttl: timedelta = DEFAULT_SIGNED_URL_TTL) -> str:
        _require_key(key)
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=int(ttl.total_seconds()),
            )
        except (BotoCoreError, ClientError) as exc:
            raise PublishError(f"Failed to presign {key}: {exc}") from exc


@dataclass(slots=True)
class LocalObjectStore:
    """Filesystem backend with HMAC-signed, expiring URLs.

    Objects are served back through ``GET /storage/{key}``; the route checks
    the signature with :meth:`verify` before reading the file.
    """

    root: Path
    public_base_url: str
    signing_key: str
    clock: Callable[[], float] = time.time
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def path_for(self, key: str) -> Path:
        _require_key(key)
        root = self.root.resolve()
        candidate = (root / key).resolve()
        if not candidate.is_relative_to(root) or candidate == root:
            raise PublishError(f"Storage key escapes storage root: {key}")
        return candidate

    def upload(self, key: str, local_path: Path, content_type: str) -> None:
        target = self.path_for(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(local_path, target)
        except OSError as exc:
            raise PublishError(f"Failed to store {key}: {exc}") from exc
        self.log.info(
            "storage.local.uploaded",
            extra={"key": key, "target": str(target), "content_type": content_type},
        )

    def _signature(self, key: str, expires: int) -> str:
        message = f"{key}:{expires}".encode("utf-8")
        return hmac.new(self.signing_key.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def presign(self, key: str, ttl: timedelta = DEFAULT_SIGNED_URL_TTL) -> str:
        _require_key(key)
        expires = int(self.clock() + ttl.total_seconds())
        query = urlencode({"expires": expires, "signature": self._signature(key, expires)})
        base = self.public_base_url.rstrip("/")
        return f"{base}/storage/{quote(key, safe='/')}?{query}"

    def verify(self, key: str, expires: int, signature: str) -> bool:
        if expires < self.clock():
            return False
        return hmac.compare_digest(self._signature(key, expires), signature)


def build_s3_client(settings: ObjectStoreSettings) -> Any:
    client_kwargs: dict[str, Any] = {
        "service_name": "s3",
        "region_name": settings.region,
        "config": BotoConfig(
            signature_version="s3v4",
            s3={"addressing_style": "path" if settings.endpoint_url else "auto"},
        ),
    }
    if settings.endpoint_url:
        client_kwargs["endpoint_url"] = settings.endpoint_url
    if settings.access_key and settings.secret_key:
        client_kwargs["aws_access_key_id"] = settings.access_key
        client_kwargs["aws_secret_access_key"] = settings.secret_key
    return boto3.client(**client_kwargs)


def build_object_store(settings: ObjectStoreSettings) -> ObjectStore:
    """Return the backend selected by ``settings.backend``."""
    if settings.backend == "local":
        settings.local_root.mkdir(parents=True, exist_ok=True)
        return LocalObjectStore(
            root=settings.local_root,
            public_base_url=settings.public_base_url,
            signing_key=settings.signing_key,
        )
    if settings.backend == "s3":
        return S3ObjectStore(bucket=settings.bucket, client=build_s3_client(settings))
    raise ValueError(f"Unknown storage backend: {settings.backend}")
