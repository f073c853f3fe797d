"""Media data models and storage key helpers."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from enum import StrEnum
from typing import BinaryIO

ASSET_NAME_BYTES = 32


class Orientation(StrEnum):
    """Coarse aspect-ratio class, used only as a storage key prefix."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


@dataclass(slots=True)
class UploadedMedia:
    """Incoming upload as seen by the ingest pipeline."""

    stream: BinaryIO
    content_type: str | None
    size: int | None = None
    filename: str | None = None


def extension_for(content_type: str) -> str:
    """Return the file extension implied by a ``type/subtype`` media type."""
    _, _, subtype = content_type.partition("/")
    return subtype or "bin"


def generate_asset_name(extension: str) -> str:
    """Return a fresh ``<random>.<ext>`` name from 32 secure random bytes."""
    return f"{secrets.token_urlsafe(ASSET_NAME_BYTES)}.{extension}"


def build_storage_key(orientation: Orientation, asset_name: str) -> str:
    return f"{orientation.value}/{asset_name}"
