"""Domain-specific exceptions for ingest pipeline."""

from __future__ import annotations

from pathlib import Path

from ..exceptions import AppError, ForbiddenError, ValidationError

__all__ = [
    "CleanupWarning",
    "ForbiddenError",
    "IngestError",
    "MediaProcessError",
    "ProbeError",
    "PublishError",
    "RewriteError",
    "ValidationError",
]


class IngestError(AppError):
    """Base class for failures of the ingest pipeline stages."""


class MediaProcessError(IngestError):
    """Raised when an external media process fails or returns garbage."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ProbeError(MediaProcessError):
    """Raised when ffprobe fails or its output carries no usable stream."""


class RewriteError(MediaProcessError):
    """Raised when the fast-start remux exits non-zero."""


class PublishError(IngestError):
    """Raised when the object store rejects an upload or cannot sign a key."""


class CleanupWarning(Warning):
    """A scratch file that could not be deleted. Logged, never raised."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"could not remove {path}: {reason}")
        self.path = path
        self.reason = reason
