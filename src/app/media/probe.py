"""Stream geometry probing via ffprobe."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..ingest.ingest_errors import ProbeError
from .media_models import Orientation

LANDSCAPE_RATIO = 16 / 9
PORTRAIT_RATIO = 9 / 16
RATIO_TOLERANCE = 0.1


class MediaProber(Protocol):
    def probe(self, path: Path) -> Orientation: ...


def classify_orientation(width: int | None, height: int | None) -> Orientation:
    """Map stream dimensions to an :class:`Orientation`.

    Missing or zero dimensions fall back to ``other``; a file that cannot be
    measured is still ingestible.
    """
    if not width or not height:
        return Orientation.OTHER
    ratio = width / height
    if abs(ratio - LANDSCAPE_RATIO) < RATIO_TOLERANCE:
        return Orientation.LANDSCAPE
    if abs(ratio - PORTRAIT_RATIO) < RATIO_TOLERANCE:
        return Orientation.PORTRAIT
    return Orientation.OTHER


def _parse_dimension(value: object) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ProbeError(f"ffprobe returned malformed dimension: {value!r}") from exc


@dataclass(slots=True)
class FFprobeProber:
    """Classify the first video stream of a file by aspect ratio."""

    ffprobe_path: str = "ffprobe"
    timeout_seconds: float | None = None
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def build_command(self, path: Path) -> list[str]:
        return [
            self.ffprobe_path,
            "-v",
            "error",
            "-select_streams",
            "v:0",
            "-show_entries",
            "stream=width,height",
            "-of",
            "json",
            str(path),
        ]

    def probe(self, path: Path) -> Orientation:
        cmd = self.build_command(path)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise ProbeError(f"ffprobe binary not found: {self.ffprobe_path}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ProbeError(f"ffprobe timed out after {self.timeout_seconds}s") from exc

        stderr = (result.stderr or "").strip()
        if result.returncode != 0:
            raise ProbeError(
                f"ffprobe exited with code {result.returncode}: {stderr}",
                returncode=result.returncode,
                stderr=stderr,
            )
        if stderr:
            raise ProbeError(
                f"ffprobe reported errors: {stderr}",
                returncode=result.returncode,
                stderr=stderr,
            )

        try:
            payload = json.loads(result.stdout or "")
        except json.JSONDecodeError as exc:
            raise ProbeError("ffprobe returned malformed JSON") from exc

        streams = payload.get("streams") if isinstance(payload, dict) else None
        if not isinstance(streams, list) or not streams or not isinstance(streams[0], dict):
            raise ProbeError("ffprobe found no video stream")

        stream = streams[0]
        width = _parse_dimension(stream.get("width"))
        height = _parse_dimension(stream.get("height"))
        orientation = classify_orientation(width, height)
        self.log.info(
            "media.probe.done",
            extra={
                "path": str(path),
                "width": width,
                "height": height,
                "orientation": orientation.value,
            },
        )
        return orientation
