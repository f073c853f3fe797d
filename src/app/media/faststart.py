"""Container rewrite for progressive playback (ffmpeg ``-movflags faststart``)."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..ingest.ingest_errors import RewriteError

PROCESSED_SUFFIX = ".processed"


class ContainerRewriter(Protocol):
    def output_path(self, source: Path) -> Path: ...

    def rewrite(self, source: Path) -> Path: ...


@dataclass(slots=True)
class FFmpegFastStartRewriter:
    """Move the container index to the front without re-encoding streams.

    The input file is left untouched; the caller owns both input and output.
    """

    ffmpeg_path: str = "ffmpeg"
    timeout_seconds: float | None = None
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def output_path(self, source: Path) -> Path:
        return source.with_name(f"{source.stem}{PROCESSED_SUFFIX}{source.suffix}")

    def build_command(self, source: Path, target: Path) -> list[str]:
        return [
            self.ffmpeg_path,
            "-y",
            "-v",
            "error",
            "-i",
            str(source),
            "-movflags",
            "faststart",
            "-map_metadata",
            "0",
            "-codec",
            "copy",
            str(target),
        ]

    def rewrite(self, source: Path) -> Path:
        target = self.output_path(source)
        cmd = self.build_command(source, target)
        try:
            process = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise RewriteError(
                f"ffmpeg binary not found: {self.ffmpeg_path}",
                stderr=str(exc),
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise RewriteError(
                f"ffmpeg timed out after {self.timeout_seconds}s",
                stderr=str(exc.stderr or ""),
            ) from exc

        if process.returncode != 0:
            stderr = (process.stderr or "").strip()
            raise RewriteError(
                f"ffmpeg exited with code {process.returncode}: {stderr}",
                returncode=process.returncode,
                stderr=stderr,
            )

        self.log.info(
            "media.faststart.done",
            extra={"source": str(source), "target": str(target)},
        )
        return target
