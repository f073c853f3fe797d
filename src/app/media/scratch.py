"""Scratch storage for ingest uploads."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from pathlib import Path
from typing import BinaryIO

from ..ingest.ingest_errors import CleanupWarning, ValidationError

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB


class ScratchKind(StrEnum):
    ORIGINAL = "original"
    REWRITTEN = "rewritten"


@dataclass(slots=True)
class ScratchSession:
    """Scratch files owned by a single ingestion.

    Holds at most one file per :class:`ScratchKind`; :meth:`cleanup` removes
    every registered path and reports failures instead of raising them.
    """

    directory: Path
    log: logging.Logger
    files: dict[ScratchKind, Path] = field(default_factory=dict)

    def register(self, kind: ScratchKind, path: Path) -> Path:
        if kind in self.files:
            raise RuntimeError(f"scratch {kind.value} file already registered")
        self.files[kind] = path
        return path

    def replace(self, kind: ScratchKind, path: Path) -> list[CleanupWarning]:
        """Point ``kind`` at ``path``, removing the previously registered file."""
        previous = self.files.get(kind)
        self.files[kind] = path
        if previous is None or previous == path:
            return []
        return self._remove(kind, previous)

    def _remove(self, kind: ScratchKind, path: Path) -> list[CleanupWarning]:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            self.log.warning(
                "media.scratch.cleanup_failed",
                extra={"path": str(path), "kind": kind.value, "reason": str(exc)},
            )
            return [CleanupWarning(path, str(exc))]
        return []

    def write_original(
        self,
        name: str,
        stream: BinaryIO,
        *,
        max_bytes: int,
        chunk_size: int = CHUNK_SIZE,
    ) -> Path:
        """Copy ``stream`` into the scratch directory, enforcing ``max_bytes``."""
        target = self.register(ScratchKind.ORIGINAL, self.directory / name)
        size = 0
        with target.open("wb") as sink:
            while True:
                chunk = stream.read(chunk_size)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise ValidationError("File too large")
                sink.write(chunk)
        self.log.info(
            "media.scratch.written",
            extra={"path": str(target), "size_bytes": size},
        )
        return target

    def cleanup(self) -> list[CleanupWarning]:
        warnings: list[CleanupWarning] = []
        for kind, path in list(self.files.items()):
            warnings.extend(self._remove(kind, path))
        self.files.clear()
        return warnings


@dataclass(slots=True)
class ScratchSpace:
    """Manages the scratch directory under the assets root."""

    directory: Path
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def ensure_structure(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    @contextmanager
    def session(self) -> Iterator[ScratchSession]:
        """Yield a session whose files are removed on every exit path."""
        session = ScratchSession(directory=self.ensure_structure(), log=self.log)
        try:
            yield session
        finally:
            session.cleanup()

    def list_stale(self, older_than: timedelta, *, now: float | None = None) -> list[Path]:
        if not self.directory.exists():
            return []
        cutoff = (now if now is not None else time.time()) - older_than.total_seconds()
        stale: list[Path] = []
        for path in self.directory.iterdir():
            try:
                if path.is_file() and path.stat().st_mtime < cutoff:
                    stale.append(path)
            except FileNotFoundError:
                continue
        return sorted(stale)

    def sweep_stale(self, older_than: timedelta, *, now: float | None = None) -> int:
        """Remove scratch files left behind by crashed or failed cleanups."""
        removed = 0
        for path in self.list_stale(older_than, now=now):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                self.log.warning(
                    "media.scratch.sweep_failed",
                    extra={"path": str(path), "reason": str(exc)},
                )
                continue
            removed += 1
            self.log.info("media.scratch.swept", extra={"path": str(path)})
        return removed
