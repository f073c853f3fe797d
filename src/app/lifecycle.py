"""Lifecycle helpers wiring background tasks for FastAPI startup."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import timedelta
from typing import Callable

from .media.scratch import ScratchSpace


logger = logging.getLogger(__name__)


def scratch_sweep_once(
    *,
    scratch: ScratchSpace,
    older_than: timedelta,
    now: float | None = None,
) -> int:
    """Run a single scratch sweep and return the number of removed files."""

    return scratch.sweep_stale(older_than, now=now)


async def run_periodic_scratch_sweep(
    *,
    scratch: ScratchSpace,
    older_than: timedelta,
    shutdown_event: asyncio.Event,
    interval_seconds: float = 900.0,
    clock: Callable[[], float] | None = None,
) -> None:
    """Sweep leaked scratch files until ``shutdown_event`` is signalled."""

    interval = max(1.0, float(interval_seconds))
    tick = clock or time.time
    while not shutdown_event.is_set():
        try:
            removed = await asyncio.to_thread(
                scratch_sweep_once, scratch=scratch, older_than=older_than, now=tick()
            )
        except Exception:  # pragma: no cover - defensive logging
            logger.exception("Scratch sweep iteration failed")
        else:
            if removed:
                logger.info("Removed %s stale scratch files", removed)
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


__all__ = [
    "run_periodic_scratch_sweep",
    "scratch_sweep_once",
]
