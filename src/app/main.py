"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress

import uvicorn
from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .lifecycle import run_periodic_scratch_sweep
from .logging import configure_logging


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        shutdown_event = asyncio.Event()
        sweeper = asyncio.create_task(
            run_periodic_scratch_sweep(
                scratch=app.state.scratch,
                older_than=cfg.scratch_ttl,
                shutdown_event=shutdown_event,
                interval_seconds=cfg.scratch_sweep_interval_seconds,
            )
        )
        try:
            yield
        finally:
            shutdown_event.set()
            sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await sweeper

    app = FastAPI(title="Tubely", lifespan=lifespan)
    include_routers(app, cfg)
    return app


def run() -> None:
    """Serve the application with uvicorn using environment settings."""
    uvicorn.run("src.app.main:create_app", factory=True, host="0.0.0.0", port=8091)
