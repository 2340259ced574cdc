"""FastAPI application factory for healthdash."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from healthdash.api.routes import dashboard
from healthdash.config.loader import load_config_or_default
from healthdash.config.models import DashboardConfig
from healthdash.dashboard.view import DashboardView, Fetcher
from healthdash.events.emitter import EventEmitter
from healthdash.events.log import EventLog

logger = logging.getLogger(__name__)


def create_app(
    config: DashboardConfig | None = None,
    fetcher: Fetcher | None = None,
    initial_load: bool = True,
) -> FastAPI:
    if config is None:
        try:
            config = load_config_or_default()
        except (FileNotFoundError, ValueError):
            logger.exception("Falling back to default configuration")
            config = DashboardConfig()

    event_log = EventLog(config.event_log_size)
    emitter = EventEmitter()
    emitter.add_listener(event_log)
    view = DashboardView(config, fetcher=fetcher, emitter=emitter)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if initial_load:
            await view.load_snapshot()
        yield

    app = FastAPI(
        title=config.dashboard.name,
        version=config.dashboard.version,
        description="Per-service, per-region health dashboard",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.view = view
    app.state.event_log = event_log
    app.state.emitter = emitter

    @app.get("/health", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(dashboard.router, prefix="/api")
    return app


app = create_app()
