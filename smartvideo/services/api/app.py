# smartvideo/services/api/app.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartvideo.common.logging import get_logger
from smartvideo.common.settings import get_settings
from smartvideo.services.api.routers import channel, health, videos
from smartvideo.services.channel.host import VideoInfoHost

logger = get_logger(__name__)


def create_app(host: Optional[VideoInfoHost] = None) -> FastAPI:
    cfg = get_settings()
    dev = cfg.app_env.lower() == "development"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.host = host or VideoInfoHost(settings=cfg)
        logger.info("%s attached (%s)", cfg.app_name, cfg.app_env)
        try:
            yield
        finally:
            app.state.host.detach()

    app = FastAPI(
        title="Smart Video Info API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
        lifespan=lifespan,
    )

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
    )

    app.include_router(health.router)
    app.include_router(videos.router)
    app.include_router(channel.router)
    return app

app = create_app()
