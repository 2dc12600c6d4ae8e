#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Blockpress: FastAPI application factory
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blockpress.core.config import get_settings
from blockpress.core.errors import ContentProviderError
from blockpress.routes import media, render
from blockpress.schemas import HealthResponse
from blockpress.services.provider import MediaRegistry


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

def configure_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    logging.getLogger("blockpress").setLevel(level.upper())


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Renders Notion block trees to HTML.",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # One registry per app: resolved downloads outlive a single render.
    app.state.media = MediaRegistry()

    # ── CORS ──────────────────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── API routers ───────────────────────────────────────────────────────

    prefix = "/api/v1"

    app.include_router(render.router, prefix=prefix)
    app.include_router(media.router,  prefix=prefix)

    # ── Global exception handlers ─────────────────────────────────────────

    @app.exception_handler(ContentProviderError)
    async def provider_error(request: Request, exc: ContentProviderError):
        log.error("Content provider failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(500)
    async def server_error(request: Request, exc):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    # ── Health check ──────────────────────────────────────────────────────

    @app.get("/api/health", tags=["system"], response_model=HealthResponse)
    async def health():
        return HealthResponse(
            version=settings.app_version,
            app=settings.app_name,
            notion_api=settings.has_notion_token,
        )

    return app


# -----------------------------------------------------------------------------

app = create_app()


# -----------------------------------------------------------------------------
