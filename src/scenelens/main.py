"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scenelens.api.routes import router
from scenelens.config import get_settings
from scenelens.upstream.client import ImaggaClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()
    app.state.settings = settings

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Starting SceneLens (provider=%s, configured=%s, timeout=%ss)",
        settings.imagga_endpoint,
        settings.provider_configured,
        settings.request_timeout,
    )
    if not settings.provider_configured:
        logger.warning("Provider credentials missing; analysis requests will fail until they are set")

    http_client = httpx.AsyncClient(base_url=settings.imagga_endpoint, timeout=settings.request_timeout)
    provider = ImaggaClient(settings, http_client)
    app.state.provider = provider

    logger.info("SceneLens ready")
    yield

    logger.info("Shutting down SceneLens")
    await provider.aclose()
    logger.info("SceneLens shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="SceneLens",
        description="Image recognition proxy that synthesizes tags, colors and objects into a scene context",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("scenelens.main:app", host=settings.host, port=settings.port)
