"""Request-scoped accessors for objects created in the app lifespan."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from scenelens.config import Settings
    from scenelens.upstream.client import ImaggaClient


def get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_provider(request: Request) -> ImaggaClient:
    provider: ImaggaClient = request.app.state.provider
    return provider
