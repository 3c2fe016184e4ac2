# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for resources created at startup.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

import httpx
from fastapi import Depends, Request

from app.config import Settings
from lib.templates import TemplateReloader


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_template_reloader(request: Request) -> TemplateReloader:
    """Shared template environment holder."""
    return request.app.state.template_reloader


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Shared outbound HTTP client.

    Created in the app lifespan with the configured Ticketmaster timeout.
    """
    return request.app.state.http_client


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
TemplatesDep = Annotated[TemplateReloader, Depends(get_template_reloader)]
HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
