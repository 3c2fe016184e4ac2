# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Concert With Friends web app.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, settings
from app.exceptions import (
    ConcertException,
    concert_exception_handler,
    http_exception_handler,
    unexpected_exception_handler,
)
from app.middleware import RateLimitMiddleware, RequestTracingMiddleware
from app.routers import events, pages
from lib.templates import TemplateReloader

# Configure logging
logging.basicConfig(
    level=settings.log.level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: Open the shared outbound HTTP client
    - Shutdown: Close it
    """
    app_settings: Settings = app.state.settings
    logger.info(f"Starting Concert With Friends server in {app_settings.env.value} mode")

    app.state.http_client = httpx.AsyncClient(
        timeout=app_settings.ticketmaster.timeout_seconds,
    )

    yield

    logger.info("Shutting down Concert With Friends server")
    await app.state.http_client.aclose()


def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Build the application for the given settings.

    Args:
        app_settings: Settings to run with (the global settings by default)

    Returns:
        FastAPI: The configured application
    """
    application = FastAPI(
        title="Concert With Friends",
        description="Find concerts and events through the Ticketmaster Discovery API.",
        version="0.1.0",
        docs_url=None if app_settings.is_production else "/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    application.state.settings = app_settings
    application.state.template_reloader = TemplateReloader(
        app_settings.template_dir,
        autoreload=app_settings.autoreload_templates,
        debug=app_settings.debug,
    )

    # =========================================================================
    # Middleware
    # =========================================================================
    # Added innermost first: rate limiting sees a request before tracing,
    # tracing before CORS.

    application.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_middleware(RequestTracingMiddleware)

    if app_settings.rate_limit.enabled:
        application.add_middleware(
            RateLimitMiddleware,
            per_second=app_settings.rate_limit.per_second,
            burst_size=app_settings.rate_limit.burst_size,
        )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    application.add_exception_handler(ConcertException, concert_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(Exception, unexpected_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    application.include_router(pages.router, tags=["Pages"])
    application.include_router(events.router, tags=["Events"])

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.server.url, port=settings.server.port)
