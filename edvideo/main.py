"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
create_app() takes optional settings and an object store so tests can
build an app around a spy store without touching the environment.

For local development:
    uvicorn edvideo.main:app --reload

Or, using HOST/PORT from the environment:
    python -m edvideo.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from .api.dependencies import build_object_store
from .api.routes import health, metrics, pages, videos
from .api.templating import STATIC_DIR
from .api.uploads import UploadTooLargeError
from .config.settings import Settings, get_settings
from .infrastructure.storage.client import ObjectStore

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown, and report missing configuration."""
    settings: Settings = app.state.settings

    logger.info(
        "%s starting",
        settings.app_title,
        extra={
            "version": settings.app_version,
            "bucket": settings.s3_bucket,
            "region": settings.aws_region,
            "mock_mode": settings.storage_mock_mode,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("%s shutting down", settings.app_title)


def create_app(
    settings: Optional[Settings] = None,
    object_store: Optional[ObjectStore] = None,
) -> FastAPI:
    """
    Application factory.

    Settings are resolved once here and pinned through a dependency
    override, so every handler sees the same configuration value.
    """
    if settings is None:
        settings = get_settings()

    if object_store is None:
        object_store = build_object_store(settings)

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        description="List and upload educational videos stored in S3.",
        lifespan=lifespan,
    )

    logging.getLogger("edvideo").setLevel(settings.log_level)

    app.state.settings = settings
    app.state.object_store = object_store
    app.dependency_overrides[get_settings] = lambda: settings

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # Include routers
    app.include_router(pages.router, tags=["Pages"])
    app.include_router(videos.router, tags=["Videos"])
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(metrics.router, prefix="/metrics", tags=["Metrics"])

    @app.exception_handler(UploadTooLargeError)
    async def upload_too_large_handler(request: Request, exc: UploadTooLargeError):
        return PlainTextResponse(
            "File too large",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message,
        so stack traces never reach clients.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return PlainTextResponse(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(
        "FastAPI application created",
        extra={"title": settings.app_title, "version": settings.app_version}
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "edvideo.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
