"""
Events API - Main Application Entry Point

A CRUD API for events with:
- Strict validation and normalization of untrusted JSON payloads
- Pluggable event stores (in-memory, SQL, Redis) injected at startup
- Presigned S3 URLs for direct image uploads
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from events_api.core.config import Settings, get_settings
from events_api.core.logging import setup_logging, get_logger
from events_api.core.metrics import metrics_endpoint
from events_api.api.error_handlers import register_error_handlers
from events_api.api.middleware import RequestLoggingMiddleware
from events_api.api.router import api_router
from events_api.services.interfaces.store import EventStore
from events_api.services.interfaces.upload import UploadAuthorizer
from events_api.services.store_factory import build_store, build_upload_authorizer


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: build missing collaborators, close them on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if app.state.store is None:
        app.state.store = await build_store(settings)
    if app.state.upload_authorizer is None:
        app.state.upload_authorizer = build_upload_authorizer(settings)

    logger.info("store_ready", backend=app.state.store.backend)

    yield

    await app.state.store.close()
    logger.info("application_shutdown")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[EventStore] = None,
    upload_authorizer: Optional[UploadAuthorizer] = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators passed here are used as-is; anything left as None is built
    from settings when the lifespan starts.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="CRUD API for events with validated payloads and presigned image uploads",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.upload_authorizer = upload_authorizer

    # CORS preflight; the logging middleware stamps the origin header on every response
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom middleware
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    # Routes
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for Docker and load balancers."""
        store = app.state.store
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "store": store.backend if store is not None else None,
        }

    @app.get("/metrics", tags=["Health"], include_in_schema=False)
    def metrics():
        return metrics_endpoint()

    return app


app = create_app()
