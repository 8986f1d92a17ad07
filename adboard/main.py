"""
=============================================================================
Nostr Ad Dashboard API
=============================================================================
Features:
  - Ad CRUD with impression / click counters
  - Users identified by Nostr npub (keys never leave the client)
  - Swappable storage: in-memory or PostgreSQL
  - JSON logging with request correlation IDs
=============================================================================
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings
from .exceptions import global_exception_handler, http_exception_handler, validation_exception_handler
from .limiter import limiter
from .logging_config import setup_logging
from .middleware import RequestTrackingMiddleware
from .repositories.base import Repository
from .repositories.factory import build_repository
from .routers import ad_router, auth_router, health_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, repository: Optional[Repository] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    repo = repository if repository is not None else build_repository(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.repository.startup()
        logger.info("Storage initialized", extra={"backend": type(app.state.repository).__name__})
        try:
            yield
        finally:
            await app.state.repository.shutdown()
            logger.info("Storage closed")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Create and manage ads, authenticated with Nostr key pairs",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.repository = repo
    app.state.settings = settings
    app.state.limiter = limiter
    limiter.enabled = settings.RATE_LIMIT_ENABLED

    # =========================================================================
    # MIDDLEWARE
    # =========================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestTrackingMiddleware)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # =========================================================================
    # ROUTES
    # =========================================================================
    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(ad_router.router)

    return app


app = create_app()
