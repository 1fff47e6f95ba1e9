"""
Application entry point
FastAPI is assembled here and the routes are attached
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from quill.config import Settings, get_settings
from quill.context import AppContext, create_mongo_context
from quill.dependencies import get_context
from quill.routes import auth, comments, posts, users
from quill.utils.exceptions import (
    AppError,
    app_error_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from quill.utils.limiter import limiter
from quill.utils.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    # A context handed to create_app (tests) is used as is
    owns_context = getattr(app.state, "context", None) is None
    if owns_context:
        # Raises when MongoDB is unreachable: startup fails instead of serving
        app.state.context = await create_mongo_context(settings)

    logger.info("Quill API started")
    yield
    logger.info("Quill API shutting down")

    if owns_context:
        app.state.context.close()
        app.state.context = None


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """
    Build the application.

    Exception handlers and middleware are registered here, before the
    server accepts any connection.
    """
    if settings is None:
        settings = context.settings if context is not None else get_settings()

    app = FastAPI(
        title="Quill API",
        description="Blog backend with posts, comments and likes",
        version="1.0.0",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.context = context

    # =====================
    # Global error handlers
    # =====================

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ==================
    # Request rate limit
    # ==================

    # One Limiter per process: the route decorators register on it at
    # import time. Each app switches it for its settings and starts with
    # empty counters.
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    limiter.reset()
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    # CORS (so a frontend can call the API)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.DEBUG else ["http://localhost:3000"],
        allow_credentials=not settings.DEBUG,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ===============
    # HEALTH-CHECKING
    # ===============

    @app.get("/health")
    async def health_check(ctx: AppContext = Depends(get_context)):
        """Check that the app and its store are alive"""
        database = "ok" if await ctx.users.ping() else "unavailable"
        return {"status": "ok", "database": database}

    # ==========
    # ALL ROUTES
    # ==========

    app.include_router(auth.router, prefix=settings.API_PREFIX)  # Register and login
    app.include_router(posts.router, prefix=settings.API_PREFIX)  # Posts and likes
    app.include_router(comments.router, prefix=settings.API_PREFIX)  # Comments
    app.include_router(users.router, prefix=settings.API_PREFIX)  # Profiles and feeds

    return app


if __name__ == "__main__":
    import uvicorn

    load_dotenv()
    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT)
