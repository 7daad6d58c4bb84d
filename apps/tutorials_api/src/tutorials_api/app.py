from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tutorials_core.config import TutorialsSettings, tutorials_settings
from tutorials_core.logging import get_logger
from tutorials_db import close_db, create_all, init_db

from .errors import register_exception_handlers
from .middleware import REQUEST_ID_HEADER, RequestIDMiddleware
from .routes import router, service_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)

__version__ = "1.0.0"


def create_app(
    settings: TutorialsSettings | None = None,
    *,
    manage_database: bool = True,
) -> FastAPI:
    """
    Build the tutorials service.

    Args:
        settings: Overrides the process-wide settings (tests pass their own).
        manage_database: If True, the lifespan opens the engine, creates the
            tables and disposes the engine on shutdown. Tests that manage
            their own database pass False.

    Example:
        >>> app = create_app()
    """
    settings = settings or tutorials_settings

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if manage_database:
            init_db(
                settings.get_database_url(),
                echo=settings.DB_ECHO,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
            )
            await create_all()
            logger.info("Database ready (%s)", settings.ENVIRONMENT)
        yield
        if manage_database:
            await close_db()

    app = FastAPI(
        title="Tutorials API",
        description="CRUD service for tutorial records",
        version=__version__,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    if settings.ENABLE_CORS:
        app.add_middleware(
            CORSMiddleware,  # ty:ignore[invalid-argument-type]
            allow_origins=settings.CORS_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER],
        )
    if settings.ENABLE_REQUEST_ID:
        app.add_middleware(RequestIDMiddleware)  # ty:ignore[invalid-argument-type]

    app.include_router(service_router)
    app.include_router(router, prefix=settings.API_PREFIX)
    return app
