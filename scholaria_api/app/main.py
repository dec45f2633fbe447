"""
Main entrypoint for the Scholaria API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  ``create_app`` builds and configures the
app, which is then instantiated at module import time as ``app``, so
it can be served with uvicorn::

    uvicorn scholaria_api.app.main:app --reload

The store handle is opened when the application starts and closed when
it shuts down; handlers reach it through ``app.state.database``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import Database
from .core.errors import ScholariaError
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    database_url : Optional[str]
        Store location; defaults to ``settings.database_url``.  Tests
        pass ``":memory:"``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    database = Database(database_url or settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database.connect()
        logger.info("%s %s started", settings.project_name, settings.api_version)
        try:
            yield
        finally:
            database.close()
            logger.info("%s shutting down", settings.project_name)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.database = database

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    @app.exception_handler(ScholariaError)
    async def scholaria_error_handler(request: Request, exc: ScholariaError) -> JSONResponse:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
