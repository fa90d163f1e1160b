"""
Main entrypoint for the Users API.

This module assembles the FastAPI application, sets up logging,
registers the envelope exception handlers and includes the API router.
The ``create_app`` function builds and configures the app, which is
then instantiated at module import time as ``app``.  Importing the app
here makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn users_api.app.main:app --reload

The connection pool is opened and migrated when the application starts
and closed when it shuts down; it lives on ``app.state.pool``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.router import router
from .core.config import Settings, settings as default_settings
from .core.db import create_pool, init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use instead of the environment-derived
        module default.  Tests pass their own to point the app at a
        temporary database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Open the pool and apply migrations before serving requests.
        pool = create_pool(settings.database_url, size=settings.db_pool_size)
        version = init_db(pool)
        app.state.pool = pool
        logger.info("Database %s ready (schema version %s)", pool.database, version)
        try:
            yield
        finally:
            pool.close()
            app.state.pool = None
            logger.info("Database connections closed")

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.pool = None

    register_exception_handlers(app)
    app.include_router(router)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
