"""
Main entrypoint for the Payments API.

This module assembles the FastAPI application.  ``create_app`` wires
logging, the database, the versioned routers and the error handlers
for one set of ``Settings``; the module-level ``app`` is built from the
environment so it can be served directly, e.g.::

    uvicorn payments_api.app.main:app --reload

The database is opened and its tables created when the application
starts, and the connection pool is released when it shuts down.
Existing tables are never dropped.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import Database
from .core.errors import add_error_handlers
from .core.logging_config import setup_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment at import time.

    Returns
    -------
    FastAPI
        A configured application.  ``app.state.settings`` and
        ``app.state.database`` are available to request dependencies.
    """
    settings = settings or default_settings
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, debug=settings.debug)

    database = Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database.init_db()
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.include_router(v1_router, prefix="/v1")
    add_error_handlers(app)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
