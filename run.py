"""Entry point for the Payments API.

Starts the API under uvicorn.  Configuration is taken from the
environment (see ``payments_api/app/core/config.py``): database
credentials via ``DB_HOST``, ``DB_PORT``, ``DB_USER``, ``DB_PASS`` and
``DB_NAME`` (or a full ``DATABASE_URL``), the token signing secret via
``TOKEN_PASSWORD``, and the listen address via ``API_HOST`` and
``API_PORT``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from payments_api.app.core.config import settings
from payments_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Payments API stopped")
