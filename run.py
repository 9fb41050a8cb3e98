"""Entry point for the Congest webhook scheduler.

Host, port and log level are read from the environment (``HOST``,
``PORT``, ``LOG_LEVEL``).  See ``congest/app/core/config.py`` for the
full list of supported variables.

Usage:
    PORT=3000 python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from congest.app.core.config import settings
from congest.app.main import app


async def run_api() -> None:
    """Serve the API with Uvicorn until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    """Log the bind address and serve the API."""
    logging.getLogger(__name__).info("Starting Congest on %s:%s", settings.host, settings.port)
    await run_api()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
