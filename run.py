"""Entry point for the Community Match API.

Starts the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, e.g. in Docker where only a single
Python file is specified::

    python run.py

Host and port come from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``3000``).  Other settings such as
``SECRET_KEY``, ``DATABASE_URL`` and ``RESEND_API_KEY`` are read by
``community_match_api.app.core.config``.
"""
import asyncio
import logging

from uvicorn import Config, Server

from community_match_api.app.core.config import settings
from community_match_api.app.main import app


async def main() -> None:
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
