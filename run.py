"""Entry point for serving the Support Network API.

Launches the FastAPI application with Uvicorn.  Intended to be executed
from the project root, e.g. under Docker where only a single Python
file is specified.

Usage:
    python run.py
"""
import asyncio
import os

from uvicorn import Config, Server

from support_network_api.app.core.config import settings
from support_network_api.app.main import app


async def run_api() -> None:
    """Start the API using Uvicorn.

    Host and port are read from environment variables ``HOST`` and
    ``PORT``. Defaults are ``0.0.0.0`` and ``8000``.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
