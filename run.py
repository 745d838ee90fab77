"""Entry point for the User Inputs API.

Serves the FastAPI application with Uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (defaults
``localhost`` and ``4000``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from user_inputs_api.app.core.config import settings
from user_inputs_api.app.main import app


async def main() -> None:
    """Run the API server until interrupted."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutting down")
