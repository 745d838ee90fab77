"""
Main entrypoint for the User Inputs API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Importing the app here makes it easy to run with uvicorn
or another ASGI server, e.g.::

    uvicorn user_inputs_api.app.main:app --port 4000

The record store lives in memory for the lifetime of the app; the
Google Sheets mirror is only wired in when ``SPREADSHEET_ID`` is set.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.errors import InvalidUserInputError
from .core.logging_config import setup_logging
from .core.store import UserInputStore
from .services.sheets_service import create_sheets_appender
from .services.user_input_service import UserInputService


async def invalid_input_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report malformed request bodies as 400.

    Handles ``InvalidUserInputError`` raised by the services as well as
    FastAPI's own ``RequestValidationError``, which would otherwise be a 422.
    """
    logging.getLogger(__name__).info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "invalid JSON data"})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to build the app from.  Defaults to the module-level
        ``settings`` read from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  The CRUD service is
        available as ``app.state.user_input_service``.
    """
    app_settings = app_settings or settings
    # Initialise logging before anything else so that the setup below
    # can log.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version)

    store = UserInputStore.with_demo_records() if app_settings.seed_demo_records else UserInputStore()
    app.state.user_input_service = UserInputService(store, mirror=create_sheets_appender(app_settings))

    app.add_exception_handler(RequestValidationError, invalid_input_handler)
    app.add_exception_handler(InvalidUserInputError, invalid_input_handler)
    app.include_router(v1_router)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
