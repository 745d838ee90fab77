"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (configuration, logging, errors, the record store
and OAuth credentials), ``schemas`` (pydantic models), ``services``
(CRUD logic and the Google Sheets mirror) and ``api`` (versioned
routers).
"""

from .main import app  # noqa: F401
