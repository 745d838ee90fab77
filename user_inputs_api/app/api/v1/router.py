"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers.  The user input
endpoints define their full paths internally, so no prefix is added
here; that keeps the public paths identical to the original service.
"""

from fastapi import APIRouter

from .endpoints import user_inputs

router = APIRouter()

router.include_router(user_inputs.router, tags=["user inputs"])
