"""
FastAPI dependencies.

The service instance is created once by ``create_app`` and attached to
``app.state``; endpoints receive it through ``Depends`` instead of
reaching for module-level state.
"""

from fastapi import Request

from user_inputs_api.app.services.user_input_service import UserInputService


def get_user_input_service(request: Request) -> UserInputService:
    return request.app.state.user_input_service
