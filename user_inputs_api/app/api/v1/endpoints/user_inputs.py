"""
User input endpoints for API v1.

The paths keep the verb-style names of the original service
(``/getuser``, ``/adduser``, ...).  Records are addressed by name; when
several records share a name, the first one in insertion order wins.

Errors use FastAPI's ``{"detail": ...}`` body (``"user not found"``,
``"invalid JSON data"``, ``"Failed to store data in Google Sheets"``),
while a successful delete answers ``{"message": "user deleted"}``.
Clients reading an error should look at ``detail``, not ``message``.

``PATCH /updateuser/{name}`` reads the raw body itself so the name is
looked up first: an unknown name is 404 even if the body is malformed.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from user_inputs_api.app.core.dependencies import get_user_input_service
from user_inputs_api.app.core.errors import ExternalMirrorError, UserInputNotFoundError
from user_inputs_api.app.schemas.user_input import MessageResponse, UserInput
from user_inputs_api.app.services.user_input_service import UserInputService

router = APIRouter()


@router.get("/getuser", response_model=List[UserInput])
async def list_user_inputs(
    service: UserInputService = Depends(get_user_input_service),
) -> List[UserInput]:
    """Return every record in insertion order."""
    return await service.list_user_inputs()


@router.get("/getuser/{name}", response_model=UserInput)
async def get_user_input(
    name: str,
    service: UserInputService = Depends(get_user_input_service),
) -> UserInput:
    """Return the first record with the given name, or 404."""
    try:
        return await service.get_user_input(name)
    except UserInputNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")


@router.post("/adduser", response_model=UserInput, status_code=status.HTTP_201_CREATED)
async def add_user_input(
    user_input: UserInput,
    service: UserInputService = Depends(get_user_input_service),
) -> UserInput:
    """Store a new record and append it to Google Sheets.

    A 500 here means the sheet append failed; the record is still
    stored and visible through ``GET /getuser``.
    """
    try:
        return await service.create_user_input(user_input)
    except ExternalMirrorError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store data in Google Sheets",
        )


@router.patch(
    "/updateuser/{name}",
    response_model=UserInput,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": UserInput.model_json_schema()}},
        }
    },
)
async def update_user_input(
    name: str,
    request: Request,
    service: UserInputService = Depends(get_user_input_service),
) -> UserInput:
    """Replace all fields of the named record.

    Fields missing from the body are reset to their defaults rather
    than kept from the old record.
    """
    try:
        return await service.update_user_input(name, await request.body())
    except UserInputNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")


@router.delete("/deleteuser/{name}", response_model=MessageResponse)
async def delete_user_input(
    name: str,
    service: UserInputService = Depends(get_user_input_service),
) -> MessageResponse:
    try:
        await service.delete_user_input(name)
    except UserInputNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    return MessageResponse(message="user deleted")
