"""
Pydantic schemas for user input records.

A single model is used for requests and responses.  Every field has a
zero default, so a field omitted from a create or update payload is
stored as ``""`` or ``0``: updates replace the whole record rather than
patching it.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from user_inputs_api.app.core.errors import InvalidUserInputError


class UserInput(BaseModel):
    """A single user input record."""

    name: str = Field("", description="Lookup key; not required to be unique")
    age: int = Field(0)
    commute_method: str = Field("", description="How the user gets to college, e.g. Bike")
    college: str = Field("")
    hobbies: str = Field("")

    def as_row(self) -> list:
        """Return the field values in spreadsheet column order."""
        return [self.name, self.age, self.commute_method, self.college, self.hobbies]


class MessageResponse(BaseModel):
    message: str


def parse_user_input(data: Any) -> UserInput:
    """Build a ``UserInput`` from a raw JSON body or a mapping.

    Raises ``InvalidUserInputError`` when the body is not valid JSON or
    a field cannot be coerced to its type.
    """
    if isinstance(data, UserInput):
        return data
    try:
        if isinstance(data, (bytes, str)):
            return UserInput.model_validate_json(data)
        return UserInput.model_validate(data)
    except ValidationError as exc:
        raise InvalidUserInputError(str(exc)) from exc
