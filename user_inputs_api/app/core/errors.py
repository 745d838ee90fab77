"""
Error types raised by the store, the services and the Sheets mirror.

The request layer translates these into HTTP responses:

* ``UserInputNotFoundError`` -> 404
* ``InvalidUserInputError`` -> 400
* ``ExternalMirrorError`` (and ``CredentialError``) -> 500
"""


class UserInputError(Exception):
    """Base class for all user input errors."""


class UserInputNotFoundError(UserInputError):
    """No record matches the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"user not found: {name!r}")
        self.name = name


class InvalidUserInputError(UserInputError):
    """The request payload could not be parsed into a record."""


class ExternalMirrorError(UserInputError):
    """Appending a record to the external spreadsheet failed.

    The in-memory store is not rolled back when this is raised.
    """


class CredentialError(ExternalMirrorError):
    """OAuth credentials could not be loaded, obtained or saved."""
