"""
Business logic for user input records.

``UserInputService`` composes the in-memory store with an optional
mirror.  A mirror is any object with an ``append_user_input(record)``
method; in production it is a ``SheetsAppender``.  Without a mirror,
records are only kept in memory.

Creation is not transactional across the store and the mirror: the
record is appended to the store first and stays there even if the
mirror then fails.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from fastapi.concurrency import run_in_threadpool

from user_inputs_api.app.core.errors import ExternalMirrorError
from user_inputs_api.app.core.store import UserInputStore
from user_inputs_api.app.schemas.user_input import UserInput, parse_user_input


logger = logging.getLogger(__name__)


class UserInputService:
    """CRUD operations over a ``UserInputStore``."""

    def __init__(self, store: UserInputStore, mirror: Optional[Any] = None) -> None:
        self.store = store
        self.mirror = mirror

    async def list_user_inputs(self) -> List[UserInput]:
        return self.store.list()

    async def get_user_input(self, name: str) -> UserInput:
        """Return the first record named ``name``.

        Raises ``UserInputNotFoundError`` if none exists.
        """
        return self.store.find_by_name(name)

    async def create_user_input(self, data: UserInput) -> UserInput:
        """Append a record and mirror it.

        The Sheets call is blocking network I/O, so it runs in the
        thread pool rather than on the event loop.  Raises
        ``ExternalMirrorError`` if the mirror fails; the record has
        already been stored at that point.
        """
        record = self.store.insert(data)
        logger.info("Created user input %s", record.name)
        if self.mirror is not None:
            try:
                await run_in_threadpool(self.mirror.append_user_input, record)
            except ExternalMirrorError:
                logger.error("User input %s kept in memory but not mirrored", record.name)
                raise
        return record

    async def update_user_input(self, name: str, data: Any) -> UserInput:
        """Replace every field of the first record named ``name``.

        ``data`` is a ``UserInput`` or an unparsed JSON body.  The name is
        looked up before the body is parsed, so an unknown name raises
        ``UserInputNotFoundError`` even when the body is malformed; a bad
        body for a known name raises ``InvalidUserInputError``.  Nothing is
        changed in either case.
        """
        self.store.find_index_by_name(name)
        record = self.store.replace_by_name(name, parse_user_input(data))
        logger.info("Updated user input %s", name)
        return record

    async def delete_user_input(self, name: str) -> UserInput:
        """Remove the first record named ``name`` and return it."""
        record = self.store.remove_by_name(name)
        logger.info("Deleted user input %s", name)
        return record
