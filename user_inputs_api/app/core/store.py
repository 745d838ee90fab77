"""
In-memory record store.

``UserInputStore`` owns an ordered list of ``UserInput`` records.
Nothing is persisted: the list lives as long as the process does.
Lookups are a linear scan by exact, case-sensitive name.  When several
records share a name, every name-keyed operation affects the first one
in store order.

All access goes through a single re-entrant lock so that concurrent
requests cannot interleave a lookup with a mutation.  Records are
copied on the way in and on the way out; callers never hold a
reference into the store.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional

from user_inputs_api.app.core.errors import UserInputNotFoundError
from user_inputs_api.app.schemas.user_input import UserInput


logger = logging.getLogger(__name__)


DEMO_RECORDS = (
    UserInput(name="Jack", age=21, commute_method="Bike", college="Boston University", hobbies="Golf"),
    UserInput(name="David", age=21, commute_method="Bike", college="Boston University", hobbies="Golf"),
    UserInput(name="Austin", age=21, commute_method="Bike", college="Boston University", hobbies="Golf"),
)


class UserInputStore:
    """Ordered, lock-guarded collection of user input records."""

    def __init__(self, records: Optional[Iterable[UserInput]] = None) -> None:
        self._lock = threading.RLock()
        self._records: List[UserInput] = [r.model_copy() for r in records or ()]

    @classmethod
    def with_demo_records(cls) -> "UserInputStore":
        return cls(DEMO_RECORDS)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def list(self) -> List[UserInput]:
        """Return copies of all records in insertion order."""
        with self._lock:
            return [r.model_copy() for r in self._records]

    def find_index_by_name(self, name: str) -> int:
        """Return the position of the first record named ``name``.

        Raises ``UserInputNotFoundError`` if there is none.
        """
        with self._lock:
            for index, record in enumerate(self._records):
                if record.name == name:
                    return index
        raise UserInputNotFoundError(name)

    def find_by_name(self, name: str) -> UserInput:
        """Return a copy of the first record named ``name``."""
        with self._lock:
            return self._records[self.find_index_by_name(name)].model_copy()

    def insert(self, record: UserInput) -> UserInput:
        """Append ``record`` to the end of the store.  Duplicates are allowed."""
        with self._lock:
            self._records.append(record.model_copy())
            return record.model_copy()

    def replace(self, index: int, record: UserInput) -> UserInput:
        with self._lock:
            self._records[index] = record.model_copy()
            return record.model_copy()

    def remove(self, index: int) -> UserInput:
        with self._lock:
            return self._records.pop(index)

    def replace_by_name(self, name: str, record: UserInput) -> UserInput:
        """Replace the first record named ``name`` with ``record`` in full."""
        with self._lock:
            return self.replace(self.find_index_by_name(name), record)

    def remove_by_name(self, name: str) -> UserInput:
        """Remove the first record named ``name`` and return it."""
        with self._lock:
            return self.remove(self.find_index_by_name(name))

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
