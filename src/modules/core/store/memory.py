"""In-process implementation of the store client.

Used for local development (``STORE_BACKEND=memory``) and the test suite.
Records are deep-copied on the way in and out so callers can never
mutate stored state by accident.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

from modules.core.store.interfaces import IStoreClient, Key, Record, UpdateAssignment

# Tables shared by every client created for the same name.
_tables: Dict[str, Dict[Tuple[Any, ...], Record]] = {}
_lock = threading.Lock()


def reset_tables() -> None:
    """Empty every in-memory table."""
    with _lock:
        for rows in _tables.values():
            rows.clear()


class InMemoryStoreClient(IStoreClient):
    """Dict-backed table keyed by the values of ``key_attributes``."""

    def __init__(self, table_name: str, key_attributes: Sequence[str] = ("id",)) -> None:
        self.table_name = table_name
        self._key_attributes = tuple(key_attributes)
        with _lock:
            self._rows = _tables.setdefault(table_name, {})

    def _index(self, key: Key) -> Tuple[Any, ...]:
        return tuple(key[name] for name in self._key_attributes)

    def get(self, key: Key) -> Optional[Record]:
        with _lock:
            row = self._rows.get(self._index(key))
            return copy.deepcopy(row) if row is not None else None

    def put(self, record: Record) -> None:
        with _lock:
            self._rows[self._index(record)] = copy.deepcopy(record)

    def scan(self, filter_attribute: str, value: Any) -> List[Record]:
        with _lock:
            return [
                copy.deepcopy(row)
                for row in self._rows.values()
                if filter_attribute in row and row[filter_attribute] == value
            ]

    def update(self, key: Key, assignments: Sequence[UpdateAssignment]) -> Record:
        """Apply the assignments; raises ``KeyError`` if the record vanished."""
        with _lock:
            row = self._rows[self._index(key)]
            for assignment in assignments:
                row[assignment.name] = copy.deepcopy(assignment.value)
            return copy.deepcopy(row)

    def ping(self) -> None:
        return None
