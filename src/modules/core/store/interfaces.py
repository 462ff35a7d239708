"""Key-value store client interface (Dependency Inversion Principle).

``IStoreClient`` is the only contract the ``Dao`` depends on.  Each
client is bound to a single table; records are plain ``dict`` objects
mapping attribute names to scalar values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

Record = Dict[str, Any]
Key = Dict[str, Any]


@dataclass(frozen=True)
class UpdateAssignment:
    """One ``name = value`` entry of an update set.

    ``name_ref`` and ``value_ref`` are placeholders unique within the
    update set (``#attr0`` / ``:val0``).  Stores that build textual update
    expressions use them instead of the raw attribute name and value.
    """

    name: str
    value: Any
    name_ref: str
    value_ref: str


class IStoreClient(ABC):
    """Single-table key-value store primitives.

    Implementations propagate their own errors unchanged; callers do not
    retry.
    """

    table_name: str

    @abstractmethod
    def get(self, key: Key) -> Optional[Record]:
        """Return the stored record at ``key`` or ``None`` when absent."""

    @abstractmethod
    def put(self, record: Record) -> None:
        """Write ``record`` as-is, replacing any record with the same key."""

    @abstractmethod
    def scan(self, filter_attribute: str, value: Any) -> List[Record]:
        """Return every record whose ``filter_attribute`` equals ``value``."""

    @abstractmethod
    def update(self, key: Key, assignments: Sequence[UpdateAssignment]) -> Record:
        """Set exactly the assigned attributes on the record at ``key``.

        Attributes not named in ``assignments`` are left untouched.
        Returns all attributes of the record after the update.
        """

    @abstractmethod
    def ping(self) -> None:
        """Raise if the table cannot be reached."""
