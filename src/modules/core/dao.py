"""Record Access Layer.

``Dao`` turns entity-level requests (a key plus storage-shaped
attributes) into store primitives:

- insert is a check-then-put that refuses any existing record;
- reads hide soft-deleted records;
- updates are merged: only attributes whose value actually changed are
  written, and nothing is written when nothing changed.

The read-then-write windows of ``insert``, ``soft_delete`` and
``merge_update`` are accepted; the store's own atomic primitives are the
only concurrency control.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from modules.core.exceptions import InvalidInput, ObjectExists, ObjectNotFound
from modules.core.store.interfaces import IStoreClient, Key, Record, UpdateAssignment

logger = structlog.get_logger(__name__)

DELETED = "deleted"


def _differs(current: Any, new: Any) -> bool:
    """Strict inequality: ``True`` and ``1`` are different values here."""
    return type(current) is not type(new) or current != new


def compute_update_set(current: Record, partial: Record) -> Dict[str, Any]:
    """Return the attributes of ``partial`` whose value differs from ``current``.

    Attributes missing from ``partial`` are never included, whatever
    their stored value.  An attribute missing from ``current`` counts as
    different.
    """
    return {
        name: value
        for name, value in partial.items()
        if name not in current or _differs(current[name], value)
    }


def build_assignments(update_set: Dict[str, Any]) -> List[UpdateAssignment]:
    """Give every entry of ``update_set`` its own placeholder pair."""
    return [
        UpdateAssignment(name=name, value=value, name_ref=f"#attr{i}", value_ref=f":val{i}")
        for i, (name, value) in enumerate(update_set.items())
    ]


class Dao:
    """Data access object for one table.

    Expects a store client bound to that table to be injected.
    """

    def __init__(self, store: IStoreClient) -> None:
        self._store = store

    @property
    def table_name(self) -> str:
        return self._store.table_name

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def insert(self, key: Key, record: Record) -> Record:
        """Persist ``record`` unless anything is already stored at ``key``.

        Soft-deleted records count as existing, so an id is never reused.

        Raises:
            ObjectExists: a record (live or soft-deleted) is stored at ``key``.
        """
        log = logger.bind(table=self.table_name, key=key)
        if self._store.get(key) is not None:
            log.warning("dao.insert.exists")
            raise ObjectExists(f"Item already exists at {key}.")

        self._store.put(record)
        log.info("dao.insert.persisted")
        return record

    def soft_delete(self, key: Key) -> Record:
        """Flip the ``deleted`` flag in place and return the stored record.

        Raises:
            ObjectNotFound: nothing is stored at ``key``.
        """
        log = logger.bind(table=self.table_name, key=key)
        item = self._store.get(key)
        if item is None:
            log.warning("dao.soft_delete.missing")
            raise ObjectNotFound(f"No item stored at {key}.")

        item[DELETED] = True
        self._store.put(item)
        log.info("dao.soft_delete.done")
        return item

    def merge_update(self, key: Key, partial: Record) -> Record:
        """Write the attributes of ``partial`` that differ from the live record.

        Returns the live record unchanged when there is nothing to write,
        otherwise the full record as stored after the update.

        Raises:
            ObjectNotFound: no live record at ``key``.
            InvalidInput: ``partial`` tries to change a key attribute.
        """
        log = logger.bind(table=self.table_name, key=key)
        current = self.fetch_by_key(key)
        if not current:
            log.warning("dao.merge_update.missing")
            raise ObjectNotFound("Unable to update a non-existing item.")

        for name, value in key.items():
            if name in partial and _differs(value, partial[name]):
                raise InvalidInput(name, "key attributes cannot be updated")

        update_set = compute_update_set(current, partial)
        if not update_set:
            log.info("dao.merge_update.noop")
            return current

        assignments = build_assignments(update_set)
        log.info("dao.merge_update.writing", attributes=sorted(update_set))
        return self._store.update(key, assignments)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def fetch_by_key(self, key: Key) -> Record:
        """Return the live record at ``key``, or ``{}`` when absent or deleted."""
        item = self._store.get(key)
        # No index on ``deleted``: filter soft-deleted rows here.
        if item is None or item.get(DELETED) is True:
            logger.info("dao.fetch.empty", table=self.table_name, key=key)
            return {}
        return item

    def exists(self, key: Key) -> bool:
        """``True`` when anything, live or soft-deleted, is stored at ``key``."""
        return self._store.get(key) is not None

    def fetch_all(self) -> List[Record]:
        """Return every live record of the table in one unpaged pass."""
        items = self._store.scan(DELETED, False)
        logger.info("dao.fetch_all.done", table=self.table_name, count=len(items))
        return items

    def fetch(self, key: Optional[Key] = None) -> Record | List[Record]:
        """``fetch_by_key`` when a key is given, ``fetch_all`` otherwise."""
        if key:
            return self.fetch_by_key(key)
        return self.fetch_all()
