"""
In-memory storage for groups and contacts.

This module provides the record stores that act as the application's
database. Stores only hold records; they never assign ids and never enforce
business rules. Ids are assigned by the services that create records.
"""

import logging
import threading
from typing import Dict, Generic, List, Optional, TypeVar

from contactnexus.models import Contact, Group

logger = logging.getLogger(__name__)

T = TypeVar('T', Group, Contact)


class RecordStore(Generic[T]):
    """
    Id-indexed, insertion-ordered record holder.

    ``lock`` is re-entrant so that a service can hold it across a whole
    check-then-write sequence while still calling the store's own methods.
    """

    def __init__(self, name: str):
        self.name = name
        self.lock = threading.RLock()
        self._records: Dict[str, T] = {}

    def list_all(self) -> List[T]:
        """Return all records in insertion order."""
        with self.lock:
            return list(self._records.values())

    def find_by_id(self, record_id: str) -> Optional[T]:
        """Return the record with ``record_id`` or ``None``."""
        with self.lock:
            return self._records.get(record_id)

    def insert(self, record: T) -> T:
        """Add ``record`` under its existing id."""
        with self.lock:
            if record.id in self._records:
                raise KeyError(f"{self.name} already contains id {record.id}")
            self._records[record.id] = record
            logger.debug(f"{self.name}: inserted {record.id}")
            return record

    def replace(self, record: T) -> T:
        """Replace the stored record that has the same id as ``record``."""
        with self.lock:
            if record.id not in self._records:
                raise KeyError(f"{self.name} has no id {record.id}")
            self._records[record.id] = record
            logger.debug(f"{self.name}: replaced {record.id}")
            return record

    def remove(self, record_id: str) -> T:
        """Remove and return the record with ``record_id``."""
        with self.lock:
            if record_id not in self._records:
                raise KeyError(f"{self.name} has no id {record_id}")
            logger.debug(f"{self.name}: removed {record_id}")
            return self._records.pop(record_id)

    def clear(self) -> None:
        with self.lock:
            self._records.clear()

    def __contains__(self, record_id: object) -> bool:
        with self.lock:
            return record_id in self._records

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)


class GroupStore(RecordStore[Group]):
    """Holds every :class:`Group` record."""

    def __init__(self):
        super().__init__("GroupStore")


class ContactStore(RecordStore[Contact]):
    """Holds every :class:`Contact` record."""

    def __init__(self):
        super().__init__("ContactStore")


class InMemoryDatabase:
    """
    The single authoritative data holder.

    One instance owns one group store and one contact store; every reader and
    writer in the application receives this instance rather than keeping its
    own copy of the records.
    """

    def __init__(self):
        self.groups = GroupStore()
        self.contacts = ContactStore()
        logger.info("InMemoryDatabase initialized")

    def clear_all(self) -> None:
        """Drop every record from both stores."""
        with self.groups.lock, self.contacts.lock:
            self.groups.clear()
            self.contacts.clear()
        logger.info("All stores cleared")

    def get_metrics(self) -> Dict[str, int]:
        return {"groups": len(self.groups), "contacts": len(self.contacts)}
