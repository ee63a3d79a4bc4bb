"""
Repository abstraction over the four record collections.

The engine and ledger only see the ``Repository`` protocol. The in-memory
implementation is what the demo and tests run on; a database-backed one
only has to honour the same five methods.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Hashable, Optional, Protocol, TypeVar

from pydantic import BaseModel

from scheduler.schemas.booking_schema import Booking
from scheduler.schemas.calendar_schema import BlockedTime, DayRule
from scheduler.schemas.service_schema import Service

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class DuplicateRecordError(Exception):
    """Raised when inserting a record whose key already exists."""


class Repository(Protocol[T]):
    """Minimal storage interface the scheduling core depends on."""

    def get(self, key: Hashable) -> Optional[T]: ...

    def list(self, predicate: Optional[Callable[[T], bool]] = None) -> list[T]: ...

    def insert(self, record: T) -> T: ...

    def update(self, key: Hashable, **changes: Any) -> Optional[T]: ...

    def delete(self, key: Hashable) -> bool: ...


class InMemoryRepository(Generic[T]):
    """
    Dict-backed repository keyed by one attribute of the record.

    Records are copied on the way in and out, so callers can never mutate
    stored state without going through ``update``.
    """

    def __init__(self, key_field: str = "id") -> None:
        self._key_field = key_field
        self._records: dict[Hashable, T] = {}
        self._lock = threading.RLock()

    def _key(self, record: T) -> Hashable:
        return getattr(record, self._key_field)

    def get(self, key: Hashable) -> Optional[T]:
        with self._lock:
            record = self._records.get(key)
            return record.model_copy(deep=True) if record is not None else None

    def list(self, predicate: Optional[Callable[[T], bool]] = None) -> list[T]:
        with self._lock:
            records = list(self._records.values())
        return [
            r.model_copy(deep=True) for r in records if predicate is None or predicate(r)
        ]

    def insert(self, record: T) -> T:
        key = self._key(record)
        with self._lock:
            if key in self._records:
                raise DuplicateRecordError(f"Record '{key}' already exists")
            self._records[key] = record.model_copy(deep=True)
        logger.debug("Inserted %s '%s'", type(record).__name__, key)
        return record.model_copy(deep=True)

    def update(self, key: Hashable, **changes: Any) -> Optional[T]:
        """Apply field changes and re-validate. Returns None if the key is unknown."""
        with self._lock:
            existing = self._records.get(key)
            if existing is None:
                return None
            data = existing.model_dump()
            data.update(changes)
            updated = type(existing).model_validate(data)
            self._records[key] = updated
        return updated.model_copy(deep=True)

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._records.pop(key, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._records)


@dataclass
class Store:
    """The four collections the scheduling core reads and writes."""

    services: InMemoryRepository[Service] = field(default_factory=InMemoryRepository)
    day_rules: InMemoryRepository[DayRule] = field(
        default_factory=lambda: InMemoryRepository(key_field="weekday")
    )
    blocked_times: InMemoryRepository[BlockedTime] = field(default_factory=InMemoryRepository)
    bookings: InMemoryRepository[Booking] = field(default_factory=InMemoryRepository)
