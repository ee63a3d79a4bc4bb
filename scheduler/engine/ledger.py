"""
Booking ledger: the only writer of Booking records.

Defining invariant: no two active (non-cancelled) bookings on the same date
ever have overlapping intervals. The overlap check and the insert run under
the date's lock, so concurrent requests for the same date are serialized.
Locks come from a fixed pool keyed by the date's ordinal; most different
dates proceed independently and the pool never grows.

Status lifecycle:
    confirmed -> completed
    confirmed -> cancelled
Completed and cancelled are terminal.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Optional

from scheduler.engine.intervals import overlaps
from scheduler.logging_context import get_request_logger
from scheduler.schemas.booking_schema import Booking, BookingStatus
from scheduler.storage.repository import Repository

logger = get_request_logger(__name__)

LOCK_POOL_SIZE = 64


@dataclass(frozen=True)
class StatusTransition:
    """A single valid status change."""
    from_status: BookingStatus
    to_status: BookingStatus


class BookingConflictError(Exception):
    """Raised when a candidate booking overlaps an active booking."""

    def __init__(self, candidate: Booking, existing: Booking) -> None:
        super().__init__(
            f"{candidate.date.isoformat()} {candidate.interval} overlaps "
            f"booking {existing.id} ({existing.interval})"
        )
        self.candidate = candidate
        self.existing = existing


class BookingNotFoundError(Exception):
    """Raised when a booking id is unknown."""


class InvalidTransitionError(Exception):
    """Raised when a status change is not allowed from the current status."""


class BookingLedger:
    """Owns Booking records and guards the no-overlap invariant."""

    TRANSITIONS: list[StatusTransition] = [
        StatusTransition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
        StatusTransition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    ]

    def __init__(self, bookings: Repository[Booking]) -> None:
        self._bookings = bookings
        self._locks = [threading.RLock() for _ in range(LOCK_POOL_SIZE)]

    # ------------------------------------------------------------------ #
    # Locking
    # ------------------------------------------------------------------ #

    def _lock_for(self, day: date) -> threading.RLock:
        return self._locks[day.toordinal() % LOCK_POOL_SIZE]

    @contextmanager
    def locked(self, day: date) -> Iterator[None]:
        """Hold the writer lock for a date. Re-entrant within one thread."""
        lock = self._lock_for(day)
        with lock:
            yield

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def active_bookings_for(self, day: date) -> list[Booking]:
        """Non-cancelled bookings on a date, in start order."""
        active = self._bookings.list(lambda b: b.date == day and b.is_active)
        return sorted(active, key=lambda b: b.interval.start)

    def list_bookings(
        self, status: Optional[BookingStatus] = None, on_date: Optional[date] = None
    ) -> list[Booking]:
        """All bookings matching the filters, newest first."""
        matches = self._bookings.list(
            lambda b: (status is None or b.status == status)
            and (on_date is None or b.date == on_date)
        )
        return sorted(matches, key=lambda b: b.created_at, reverse=True)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def insert(self, candidate: Booking) -> Booking:
        """
        Store a new confirmed booking.

        Raises:
            BookingConflictError: If it overlaps an active booking on its date.
            ValueError: If the candidate is not in the confirmed status.
        """
        if candidate.status != BookingStatus.CONFIRMED:
            raise ValueError(f"New bookings must be confirmed, got '{candidate.status.value}'")

        with self.locked(candidate.date):
            for existing in self.active_bookings_for(candidate.date):
                if overlaps(candidate.interval, existing.interval):
                    logger.info(
                        "Conflict: %s %s overlaps %s",
                        candidate.date.isoformat(), candidate.interval, existing.id,
                    )
                    raise BookingConflictError(candidate, existing)
            stored = self._bookings.insert(candidate)

        logger.info(
            "Booking %s stored for %s %s", stored.id, stored.date.isoformat(), stored.interval
        )
        return stored

    def set_status(self, booking_id: str, new_status: BookingStatus) -> Booking:
        """
        Move a booking to a new status.

        Raises:
            BookingNotFoundError: If the id is unknown.
            InvalidTransitionError: If the change is not a valid transition.
        """
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")

        with self.locked(booking.date):
            # Re-read under the lock; another writer may have moved it already.
            booking = self._bookings.get(booking_id)
            if not self.can_transition(booking.status, new_status):
                valid = [s.value for s in self.valid_targets(booking.status)]
                raise InvalidTransitionError(
                    f"Cannot move booking {booking_id} from '{booking.status.value}' "
                    f"to '{new_status.value}'. Valid targets: {valid}"
                )
            updated = self._bookings.update(booking_id, status=new_status)

        logger.info(
            "Booking %s: %s -> %s", booking_id, booking.status.value, new_status.value
        )
        return updated

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    @classmethod
    def valid_targets(cls, status: BookingStatus) -> list[BookingStatus]:
        return [t.to_status for t in cls.TRANSITIONS if t.from_status == status]

    @classmethod
    def can_transition(cls, from_status: BookingStatus, to_status: BookingStatus) -> bool:
        return to_status in cls.valid_targets(from_status)

    @classmethod
    def is_terminal(cls, status: BookingStatus) -> bool:
        return not cls.valid_targets(status)
