"""
Availability engine: which start times can a service be booked at on a date.

Stateless. Every call recomputes from the calendar, the blocked-time
registry and the ledger, so identical inputs always give identical output:

    1. Resolve the operating window (closed / not configured -> no slots)
    2. Carve out the lunch break (up to two sub-windows)
    3. All-day block -> no slots
    4. Occupied = active bookings + partial blocks
    5. Walk each sub-window on a fixed grid anchored at its own start; keep t when
       [t, t + duration) fits that sub-window and overlaps nothing occupied

``validate_booking`` is the server-side guard run right before the ledger
insert; whatever list the client was shown earlier may be stale.
"""

from datetime import date
from enum import Enum

from scheduler.engine.blocked_times import BlockedTimeRegistry
from scheduler.engine.business_calendar import BusinessCalendar, Closed
from scheduler.engine.intervals import covers, overlaps_any, subtract
from scheduler.engine.ledger import BookingLedger
from scheduler.logging_context import get_request_logger
from scheduler.schemas.calendar_schema import Interval
from scheduler.schemas.service_schema import Service
from scheduler.utils import MINUTES_PER_DAY, format_time_of_day

logger = get_request_logger(__name__)

DEFAULT_GRANULARITY_MINUTES = 15


class RejectionReason(str, Enum):
    """Why a requested start time is not bookable."""
    CLOSED = "closed"
    FULLY_BLOCKED = "fully_blocked"
    OCCUPIED = "occupied"
    BLOCKED = "blocked"
    OUTSIDE_HOURS = "outside_hours"


class SlotRejectedError(Exception):
    """Raised when a requested start is not among the available slots."""

    def __init__(self, day: date, start: int, reason: RejectionReason) -> None:
        super().__init__(
            f"{format_time_of_day(start)} on {day.isoformat()} is not available ({reason.value})"
        )
        self.day = day
        self.start = start
        self.reason = reason


class AvailabilityEngine:
    """Composes calendar, blocks and ledger into bookable start times."""

    def __init__(
        self,
        calendar: BusinessCalendar,
        blocks: BlockedTimeRegistry,
        ledger: BookingLedger,
        granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
    ) -> None:
        if granularity_minutes < 1:
            raise ValueError(f"Granularity must be >= 1 minute, got {granularity_minutes}")
        self._calendar = calendar
        self._blocks = blocks
        self._ledger = ledger
        self._step = granularity_minutes

    @property
    def granularity_minutes(self) -> int:
        return self._step

    def occupied_intervals(self, day: date) -> list[Interval]:
        """Active booking intervals plus partial blocks for a date."""
        booked = [b.interval for b in self._ledger.active_bookings_for(day)]
        return booked + self._blocks.partial_intervals(day)

    def available_slots(self, day: date, service: Service) -> list[int]:
        """Ascending start times (minutes since midnight) bookable for ``service``."""
        operating = self._calendar.operating_window(day)
        if isinstance(operating, Closed):
            return []

        lunch = self._calendar.lunch_break_for(day)
        windows = subtract(operating, lunch) if lunch is not None else [operating]
        if self._blocks.is_date_fully_blocked(day):
            logger.debug("%s is fully blocked", day.isoformat())
            return []

        occupied = self.occupied_intervals(day)
        duration = service.duration_minutes
        slots = []

        for window in windows:
            for start in range(window.start, window.end, self._step):
                if start + duration > MINUTES_PER_DAY:
                    break
                candidate = Interval.starting_at(start, duration)
                if not covers(window, candidate):
                    break
                if overlaps_any(candidate, occupied):
                    continue
                slots.append(start)

        logger.debug(
            "%d slots for %s (%d min) on %s",
            len(slots), service.id, duration, day.isoformat(),
        )
        return slots

    def validate_booking(self, day: date, service: Service, start: int) -> None:
        """
        Check a requested start against freshly computed availability.

        Raises:
            SlotRejectedError: If ``start`` is not an available slot.
        """
        if start in self.available_slots(day, service):
            return
        reason = self._diagnose(day, service, start)
        logger.info(
            "Rejected %s %s for %s: %s",
            day.isoformat(), format_time_of_day(start), service.id, reason.value,
        )
        raise SlotRejectedError(day, start, reason)

    def _diagnose(self, day: date, service: Service, start: int) -> RejectionReason:
        if isinstance(self._calendar.operating_window(day), Closed):
            return RejectionReason.CLOSED
        if self._blocks.is_date_fully_blocked(day):
            return RejectionReason.FULLY_BLOCKED
        if start + service.duration_minutes > MINUTES_PER_DAY:
            return RejectionReason.OUTSIDE_HOURS
        candidate = Interval.starting_at(start, service.duration_minutes)
        booked = [b.interval for b in self._ledger.active_bookings_for(day)]
        if overlaps_any(candidate, booked):
            return RejectionReason.OCCUPIED
        if overlaps_any(candidate, self._blocks.partial_intervals(day)):
            return RejectionReason.BLOCKED
        return RejectionReason.OUTSIDE_HOURS
