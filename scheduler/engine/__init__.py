from scheduler.engine.availability import AvailabilityEngine, RejectionReason, SlotRejectedError
from scheduler.engine.blocked_times import BlockedTimeNotFoundError, BlockedTimeRegistry
from scheduler.engine.business_calendar import BusinessCalendar, Closed, NotConfiguredError
from scheduler.engine.intervals import contains, overlaps
from scheduler.engine.ledger import (
    BookingConflictError,
    BookingLedger,
    BookingNotFoundError,
    InvalidTransitionError,
)

__all__ = [
    "AvailabilityEngine",
    "RejectionReason",
    "SlotRejectedError",
    "BlockedTimeRegistry",
    "BlockedTimeNotFoundError",
    "BusinessCalendar",
    "Closed",
    "NotConfiguredError",
    "BookingLedger",
    "BookingConflictError",
    "BookingNotFoundError",
    "InvalidTransitionError",
    "overlaps",
    "contains",
]
