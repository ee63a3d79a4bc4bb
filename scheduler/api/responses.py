"""Result types for the booking and admin desks.

Every call returns one of these instead of raising: ``outcome`` is the
tagged variant and ``status_code`` its HTTP equivalent, so a web layer can
map a response without inspecting the message text.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, computed_field

from scheduler.reports import DashboardSummary, DaySchedule
from scheduler.schemas.booking_schema import Booking
from scheduler.schemas.calendar_schema import BlockedTime, BusinessHoursEntry
from scheduler.schemas.service_schema import Service


class Outcome(str, Enum):
    OK = "ok"
    CREATED = "created"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    INVALID_TRANSITION = "invalid_transition"


STATUS_CODES: dict[Outcome, int] = {
    Outcome.OK: 200,
    Outcome.CREATED: 201,
    Outcome.INVALID_INPUT: 400,
    Outcome.NOT_FOUND: 404,
    Outcome.CONFLICT: 409,
    Outcome.UNAVAILABLE: 409,
    Outcome.INVALID_TRANSITION: 409,
}


class DeskResponse(BaseModel):
    """Fields shared by every desk response."""

    outcome: Outcome = Outcome.OK
    message: str = ""
    errors: list[str] = Field(default_factory=list)
    request_id: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.outcome]

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.OK, Outcome.CREATED)


class AvailabilityResponse(DeskResponse):
    day: Optional[date] = None
    service_id: Optional[str] = None
    slots: list[str] = Field(default_factory=list)


class BookingResponse(DeskResponse):
    booking: Optional[Booking] = None
    starts_at: Optional[datetime] = None


class BookingListResponse(DeskResponse):
    bookings: list[Booking] = Field(default_factory=list)


class ServiceResponse(DeskResponse):
    service: Optional[Service] = None


class ServiceListResponse(DeskResponse):
    services: list[Service] = Field(default_factory=list)


class BusinessHoursResponse(DeskResponse):
    hours: list[BusinessHoursEntry] = Field(default_factory=list)


class BlockedTimeResponse(DeskResponse):
    blocked_time: Optional[BlockedTime] = None


class BlockedTimeListResponse(DeskResponse):
    blocked_times: list[BlockedTime] = Field(default_factory=list)


class DashboardResponse(DeskResponse):
    dashboard: Optional[DashboardSummary] = None


class DayScheduleResponse(DeskResponse):
    schedule: Optional[DaySchedule] = None


def validation_messages(exc: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into ``field: message`` strings."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return messages
