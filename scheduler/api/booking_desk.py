"""
Customer-facing booking desk.

Transport-agnostic: each method takes plain values or a dict payload and
returns a response model. Domain exceptions are translated into outcomes
here and never escape to the caller.
"""

import uuid
from datetime import date
from typing import Any, Optional, Union

from pydantic import ValidationError

from scheduler.api.responses import (
    AvailabilityResponse,
    BookingResponse,
    Outcome,
    ServiceListResponse,
    validation_messages,
)
from scheduler.core import SchedulingCore
from scheduler.engine.availability import RejectionReason, SlotRejectedError
from scheduler.engine.ledger import BookingConflictError
from scheduler.logging_context import get_request_logger, new_request_id
from scheduler.schemas.booking_schema import Booking, BookingRequest, ServiceSnapshot
from scheduler.schemas.calendar_schema import Interval
from scheduler.schemas.service_schema import Service
from scheduler.utils import format_time_12h, format_time_of_day, parse_date

logger = get_request_logger(__name__)


def _new_booking_id() -> str:
    return f"BK-{uuid.uuid4().hex[:8].upper()}"


class BookingDesk:
    """What a customer can do: browse services, check slots, book, look up."""

    def __init__(self, core: SchedulingCore) -> None:
        self._core = core

    def _active_service(self, service_id: str) -> Optional[Service]:
        service = self._core.store.services.get(service_id)
        if service is None or not service.is_active:
            return None
        return service

    # ------------------------------------------------------------------ #
    # Catalog
    # ------------------------------------------------------------------ #

    def list_services(self, active_only: bool = True) -> ServiceListResponse:
        request_id = new_request_id()
        services = self._core.store.services.list(
            lambda s: s.is_active or not active_only
        )
        services.sort(key=lambda s: (s.sort_order, s.name))
        return ServiceListResponse(
            services=services,
            message=f"{len(services)} services",
            request_id=request_id,
        )

    # ------------------------------------------------------------------ #
    # Availability
    # ------------------------------------------------------------------ #

    def get_availability(self, day: Union[str, date], service_id: str) -> AvailabilityResponse:
        """Bookable ``HH:MM`` start times for a service on a date."""
        request_id = new_request_id()
        try:
            parsed = parse_date(day)
        except ValueError as exc:
            return AvailabilityResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Invalid date.",
                errors=[str(exc)],
                service_id=service_id,
                request_id=request_id,
            )

        service = self._active_service(service_id)
        if service is None:
            return AvailabilityResponse(
                outcome=Outcome.NOT_FOUND,
                message=f"Service '{service_id}' not found.",
                day=parsed,
                service_id=service_id,
                request_id=request_id,
            )

        if self._core.calendar.is_past(parsed):
            slots: list[int] = []
        else:
            slots = self._core.engine.available_slots(parsed, service)
        logger.info(
            "Availability for %s on %s: %d slots", service.id, parsed.isoformat(), len(slots)
        )
        return AvailabilityResponse(
            day=parsed,
            service_id=service.id,
            slots=[format_time_of_day(t) for t in slots],
            message=f"{len(slots)} open slots for {service.name} on {parsed.isoformat()}.",
            request_id=request_id,
        )

    # ------------------------------------------------------------------ #
    # Bookings
    # ------------------------------------------------------------------ #

    def create_booking(self, payload: Union[dict[str, Any], BookingRequest]) -> BookingResponse:
        """
        Validate a request and commit it to the ledger.

        Availability is recomputed under the date's writer lock, so the slot
        list the customer saw earlier is never trusted.
        """
        request_id = new_request_id()
        try:
            request = (
                payload
                if isinstance(payload, BookingRequest)
                else BookingRequest.model_validate(payload)
            )
        except ValidationError as exc:
            logger.info("Booking request rejected: invalid input")
            return BookingResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Please correct the highlighted fields.",
                errors=validation_messages(exc),
                request_id=request_id,
            )

        service = self._active_service(request.service_id)
        if service is None:
            return BookingResponse(
                outcome=Outcome.NOT_FOUND,
                message=f"Service '{request.service_id}' not found.",
                request_id=request_id,
            )

        if self._core.calendar.is_past(request.date):
            return BookingResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Bookings cannot be made for past dates.",
                errors=[f"date: {request.date.isoformat()} is in the past"],
                request_id=request_id,
            )

        start = request.start_minutes
        ledger = self._core.ledger
        try:
            with ledger.locked(request.date):
                self._core.engine.validate_booking(request.date, service, start)
                candidate = Booking(
                    id=_new_booking_id(),
                    service_id=service.id,
                    service=ServiceSnapshot(
                        name=service.name,
                        price=service.price,
                        duration_minutes=service.duration_minutes,
                    ),
                    date=request.date,
                    interval=Interval.starting_at(start, service.duration_minutes),
                    customer=request.customer(),
                    notes=request.notes,
                )
                booking = ledger.insert(candidate)
        except SlotRejectedError as exc:
            outcome = (
                Outcome.CONFLICT if exc.reason == RejectionReason.OCCUPIED else Outcome.UNAVAILABLE
            )
            return BookingResponse(
                outcome=outcome,
                message=f"Sorry, {format_time_12h(start)} is no longer available.",
                errors=[str(exc)],
                request_id=request_id,
            )
        except BookingConflictError as exc:
            return BookingResponse(
                outcome=Outcome.CONFLICT,
                message=f"Sorry, {format_time_12h(start)} was just booked.",
                errors=[str(exc)],
                request_id=request_id,
            )

        logger.info(
            "Booking %s created for %s (%s)", booking.id, booking.customer.name, service.id
        )
        return BookingResponse(
            outcome=Outcome.CREATED,
            booking=booking,
            starts_at=self._core.calendar.localize(booking.date, booking.interval.start),
            message=(
                f"Booking confirmed. Reference number: {booking.id}. {service.name} on "
                f"{booking.date.isoformat()} at {format_time_12h(start)}."
            ),
            request_id=request_id,
        )

    def get_booking(self, booking_id: str) -> BookingResponse:
        request_id = new_request_id()
        booking = self._core.ledger.get(booking_id)
        if booking is None:
            return BookingResponse(
                outcome=Outcome.NOT_FOUND,
                message=f"Booking {booking_id} not found.",
                request_id=request_id,
            )
        return BookingResponse(
            booking=booking,
            starts_at=self._core.calendar.localize(booking.date, booking.interval.start),
            message=f"Booking {booking.id} is {booking.status.value}.",
            request_id=request_id,
        )
