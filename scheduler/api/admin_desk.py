"""
Administrator desk: booking lifecycle, catalog, weekly hours, closures and reports.

Authentication is the caller's concern; everything here assumes an
authorized admin.
"""

from datetime import date
from typing import Any, Optional, Union

from pydantic import ValidationError

from scheduler.api.responses import (
    BlockedTimeListResponse,
    BlockedTimeResponse,
    BookingListResponse,
    BookingResponse,
    BusinessHoursResponse,
    DashboardResponse,
    DayScheduleResponse,
    DeskResponse,
    Outcome,
    ServiceResponse,
    validation_messages,
)
from scheduler.config import AppConfig, settings
from scheduler.core import SchedulingCore
from scheduler.engine.blocked_times import BlockedTimeNotFoundError
from scheduler.engine.ledger import BookingNotFoundError, InvalidTransitionError
from scheduler.logging_context import get_request_logger, new_request_id
from scheduler.reports import build_dashboard, build_day_schedule
from scheduler.schemas.booking_schema import BookingStatus
from scheduler.schemas.calendar_schema import BlockedTimeCreate, BusinessHoursEntry
from scheduler.schemas.service_schema import Service, ServiceCreate, ServiceUpdate
from scheduler.utils import parse_date, slugify

logger = get_request_logger(__name__)


class AdminDesk:
    """Admin operations over one scheduling core."""

    def __init__(self, core: SchedulingCore, config: Optional[AppConfig] = None) -> None:
        self._core = core
        self._config = config or settings

    # ------------------------------------------------------------------ #
    # Bookings
    # ------------------------------------------------------------------ #

    def update_booking_status(self, booking_id: str, status: str) -> BookingResponse:
        request_id = new_request_id()
        try:
            new_status = BookingStatus(status)
        except ValueError:
            valid = [s.value for s in BookingStatus]
            return BookingResponse(
                outcome=Outcome.INVALID_INPUT,
                message=f"Unknown status '{status}'.",
                errors=[f"status: must be one of {valid}"],
                request_id=request_id,
            )

        try:
            booking = self._core.ledger.set_status(booking_id, new_status)
        except BookingNotFoundError as exc:
            return BookingResponse(
                outcome=Outcome.NOT_FOUND, message=str(exc), request_id=request_id
            )
        except InvalidTransitionError as exc:
            logger.info("Status change refused for %s: %s", booking_id, exc)
            return BookingResponse(
                outcome=Outcome.INVALID_TRANSITION, message=str(exc), request_id=request_id
            )

        return BookingResponse(
            booking=booking,
            message=f"Booking {booking.id} marked {booking.status.value}.",
            request_id=request_id,
        )

    def list_bookings(
        self, status: Optional[str] = None, on_date: Optional[Union[str, date]] = None
    ) -> BookingListResponse:
        """Bookings filtered by status and/or date, newest first."""
        request_id = new_request_id()
        try:
            status_filter = BookingStatus(status) if status else None
            date_filter = parse_date(on_date) if on_date else None
        except ValueError as exc:
            return BookingListResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Invalid filter.",
                errors=[str(exc)],
                request_id=request_id,
            )
        bookings = self._core.ledger.list_bookings(status=status_filter, on_date=date_filter)
        return BookingListResponse(
            bookings=bookings, message=f"{len(bookings)} bookings", request_id=request_id
        )

    # ------------------------------------------------------------------ #
    # Weekly hours
    # ------------------------------------------------------------------ #

    def get_business_hours(self) -> BusinessHoursResponse:
        request_id = new_request_id()
        hours = [BusinessHoursEntry.from_rule(r) for r in self._core.calendar.all_hours()]
        return BusinessHoursResponse(hours=hours, request_id=request_id)

    def update_business_hours(
        self, entries: list[Union[dict[str, Any], BusinessHoursEntry]]
    ) -> BusinessHoursResponse:
        """
        Replace the rules for the given weekdays.

        All entries are validated before any is written, so a bad entry
        leaves the stored hours untouched.
        """
        request_id = new_request_id()
        rules = []
        errors = []
        for position, raw in enumerate(entries):
            try:
                entry = (
                    raw if isinstance(raw, BusinessHoursEntry)
                    else BusinessHoursEntry.model_validate(raw)
                )
                rules.append(entry.to_rule())
            except ValidationError as exc:
                errors.extend(f"hours[{position}].{m}" for m in validation_messages(exc))
            except ValueError as exc:
                errors.append(f"hours[{position}]: {exc}")

        if errors:
            return BusinessHoursResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Business hours not saved.",
                errors=errors,
                request_id=request_id,
            )

        for rule in rules:
            self._core.calendar.set_hours(rule)
        hours = [BusinessHoursEntry.from_rule(r) for r in self._core.calendar.all_hours()]
        return BusinessHoursResponse(
            hours=hours, message=f"Updated {len(rules)} weekdays.", request_id=request_id
        )

    # ------------------------------------------------------------------ #
    # Blocked time
    # ------------------------------------------------------------------ #

    def add_blocked_time(
        self, payload: Union[dict[str, Any], BlockedTimeCreate]
    ) -> BlockedTimeResponse:
        request_id = new_request_id()
        try:
            request = (
                payload if isinstance(payload, BlockedTimeCreate)
                else BlockedTimeCreate.model_validate(payload)
            )
            interval = request.to_interval()
        except ValidationError as exc:
            return BlockedTimeResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Blocked time not saved.",
                errors=validation_messages(exc),
                request_id=request_id,
            )
        except ValueError as exc:
            return BlockedTimeResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Blocked time not saved.",
                errors=[str(exc)],
                request_id=request_id,
            )

        block = self._core.blocks.add(
            request.date, interval=interval, all_day=request.all_day, reason=request.reason
        )
        return BlockedTimeResponse(
            outcome=Outcome.CREATED,
            blocked_time=block,
            message=f"Blocked {block.date.isoformat()}.",
            request_id=request_id,
        )

    def remove_blocked_time(self, block_id: str) -> DeskResponse:
        request_id = new_request_id()
        try:
            self._core.blocks.remove(block_id)
        except BlockedTimeNotFoundError as exc:
            return DeskResponse(outcome=Outcome.NOT_FOUND, message=str(exc), request_id=request_id)
        return DeskResponse(message=f"Blocked time {block_id} removed.", request_id=request_id)

    def list_blocked_times(
        self, on_date: Optional[Union[str, date]] = None
    ) -> BlockedTimeListResponse:
        request_id = new_request_id()
        if on_date is None:
            blocks = self._core.blocks.list_all()
        else:
            try:
                day = parse_date(on_date)
            except ValueError as exc:
                return BlockedTimeListResponse(
                    outcome=Outcome.INVALID_INPUT,
                    message="Invalid date.",
                    errors=[str(exc)],
                    request_id=request_id,
                )
            blocks = self._core.blocks.list_between(day, day)
        return BlockedTimeListResponse(blocked_times=blocks, request_id=request_id)

    # ------------------------------------------------------------------ #
    # Services
    # ------------------------------------------------------------------ #

    def create_service(self, payload: Union[dict[str, Any], ServiceCreate]) -> ServiceResponse:
        request_id = new_request_id()
        try:
            request = (
                payload if isinstance(payload, ServiceCreate)
                else ServiceCreate.model_validate(payload)
            )
        except ValidationError as exc:
            return ServiceResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Service not saved.",
                errors=validation_messages(exc),
                request_id=request_id,
            )

        services = self._core.store.services
        service_id = slugify(request.name)
        if not service_id:
            return ServiceResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Service not saved.",
                errors=["name: must contain at least one letter or digit"],
                request_id=request_id,
            )
        suffix = 2
        while services.get(service_id) is not None:
            service_id = f"{slugify(request.name)}-{suffix}"
            suffix += 1

        next_order = max((s.sort_order for s in services.list()), default=0) + 1
        service = services.insert(
            Service(id=service_id, sort_order=next_order, **request.model_dump())
        )
        logger.info("Service %s created", service.id)
        return ServiceResponse(
            outcome=Outcome.CREATED,
            service=service,
            message=f"Service '{service.name}' created.",
            request_id=request_id,
        )

    def update_service(
        self, service_id: str, changes: Union[dict[str, Any], ServiceUpdate]
    ) -> ServiceResponse:
        """Edit a service. Existing bookings keep their snapshot of it."""
        request_id = new_request_id()
        try:
            update = (
                changes if isinstance(changes, ServiceUpdate)
                else ServiceUpdate.model_validate(changes)
            )
        except ValidationError as exc:
            return ServiceResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Service not saved.",
                errors=validation_messages(exc),
                request_id=request_id,
            )

        service = self._core.store.services.update(
            service_id, **update.model_dump(exclude_none=True)
        )
        if service is None:
            return ServiceResponse(
                outcome=Outcome.NOT_FOUND,
                message=f"Service '{service_id}' not found.",
                request_id=request_id,
            )
        logger.info("Service %s updated", service.id)
        return ServiceResponse(
            service=service, message=f"Service '{service.name}' updated.", request_id=request_id
        )

    def deactivate_service(self, service_id: str) -> ServiceResponse:
        """Hide a service from customers. Its past bookings are unaffected."""
        return self.update_service(service_id, ServiceUpdate(is_active=False))

    # ------------------------------------------------------------------ #
    # Reports
    # ------------------------------------------------------------------ #

    def dashboard(self, today: Optional[date] = None) -> DashboardResponse:
        request_id = new_request_id()
        today = today or self._core.calendar.today()
        summary = build_dashboard(
            self._core.ledger.list_bookings(),
            today,
            upcoming_limit=self._config.scheduling.dashboard_upcoming_limit,
        )
        return DashboardResponse(dashboard=summary, request_id=request_id)

    def day_schedule(self, day: Union[str, date]) -> DayScheduleResponse:
        request_id = new_request_id()
        try:
            parsed = parse_date(day)
        except ValueError as exc:
            return DayScheduleResponse(
                outcome=Outcome.INVALID_INPUT,
                message="Invalid date.",
                errors=[str(exc)],
                request_id=request_id,
            )
        schedule = build_day_schedule(
            parsed,
            self._core.calendar,
            self._core.blocks,
            self._core.ledger,
            step_minutes=self._core.engine.granularity_minutes,
        )
        return DayScheduleResponse(schedule=schedule, request_id=request_id)
