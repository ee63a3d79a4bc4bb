"""
Admin reports: the dashboard summary and the per-day schedule grid.

Both are read-only views computed from the ledger, the calendar and the
blocked-time registry; nothing here writes.
"""

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from scheduler.engine.blocked_times import BlockedTimeRegistry
from scheduler.engine.business_calendar import BusinessCalendar, Closed
from scheduler.engine.intervals import contains, overlaps, subtract
from scheduler.engine.ledger import BookingLedger
from scheduler.schemas.booking_schema import Booking, BookingStatus
from scheduler.schemas.calendar_schema import Interval
from scheduler.utils import format_time_of_day, weekday_index


class DashboardSummary(BaseModel):
    """Headline numbers for the admin landing page."""

    today: date
    today_bookings: list[Booking] = Field(default_factory=list)
    completed_today: int = 0
    today_revenue: Decimal = Decimal("0")
    week_count: int = 0
    upcoming: list[Booking] = Field(default_factory=list)
    status_counts: dict[str, int] = Field(default_factory=dict)


class SlotState(str, Enum):
    OPEN = "open"
    BOOKED = "booked"
    BLOCKED = "blocked"
    LUNCH = "lunch"


class ScheduleRow(BaseModel):
    time: str
    state: SlotState
    booking_id: Optional[str] = None
    customer_name: Optional[str] = None
    reason: Optional[str] = None


class DaySchedule(BaseModel):
    """One row per grid step across a day's operating window."""

    day: date
    is_open: bool
    closed_reason: Optional[str] = None
    rows: list[ScheduleRow] = Field(default_factory=list)


def build_dashboard(bookings: list[Booking], today: date, upcoming_limit: int = 5) -> DashboardSummary:
    """Summarize bookings as of ``today`` (a business-timezone date)."""
    today_active = sorted(
        (b for b in bookings if b.date == today and b.is_active),
        key=lambda b: b.interval.start,
    )
    completed_today = [b for b in today_active if b.status == BookingStatus.COMPLETED]
    revenue = sum((b.service.price for b in completed_today), Decimal("0"))

    # Weeks start on Sunday.
    week_start = today - timedelta(days=weekday_index(today))
    week_end = week_start + timedelta(days=7)
    week_count = sum(1 for b in bookings if week_start <= b.date < week_end and b.is_active)

    upcoming = sorted(
        (b for b in bookings if b.date >= today and b.status == BookingStatus.CONFIRMED),
        key=lambda b: (b.date, b.interval.start),
    )[:upcoming_limit]

    status_counts = {status.value: 0 for status in BookingStatus}
    for booking in bookings:
        status_counts[booking.status.value] += 1

    return DashboardSummary(
        today=today,
        today_bookings=today_active,
        completed_today=len(completed_today),
        today_revenue=revenue,
        week_count=week_count,
        upcoming=upcoming,
        status_counts=status_counts,
    )


def _row_times(operating: Interval, lunch: Optional[Interval], step: int) -> list[int]:
    """Grid points of each sub-window and of the lunch break, each anchored at its own start."""
    if lunch is None or not overlaps(operating, lunch):
        return list(range(operating.start, operating.end, step))
    lunch = Interval(start=max(operating.start, lunch.start), end=min(operating.end, lunch.end))
    segments = subtract(operating, lunch) + [lunch]
    return sorted(t for segment in segments for t in range(segment.start, segment.end, step))


def build_day_schedule(
    day: date,
    calendar: BusinessCalendar,
    blocks: BlockedTimeRegistry,
    ledger: BookingLedger,
    step_minutes: int,
) -> DaySchedule:
    """Grid view of a date: what occupies each step of the operating window."""
    operating = calendar.operating_window(day)
    if isinstance(operating, Closed):
        return DaySchedule(day=day, is_open=False, closed_reason=operating.reason)

    all_day = [b for b in blocks.blocks_for(day) if b.all_day]
    if all_day:
        return DaySchedule(
            day=day, is_open=False, closed_reason=all_day[0].reason or "blocked"
        )

    bookings = ledger.active_bookings_for(day)
    partial = [b for b in blocks.blocks_for(day) if not b.all_day]
    lunch = calendar.lunch_break_for(day)

    rows = []
    for t in _row_times(operating, lunch, step_minutes):
        booking = next((b for b in bookings if contains(b.interval, t)), None)
        block = next((b for b in partial if contains(b.interval, t)), None)
        if booking is not None:
            row = ScheduleRow(
                time=format_time_of_day(t),
                state=SlotState.BOOKED,
                booking_id=booking.id,
                customer_name=booking.customer.name,
            )
        elif block is not None:
            row = ScheduleRow(time=format_time_of_day(t), state=SlotState.BLOCKED, reason=block.reason)
        elif lunch is not None and contains(lunch, t):
            row = ScheduleRow(time=format_time_of_day(t), state=SlotState.LUNCH)
        else:
            row = ScheduleRow(time=format_time_of_day(t), state=SlotState.OPEN)
        rows.append(row)

    return DaySchedule(day=day, is_open=True, rows=rows)
