"""Tests for the dashboard and day-schedule reports."""

from datetime import timedelta
from decimal import Decimal

from scheduler.reports import SlotState, build_dashboard, build_day_schedule
from scheduler.schemas.booking_schema import BookingStatus
from scheduler.schemas.calendar_schema import DayRule, Interval
from tests.conftest import MONDAY, SATURDAY, SUNDAY, TUESDAY, WEDNESDAY, hhmm, make_booking


def with_status(booking, status):
    return booking.model_copy(update={"status": status})


class TestDashboard:
    def test_counts_and_revenue(self, regular_cut, skin_fade):
        bookings = [
            with_status(make_booking(regular_cut, TUESDAY, "09:00", "BK-1"), BookingStatus.COMPLETED),
            with_status(make_booking(skin_fade, TUESDAY, "10:00", "BK-2"), BookingStatus.COMPLETED),
            make_booking(regular_cut, TUESDAY, "11:00", "BK-3"),
            with_status(make_booking(regular_cut, TUESDAY, "12:00", "BK-4"), BookingStatus.CANCELLED),
            make_booking(regular_cut, WEDNESDAY, "10:00", "BK-5"),
        ]
        summary = build_dashboard(bookings, TUESDAY)
        assert [b.id for b in summary.today_bookings] == ["BK-1", "BK-2", "BK-3"]
        assert summary.completed_today == 2
        assert summary.today_revenue == Decimal("60")
        assert summary.status_counts == {"confirmed": 2, "completed": 2, "cancelled": 1}

    def test_week_starts_on_sunday(self, regular_cut):
        previous_sunday = TUESDAY - timedelta(days=2)
        bookings = [
            make_booking(regular_cut, previous_sunday, "10:00", "BK-1"),
            make_booking(regular_cut, SATURDAY, "10:00", "BK-2"),
            make_booking(regular_cut, SUNDAY, "10:00", "BK-3"),
            make_booking(regular_cut, previous_sunday - timedelta(days=1), "10:00", "BK-4"),
        ]
        assert build_dashboard(bookings, TUESDAY).week_count == 2

    def test_upcoming_ordered_and_capped(self, regular_cut):
        bookings = [
            make_booking(regular_cut, WEDNESDAY, "10:00", "BK-W"),
            make_booking(regular_cut, TUESDAY, "15:00", "BK-T2"),
            make_booking(regular_cut, TUESDAY, "09:00", "BK-T1"),
            make_booking(regular_cut, TUESDAY - timedelta(days=7), "09:00", "BK-OLD"),
            with_status(make_booking(regular_cut, SATURDAY, "09:00", "BK-C"), BookingStatus.CANCELLED),
        ]
        summary = build_dashboard(bookings, TUESDAY, upcoming_limit=2)
        assert [b.id for b in summary.upcoming] == ["BK-T1", "BK-T2"]

    def test_empty(self):
        summary = build_dashboard([], TUESDAY)
        assert summary.today_revenue == Decimal("0")
        assert summary.upcoming == []


class TestDaySchedule:
    def test_rows_cover_operating_window(self, core):
        schedule = build_day_schedule(TUESDAY, core.calendar, core.blocks, core.ledger, 15)
        assert schedule.is_open
        assert schedule.rows[0].time == "09:00"
        assert schedule.rows[-1].time == "17:45"
        assert len(schedule.rows) == 36

    def test_states(self, core, regular_cut):
        core.ledger.insert(make_booking(regular_cut, TUESDAY, "10:00", customer_name="Sam Ortiz"))
        core.blocks.add(
            TUESDAY, interval=Interval(start=hhmm("15:00"), end=hhmm("15:30")), reason="Supplier"
        )
        schedule = build_day_schedule(TUESDAY, core.calendar, core.blocks, core.ledger, 15)
        rows = {r.time: r for r in schedule.rows}
        assert rows["10:00"].state == SlotState.BOOKED
        assert rows["10:15"].booking_id == "BK-TEST0001"
        assert rows["10:30"].state == SlotState.OPEN
        assert rows["13:45"].state == SlotState.LUNCH
        assert rows["15:15"].state == SlotState.BLOCKED
        assert rows["15:15"].reason == "Supplier"

    def test_afternoon_rows_start_at_lunch_end(self, core):
        core.calendar.set_hours(
            DayRule(
                weekday=1,
                is_open=True,
                open_time=hhmm("09:00"),
                close_time=hhmm("18:00"),
                lunch_break=Interval(start=hhmm("13:00"), end=hhmm("14:10")),
            )
        )
        schedule = build_day_schedule(MONDAY, core.calendar, core.blocks, core.ledger, 15)
        rows = {r.time: r for r in schedule.rows}
        assert rows["14:00"].state == SlotState.LUNCH
        assert rows["14:10"].state == SlotState.OPEN
        assert rows["14:25"].state == SlotState.OPEN
        assert "14:15" not in rows
        assert schedule.rows[-1].time == "17:55"
        times = [r.time for r in schedule.rows]
        assert times == sorted(times)

    def test_closed_day(self, core):
        schedule = build_day_schedule(SUNDAY, core.calendar, core.blocks, core.ledger, 15)
        assert not schedule.is_open
        assert schedule.closed_reason == "closed"
        assert schedule.rows == []

    def test_all_day_block(self, core):
        core.blocks.add(TUESDAY, all_day=True, reason="Holiday")
        schedule = build_day_schedule(TUESDAY, core.calendar, core.blocks, core.ledger, 15)
        assert not schedule.is_open
        assert schedule.closed_reason == "Holiday"
