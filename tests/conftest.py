"""Shared test fixtures and helpers."""

from datetime import date
from typing import Optional

import pytest

from scheduler.api.admin_desk import AdminDesk
from scheduler.api.booking_desk import BookingDesk
from scheduler.core import SchedulingCore, create_core
from scheduler.schemas.booking_schema import Booking, Customer, ServiceSnapshot
from scheduler.schemas.calendar_schema import Interval
from scheduler.schemas.service_schema import Service
from scheduler.storage.repository import Store
from scheduler.utils import parse_time_of_day

# Far enough ahead that no test date is ever in the past.
TUESDAY = date(2030, 1, 8)
WEDNESDAY = date(2030, 1, 9)
SATURDAY = date(2030, 1, 12)
SUNDAY = date(2030, 1, 13)
MONDAY = date(2030, 1, 14)


@pytest.fixture
def core() -> SchedulingCore:
    return create_core(store=Store())


@pytest.fixture
def booking_desk(core):
    return BookingDesk(core)


@pytest.fixture
def admin_desk(core):
    return AdminDesk(core)


@pytest.fixture
def tuesday():
    return TUESDAY


@pytest.fixture
def regular_cut(core) -> Service:
    """Seeded 30-minute service."""
    return core.store.services.get("regular-cut")


@pytest.fixture
def skin_fade(core) -> Service:
    """Seeded 45-minute service."""
    return core.store.services.get("skin-fade")


def hhmm(value: str) -> int:
    return parse_time_of_day(value)


def make_booking(
    service: Service,
    day: date,
    start: str,
    booking_id: str = "BK-TEST0001",
    customer_name: str = "Test Customer",
) -> Booking:
    """Helper to create a confirmed Booking for ``service`` starting at ``start``."""
    return Booking(
        id=booking_id,
        service_id=service.id,
        service=ServiceSnapshot(
            name=service.name,
            price=service.price,
            duration_minutes=service.duration_minutes,
        ),
        date=day,
        interval=Interval.starting_at(hhmm(start), service.duration_minutes),
        customer=Customer(name=customer_name, email="test@example.com", phone="3345550100"),
    )


def booking_payload(
    day: date = TUESDAY,
    start: str = "10:00",
    service_id: str = "regular-cut",
    name: str = "Jordan Reyes",
    notes: Optional[str] = None,
) -> dict:
    """Helper to create a customer booking payload as a client would send it."""
    payload = {
        "service_id": service_id,
        "date": day.isoformat(),
        "start_time": start,
        "customer_name": name,
        "customer_email": "Jordan@Example.com",
        "customer_phone": "(334) 555-0142",
    }
    if notes is not None:
        payload["notes"] = notes
    return payload
