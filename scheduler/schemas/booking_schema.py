"""Booking data models and booking request validation."""

import re
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from scheduler.schemas.calendar_schema import Interval
from scheduler.utils import format_time_of_day, normalize_phone, parse_time_of_day

# Validation thresholds
MIN_NAME_LENGTH = 2
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15
MAX_NOTES_LENGTH = 500

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Customer(BaseModel):
    name: str
    email: str
    phone: str


class ServiceSnapshot(BaseModel):
    """The service as it was when the booking was made."""
    name: str
    price: Decimal
    duration_minutes: int


class Booking(BaseModel):
    """A customer's claim on an interval of one date."""

    id: str
    service_id: str
    service: ServiceSnapshot
    date: date
    interval: Interval
    customer: Customer
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def start_time(self) -> str:
        return format_time_of_day(self.interval.start)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def end_time(self) -> str:
        return format_time_of_day(self.interval.end)

    @property
    def is_active(self) -> bool:
        """Cancelled bookings no longer occupy their interval."""
        return self.status != BookingStatus.CANCELLED


class BookingRequest(BaseModel):
    """Validated customer booking request."""

    service_id: str = Field(min_length=1)
    date: date
    start_time: str
    customer_name: str
    customer_email: str
    customer_phone: str
    notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH)

    @field_validator("start_time")
    @classmethod
    def _check_start_time(cls, value: str) -> str:
        return format_time_of_day(parse_time_of_day(value))

    @field_validator("customer_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_NAME_LENGTH:
            raise ValueError(f"Name must be at least {MIN_NAME_LENGTH} characters")
        return value

    @field_validator("customer_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not _EMAIL.match(value):
            raise ValueError(f"'{value}' is not a valid email address")
        return value

    @field_validator("customer_phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        digits = re.sub(r"[^\d]", "", value)
        if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
            raise ValueError(f"'{value}' doesn't look like a phone number")
        return normalize_phone(value)

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def start_minutes(self) -> int:
        return parse_time_of_day(self.start_time)

    def customer(self) -> Customer:
        return Customer(
            name=self.customer_name,
            email=self.customer_email,
            phone=self.customer_phone,
        )
