"""Shared utilities for time-of-day, money and text formatting."""

import re
from datetime import date
from decimal import Decimal
from typing import Union

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(value: str) -> int:
    """Parse an ``HH:MM`` string into minutes since midnight.

    Examples:
        >>> parse_time_of_day("09:30")
        570
        >>> parse_time_of_day("13:00")
        780

    Raises:
        ValueError: If the value is not a valid 24-hour clock time.
    """
    match = _HHMM.match(value.strip())
    if not match:
        raise ValueError(f"Time must be HH:MM, got {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_time_of_day(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``. 1440 renders as ``24:00``."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time_12h(minutes: int) -> str:
    """Format minutes since midnight as a 12-hour clock time, e.g. ``1:30 PM``."""
    hour, minute = divmod(minutes % MINUTES_PER_DAY, 60)
    period = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


def format_price(price: Decimal) -> str:
    """Format a price in dollars, e.g. ``$1,250.00``."""
    return f"${price:,.2f}"


def format_duration(minutes: int) -> str:
    """Human-readable duration.

    Examples:
        >>> format_duration(45)
        '45 min'
        >>> format_duration(60)
        '1 hr'
        >>> format_duration(75)
        '1 hr 15 min'
    """
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours} hr"
    return f"{hours} hr {remaining} min"


def weekday_index(day: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % 7


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("(714) 809-9692")
        '7148099692'
        >>> normalize_phone("+1 714-809-9692")
        '+17148099692'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def slugify(name: str) -> str:
    """Turn a display name into an identifier, e.g. ``Haircut & Beard`` -> ``haircut-beard``."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def parse_date(value: Union[str, date]) -> date:
    """Accept a ``date`` or an ISO ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the string is not an ISO date.
    """
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"Date must be YYYY-MM-DD, got {value!r}") from None
