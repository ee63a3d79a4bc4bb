"""
Default catalog and weekly hours loaded on first run.

Prices in dollars, durations in minutes. Seeding is skipped for any
collection that already has records, so admin edits survive restarts.
"""

import logging
from decimal import Decimal
from typing import Optional

from scheduler.config import AppConfig, settings
from scheduler.schemas.calendar_schema import DayRule, Interval
from scheduler.schemas.service_schema import Service
from scheduler.storage.repository import Store
from scheduler.utils import parse_time_of_day, slugify

logger = logging.getLogger(__name__)

DEFAULT_SERVICES: list[tuple[str, str, str, int]] = [
    ("Regular Cut", "Classic precision cut tailored to your style", "30", 30),
    ("Skin Fade", "Sharp, clean fade down to the skin", "30", 45),
    ("Beard Service", "Professional trim, shape, and conditioning", "20", 30),
    ("Haircut & Beard", "Complete grooming experience", "45", 50),
    ("Hot Towel Shave", "Luxurious traditional straight razor shave", "65", 55),
    ("Line Up", "Clean edges and sharp lines", "10", 15),
    ("Facial Hair", "Mustache & goatee trim", "5", 15),
    ("Eyebrows", "Eyebrow cleanup and shaping", "5", 5),
]

# weekday (0=Sunday): (open, close) or None when closed
DEFAULT_HOURS: dict[int, Optional[tuple[str, str]]] = {
    0: None,
    1: None,
    2: ("09:00", "18:00"),
    3: ("09:00", "18:00"),
    4: ("09:00", "18:00"),
    5: ("09:00", "18:00"),
    6: ("08:00", "14:00"),
}


def default_services() -> list[Service]:
    return [
        Service(
            id=slugify(name),
            name=name,
            description=description,
            price=Decimal(price),
            duration_minutes=duration,
            sort_order=position,
        )
        for position, (name, description, price, duration) in enumerate(DEFAULT_SERVICES, 1)
    ]


def default_day_rules(config: Optional[AppConfig] = None) -> list[DayRule]:
    scheduling = (config or settings).scheduling
    lunch = Interval(
        start=parse_time_of_day(scheduling.lunch_break_start),
        end=parse_time_of_day(scheduling.lunch_break_end),
    )
    rules = []
    for weekday, hours in DEFAULT_HOURS.items():
        if hours is None:
            rules.append(DayRule(weekday=weekday, is_open=False))
            continue
        open_time, close_time = parse_time_of_day(hours[0]), parse_time_of_day(hours[1])
        # Lunch only on days open when it starts.
        spans_lunch = open_time <= lunch.start < close_time
        rules.append(
            DayRule(
                weekday=weekday,
                is_open=True,
                open_time=open_time,
                close_time=close_time,
                lunch_break=lunch if spans_lunch else None,
            )
        )
    return rules


def seed_store(store: Store, config: Optional[AppConfig] = None) -> None:
    """Load default services and hours into empty collections."""
    if store.services.count() == 0:
        for service in default_services():
            store.services.insert(service)
        logger.info("Seeded %d services", len(DEFAULT_SERVICES))

    if store.day_rules.count() == 0:
        for rule in default_day_rules(config):
            store.day_rules.insert(rule)
        logger.info("Seeded business hours")
