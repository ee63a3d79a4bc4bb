"""
Wiring for the scheduling core.

Builds the calendar, blocked-time registry, ledger and availability engine
over one Store. Everything downstream takes a ``SchedulingCore`` rather
than reaching for module-level globals.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from scheduler.config import AppConfig, settings
from scheduler.engine.availability import AvailabilityEngine
from scheduler.engine.blocked_times import BlockedTimeRegistry
from scheduler.engine.business_calendar import BusinessCalendar
from scheduler.engine.ledger import BookingLedger
from scheduler.storage.repository import Store
from scheduler.storage.seed import seed_store

logger = logging.getLogger(__name__)


@dataclass
class SchedulingCore:
    store: Store
    calendar: BusinessCalendar
    blocks: BlockedTimeRegistry
    ledger: BookingLedger
    engine: AvailabilityEngine


def create_core(
    store: Optional[Store] = None,
    config: Optional[AppConfig] = None,
    seed: bool = True,
) -> SchedulingCore:
    """Assemble the core over ``store`` (a fresh in-memory store by default)."""
    config = config or settings
    store = store if store is not None else Store()
    if seed:
        seed_store(store, config)

    calendar = BusinessCalendar(store.day_rules, timezone=config.business.timezone)
    blocks = BlockedTimeRegistry(store.blocked_times)
    ledger = BookingLedger(store.bookings)
    engine = AvailabilityEngine(
        calendar,
        blocks,
        ledger,
        granularity_minutes=config.scheduling.slot_granularity_minutes,
    )
    logger.debug("Scheduling core ready (tz=%s)", calendar.timezone)
    return SchedulingCore(
        store=store, calendar=calendar, blocks=blocks, ledger=ledger, engine=engine
    )
