"""
Business calendar: weekly open hours, lunch carve-out and the business clock.

Every availability query starts here. A weekday without a DayRule is a
misconfiguration, not a crash: it is logged and the day is treated as closed.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Union

import pytz

from scheduler.engine.intervals import subtract
from scheduler.logging_context import get_request_logger
from scheduler.schemas.calendar_schema import DayRule, Interval
from scheduler.storage.repository import Repository
from scheduler.utils import MINUTES_PER_DAY, weekday_index

logger = get_request_logger(__name__)

WEEKDAY_NAMES = [
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
]


class NotConfiguredError(Exception):
    """Raised when no DayRule exists for a weekday."""

    def __init__(self, weekday: int) -> None:
        super().__init__(f"No business hours configured for {WEEKDAY_NAMES[weekday]}")
        self.weekday = weekday


@dataclass(frozen=True)
class Closed:
    """Marker returned instead of an operating window."""
    reason: str = "closed"


CLOSED = Closed()
NOT_CONFIGURED = Closed(reason="not_configured")

OperatingWindow = Union[Interval, Closed]


class BusinessCalendar:
    """Reads DayRules and turns a date into its bookable windows."""

    def __init__(self, day_rules: Repository[DayRule], timezone: str) -> None:
        self._rules = day_rules
        self._tz = pytz.timezone(timezone)

    @property
    def timezone(self) -> str:
        return self._tz.zone

    # ------------------------------------------------------------------ #
    # Weekly hours
    # ------------------------------------------------------------------ #

    def hours_for(self, weekday: int) -> DayRule:
        """
        Look up the rule for a weekday (0=Sunday).

        Raises:
            NotConfiguredError: If no rule exists for that weekday.
        """
        rule = self._rules.get(weekday)
        if rule is None:
            raise NotConfiguredError(weekday)
        return rule

    def all_hours(self) -> list[DayRule]:
        """All configured rules, Sunday first."""
        return sorted(self._rules.list(), key=lambda r: r.weekday)

    def set_hours(self, rule: DayRule) -> DayRule:
        """Create or replace the rule for ``rule.weekday``."""
        if self._rules.get(rule.weekday) is None:
            stored = self._rules.insert(rule)
        else:
            stored = self._rules.update(rule.weekday, **rule.model_dump())
        logger.info(
            "Business hours for %s set (open=%s)", WEEKDAY_NAMES[rule.weekday], rule.is_open
        )
        return stored

    # ------------------------------------------------------------------ #
    # Windows for a date
    # ------------------------------------------------------------------ #

    def operating_window(self, day: date) -> OperatingWindow:
        """The open-to-close interval for a date, or a Closed marker."""
        weekday = weekday_index(day)
        try:
            rule = self.hours_for(weekday)
        except NotConfiguredError as exc:
            logger.warning("%s; treating %s as closed", exc, day.isoformat())
            return NOT_CONFIGURED
        if not rule.is_open:
            return CLOSED
        return Interval(start=rule.open_time, end=rule.close_time)

    def open_windows(self, day: date) -> list[Interval]:
        """Operating window minus the lunch break, in order. Empty when closed."""
        window = self.operating_window(day)
        if isinstance(window, Closed):
            return []
        lunch = self.lunch_break_for(day)
        if lunch is None:
            return [window]
        return subtract(window, lunch)

    def lunch_break_for(self, day: date) -> Optional[Interval]:
        rule = self._rules.get(weekday_index(day))
        return rule.lunch_break if rule is not None and rule.is_open else None

    # ------------------------------------------------------------------ #
    # Business clock
    # ------------------------------------------------------------------ #

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def today(self) -> date:
        """Today's date in the business timezone, not the host's."""
        return self.now().date()

    def is_past(self, day: date) -> bool:
        return day < self.today()

    def localize(self, day: date, minutes: int) -> datetime:
        """Aware datetime for a time of day on a date in the business timezone."""
        if not 0 <= minutes < MINUTES_PER_DAY:
            raise ValueError(f"Minutes out of range: {minutes}")
        naive = datetime.combine(day, time(minutes // 60, minutes % 60))
        return self._tz.localize(naive)
