"""Calendar data models: intervals, weekly hours and blocked time."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scheduler.utils import MINUTES_PER_DAY, format_time_of_day, parse_time_of_day


class Interval(BaseModel):
    """Half-open ``[start, end)`` span of minutes within one calendar date."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0, lt=MINUTES_PER_DAY)
    end: int = Field(gt=0, le=MINUTES_PER_DAY)

    @model_validator(mode="after")
    def _check_order(self) -> "Interval":
        if self.start >= self.end:
            raise ValueError(
                f"Interval start must be before end, got {self.start}-{self.end}"
            )
        return self

    @classmethod
    def starting_at(cls, start: int, minutes: int) -> "Interval":
        """Build the interval ``[start, start + minutes)``."""
        return cls(start=start, end=start + minutes)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{format_time_of_day(self.start)}-{format_time_of_day(self.end)}"


class DayRule(BaseModel):
    """Open/closed policy and hours for one weekday (0=Sunday .. 6=Saturday)."""

    weekday: int = Field(ge=0, le=6)
    is_open: bool = False
    open_time: Optional[int] = Field(default=None, ge=0, lt=MINUTES_PER_DAY)
    close_time: Optional[int] = Field(default=None, gt=0, le=MINUTES_PER_DAY)
    lunch_break: Optional[Interval] = None

    @model_validator(mode="after")
    def _check_hours(self) -> "DayRule":
        if not self.is_open:
            return self
        if self.open_time is None or self.close_time is None:
            raise ValueError(f"Open weekday {self.weekday} needs both open and close times")
        if self.open_time >= self.close_time:
            raise ValueError(
                f"Weekday {self.weekday} opens at {self.open_time} "
                f"but closes at {self.close_time}"
            )
        return self


class BlockedTime(BaseModel):
    """Admin-declared closure: the whole day, or one interval of it."""

    id: str
    date: date
    all_day: bool = False
    interval: Optional[Interval] = None
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "BlockedTime":
        if self.all_day and self.interval is not None:
            raise ValueError("An all-day block cannot carry an interval")
        if not self.all_day and self.interval is None:
            raise ValueError("A partial block needs an interval")
        return self


def _parse_optional_time(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return parse_time_of_day(value)


class BusinessHoursEntry(BaseModel):
    """Admin-facing weekday hours with ``HH:MM`` times."""

    weekday: int = Field(ge=0, le=6)
    is_open: bool = False
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None

    def to_rule(self) -> DayRule:
        """Convert to a DayRule. Raises ValueError on malformed or inconsistent times."""
        lunch_start = _parse_optional_time(self.lunch_start)
        lunch_end = _parse_optional_time(self.lunch_end)
        if (lunch_start is None) != (lunch_end is None):
            raise ValueError(f"Weekday {self.weekday} lunch break needs both start and end")
        if not self.is_open:
            return DayRule(weekday=self.weekday, is_open=False)
        lunch = None
        if lunch_start is not None and lunch_end is not None:
            lunch = Interval(start=lunch_start, end=lunch_end)
        return DayRule(
            weekday=self.weekday,
            is_open=True,
            open_time=_parse_optional_time(self.open_time),
            close_time=_parse_optional_time(self.close_time),
            lunch_break=lunch,
        )

    @classmethod
    def from_rule(cls, rule: DayRule) -> "BusinessHoursEntry":
        return cls(
            weekday=rule.weekday,
            is_open=rule.is_open,
            open_time=format_time_of_day(rule.open_time) if rule.open_time is not None else None,
            close_time=format_time_of_day(rule.close_time) if rule.close_time is not None else None,
            lunch_start=format_time_of_day(rule.lunch_break.start) if rule.lunch_break else None,
            lunch_end=format_time_of_day(rule.lunch_break.end) if rule.lunch_break else None,
        )


class BlockedTimeCreate(BaseModel):
    """Admin request to block a whole day or part of one."""

    date: date
    all_day: bool = False
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

    def to_interval(self) -> Optional[Interval]:
        """The blocked interval, or None for an all-day block.

        Raises:
            ValueError: If a partial block is missing its times or they are malformed.
        """
        if self.all_day:
            return None
        start = _parse_optional_time(self.start_time)
        end = _parse_optional_time(self.end_time)
        if start is None or end is None:
            raise ValueError("A partial block needs both start_time and end_time")
        return Interval(start=start, end=end)
