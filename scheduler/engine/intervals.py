"""
Half-open interval arithmetic on minutes within a single day.

Intervals are ``[start, end)``: an appointment ending at 10:00 and one
starting at 10:00 do not overlap. Zero-length intervals cannot be
constructed, so none of these functions need to handle them.
"""

from scheduler.schemas.calendar_schema import Interval


def overlaps(a: Interval, b: Interval) -> bool:
    """True iff the two intervals share at least one minute."""
    return a.start < b.end and b.start < a.end


def contains(interval: Interval, point: int) -> bool:
    """True iff ``point`` falls inside the interval."""
    return interval.start <= point < interval.end


def covers(outer: Interval, inner: Interval) -> bool:
    """True iff ``inner`` lies entirely within ``outer``."""
    return outer.start <= inner.start and inner.end <= outer.end


def subtract(window: Interval, cut: Interval) -> list[Interval]:
    """Remove ``cut`` from ``window``, leaving zero, one or two pieces in order."""
    if not overlaps(window, cut):
        return [window]
    pieces = []
    if window.start < cut.start:
        pieces.append(Interval(start=window.start, end=cut.start))
    if cut.end < window.end:
        pieces.append(Interval(start=cut.end, end=window.end))
    return pieces


def overlaps_any(candidate: Interval, occupied: list[Interval]) -> bool:
    return any(overlaps(candidate, other) for other in occupied)
