"""Blocked-time registry: ad hoc closures layered on top of weekly hours."""

import uuid
from datetime import date
from typing import Optional

from scheduler.logging_context import get_request_logger
from scheduler.schemas.calendar_schema import BlockedTime, Interval
from scheduler.storage.repository import Repository

logger = get_request_logger(__name__)


class BlockedTimeNotFoundError(Exception):
    """Raised when removing a block that does not exist."""


class BlockedTimeRegistry:
    """
    Admin closures for specific dates.

    Blocks may overlap each other; only their union matters for slot
    exclusion, so no conflict detection is done between them.
    """

    def __init__(self, blocked_times: Repository[BlockedTime]) -> None:
        self._blocks = blocked_times

    def blocks_for(self, day: date) -> list[BlockedTime]:
        return self._blocks.list(lambda b: b.date == day)

    def is_date_fully_blocked(self, day: date) -> bool:
        return any(b.all_day for b in self.blocks_for(day))

    def partial_intervals(self, day: date) -> list[Interval]:
        """Intervals of the partial blocks on a date, in start order."""
        intervals = [b.interval for b in self.blocks_for(day) if not b.all_day]
        return sorted(intervals, key=lambda i: (i.start, i.end))

    def list_between(self, start: date, end: date) -> list[BlockedTime]:
        """Blocks with ``start <= date <= end``, ordered by date then start."""
        blocks = self._blocks.list(lambda b: start <= b.date <= end)
        return sorted(blocks, key=lambda b: (b.date, b.interval.start if b.interval else -1))

    def list_all(self) -> list[BlockedTime]:
        return sorted(
            self._blocks.list(), key=lambda b: (b.date, b.interval.start if b.interval else -1)
        )

    def add(
        self,
        day: date,
        interval: Optional[Interval] = None,
        all_day: bool = False,
        reason: Optional[str] = None,
    ) -> BlockedTime:
        block = BlockedTime(
            id=f"BT-{uuid.uuid4().hex[:8].upper()}",
            date=day,
            all_day=all_day,
            interval=interval,
            reason=reason,
        )
        stored = self._blocks.insert(block)
        logger.info(
            "Blocked %s %s%s",
            day.isoformat(),
            "all day" if all_day else str(interval),
            f" ({reason})" if reason else "",
        )
        return stored

    def remove(self, block_id: str) -> None:
        """
        Delete a block.

        Raises:
            BlockedTimeNotFoundError: If no block has that id.
        """
        if not self._blocks.delete(block_id):
            raise BlockedTimeNotFoundError(f"Blocked time {block_id} not found")
        logger.info("Blocked time %s removed", block_id)
