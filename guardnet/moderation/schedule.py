"""Schedule evaluation for time-windowed block rules.

A rule without a window blocks permanently.  A scheduled rule blocks only
while ``now`` lies inside ``[window_start, window_end]``; both edges count
as inside.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from guardnet.moderation.errors import InvalidScheduleError
from guardnet.moderation.models import BlockRule, as_utc


class ScheduleStatus(Enum):
    """Where a rule sits relative to its block window."""

    PERMANENT = "permanent"
    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"

    @property
    def blocks(self) -> bool:
        return self in (ScheduleStatus.PERMANENT, ScheduleStatus.ACTIVE)


def schedule_status(rule: BlockRule, now: datetime) -> ScheduleStatus:
    """Return the schedule status of *rule* at instant *now*."""
    if not rule.has_schedule:
        return ScheduleStatus.PERMANENT

    now = as_utc(now)
    if now < as_utc(rule.window_start):
        return ScheduleStatus.PENDING
    if now <= as_utc(rule.window_end):
        return ScheduleStatus.ACTIVE
    return ScheduleStatus.EXPIRED


def validate_window(
    start: Optional[datetime], end: Optional[datetime]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Check a proposed window and return it normalized to UTC.

    Both bounds must be given together, and end must fall after start.
    ``(None, None)`` clears the schedule.
    """
    if start is None and end is None:
        return None, None
    if start is None or end is None:
        raise InvalidScheduleError("A schedule needs both a start and an end.")

    start, end = as_utc(start), as_utc(end)
    if end <= start:
        raise InvalidScheduleError("End time must be after start time.")
    return start, end


def uninstall_locked_until(
    rules: Iterable[BlockRule], now: datetime
) -> Optional[datetime]:
    """Return the latest window end still in the future, or None if unlocked.

    Any rule whose schedule has not finished yet (pending or active) keeps
    the application from being reset.
    """
    now = as_utc(now)
    latest: Optional[datetime] = None
    for rule in rules:
        if rule.window_end is None:
            continue
        end = as_utc(rule.window_end)
        if end > now and (latest is None or end > latest):
            latest = end
    return latest
