"""
Time source for the lineup engine.

All "what day is it / have tonight's games started" questions go through
one injected clock, so elapsed-day handling is deterministic under test.
"""

from datetime import date, datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

# NBA slates are scheduled in Eastern time
DEFAULT_TIMEZONE = 'America/New_York'


class Clock:
    """Base clock interface."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time in the schedule's timezone."""

    def __init__(self, timezone: str = DEFAULT_TIMEZONE):
        self.tz: tzinfo = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """Clock pinned to one instant (tests, replaying a past week)."""

    def __init__(self, instant: datetime, timezone: Optional[str] = None):
        if timezone:
            tz = ZoneInfo(timezone)
            if instant.tzinfo is None:
                instant = instant.replace(tzinfo=tz)
            else:
                # "today" is the schedule's date, not the caller's UTC date
                instant = instant.astimezone(tz)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
