"""
Clock

Supplies "now" to the parts of the app that need it. Health calculations
never read the system clock themselves; callers pass the value in.
"""

from datetime import datetime, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def system_clock(timezone: str = "UTC") -> Clock:
    """Return a clock reading the wall time in the given zone."""
    tz = ZoneInfo(timezone)

    def _now() -> datetime:
        return datetime.now(tz)

    return _now


def fixed_clock(moment: datetime) -> Clock:
    """Return a clock frozen at `moment` (useful for tests and replays)."""
    return lambda: moment


def localize(moment: datetime, tz: tzinfo) -> datetime:
    """Express `moment` in `tz`. Naive datetimes are taken to already be in `tz`."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def as_zone(timezone: Optional[str]) -> tzinfo:
    return ZoneInfo(timezone or "UTC")
