"""Standard overnight off-peak windows."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from .models import DEFAULT_TIME_ZONE, DispatchSlot
from .offset import load_zone, local_to_utc
from .util import ensure_aware, utcnow

STANDARD_WINDOW_START = time(23, 30)
STANDARD_WINDOW_END = time(5, 30)


def _window(start_day: date, zone: str) -> DispatchSlot:
    end_day = start_day + timedelta(days=1)
    # Each boundary is resolved on its own so a clock change inside the
    # window shortens or lengthens it.
    start = local_to_utc(datetime.combine(start_day, STANDARD_WINDOW_START).isoformat(), zone)
    end = local_to_utc(datetime.combine(end_day, STANDARD_WINDOW_END).isoformat(), zone)
    return DispatchSlot(start=start, end=end)


def standard_windows(now: datetime | None = None, zone: str = DEFAULT_TIME_ZONE) -> list[DispatchSlot]:
    """Return the overnight windows ending today and starting today.

    Both are always returned so callers never need to work out which one is
    current.
    """
    instant = utcnow() if now is None else ensure_aware(now)
    today = instant.astimezone(load_zone(zone)).date()
    yesterday = today - timedelta(days=1)
    return [_window(yesterday, zone), _window(today, zone)]
