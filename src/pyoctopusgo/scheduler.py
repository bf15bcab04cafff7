"""Wall-clock aligned, self-rescheduling timers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any

from .util import utcnow

_LOGGER = logging.getLogger(__name__)

Action = Callable[[], Awaitable[Any]]
BoundaryFn = Callable[[datetime], datetime]

_ONE_MINUTE = timedelta(minutes=1)


def next_minute_boundary(now: datetime) -> datetime:
    return now.replace(second=0, microsecond=0) + _ONE_MINUTE


def next_x9_minute(now: datetime) -> datetime:
    """Return the next minute ending in 9 (xx:09, xx:19, ...) after ``now``."""
    candidate = next_minute_boundary(now)
    while candidate.minute % 10 != 9:
        candidate += _ONE_MINUTE
    return candidate


class WallClockScheduler:
    """Run actions at wall-clock boundaries.

    Every wait is a one-shot timer recomputed from the wall clock after the
    previous action has finished, so slow actions never accumulate drift and
    two runs of the same cycle never overlap. The sleep itself is measured on
    the event loop's monotonic clock.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep

    def seconds_until(self, boundary: datetime) -> float:
        return max(0.0, (boundary - self._clock()).total_seconds())

    async def wait_for(
        self,
        next_boundary: BoundaryFn,
        *,
        after: datetime | None = None,
    ) -> datetime:
        """Sleep until the wall clock reaches the next boundary after ``after``."""
        now = self._clock()
        if after is not None and now < after:
            now = after
        boundary = next_boundary(now)
        # The monotonic sleep can end before the wall clock gets there.
        delay = self.seconds_until(boundary)
        while delay > 0:
            await self._sleep(delay)
            delay = self.seconds_until(boundary)
        return boundary

    async def run_at_next_minute_boundary(self, action: Action) -> Any:
        await self.wait_for(next_minute_boundary)
        return await action()

    async def run_at_next_x9_minute(self, action: Action) -> Any:
        await self.wait_for(next_x9_minute)
        return await action()

    async def run_forever(
        self,
        action: Action,
        *,
        next_boundary: BoundaryFn = next_minute_boundary,
        run_immediately: bool = True,
    ) -> None:
        """Run ``action`` now and then at every boundary until cancelled."""
        if run_immediately:
            await self._run_cycle(action)
        boundary: datetime | None = None
        while True:
            boundary = await self.wait_for(next_boundary, after=boundary)
            _LOGGER.debug("Timer fired for %s", boundary.isoformat())
            await self._run_cycle(action)

    async def _run_cycle(self, action: Action) -> None:
        try:
            await action()
        except Exception:
            _LOGGER.exception("Scheduled action failed")
