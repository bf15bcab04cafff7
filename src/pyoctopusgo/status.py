"""Tariff status evaluation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from .exceptions import PyOctopusGoError
from .kraken.dispatches import SlotFetcher
from .models import DEFAULT_TIME_ZONE, DispatchSlot, StatusSnapshot
from .util import ensure_aware, utcnow
from .windows import standard_windows

_LOGGER = logging.getLogger(__name__)


def evaluate_status(
    now: datetime,
    standard: Iterable[DispatchSlot],
    dynamic: Iterable[DispatchSlot],
) -> StatusSnapshot:
    standard_offpeak = any(slot.contains(now) for slot in standard)
    charging = any(slot.contains(now) for slot in dynamic)
    return StatusSnapshot.from_flags(standard_offpeak, charging)


class StatusEvaluator:
    """Combine standard windows and planned dispatches into a status snapshot."""

    def __init__(
        self,
        slot_fetcher: SlotFetcher,
        time_zone: str = DEFAULT_TIME_ZONE,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._slot_fetcher = slot_fetcher
        self._time_zone = time_zone
        self._clock = clock

    @property
    def time_zone(self) -> str:
        return self._time_zone

    async def evaluate(self, now: datetime | None = None) -> StatusSnapshot:
        """Return the status at ``now``; any failure degrades to all windows inactive."""
        try:
            instant = self._clock() if now is None else ensure_aware(now)
            standard = standard_windows(instant, self._time_zone)
            dynamic = await self._slot_fetcher.get_planned_slots()
        except PyOctopusGoError as exc:
            _LOGGER.warning("Status unavailable, reporting inactive: %s", exc)
            return StatusSnapshot.inactive()
        except Exception:
            _LOGGER.exception("Status evaluation failed, reporting inactive")
            return StatusSnapshot.inactive()
        snapshot = evaluate_status(instant, standard, dynamic)
        _LOGGER.debug("Status at %s: %s", instant.isoformat(), snapshot)
        return snapshot
