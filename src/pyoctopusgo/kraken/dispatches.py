"""Planned dispatch fetching and caching."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

import aiohttp

from ..exceptions import ApiError, AuthError, FetchError, NetworkError, ValidationError
from ..models import DispatchSlot, SlotCache
from ..util import mask_secret, parse_timestamp, utcnow
from .auth import TokenManager
from .base import BaseApi
from .const import SLOT_CACHE_TTL

_LOGGER = logging.getLogger(__name__)


def planned_dispatches_query(account_number: str) -> str:
    return (
        f"query {{plannedDispatches(accountNumber: {json.dumps(account_number)})"
        "{startDtUtc: startDt endDtUtc: endDt chargeKwh: delta meta { source location }}}"
    )


class SlotFetcher(BaseApi):
    """Fetch the account's planned dispatches, cached for a short time."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token_manager: TokenManager,
        account_number: str,
        *,
        url: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        clock: Callable[[], datetime] = utcnow,
        ttl: timedelta = SLOT_CACHE_TTL,
    ) -> None:
        super().__init__(session, url=url, timeout=timeout)
        if not isinstance(account_number, str) or not account_number.strip():
            raise ValidationError("account_number is required.")
        self._token_manager = token_manager
        self._account_number = account_number.strip()
        self._clock = clock
        self._ttl = ttl
        self._cache = SlotCache()
        self._lock = asyncio.Lock()

    @property
    def cache(self) -> SlotCache:
        return self._cache

    def invalidate(self) -> None:
        self._cache = SlotCache(slots=self._cache.slots, last_fetched_at=None)

    async def get_planned_slots(self) -> list[DispatchSlot]:
        """Return planned dispatches, from cache when fetched under ten minutes ago."""
        async with self._lock:
            now = self._clock()
            last_fetched_at = self._cache.last_fetched_at
            if last_fetched_at is not None and now - self._ttl < last_fetched_at:
                _LOGGER.debug("Planned dispatches served from cache")
                return list(self._cache.slots)
            try:
                slots = await self._fetch()
            except (AuthError, FetchError) as exc:
                # Only the slots are dropped; the stale timestamp still forces a refetch.
                self._cache = SlotCache(slots=(), last_fetched_at=last_fetched_at)
                _LOGGER.warning("Failed to get planned dispatches: %s", exc)
                raise
            self._cache = SlotCache(slots=tuple(slots), last_fetched_at=now)
            _LOGGER.debug("Fetched %s planned dispatches", len(slots))
            return list(slots)

    async def _fetch(self) -> list[DispatchSlot]:
        token = await self._token_manager.get_token()
        _LOGGER.debug("Querying planned dispatches for %s", mask_secret(self._account_number))
        try:
            data = await self._graphql(planned_dispatches_query(self._account_number), token=token)
        except AuthError as exc:
            self._token_manager.invalidate()
            raise FetchError("Token was rejected by the API.") from exc
        except (ApiError, NetworkError) as exc:
            raise FetchError(f"Planned dispatch query failed: {exc}") from exc
        return self._map_slot_list(data.get("plannedDispatches"))

    def _map_slot_list(self, data: Any) -> list[DispatchSlot]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise FetchError("API response included invalid planned dispatches.")
        slots: list[DispatchSlot] = []
        for item in data:
            if not isinstance(item, dict):
                raise FetchError("API response included invalid planned dispatches.")
            slots.append(self._map_slot(item))
        slots.sort(key=lambda slot: slot.start)
        return slots

    def _map_slot(self, data: dict[str, Any]) -> DispatchSlot:
        start_raw = data.get("startDtUtc")
        end_raw = data.get("endDtUtc")
        if not isinstance(start_raw, str) or not isinstance(end_raw, str):
            raise FetchError("API response missing dispatch fields.")
        meta = data.get("meta")
        if not isinstance(meta, dict):
            meta = {}
        try:
            return DispatchSlot(
                start=parse_timestamp(start_raw),
                end=parse_timestamp(end_raw),
                charge_kwh=self._parse_float(data.get("chargeKwh")),
                source=self._optional_text(meta.get("source")),
                location=self._optional_text(meta.get("location")),
            )
        except ValidationError as exc:
            raise FetchError("API returned invalid dispatch data.") from exc

    def _parse_float(self, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int | float):
            return float(value)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return None
            try:
                return float(stripped)
            except ValueError:
                return None
        return None

    def _optional_text(self, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None
