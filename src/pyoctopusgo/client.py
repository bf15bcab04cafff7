"""Client facade wiring token, dispatch and status handling for one account."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import aiohttp

from .exceptions import AuthError, FetchError
from .kraken.auth import TokenManager
from .kraken.dispatches import SlotFetcher
from .models import Configuration, DispatchSlot, StatusSnapshot
from .scheduler import WallClockScheduler, next_x9_minute
from .status import StatusEvaluator
from .util import ensure_aware, utcnow
from .windows import standard_windows

_LOGGER = logging.getLogger(__name__)
_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)

Publisher = Callable[[StatusSnapshot], Any]


class Client:
    """Facade for token, dispatch and status access."""

    def __init__(
        self,
        config: Configuration,
        session: aiohttp.ClientSession | None = None,
        *,
        url: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        clock: Callable[[], datetime] = utcnow,
        scheduler: WallClockScheduler | None = None,
    ) -> None:
        self._config = config
        self._session = session
        self._owns_session = session is None
        self._url = url
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._clock = clock
        self._scheduler = scheduler or WallClockScheduler(clock=clock)
        self._token_manager: TokenManager | None = None
        self._slot_fetcher: SlotFetcher | None = None
        self._evaluator: StatusEvaluator | None = None

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
        self._token_manager = None
        self._slot_fetcher = None
        self._evaluator = None

    @property
    def config(self) -> Configuration:
        return self._config

    @property
    def token_manager(self) -> TokenManager:
        if self._token_manager is None:
            self._token_manager = TokenManager(
                self._ensure_session(),
                self._config.api_key,
                url=self._url,
                timeout=self._timeout,
                clock=self._clock,
            )
        return self._token_manager

    @property
    def slot_fetcher(self) -> SlotFetcher:
        if self._slot_fetcher is None:
            self._slot_fetcher = SlotFetcher(
                self._ensure_session(),
                self.token_manager,
                self._config.account_number,
                url=self._url,
                timeout=self._timeout,
                clock=self._clock,
            )
        return self._slot_fetcher

    @property
    def evaluator(self) -> StatusEvaluator:
        if self._evaluator is None:
            self._evaluator = StatusEvaluator(
                self.slot_fetcher,
                self._config.time_zone,
                clock=self._clock,
            )
        return self._evaluator

    async def get_token(self) -> str:
        return await self.token_manager.get_token()

    async def get_planned_slots(self) -> list[DispatchSlot]:
        return await self.slot_fetcher.get_planned_slots()

    def standard_windows(self, now: datetime | None = None) -> list[DispatchSlot]:
        instant = self._clock() if now is None else ensure_aware(now)
        return standard_windows(instant, self._config.time_zone)

    async def get_status(self, now: datetime | None = None) -> StatusSnapshot:
        return await self.evaluator.evaluate(now)

    async def run(self, publish: Publisher, *, refresh_slots: bool = False) -> None:
        """Publish a status snapshot now and at every minute boundary.

        With ``refresh_slots`` the dispatch cache is also refreshed on its own
        cycle at every minute ending in 9. Runs until cancelled.
        """

        async def _status_cycle() -> None:
            _LOGGER.debug("Minute timer fired")
            snapshot = await self.get_status()
            _LOGGER.info("Status: %s", snapshot)
            result = publish(snapshot)
            if inspect.isawaitable(result):
                await result

        async def _refresh_cycle() -> None:
            try:
                await self.get_planned_slots()
            except (AuthError, FetchError) as exc:
                _LOGGER.warning("Planned dispatch refresh failed: %s", exc)

        tasks = [asyncio.create_task(self._scheduler.run_forever(_status_cycle))]
        if refresh_slots:
            tasks.append(
                asyncio.create_task(
                    self._scheduler.run_forever(_refresh_cycle, next_boundary=next_x9_minute)
                )
            )
        try:
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session
