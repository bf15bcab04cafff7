"""Kraken token exchange and caching."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import aiohttp

from ..exceptions import ApiError, AuthError, NetworkError, ValidationError
from ..models import Credential
from ..util import format_utc_timestamp, mask_secret, token_expiry, utcnow
from .base import BaseApi
from .const import TOKEN_EXPIRY_MARGIN

_LOGGER = logging.getLogger(__name__)


def token_mutation(api_key: str) -> str:
    return f"mutation {{obtainKrakenToken(input: {{APIKey: {json.dumps(api_key)}}}){{token}}}}"


class TokenManager(BaseApi):
    """Obtain and cache the short-lived API token."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        *,
        url: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(session, url=url, timeout=timeout)
        if not isinstance(api_key, str) or not api_key.strip():
            raise ValidationError("api_key is required.")
        self._api_key = api_key.strip()
        self._clock = clock
        self._credential: Credential | None = None
        self._lock = asyncio.Lock()

    @property
    def credential(self) -> Credential | None:
        return self._credential

    def invalidate(self) -> None:
        self._credential = None

    async def get_token(self) -> str:
        """Return a token valid for at least another minute, exchanging if needed."""
        async with self._lock:
            credential = self._credential
            if credential is not None and credential.is_valid(self._clock(), TOKEN_EXPIRY_MARGIN):
                return credential.token
            _LOGGER.info("New token requested")
            try:
                credential = await self._exchange()
            except AuthError:
                self._credential = None
                raise
            except (ApiError, NetworkError, ValidationError) as exc:
                self._credential = None
                raise AuthError(f"Token exchange failed: {exc}") from exc
            self._credential = credential
            _LOGGER.info(
                "Token %s valid until %s",
                mask_secret(credential.token),
                format_utc_timestamp(credential.expires_at),
            )
            return credential.token

    async def _exchange(self) -> Credential:
        data = await self._graphql(token_mutation(self._api_key))
        token = self._extract_token(data)
        return Credential(token=token, expires_at=token_expiry(token))

    def _extract_token(self, data: dict[str, Any]) -> str:
        result = data.get("obtainKrakenToken")
        if isinstance(result, dict):
            token = result.get("token")
            if isinstance(token, str) and token.strip():
                return token.strip()
        raise AuthError("Token missing from response.")
