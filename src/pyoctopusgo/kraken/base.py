"""Shared GraphQL transport."""

from __future__ import annotations

from typing import Any

import aiohttp

from ..exceptions import ApiError, AuthError, NetworkError, ValidationError
from .const import AUTHORIZATION_HEADER, DEFAULT_HEADERS, GRAPHQL_URL, TOKEN_SCHEME

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)


class BaseApi:
    """Base class for GraphQL operations against a single endpoint."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        url: str | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
    ) -> None:
        if session is None:
            raise ValidationError("Session is required.")
        self._session = session
        self._url = self._normalize_url(url)
        self._timeout = timeout or _DEFAULT_TIMEOUT

    @property
    def url(self) -> str:
        return self._url

    async def _graphql(self, query: str, *, token: str | None = None) -> dict[str, Any]:
        headers = dict(DEFAULT_HEADERS)
        if token is not None:
            headers[AUTHORIZATION_HEADER] = f"{TOKEN_SCHEME} {token}"
        payload = await self._request("POST", self._url, json={"query": query}, headers=headers)
        if not isinstance(payload, dict):
            raise ApiError("Response was not a JSON object.")
        if payload.get("errors") is not None:
            raise ApiError(self._error_message(payload["errors"]))
        data = payload.get("data")
        if not isinstance(data, dict):
            raise ApiError("Response did not contain data.")
        return data

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            async with self._session.request(
                method,
                url,
                timeout=self._timeout,
                ssl=True,
                **kwargs,
            ) as response:
                self._raise_for_status(response)
                try:
                    return await response.json()
                except (aiohttp.ContentTypeError, ValueError) as exc:
                    raise ApiError("Response did not contain valid JSON.") from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise NetworkError("Network request failed.") from exc

    def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        if 200 <= response.status < 300:
            return
        if response.status in (401, 403):
            raise AuthError("Authentication failed.")
        raise ApiError(f"API request failed with status {response.status}.")

    def _error_message(self, errors: Any) -> str:
        if isinstance(errors, list):
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                if not isinstance(message, str) or not message.strip():
                    continue
                extensions = item.get("extensions")
                code = extensions.get("errorCode") if isinstance(extensions, dict) else None
                if isinstance(code, str) and code:
                    return f"API error {code}: {message.strip()}"
                return f"API error: {message.strip()}"
        return "API returned an error."

    def _normalize_url(self, url: str | None) -> str:
        if url is None:
            return GRAPHQL_URL
        if not isinstance(url, str) or not url.strip():
            raise ValidationError("url must be a non-empty string.")
        normalized = url.strip()
        if not normalized.startswith(("https://", "http://")):
            raise ValidationError("url must be an absolute http(s) URL.")
        return normalized
