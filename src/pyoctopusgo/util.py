"""Shared utilities for parsing, decoding and masking."""

from __future__ import annotations

import base64
import json
from datetime import UTC, datetime
from typing import Any

from .exceptions import ValidationError


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError("Instant must be a datetime.")
    if value.tzinfo is None:
        raise ValidationError("Instant must include timezone information.")
    return value.astimezone(UTC)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp with offset into an aware UTC datetime.

    Accepts the space separated form returned by the GraphQL API, for example
    ``2024-01-10 11:59:00+00:00``, as well as a trailing ``Z``.
    """
    if not isinstance(value, str) or not value:
        raise ValidationError("Timestamp must be a non-empty string.")
    raw = value.strip().replace(" ", "T", 1)
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError("Timestamp is not a valid ISO 8601 value.") from exc
    if parsed.tzinfo is None:
        raise ValidationError("Timestamp must include timezone information.")
    return parsed.astimezone(UTC)


def format_utc_timestamp(value: datetime) -> str:
    normalized = ensure_aware(value).replace(microsecond=0)
    return normalized.isoformat().replace("+00:00", "Z")


def decode_token_claims(token: str) -> dict[str, Any]:
    """Decode the payload segment of a signed token without verifying it."""
    if not isinstance(token, str):
        raise ValidationError("Token must be a string.")
    parts = token.strip().split(".")
    if len(parts) != 3 or not parts[1]:
        raise ValidationError("Token must have three dot separated segments.")
    payload = parts[1]
    padded = payload + "=" * (-len(payload) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("ascii"))
        claims = json.loads(decoded.decode("utf-8"))
    except (ValueError, UnicodeError) as exc:
        raise ValidationError("Token payload could not be decoded.") from exc
    if not isinstance(claims, dict):
        raise ValidationError("Token payload must be a JSON object.")
    return claims


def token_expiry(token: str) -> datetime:
    claims = decode_token_claims(token)
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, int | float | str):
        raise ValidationError("Token payload has no usable exp claim.")
    try:
        return datetime.fromtimestamp(int(exp), UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValidationError("Token exp claim is not a usable timestamp.") from exc


def mask_secret(value: str | None) -> str:
    if not isinstance(value, str) or not value:
        return "***"
    if len(value) <= 4:
        return "*" * len(value)
    if len(value) <= 8:
        return f"{value[:1]}{'*' * (len(value) - 2)}{value[-1:]}"
    return f"{value[:4]}...{value[-4:]}"
