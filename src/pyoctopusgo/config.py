"""Configuration validation and normalization."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ValidationError
from .models import DEFAULT_TIME_ZONE, Configuration

_KEY_ALIASES = {
    "apiKey": "api_key",
    "apikey": "api_key",
    "accountNumber": "account_number",
    "timeZone": "time_zone",
}


def _merge_values(values: Mapping[str, Any] | None, overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    if values is not None:
        if not isinstance(values, Mapping):
            raise ValidationError("Configuration must be a mapping.")
        for key, value in values.items():
            if not isinstance(key, str):
                raise ValidationError("Configuration keys must be strings.")
            merged[_KEY_ALIASES.get(key, key)] = value
    for key, value in overrides.items():
        if value is None:
            continue
        merged[_KEY_ALIASES.get(key, key)] = value
    return merged


def _require_string(merged: Mapping[str, Any], key: str) -> str:
    value = merged.get(key)
    if value is None:
        raise ValidationError(f"{key} is required.")
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string.")
    text = value.strip()
    if not text:
        raise ValidationError(f"{key} is required.")
    return text


def validate_time_zone(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("time_zone must be a non-empty string.")
    normalized = name.strip()
    try:
        ZoneInfo(normalized)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown time zone {normalized}.") from exc
    return normalized


def build_configuration(values: Mapping[str, Any] | None = None, **overrides: Any) -> Configuration:
    """Build a validated configuration from a mapping and keyword overrides.

    Both the camelCase keys of the plugin configuration (``apiKey``,
    ``accountNumber``, ``timeZone``) and snake_case keys are accepted.
    Keyword overrides win over mapping values; ``None`` overrides are ignored.
    """
    merged = _merge_values(values, overrides)
    api_key = _require_string(merged, "api_key")
    account_number = _require_string(merged, "account_number")
    time_zone = merged.get("time_zone")
    time_zone = DEFAULT_TIME_ZONE if time_zone is None else validate_time_zone(time_zone)
    return Configuration(
        api_key=api_key,
        account_number=account_number,
        time_zone=time_zone,
    )
