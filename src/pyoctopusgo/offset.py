"""UTC offset resolution for local wall-clock times in a named time zone."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import TimeZoneError, ValidationError
from .models import DEFAULT_TIME_ZONE, UtcOffset

_LOGGER = logging.getLogger(__name__)


def load_zone(name: str) -> ZoneInfo:
    if not isinstance(name, str) or not name.strip():
        raise TimeZoneError("Time zone name must be a non-empty string.")
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise TimeZoneError(f"Unknown time zone {name}.") from exc


def _parse_local(local: str) -> datetime:
    if not isinstance(local, str) or not local.strip():
        raise ValidationError("Local date-time must be a non-empty string.")
    try:
        parsed = datetime.fromisoformat(local.strip())
    except ValueError as exc:
        raise ValidationError("Local date-time is not a valid ISO 8601 value.") from exc
    if parsed.tzinfo is not None:
        raise ValidationError("Local date-time must not include an offset.")
    return parsed


def _render(instant: datetime, zone: ZoneInfo) -> str:
    return instant.astimezone(zone).replace(tzinfo=None).isoformat()


def _offset_at(instant: datetime, zone: ZoneInfo) -> timedelta:
    offset = instant.astimezone(zone).utcoffset()
    return offset if offset is not None else timedelta(0)


def resolve_offset(local: str, zone: str = DEFAULT_TIME_ZONE) -> UtcOffset:
    """Return the UTC offset in force at ``local`` wall-clock time in ``zone``.

    The local time is first read as if it were UTC and the zone's offset at
    that trial instant is taken as a candidate. Applying the candidate and
    rendering the result back in the zone must reproduce the input; near a
    transition the candidate may come from the wrong side, so it is taken once
    more from the adjusted instant. A second mismatch means the local time
    falls in a gap and :class:`TimeZoneError` is raised.

    Ambiguous times (the hour repeated when clocks go back) resolve to their
    second occurrence, i.e. the offset in force after the change.
    """
    wall = _parse_local(local)
    tz = load_zone(zone)
    expected = wall.isoformat()
    trial = wall.replace(tzinfo=UTC)

    difference = _offset_at(trial, tz)
    adjusted = trial - difference
    if not _render(adjusted, tz).startswith(expected):
        difference = _offset_at(adjusted, tz)
        adjusted = trial - difference
        if not _render(adjusted, tz).startswith(expected):
            raise TimeZoneError(f"{expected} does not exist in time zone {zone}.")

    later = wall.replace(tzinfo=tz, fold=1).utcoffset()
    if later is not None and later != difference:
        _LOGGER.debug("Ambiguous local time %s in %s, using later offset", expected, zone)
        difference = later

    if difference % timedelta(minutes=1):
        raise TimeZoneError(f"Offset for {expected} in {zone} is not a whole minute.")
    offset = UtcOffset.from_timedelta(difference)

    check = wall.replace(tzinfo=timezone(offset.as_timedelta()))
    if not _render(check, tz).startswith(expected):
        raise TimeZoneError(f"Offset check failed for {expected} in time zone {zone}.")
    return offset


def format_offset(offset: UtcOffset) -> str:
    return offset.isoformat()


def local_to_utc(local: str, zone: str = DEFAULT_TIME_ZONE) -> datetime:
    """Convert a local wall-clock time in ``zone`` to an aware UTC datetime."""
    offset = resolve_offset(local, zone)
    wall = _parse_local(local)
    return wall.replace(tzinfo=timezone(offset.as_timedelta())).astimezone(UTC)
