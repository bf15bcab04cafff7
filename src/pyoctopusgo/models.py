"""Public data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from .exceptions import ValidationError

DEFAULT_TIME_ZONE = "Europe/London"


@dataclass(frozen=True, slots=True)
class Configuration:
    api_key: str
    account_number: str
    time_zone: str = DEFAULT_TIME_ZONE


@dataclass(frozen=True, slots=True)
class Credential:
    token: str
    expires_at: datetime

    def is_valid(self, now: datetime, margin: timedelta) -> bool:
        return now + margin < self.expires_at


@dataclass(frozen=True, slots=True)
class DispatchSlot:
    """A low-cost window, either planned by the API or the standard overnight one."""

    start: datetime
    end: datetime
    charge_kwh: float | None = None
    source: str | None = None
    location: str | None = None

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValidationError("Slot boundaries must include timezone information.")
        if self.end < self.start:
            raise ValidationError("Slot end must not be before its start.")

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True, slots=True)
class SlotCache:
    slots: tuple[DispatchSlot, ...] = ()
    last_fetched_at: datetime | None = None


class StatusField(Enum):
    STANDARD_OFFPEAK = "standard_offpeak"
    OFFPEAK = "offpeak"
    CHARGING = "charging"
    EXTRA_OFFPEAK = "extra_offpeak"

    @property
    def display_name(self) -> str:
        return STATUS_FIELD_NAMES[self]


STATUS_FIELD_NAMES: dict[StatusField, str] = {
    StatusField.STANDARD_OFFPEAK: "Default Off-peak Active",
    StatusField.OFFPEAK: "Off-peak Active",
    StatusField.CHARGING: "Charging Slot Active",
    StatusField.EXTRA_OFFPEAK: "Extra Slot Active",
}


@dataclass(frozen=True, slots=True)
class StatusSnapshot:
    standard_offpeak: bool
    offpeak: bool
    charging: bool
    extra_offpeak: bool

    @classmethod
    def from_flags(cls, standard_offpeak: bool, charging: bool) -> StatusSnapshot:
        return cls(
            standard_offpeak=standard_offpeak,
            offpeak=standard_offpeak or charging,
            charging=charging,
            extra_offpeak=charging and not standard_offpeak,
        )

    @classmethod
    def inactive(cls) -> StatusSnapshot:
        return cls.from_flags(False, False)

    def value(self, status_field: StatusField) -> bool:
        return getattr(self, status_field.value)

    def as_dict(self) -> dict[StatusField, bool]:
        return {status_field: self.value(status_field) for status_field in StatusField}


@dataclass(frozen=True, slots=True)
class UtcOffset:
    """Signed UTC offset with minute resolution."""

    total_minutes: int = 0

    @classmethod
    def from_timedelta(cls, value: timedelta) -> UtcOffset:
        seconds = int(value.total_seconds())
        if seconds % 60:
            raise ValidationError("Offsets must be a whole number of minutes.")
        return cls(total_minutes=seconds // 60)

    @property
    def sign(self) -> str:
        return "-" if self.total_minutes < 0 else "+"

    @property
    def hours(self) -> int:
        return abs(self.total_minutes) // 60

    @property
    def minutes(self) -> int:
        return abs(self.total_minutes) % 60

    def as_timedelta(self) -> timedelta:
        return timedelta(minutes=self.total_minutes)

    def isoformat(self) -> str:
        return f"{self.sign}{self.hours:02d}:{self.minutes:02d}"

    def __str__(self) -> str:
        return self.isoformat()
