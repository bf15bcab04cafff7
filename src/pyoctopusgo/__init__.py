"""pyoctopusgo package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .client import Client
from .config import build_configuration
from .exceptions import (
    ApiError,
    AuthError,
    FetchError,
    NetworkError,
    PyOctopusGoError,
    TimeZoneError,
    ValidationError,
)
from .kraken import SlotFetcher, TokenManager
from .models import (
    Configuration,
    Credential,
    DispatchSlot,
    SlotCache,
    StatusField,
    StatusSnapshot,
    UtcOffset,
)
from .offset import local_to_utc, resolve_offset
from .scheduler import WallClockScheduler, next_minute_boundary, next_x9_minute
from .status import StatusEvaluator, evaluate_status
from .windows import standard_windows

try:
    __version__ = version("pyoctopusgo")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "ApiError",
    "AuthError",
    "Client",
    "Configuration",
    "Credential",
    "DispatchSlot",
    "FetchError",
    "NetworkError",
    "PyOctopusGoError",
    "SlotCache",
    "SlotFetcher",
    "StatusEvaluator",
    "StatusField",
    "StatusSnapshot",
    "TimeZoneError",
    "TokenManager",
    "UtcOffset",
    "ValidationError",
    "WallClockScheduler",
    "__version__",
    "build_configuration",
    "evaluate_status",
    "local_to_utc",
    "next_minute_boundary",
    "next_x9_minute",
    "resolve_offset",
    "standard_windows",
]
