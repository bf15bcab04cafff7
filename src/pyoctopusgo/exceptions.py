"""Library exceptions."""


class PyOctopusGoError(Exception):
    """Base exception for the library."""


class ValidationError(PyOctopusGoError):
    """Raised when inputs or configuration fail validation."""


class NetworkError(PyOctopusGoError):
    """Raised when network communication fails."""


class ApiError(PyOctopusGoError):
    """Raised when the API returns an error or an unusable response."""


class AuthError(PyOctopusGoError):
    """Raised when the token exchange fails."""


class FetchError(PyOctopusGoError):
    """Raised when planned dispatches cannot be fetched."""


class TimeZoneError(PyOctopusGoError):
    """Raised when a local time does not exist in a time zone."""
