"""Domain errors raised by the weather aggregation service.

Every error carries a closed `ErrorKind` code; the HTTP layer only ever sees
a message string and a status code.
"""

from __future__ import annotations

from enum import Enum

MISSING_LOCATION_MESSAGE = "City or coordinates (lat and lon) are required."
UPSTREAM_FAILURE_PREFIX = "City not found or API failed: "


class ErrorKind(str, Enum):
    MISSING_LOCATION = "missing_location"
    UPSTREAM_FAILURE = "upstream_failure"
    NO_GEOLOCATION_SUPPORT = "no_geolocation_support"
    PERMISSION_DENIED_OR_UNAVAILABLE = "permission_denied_or_unavailable"
    REVERSE_GEOCODE_FAILURE = "reverse_geocode_failure"
    AGGREGATOR_FAILURE = "aggregator_failure"


class WeatherError(Exception):
    """Base class for weather errors with a stable kind code."""

    kind: ErrorKind
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message


class MissingLocation(WeatherError):
    """Raised when neither a city nor a full coordinate pair was given."""

    kind = ErrorKind.MISSING_LOCATION
    status_code = 400

    def __init__(self, message: str = MISSING_LOCATION_MESSAGE) -> None:
        super().__init__(message)


class UpstreamFailure(WeatherError):
    """Raised when an upstream call fails or returns a non-success status.

    `status` is the upstream HTTP status, or None for transport errors.
    """

    kind = ErrorKind.UPSTREAM_FAILURE
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.endpoint = endpoint

    @property
    def public_message(self) -> str:
        return f"{UPSTREAM_FAILURE_PREFIX}{self.message}"
