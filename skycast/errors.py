from __future__ import annotations

from weather.errors import ErrorKind

GENERIC_FETCH_ERROR = "City not found or API failed."
NO_GEOLOCATION_MESSAGE = "Geolocation is not supported by this client."
PERMISSION_DENIED_MESSAGE = (
    "Unable to retrieve your location. Please allow location access."
)


class ClientError(Exception):
    """Base class for errors surfaced to the SkyCast user."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoGeolocationSupport(ClientError):
    kind = ErrorKind.NO_GEOLOCATION_SUPPORT

    def __init__(self, message: str = NO_GEOLOCATION_MESSAGE) -> None:
        super().__init__(message)


class PermissionDeniedOrUnavailable(ClientError):
    kind = ErrorKind.PERMISSION_DENIED_OR_UNAVAILABLE

    def __init__(self, message: str = PERMISSION_DENIED_MESSAGE) -> None:
        super().__init__(message)


class ReverseGeocodeFailure(ClientError):
    """Reverse geocoding call failed; callers fall back to coordinates."""

    kind = ErrorKind.REVERSE_GEOCODE_FAILURE


class AggregatorFailure(ClientError):
    """The `/weather` endpoint answered with an error or was unreachable."""

    kind = ErrorKind.AGGREGATOR_FAILURE

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
