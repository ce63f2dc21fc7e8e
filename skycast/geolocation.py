from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx

from weather.engines.types import ByCoordinates

from .errors import PermissionDeniedOrUnavailable

logger = logging.getLogger(__name__)


class Geolocator(ABC):
    """Platform location capability."""

    @abstractmethod
    async def current_position(self) -> ByCoordinates:
        """Return the position or raise PermissionDeniedOrUnavailable."""


class FixedGeolocator(Geolocator):
    """Reports a position supplied up front (terminal flags, tests)."""

    def __init__(self, lat: float, lon: float) -> None:
        self.position = ByCoordinates(lat=lat, lon=lon)

    async def current_position(self) -> ByCoordinates:
        return self.position


class IpGeolocator(Geolocator):
    """Approximate position from the public IP via ip-api.com.

    Any failure, including a `"status": "fail"` answer, counts as the
    position being unavailable.
    """

    def __init__(self, *, url: str = "http://ip-api.com/json/") -> None:
        self.url = url

    async def current_position(self) -> ByCoordinates:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self.url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("skycast.geolocation.failed err=%s", exc)
            raise PermissionDeniedOrUnavailable() from exc

        if not isinstance(data, dict) or data.get("status") != "success":
            raise PermissionDeniedOrUnavailable()
        try:
            return ByCoordinates(
                lat=float(data["lat"]), lon=float(data["lon"])
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PermissionDeniedOrUnavailable() from exc
