"""Location resolution chain: geolocation -> reverse geocode -> weather.

Each step has a defined fallback:

* no geolocation capability: NoGeolocationSupport, back to Idle;
* permission denied or position unavailable: PermissionDeniedOrUnavailable,
  back to Idle, no weather call (the user has to retry);
* reverse geocode returns no place: label "Unknown Location" plus a notice,
  weather is fetched by the raw coordinates;
* reverse geocode call fails: same label, no notice, raw coordinates.

A manual city search skips straight to FetchingWeather.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from weather.engines.types import (
    ByCity,
    ByCoordinates,
    LocationQuery,
    WeatherSnapshot,
)

from .api import WeatherApiClient
from .errors import (
    AggregatorFailure,
    ClientError,
    NoGeolocationSupport,
    ReverseGeocodeFailure,
)
from .geocoding import ReverseGeocoder
from .geolocation import Geolocator

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown Location"
COORDINATE_FALLBACK_NOTICE = (
    "Could not determine city from location. Using coordinates instead."
)


class ChainState(str, Enum):
    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting_permission"
    HAVE_COORDINATES = "have_coordinates"
    REVERSE_GEOCODING = "reverse_geocoding"
    HAVE_CITY_NAME = "have_city_name"
    FETCHING_WEATHER = "fetching_weather"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ResolvedLocation:
    label: str
    query: LocationQuery
    notice: str = ""


@dataclass(frozen=True)
class ChainResult:
    location: ResolvedLocation
    snapshot: WeatherSnapshot


class LocationResolutionChain:
    """One resolution attempt per `locate()`/`search()` call.

    `trace` lists the states visited by the latest attempt.
    """

    def __init__(
        self,
        *,
        geolocator: Geolocator | None,
        geocoder: ReverseGeocoder,
        api: WeatherApiClient,
    ) -> None:
        self.geolocator = geolocator
        self.geocoder = geocoder
        self.api = api
        self.state = ChainState.IDLE
        self.trace: list[ChainState] = [ChainState.IDLE]

    def _enter(self, state: ChainState) -> None:
        self.state = state
        self.trace.append(state)
        logger.debug("skycast.chain.state state=%s", state.value)

    def _reset(self) -> None:
        self.state = ChainState.IDLE
        self.trace = [ChainState.IDLE]

    async def resolve(self) -> ResolvedLocation:
        """Turn the device position into a location to fetch weather for."""

        self._reset()
        if self.geolocator is None:
            raise NoGeolocationSupport()

        self._enter(ChainState.REQUESTING_PERMISSION)
        try:
            position = await self.geolocator.current_position()
        except ClientError:
            self._enter(ChainState.IDLE)
            raise

        self._enter(ChainState.HAVE_COORDINATES)
        return await self._name_position(position)

    async def _name_position(
        self, position: ByCoordinates
    ) -> ResolvedLocation:
        self._enter(ChainState.REVERSE_GEOCODING)
        try:
            name = await self.geocoder.place_name(position.lat, position.lon)
        except ReverseGeocodeFailure as exc:
            logger.warning(
                "skycast.chain.reverse_geocode.failed lat=%s lon=%s err=%s",
                position.lat,
                position.lon,
                exc.message,
            )
            return ResolvedLocation(label=UNKNOWN_LOCATION, query=position)

        if name is None:
            logger.info(
                "skycast.chain.reverse_geocode.empty lat=%s lon=%s",
                position.lat,
                position.lon,
            )
            return ResolvedLocation(
                label=UNKNOWN_LOCATION,
                query=position,
                notice=COORDINATE_FALLBACK_NOTICE,
            )

        self._enter(ChainState.HAVE_CITY_NAME)
        return ResolvedLocation(label=name, query=ByCity(name=name))

    async def fetch(self, location: ResolvedLocation) -> ChainResult:
        self._enter(ChainState.FETCHING_WEATHER)
        try:
            snapshot = await self.api.fetch(location.query)
        except AggregatorFailure:
            self._enter(ChainState.FAILED)
            raise
        self._enter(ChainState.DONE)
        return ChainResult(location=location, snapshot=snapshot)

    async def locate(self) -> ChainResult:
        """Run the whole chain from the device position."""

        location = await self.resolve()
        return await self.fetch(location)

    async def search(self, city: str) -> ChainResult:
        """Manual search: fetch weather for a typed city name."""

        self._reset()
        name = city.strip()
        return await self.fetch(
            ResolvedLocation(label=name, query=ByCity(name=name))
        )
