from __future__ import annotations

# ruff: noqa: S101
import asyncio

from skycast.errors import (
    GENERIC_FETCH_ERROR,
    PERMISSION_DENIED_MESSAGE,
    AggregatorFailure,
    PermissionDeniedOrUnavailable,
)
from skycast.geolocation import FixedGeolocator, Geolocator
from skycast.resolution import (
    COORDINATE_FALLBACK_NOTICE,
    UNKNOWN_LOCATION,
    LocationResolutionChain,
)
from skycast.session import WeatherSession
from skycast.state import DisplayState, Theme, Unit
from weather.engines.types import ByCity, ByCoordinates

from .fakes import RecordingApi, StubGeocoder


class DeniedGeolocator(Geolocator):
    async def current_position(self) -> ByCoordinates:
        raise PermissionDeniedOrUnavailable()


def make_session(
    api: RecordingApi,
    *,
    geolocator: Geolocator | None = None,
    place: str | None = None,
) -> WeatherSession:
    chain = LocationResolutionChain(
        geolocator=geolocator,
        geocoder=StubGeocoder(name=place),
        api=api,
    )
    return WeatherSession(chain)


def test_search_success_updates_display() -> None:
    api = RecordingApi()
    session = make_session(api)

    state = asyncio.run(session.search("Madurai"))

    assert api.queries == [ByCity(name="Madurai")]
    assert state.snapshot is not None
    assert state.snapshot.current.name == "Madurai"
    assert state.city_input == "Madurai"
    assert state.generation == 1
    assert state.loading is False
    assert state.error == ""


def test_blank_search_is_ignored() -> None:
    api = RecordingApi()
    session = make_session(api)

    state = asyncio.run(session.search("   "))

    assert api.queries == []
    assert state.generation == 0
    assert state.snapshot is None


def test_search_uses_typed_city_by_default() -> None:
    api = RecordingApi()
    session = make_session(api)
    session.type_city("Coimbatore")

    asyncio.run(session.search())

    assert api.queries == [ByCity(name="Coimbatore")]


def test_failed_search_keeps_previous_snapshot() -> None:
    message = "City not found or API failed: city not found"
    api = RecordingApi(
        failures={"Atlantis": AggregatorFailure(message, status=500)}
    )
    session = make_session(api)

    async def scenario() -> DisplayState:
        await session.search("Chennai")
        return await session.search("Atlantis")

    state = asyncio.run(scenario())

    assert state.error == message
    assert state.city_input == "Atlantis"
    assert state.snapshot is not None
    assert state.snapshot.current.name == "Chennai"
    assert state.loading is False


def test_newer_search_supersedes_slow_one() -> None:
    async def scenario() -> tuple[WeatherSession, RecordingApi]:
        gate = asyncio.Event()
        api = RecordingApi(gates={"Madurai": gate})
        session = make_session(api)

        slow = asyncio.create_task(session.search("Madurai"))
        for _ in range(3):
            await asyncio.sleep(0)
        await session.search("Chennai")
        gate.set()
        await slow
        return session, api

    session, api = asyncio.run(scenario())

    assert ByCity(name="Chennai") in api.queries
    assert session.state.generation == 2
    assert session.state.snapshot is not None
    assert session.state.snapshot.current.name == "Chennai"
    assert session.state.city_input == "Chennai"
    assert session.state.loading is False


def test_locate_falls_back_to_coordinates_with_notice() -> None:
    api = RecordingApi()
    session = make_session(api, geolocator=FixedGeolocator(13.08, 80.27))

    state = asyncio.run(session.locate())

    assert api.queries == [ByCoordinates(lat=13.08, lon=80.27)]
    assert state.city_input == UNKNOWN_LOCATION
    assert state.notice == COORDINATE_FALLBACK_NOTICE
    assert state.snapshot is not None


def test_locate_with_place_sets_city_and_next_search_clears_notice() -> None:
    api = RecordingApi()
    session = make_session(
        api, geolocator=FixedGeolocator(13.08, 80.27), place="Chennai"
    )

    state = asyncio.run(session.locate())
    assert state.city_input == "Chennai"
    assert state.notice == ""

    session_with_notice = make_session(
        RecordingApi(), geolocator=FixedGeolocator(13.08, 80.27)
    )

    async def scenario() -> DisplayState:
        await session_with_notice.locate()
        return await session_with_notice.search("Madurai")

    after = asyncio.run(scenario())
    assert after.notice == ""
    assert after.city_input == "Madurai"


def test_locate_permission_denied_reports_error() -> None:
    api = RecordingApi()
    session = make_session(api, geolocator=DeniedGeolocator())

    state = asyncio.run(session.locate())

    assert api.queries == []
    assert state.error == PERMISSION_DENIED_MESSAGE
    assert state.city_input == "Chennai"
    assert state.snapshot is None


def test_locate_fetch_failure_still_shows_label() -> None:
    api = RecordingApi(failure=AggregatorFailure(GENERIC_FETCH_ERROR))
    session = make_session(api, geolocator=FixedGeolocator(1.0, 2.0))

    state = asyncio.run(session.locate())

    assert state.error == GENERIC_FETCH_ERROR
    assert state.city_input == UNKNOWN_LOCATION
    assert state.notice == ""


def test_unit_and_theme_changes_keep_snapshot() -> None:
    api = RecordingApi()
    session = make_session(api)
    asyncio.run(session.search("Chennai"))
    snapshot = session.state.snapshot

    session.set_unit(Unit.CELSIUS)
    state = session.toggle_theme()

    assert state.unit is Unit.CELSIUS
    assert state.theme is Theme.LIGHT
    assert state.snapshot is snapshot
    assert session.toggle_theme().theme is Theme.DARK
