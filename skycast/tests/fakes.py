from __future__ import annotations

import asyncio

from skycast.api import WeatherApiClient
from skycast.errors import AggregatorFailure, ReverseGeocodeFailure
from skycast.geocoding import ReverseGeocoder
from weather.engines.types import (
    ByCity,
    LocationQuery,
    WeatherSnapshot,
    parse_current,
    parse_forecast_entry,
)
from weather.tests.fakes import current_payload, forecast_item


def snapshot_for(name: str) -> WeatherSnapshot:
    entry = parse_forecast_entry(forecast_item("2025-10-20 12:00:00"))
    return WeatherSnapshot(
        current=parse_current(current_payload(name)), forecast=[entry]
    )


class RecordingApi(WeatherApiClient):
    """Answers every query with a snapshot named after the city.

    Cities listed in `gates` wait for their event before answering;
    `failures` maps a city (or "" for coordinates) to the error to raise.
    """

    def __init__(
        self,
        *,
        failure: AggregatorFailure | None = None,
        failures: dict[str, AggregatorFailure] | None = None,
        gates: dict[str, asyncio.Event] | None = None,
    ) -> None:
        super().__init__()
        self.failure = failure
        self.failures = failures or {}
        self.gates = gates or {}
        self.queries: list[LocationQuery] = []

    async def fetch(self, query: LocationQuery) -> WeatherSnapshot:
        self.queries.append(query)
        name = query.name if isinstance(query, ByCity) else ""
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        failure = self.failures.get(name, self.failure)
        if failure is not None:
            raise failure
        return snapshot_for(name)


class StubGeocoder(ReverseGeocoder):
    def __init__(
        self,
        name: str | None = None,
        failure: ReverseGeocodeFailure | None = None,
    ) -> None:
        super().__init__(api_key="client-key")
        self.name = name
        self.failure = failure

    async def place_name(self, lat: float, lon: float) -> str | None:
        if self.failure is not None:
            raise self.failure
        return self.name
