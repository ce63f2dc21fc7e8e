from __future__ import annotations

# ruff: noqa: S101
import io
from typing import Any

import pytest
from django.core.management import call_command

from skycast.api import WeatherApiClient
from skycast.geocoding import ReverseGeocoder
from weather.sampler import sample_daily
from weather.engines.types import parse_forecast_series

from .fakes import current_payload, forecast_payload


@pytest.fixture(autouse=True)
def _client_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKYCAST_DISPLAY_TZ", "UTC")
    monkeypatch.delenv("SKYCAST_DEFAULT_UNIT", raising=False)
    monkeypatch.delenv("SKYCAST_DEFAULT_CITY", raising=False)


def _fake_service(
    monkeypatch: pytest.MonkeyPatch,
) -> list[dict[str, Any]]:
    seen: list[dict[str, Any]] = []

    async def fake_request(
        self: WeatherApiClient, params: dict[str, Any]
    ) -> dict[str, Any]:
        seen.append(params)
        series = parse_forecast_series(forecast_payload(days=2))
        return {
            "current": current_payload(params.get("city", "Unknown")),
            "forecast": [dict(e.raw) for e in sample_daily(series)],
        }

    monkeypatch.setattr(WeatherApiClient, "_request", fake_request)
    return seen


def test_skycast_command_searches_city_in_celsius(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    seen = _fake_service(monkeypatch)
    out = io.StringIO()
    call_command("skycast", "--city", "Chennai", "--unit", "C", stdout=out)

    lines = out.getvalue().splitlines()
    assert seen == [{"city": "Chennai"}]
    assert lines[0] == "SKY CAST [dark] search: Chennai"
    assert lines[1].startswith("Chennai  31°C  [")
    assert "Clouds Day" in lines
    assert "Wind Status: 4.1 m/s" in lines
    assert sum(1 for line in lines if line.startswith("  ")) == 2


def test_skycast_command_defaults_to_chennai_in_fahrenheit(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    seen = _fake_service(monkeypatch)
    out = io.StringIO()
    call_command("skycast", "--theme", "light", stdout=out)

    lines = out.getvalue().splitlines()
    assert seen == [{"city": "Chennai"}]
    assert lines[0] == "SKY CAST [light] search: Chennai"
    assert lines[1].startswith("Chennai  89°F")


def test_skycast_command_locate_falls_back_to_coordinates(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    seen = _fake_service(monkeypatch)

    async def no_places(
        self: ReverseGeocoder, params: dict[str, Any]
    ) -> list[Any]:
        return []

    monkeypatch.setattr(ReverseGeocoder, "_request", no_places)
    out = io.StringIO()
    call_command(
        "skycast", "--locate", "--lat", "13.08", "--lon", "80.27", stdout=out
    )

    lines = out.getvalue().splitlines()
    assert seen == [{"lat": 13.08, "lon": 80.27}]
    assert lines[0] == "SKY CAST [dark] search: Unknown Location"
    assert (
        "* Could not determine city from location. Using coordinates instead."
        in lines
    )


def test_skycast_command_locate_without_position_reports_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    seen = _fake_service(monkeypatch)
    out = io.StringIO()
    call_command("skycast", "--locate", stdout=out)

    assert seen == []
    assert "! Geolocation is not supported by this client." in (
        out.getvalue().splitlines()
    )
