from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Upstream is always queried with metric units.
WIND_SPEED_UNIT = "m/s"


class EndpointKind(str, Enum):
    CURRENT = "current"
    FORECAST = "forecast"


class ConditionCategory(str, Enum):
    CLEAR = "Clear"
    CLOUDS = "Clouds"
    RAIN = "Rain"
    DRIZZLE = "Drizzle"
    THUNDERSTORM = "Thunderstorm"
    SNOW = "Snow"
    MIST = "Mist"
    FOG = "Fog"
    OTHER = "Other"

    @classmethod
    def from_raw(cls, raw: object) -> ConditionCategory:
        """Map an upstream condition string onto the closed category set."""

        if not isinstance(raw, str):
            return cls.OTHER
        normalized = title_case(raw)
        for member in cls:
            if member is not cls.OTHER and member.value == normalized:
                return member
        return cls.OTHER


def title_case(text: str) -> str:
    """Lower-case the text, then upper-case the first letter of each word."""

    return " ".join(
        word[:1].upper() + word[1:] for word in text.lower().split(" ")
    )


@dataclass(frozen=True)
class ByCity:
    name: str


@dataclass(frozen=True)
class ByCoordinates:
    lat: float
    lon: float


LocationQuery = ByCity | ByCoordinates


@dataclass(frozen=True)
class CurrentConditions:
    name: str
    observed_at: int | None
    condition: ConditionCategory
    condition_text: str
    temperature_c: float | None
    humidity_pct: int | None
    wind_speed: float | None
    wind_speed_unit: str
    sunrise: int | None
    sunset: int | None
    raw: Mapping[str, Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class ForecastEntry:
    timestamp: int | None
    timestamp_text: str
    condition: ConditionCategory
    condition_text: str
    temperature_c: float | None
    raw: Mapping[str, Any] = field(repr=False, compare=False)


@dataclass(frozen=True)
class WeatherSnapshot:
    current: CurrentConditions
    forecast: Sequence[ForecastEntry]


def _primary_condition(payload: Mapping[str, Any]) -> str:
    weather = payload.get("weather")
    if isinstance(weather, list) and weather:
        first = weather[0]
        if isinstance(first, dict) and isinstance(first.get("main"), str):
            return first["main"]
    return ""


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_current(payload: Mapping[str, Any]) -> CurrentConditions:
    """Build CurrentConditions from an upstream current-weather payload.

    Missing or unusable fields become None; the raw payload is kept as-is.
    """

    main = payload.get("main") if isinstance(payload.get("main"), dict) else {}
    wind = payload.get("wind") if isinstance(payload.get("wind"), dict) else {}
    sys_block = (
        payload.get("sys") if isinstance(payload.get("sys"), dict) else {}
    )

    condition_text = _primary_condition(payload)
    return CurrentConditions(
        name=str(payload.get("name") or ""),
        observed_at=_optional_int(payload.get("dt")),
        condition=ConditionCategory.from_raw(condition_text),
        condition_text=condition_text,
        temperature_c=_optional_float(main.get("temp")),
        humidity_pct=_optional_int(main.get("humidity")),
        wind_speed=_optional_float(wind.get("speed")),
        wind_speed_unit=WIND_SPEED_UNIT,
        sunrise=_optional_int(sys_block.get("sunrise")),
        sunset=_optional_int(sys_block.get("sunset")),
        raw=payload,
    )


def parse_forecast_entry(item: Mapping[str, Any]) -> ForecastEntry:
    main = item.get("main") if isinstance(item.get("main"), dict) else {}
    raw_text = item.get("dt_txt")
    timestamp_text = raw_text if isinstance(raw_text, str) else ""
    condition_text = _primary_condition(item)
    return ForecastEntry(
        timestamp=_optional_int(item.get("dt")),
        timestamp_text=timestamp_text,
        condition=ConditionCategory.from_raw(condition_text),
        condition_text=condition_text,
        temperature_c=_optional_float(main.get("temp")),
        raw=item,
    )


def parse_forecast_series(payload: Mapping[str, Any]) -> list[ForecastEntry]:
    """Parse the `list` block of a forecast payload, keeping upstream order.

    Raises ValueError when the payload has no `list`; items that are not
    objects are skipped.
    """

    items = payload.get("list")
    if not isinstance(items, list):
        raise ValueError("Forecast payload missing list")
    return [
        parse_forecast_entry(item) for item in items if isinstance(item, dict)
    ]
