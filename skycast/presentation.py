"""Display derivations for a weather snapshot.

Temperatures arrive in Celsius and are converted per the selected unit with
half-up rounding. Condition strings map onto a fixed icon set.

Evening override: from 18:00 local display time, when the first sampled
forecast entry is Clear, the *current* icon shows Clear whatever the current
condition is. This is a deliberate heuristic carried over as-is, not a
correctness guarantee; forecast card icons are never overridden.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo

from weather.engines.types import (
    ConditionCategory,
    CurrentConditions,
    ForecastEntry,
    WeatherSnapshot,
)

from .state import DisplayState, Theme, Unit

EVENING_HOUR = 18
NO_DATA = "No data"

ICONS: dict[ConditionCategory, str] = {
    ConditionCategory.CLEAR: "clear",
    ConditionCategory.CLOUDS: "cloudy",
    ConditionCategory.RAIN: "rainy",
    ConditionCategory.DRIZZLE: "rainy",
    ConditionCategory.THUNDERSTORM: "thunder",
    ConditionCategory.SNOW: "snow",
    ConditionCategory.MIST: "mist",
    ConditionCategory.FOG: "fog",
}
DEFAULT_ICON = ICONS[ConditionCategory.CLEAR]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def to_fahrenheit(celsius: float) -> int:
    return _round_half_up(celsius * 9 / 5 + 32)


def to_celsius(celsius: float) -> int:
    return _round_half_up(celsius)


def convert_temperature(celsius: float, unit: Unit) -> int:
    if unit is Unit.FAHRENHEIT:
        return to_fahrenheit(celsius)
    return to_celsius(celsius)


def format_temperature(celsius: float | None, unit: Unit) -> str:
    if celsius is None:
        return NO_DATA
    return f"{convert_temperature(celsius, unit)}°{unit.value}"


def icon_for(condition: ConditionCategory | str) -> str:
    if not isinstance(condition, ConditionCategory):
        condition = ConditionCategory.from_raw(condition)
    return ICONS.get(condition, DEFAULT_ICON)


def is_evening(now: datetime, tz: tzinfo) -> bool:
    return now.astimezone(tz).hour >= EVENING_HOUR


def current_icon(snapshot: WeatherSnapshot, now: datetime, tz: tzinfo) -> str:
    forecast = snapshot.forecast
    if (
        is_evening(now, tz)
        and forecast
        and forecast[0].condition is ConditionCategory.CLEAR
    ):
        return ICONS[ConditionCategory.CLEAR]
    return icon_for(snapshot.current.condition)


def format_datetime(epoch: int | None, tz: tzinfo) -> str:
    if epoch is None:
        return NO_DATA
    moment = datetime.fromtimestamp(epoch, tz)
    # Day of month without zero padding ("October 5").
    return f"{moment:%A, %B} {moment.day}, {moment:%Y, %I:%M %p %Z}"


def format_time(epoch: int | None, tz: tzinfo) -> str:
    if epoch is None:
        return NO_DATA
    return datetime.fromtimestamp(epoch, tz).strftime("%I:%M:%S %p")


def weekday_label(entry: ForecastEntry, tz: tzinfo) -> str:
    # dt_txt is upstream-local wall time; use its calendar date as-is.
    try:
        moment = datetime.strptime(entry.timestamp_text, "%Y-%m-%d %H:%M:%S")
    except ValueError:
        if entry.timestamp is None:
            return ""
        moment = datetime.fromtimestamp(entry.timestamp, tz)
    return moment.strftime("%a")


@dataclass(frozen=True)
class ForecastCard:
    day: str
    icon: str
    condition: str
    temperature: str


@dataclass(frozen=True)
class WeatherView:
    name: str
    icon: str
    temperature: str
    condition_label: str
    observed_at: str
    wind: str
    humidity: str
    sunrise: str
    sunset: str
    forecast: Sequence[ForecastCard]
    unit: Unit
    theme: Theme


def _condition_text(current: CurrentConditions) -> str:
    return current.condition_text or current.condition.value


def _wind_text(current: CurrentConditions) -> str:
    if current.wind_speed is None:
        return NO_DATA
    return f"{current.wind_speed} {current.wind_speed_unit}"


def build_view(
    state: DisplayState, *, now: datetime, tz: tzinfo
) -> WeatherView | None:
    """Derive everything the screen shows from the current display state."""

    snapshot = state.snapshot
    if snapshot is None:
        return None
    current = snapshot.current
    cards = [
        ForecastCard(
            day=weekday_label(entry, tz),
            icon=icon_for(entry.condition),
            condition=entry.condition_text or entry.condition.value,
            temperature=format_temperature(entry.temperature_c, state.unit),
        )
        for entry in snapshot.forecast
    ]
    humidity = (
        f"{current.humidity_pct}%"
        if current.humidity_pct is not None
        else NO_DATA
    )
    return WeatherView(
        name=current.name,
        icon=current_icon(snapshot, now, tz),
        temperature=format_temperature(current.temperature_c, state.unit),
        condition_label=f"{_condition_text(current)} Day",
        observed_at=format_datetime(current.observed_at, tz),
        wind=_wind_text(current),
        humidity=humidity,
        sunrise=format_time(current.sunrise, tz),
        sunset=format_time(current.sunset, tz),
        forecast=cards,
        unit=state.unit,
        theme=state.theme,
    )


def render_text(state: DisplayState, view: WeatherView | None) -> list[str]:
    """Plain-text rendering used by the terminal client."""

    lines = [f"SKY CAST [{state.theme.value}] search: {state.city_input}"]
    if state.error:
        lines.append(f"! {state.error}")
    if state.notice:
        lines.append(f"* {state.notice}")
    if view is None:
        return lines
    lines.extend(
        [
            f"{view.name}  {view.temperature}  [{view.icon}]",
            view.observed_at,
            view.condition_label,
            f"Wind Status: {view.wind}",
            f"Humidity: {view.humidity}",
            f"Sunrise: {view.sunrise}  Sunset: {view.sunset}",
        ]
    )
    for card in view.forecast:
        lines.append(
            f"  {card.day}  {card.temperature}  [{card.icon}] {card.condition}"
        )
    return lines
