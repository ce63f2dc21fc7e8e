"""Immutable display state and the transitions that produce new states.

The display never mutates in place: every event (fetch started, succeeded,
failed, unit changed, theme toggled, search text edited) returns a new
`DisplayState`. `generation` identifies the latest fetch; results carrying
an older generation are stale and must be ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from weather.engines.types import WeatherSnapshot


class Unit(str, Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


@dataclass(frozen=True)
class DisplayState:
    city_input: str = "Chennai"
    snapshot: WeatherSnapshot | None = None
    error: str = ""
    notice: str = ""
    unit: Unit = Unit.FAHRENHEIT
    theme: Theme = Theme.DARK
    generation: int = 0
    loading: bool = False


def fetch_started(state: DisplayState) -> DisplayState:
    return replace(state, generation=state.generation + 1, loading=True)


def fetch_succeeded(
    state: DisplayState,
    generation: int,
    snapshot: WeatherSnapshot,
    *,
    city_input: str | None = None,
    notice: str = "",
) -> DisplayState:
    if generation != state.generation:
        return state
    return replace(
        state,
        snapshot=snapshot,
        error="",
        notice=notice,
        loading=False,
        city_input=state.city_input if city_input is None else city_input,
    )


def fetch_failed(
    state: DisplayState,
    generation: int,
    message: str,
    *,
    clear_snapshot: bool = False,
    city_input: str | None = None,
) -> DisplayState:
    """Record a failed fetch; the last good snapshot stays unless cleared."""

    if generation != state.generation:
        return state
    return replace(
        state,
        snapshot=None if clear_snapshot else state.snapshot,
        error=message,
        notice="",
        loading=False,
        city_input=state.city_input if city_input is None else city_input,
    )


def unit_changed(state: DisplayState, unit: Unit) -> DisplayState:
    return replace(state, unit=unit)


def theme_toggled(state: DisplayState) -> DisplayState:
    theme = Theme.LIGHT if state.theme is Theme.DARK else Theme.DARK
    return replace(state, theme=theme)


def city_input_changed(state: DisplayState, text: str) -> DisplayState:
    return replace(state, city_input=text)
