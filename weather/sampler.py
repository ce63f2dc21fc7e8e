from __future__ import annotations

from collections.abc import Iterable

from .engines.types import ForecastEntry

# Upstream-local time of the one entry kept per day.
REFERENCE_HOUR_MARKER = "12:00:00"


def sample_daily(series: Iterable[ForecastEntry]) -> list[ForecastEntry]:
    """Reduce a 3-hourly forecast to the entries at the reference hour.

    Entries at other hours are dropped, never averaged. An input without any
    reference-hour entry yields an empty list.
    """

    return [
        entry
        for entry in series
        if REFERENCE_HOUR_MARKER in entry.timestamp_text
    ]
