from __future__ import annotations

import asyncio
import logging

from .engines.openweather import OpenWeatherProvider
from .engines.types import ByCity, LocationQuery, WeatherSnapshot
from .errors import MissingLocation, UpstreamFailure
from .metrics import weather_aggregate_total
from .query import normalize_query
from .sampler import sample_daily

logger = logging.getLogger(__name__)

PROVIDER = OpenWeatherProvider()


def _describe(query: LocationQuery) -> str:
    if isinstance(query, ByCity):
        return f"city={query.name}"
    return f"lat={query.lat} lon={query.lon}"


async def fetch_snapshot(
    query: LocationQuery, provider: OpenWeatherProvider | None = None
) -> WeatherSnapshot:
    """Fetch current and forecast legs concurrently and merge them.

    Both legs are awaited to completion. If either fails the whole lookup
    fails with that leg's UpstreamFailure (current first when both fail);
    a partial snapshot is never returned.
    """

    impl = provider or PROVIDER
    current, forecast = await asyncio.gather(
        impl.current(query),
        impl.forecast(query),
        return_exceptions=True,
    )
    if isinstance(current, BaseException):
        raise current
    if isinstance(forecast, BaseException):
        raise forecast
    return WeatherSnapshot(current=current, forecast=sample_daily(forecast))


async def aggregate(
    *,
    city: str | None = None,
    lat: float | None = None,
    lon: float | None = None,
    provider: OpenWeatherProvider | None = None,
) -> WeatherSnapshot:
    """Resolve a location query and return the merged weather snapshot.

    Raises MissingLocation before any network I/O when no usable location
    was supplied, or UpstreamFailure when either upstream leg fails.
    """

    try:
        query = normalize_query(city, lat, lon)
    except MissingLocation:
        weather_aggregate_total.labels(outcome="missing_location").inc()
        raise

    try:
        snapshot = await fetch_snapshot(query, provider)
    except UpstreamFailure as exc:
        weather_aggregate_total.labels(outcome="upstream_failure").inc()
        logger.warning(
            "weather.aggregate.failure %s endpoint=%s status=%s",
            _describe(query),
            exc.endpoint,
            exc.status,
        )
        raise

    weather_aggregate_total.labels(outcome="ok").inc()
    logger.info(
        "weather.aggregate.success %s forecast_days=%s",
        _describe(query),
        len(snapshot.forecast),
    )
    return snapshot
