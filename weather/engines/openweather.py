from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any, cast

import httpx
from django.conf import settings

from ..errors import UpstreamFailure
from ..metrics import (
    weather_upstream_errors_total,
    weather_upstream_latency_seconds,
    weather_upstream_requests_total,
)
from .types import (
    ByCity,
    CurrentConditions,
    EndpointKind,
    ForecastEntry,
    LocationQuery,
    parse_current,
    parse_forecast_series,
)

logger = logging.getLogger(__name__)

_ENDPOINT_PATHS: dict[EndpointKind, str] = {
    EndpointKind.CURRENT: "weather",
    EndpointKind.FORECAST: "forecast",
}


class OpenWeatherProvider:
    """OpenWeatherMap client for current conditions and 5-day forecast.

    Both endpoints accept either `q=<city>` or `lat`/`lon` and are always
    called with the configured units directive (metric). The httpx client is
    built with its default timeout and there are no retries.
    """

    name = "openweathermap"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        units: str | None = None,
    ) -> None:
        self.base_url: str = (
            base_url
            or cast(
                str,
                getattr(
                    settings,
                    "OPENWEATHER_BASE_URL",
                    "https://api.openweathermap.org/data/2.5",
                ),
            )
        ).rstrip("/")
        self.api_key: str = (
            api_key
            if api_key is not None
            else str(getattr(settings, "OPENWEATHER_API_KEY", ""))
        )
        self.units: str = units or str(
            getattr(settings, "OPENWEATHER_UNITS", "metric")
        )

    def url_for(self, kind: EndpointKind) -> str:
        return f"{self.base_url}/{_ENDPOINT_PATHS[kind]}"

    def build_params(self, query: LocationQuery) -> dict[str, Any]:
        params: dict[str, Any]
        if isinstance(query, ByCity):
            params = {"q": query.name}
        else:
            params = {"lat": query.lat, "lon": query.lon}
        params["appid"] = self.api_key
        params["units"] = self.units
        return params

    async def fetch(
        self, kind: EndpointKind, query: LocationQuery
    ) -> dict[str, Any]:
        """Return the raw JSON object of one upstream endpoint."""

        endpoint = kind.value
        weather_upstream_requests_total.labels(endpoint=endpoint).inc()
        start_time = time.perf_counter()
        url = self.url_for(kind)
        params = self.build_params(query)
        try:
            return await self._request(url, params)
        except UpstreamFailure as exc:
            exc.endpoint = endpoint
            weather_upstream_errors_total.labels(
                endpoint=endpoint,
                error_type="http" if exc.status is not None else "transport",
            ).inc()
            logger.warning(
                "weather.upstream.failure endpoint=%s status=%s message=%s",
                endpoint,
                exc.status,
                exc.message,
            )
            raise
        finally:
            weather_upstream_latency_seconds.labels(endpoint=endpoint).observe(
                time.perf_counter() - start_time
            )

    async def current(self, query: LocationQuery) -> CurrentConditions:
        payload = await self.fetch(EndpointKind.CURRENT, query)
        return parse_current(payload)

    async def forecast(self, query: LocationQuery) -> Sequence[ForecastEntry]:
        payload = await self.fetch(EndpointKind.FORECAST, query)
        try:
            return parse_forecast_series(payload)
        except ValueError as exc:
            endpoint = EndpointKind.FORECAST.value
            weather_upstream_errors_total.labels(
                endpoint=endpoint, error_type="payload"
            ).inc()
            logger.warning(
                "weather.upstream.bad_payload endpoint=%s message=%s",
                endpoint,
                exc,
            )
            raise UpstreamFailure(
                str(exc), status=200, endpoint=endpoint
            ) from exc

    async def _request(
        self, url: str, params: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamFailure(
                str(exc) or exc.__class__.__name__
            ) from exc

        if not response.is_success:
            raise UpstreamFailure(
                self._error_message(response), status=response.status_code
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamFailure(
                "Unexpected OpenWeatherMap response body",
                status=response.status_code,
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamFailure(
                "Unexpected OpenWeatherMap response shape",
                status=response.status_code,
            )
        return data

    def _error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        text = getattr(response, "text", "") or ""
        if text:
            return text
        return f"Request failed with status code {response.status_code}"
