from __future__ import annotations

import logging
from typing import Any

import httpx

from weather.engines.types import (
    ByCity,
    LocationQuery,
    WeatherSnapshot,
    parse_current,
    parse_forecast_entry,
)

from .errors import GENERIC_FETCH_ERROR, AggregatorFailure

logger = logging.getLogger(__name__)


class WeatherApiClient:
    """Client for the service's `GET /weather` endpoint."""

    def __init__(self, *, base_url: str = "http://localhost:8000") -> None:
        self.base_url = base_url.rstrip("/")

    def build_params(self, query: LocationQuery) -> dict[str, Any]:
        if isinstance(query, ByCity):
            return {"city": query.name}
        return {"lat": query.lat, "lon": query.lon}

    async def fetch(self, query: LocationQuery) -> WeatherSnapshot:
        params = self.build_params(query)
        logger.debug("skycast.api.fetch params=%s", params)
        body = await self._request(params)
        current = body.get("current")
        forecast = body.get("forecast")
        if not isinstance(current, dict) or not isinstance(forecast, list):
            raise AggregatorFailure(GENERIC_FETCH_ERROR)
        return WeatherSnapshot(
            current=parse_current(current),
            forecast=[
                parse_forecast_entry(item)
                for item in forecast
                if isinstance(item, dict)
            ],
        )

    async def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/weather", params=params
                )
        except httpx.HTTPError as exc:
            logger.warning("skycast.api.unreachable err=%s", exc)
            raise AggregatorFailure(GENERIC_FETCH_ERROR) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = GENERIC_FETCH_ERROR
            if isinstance(data, dict) and isinstance(data.get("error"), str):
                message = data["error"]
            raise AggregatorFailure(message, status=response.status_code)
        if not isinstance(data, dict):
            raise AggregatorFailure(
                GENERIC_FETCH_ERROR, status=response.status_code
            )
        return data
