from __future__ import annotations

from typing import Any

import httpx

from .errors import ReverseGeocodeFailure


class ReverseGeocoder:
    """OpenWeatherMap reverse geocoding (`/geo/1.0/reverse`).

    Uses the client's own API key, separate from the weather service key.
    """

    def __init__(
        self,
        *,
        base_url: str = "https://api.openweathermap.org/geo/1.0",
        api_key: str = "",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def place_name(self, lat: float, lon: float) -> str | None:
        """Return the nearest place name, or None when nothing was found.

        Raises ReverseGeocodeFailure when the call itself fails.
        """

        params = {"lat": lat, "lon": lon, "limit": 1, "appid": self.api_key}
        data = await self._request(params)
        if not data:
            return None
        first = data[0]
        name = first.get("name") if isinstance(first, dict) else None
        if not isinstance(name, str) or not name.strip():
            return None
        return name

    async def _request(self, params: dict[str, Any]) -> list[Any]:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/reverse", params=params
                )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            message = str(exc) or "reverse geocode failed"
            raise ReverseGeocodeFailure(message) from exc
        if not isinstance(data, list):
            raise ReverseGeocodeFailure("Unexpected reverse geocode response")
        return data
